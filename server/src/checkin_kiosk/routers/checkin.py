"""Kiosk API: single JSON endpoint dispatching on "action"

Kiosks post with ``Content-Type: text/plain`` so browsers skip the CORS
pre-flight, which is why the body is parsed by hand instead of through a
request model.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request

from checkin_kiosk.services.checkin_provider import get_checkin_service
from checkin_kiosk.services.checkin_service import (
    CheckInResult,
    CheckInService,
    InvalidRequestError,
    Outcome,
    QueryResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Kiosk"])

GENERIC_ERROR_MESSAGE = "系統忙碌中，請稍後再試。"


def query_response(result: QueryResult) -> dict:
    if result.outcome == Outcome.OK:
        return {
            "success": True,
            "code": Outcome.OK.value,
            "data": result.attendee.model_dump(),
        }
    return {
        "success": False,
        "code": result.outcome.value,
        "message": result.message,
    }


def checkin_response(result: CheckInResult) -> dict:
    if result.outcome == Outcome.OK:
        response = {
            "success": True,
            "code": Outcome.OK.value,
            "timestamp": result.timestamp,
        }
        if result.message:
            response["message"] = result.message
        return response

    response = {
        "success": False,
        "code": result.outcome.value,
        "message": result.message,
    }
    if result.outcome == Outcome.ALREADY_CHECKED_IN:
        response["debugStatus"] = result.observed_status
    return response


def _parse_payload(body: bytes) -> dict:
    if not body:
        raise InvalidRequestError("無效請求：未收到資料。")
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError(f"無效請求：{e}") from e
    if not isinstance(payload, dict):
        raise InvalidRequestError("無效請求：資料格式錯誤。")
    return payload


def dispatch(payload: dict, service: CheckInService) -> dict:
    action = payload.get("action")
    if action == "query":
        return query_response(service.query(payload.get("phone")))
    if action == "checkin":
        return checkin_response(service.check_in(payload.get("id")))
    raise InvalidRequestError(f"未知動作：{action}")


@router.post("/api")
@router.post("/exec", include_in_schema=False)
async def handle_kiosk_request(
    request: Request,
    service: CheckInService = Depends(get_checkin_service),
):
    """Handle a kiosk query or check-in request.

    Every outcome, including failures, is a 200 response carrying
    ``success`` and a ``code`` discriminant.
    """
    try:
        payload = _parse_payload(await request.body())
        return dispatch(payload, service)
    except InvalidRequestError as e:
        logger.info(f"Rejected kiosk request: {e}")
        return {"success": False, "code": "invalid_request", "message": str(e)}
    except Exception as e:
        logger.error(f"Kiosk request failed: {e}", exc_info=True)
        return {"success": False, "code": "error", "message": GENERIC_ERROR_MESSAGE}
