"""HTTP client the kiosk uses to reach the check-in API"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class KioskApiError(RuntimeError):
    """The API could not be reached or did not answer with a JSON object"""


class KioskApiClient:
    def __init__(
        self,
        api_url: str,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 15.0,
    ):
        """
        Args:
            api_url: Kiosk endpoint, e.g. http://localhost:8080/api
            http_client: Preconfigured client (tests pass a TestClient)
            timeout: Request timeout in seconds for the default client
        """
        self.api_url = api_url
        self.http_client = http_client or httpx.Client(timeout=timeout)

    def call(self, action: str, **payload: Any) -> Dict[str, Any]:
        """
        POST ``{"action": action, **payload}`` and return the decoded reply.

        The body goes out as text/plain so browsers and proxies treat it as
        a simple request with no pre-flight.

        Raises:
            KioskApiError: On connection errors, HTTP errors or a reply that is not
                a JSON object
        """
        body = json.dumps({"action": action, **payload}, ensure_ascii=False)
        try:
            response = self.http_client.post(
                self.api_url,
                content=body.encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=utf-8"},
                follow_redirects=True,
            )
            response.raise_for_status()
            reply = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Kiosk API call '{action}' failed: {e}")
            raise KioskApiError(str(e)) from e

        if not isinstance(reply, dict):
            logger.error(f"Kiosk API call '{action}' returned {type(reply).__name__}")
            raise KioskApiError(f"unexpected reply: {reply!r}")
        return reply

    def query(self, phone: str) -> Dict[str, Any]:
        return self.call("query", phone=phone)

    def check_in(self, attendee_id: str) -> Dict[str, Any]:
        return self.call("checkin", id=attendee_id)
