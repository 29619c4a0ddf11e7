"""Tests for the kiosk screen flow against the API"""

import httpx
import pytest

from checkin_kiosk.kiosk.api_client import KioskApiClient, KioskApiError
from checkin_kiosk.kiosk.console import ConsoleDisplay, run_console
from checkin_kiosk.kiosk.controller import (
    ALREADY_DONE_TEXT,
    CONNECTION_ERROR_ALERT,
    DONE_TITLE,
    ENTER_PHONE_ALERT,
    QUERY_NOT_FOUND_ALERT,
    KioskController,
    KioskDisplay,
    Screen,
)


class RecordingDisplay(KioskDisplay):
    def __init__(self):
        self.renders = []
        self.alerts = []

    def render(self, state):
        self.renders.append((state.screen, state.loading))

    def alert(self, message):
        self.alerts.append(message)


class CountingTransport(httpx.BaseTransport):
    def __init__(self, handler):
        self.handler = handler
        self.calls = 0

    def handle_request(self, request):
        self.calls += 1
        return self.handler(request)


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def kiosk(api_client, display):
    """Controller talking to the app through the TestClient"""
    return KioskController(
        KioskApiClient("/api", http_client=api_client),
        display,
        time_zone="Asia/Taipei",
    )


def offline_kiosk(display, handler):
    transport = CountingTransport(handler)
    api = KioskApiClient(
        "http://kiosk.invalid/api", http_client=httpx.Client(transport=transport)
    )
    return KioskController(api, display), transport


def refuse(request):
    raise httpx.ConnectError("connection refused", request=request)


def test_api_client_sends_text_plain():
    seen = {}

    def handler(request):
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.content.decode("utf-8")
        return httpx.Response(200, json={"success": True})

    api = KioskApiClient(
        "http://kiosk.invalid/api",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )

    assert api.query("0912345678") == {"success": True}
    assert seen["content_type"] == "text/plain;charset=utf-8"
    assert seen["body"] == '{"action": "query", "phone": "0912345678"}'


def test_api_client_http_error_raises():
    api = KioskApiClient(
        "http://kiosk.invalid/api",
        http_client=httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))
        ),
    )

    with pytest.raises(KioskApiError):
        api.check_in("A1")


def test_empty_phone_blocks_submission(display):
    controller, transport = offline_kiosk(display, refuse)

    controller.submit_phone(" -() ")

    assert display.alerts == [ENTER_PHONE_ALERT]
    assert transport.calls == 0
    assert controller.state.screen == Screen.SEARCH


def test_search_sanitizes_and_confirms(kiosk, display):
    kiosk.submit_phone("0912-345 (678)")

    state = kiosk.state
    assert state.screen == Screen.CONFIRM
    assert state.current_user["id"] == "A1"
    assert state.confirm_title == "確認資料"
    assert state.checkin_visible is True
    assert display.alerts == []
    assert state.loading is False
    assert (Screen.SEARCH, True) in display.renders


def test_search_not_found_alerts_server_message(kiosk, display):
    kiosk.submit_phone("0900000000")

    assert kiosk.state.screen == Screen.SEARCH
    assert display.alerts == ["找不到使用者。"]
    assert kiosk.state.loading is False


def test_check_in_shows_local_time(kiosk):
    kiosk.submit_phone("0912345678")
    kiosk.confirm_check_in()

    assert kiosk.state.screen == Screen.SUCCESS
    # 06:05:09Z is 14:05:09 in Taipei
    assert kiosk.state.success_text == "報到時間：2025/01/03 14:05:09"


def test_already_checked_in_attendee_is_read_only(kiosk):
    kiosk.submit_phone("0912345678")
    kiosk.confirm_check_in()
    kiosk.reset_app()

    kiosk.submit_phone("0912345678")

    assert kiosk.state.screen == Screen.CONFIRM
    assert kiosk.state.confirm_title == DONE_TITLE
    assert kiosk.state.checkin_visible is False


def test_race_lands_on_success(kiosk, display, attendee_table):
    kiosk.submit_phone("0912345678")
    # Another kiosk checks A1 in while this one shows the confirm screen
    attendee_table.grid[1][6] = "CheckedIn"

    kiosk.confirm_check_in()

    assert kiosk.state.screen == Screen.SUCCESS
    assert kiosk.state.success_text == ALREADY_DONE_TEXT
    assert display.alerts == []


def test_network_failure_stays_on_current_view(display):
    def handler(request):
        return httpx.Response(
            200,
            json={
                "success": True,
                "code": "ok",
                "data": {"id": "A1", "name": "王小明", "status": ""},
            },
        )

    controller, transport = offline_kiosk(display, handler)
    controller.submit_phone("0912345678")
    assert controller.state.screen == Screen.CONFIRM

    transport.handler = refuse
    controller.confirm_check_in()

    assert controller.state.screen == Screen.CONFIRM
    assert display.alerts == [CONNECTION_ERROR_ALERT]
    assert controller.state.loading is False


def test_query_network_failure_alerts(display):
    controller, _ = offline_kiosk(display, refuse)

    controller.submit_phone("0912345678")

    assert controller.state.screen == Screen.SEARCH
    assert display.alerts == [CONNECTION_ERROR_ALERT]
    assert controller.state.loading is False


def test_check_in_failure_alerts_message(display):
    responses = iter(
        [
            {"success": True, "code": "ok", "data": {"id": "A9", "status": ""}},
            {"success": False, "code": "not_found", "message": "找不到使用者 ID。"},
        ]
    )
    controller, _ = offline_kiosk(
        display, lambda request: httpx.Response(200, json=next(responses))
    )

    controller.submit_phone("0912345678")
    controller.confirm_check_in()

    assert controller.state.screen == Screen.CONFIRM
    assert display.alerts == ["找不到使用者 ID。"]


def test_api_client_non_object_reply_raises():
    api = KioskApiClient(
        "http://kiosk.invalid/api",
        http_client=httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[1, 2]))
        ),
    )

    with pytest.raises(KioskApiError):
        api.query("0912345678")


def test_non_object_reply_alerts_connection_error(display):
    controller, _ = offline_kiosk(
        display, lambda request: httpx.Response(200, json="ok")
    )

    controller.submit_phone("0912345678")

    assert controller.state.screen == Screen.SEARCH
    assert display.alerts == [CONNECTION_ERROR_ALERT]
    assert controller.state.loading is False


def test_query_success_without_data_alerts(display):
    controller, _ = offline_kiosk(
        display, lambda request: httpx.Response(200, json={"success": True})
    )

    controller.submit_phone("0912345678")

    assert controller.state.screen == Screen.SEARCH
    assert controller.state.current_user is None
    assert display.alerts == [QUERY_NOT_FOUND_ALERT]


def test_back_returns_to_search_keeping_input(kiosk):
    kiosk.submit_phone("0912345678")

    kiosk.back()

    assert kiosk.state.screen == Screen.SEARCH
    assert kiosk.state.phone_input == "0912345678"


def test_reset_app_clears_selection(kiosk):
    kiosk.submit_phone("0912345678")
    kiosk.confirm_check_in()

    kiosk.reset_app()

    assert kiosk.state.screen == Screen.SEARCH
    assert kiosk.state.current_user is None
    assert kiosk.state.phone_input == ""


def test_check_in_without_selection_is_ignored(kiosk, display):
    kiosk.confirm_check_in()

    assert display.renders == []


def test_console_session(api_client):
    lines = iter(["0912 345 678", "", "", "q"])
    output = []
    controller = KioskController(
        KioskApiClient("/api", http_client=api_client),
        ConsoleDisplay(write=output.append),
        time_zone="Asia/Taipei",
    )

    run_console(controller, read=lambda prompt: next(lines))

    text = "\n".join(output)
    assert "王小明" in text
    assert "報到時間：2025/01/03 14:05:09" in text
    assert controller.state.screen == Screen.SEARCH


def test_console_stops_on_eof(api_client):
    def read(prompt):
        raise EOFError

    controller = KioskController(
        KioskApiClient("/api", http_client=api_client), ConsoleDisplay(write=lambda line: None)
    )

    run_console(controller, read=read)

    assert controller.state.screen == Screen.SEARCH
