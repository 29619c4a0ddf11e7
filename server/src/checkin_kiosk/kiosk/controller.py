"""Kiosk screen flow: Search -> Confirm -> Success.

The loading overlay is tracked separately from the active screen and is
always cleared once a call returns, whatever the outcome.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from checkin_kiosk.kiosk.api_client import KioskApiClient, KioskApiError
from checkin_kiosk.models.attendee import AttendeeStatus
from checkin_kiosk.utils.formatting import format_check_in_time
from checkin_kiosk.utils.phone import strip_non_digits

logger = logging.getLogger(__name__)

ENTER_PHONE_ALERT = "請輸入手機號碼"
QUERY_NOT_FOUND_ALERT = "找不到此手機號碼的報名資料"
CHECKIN_FAILED_ALERT = "報到失敗"
CONNECTION_ERROR_ALERT = "連線錯誤，請稍後再試"

CONFIRM_TITLE = "確認資料"
CONFIRM_DESC = "請確認以下資訊是否正確"
DONE_TITLE = "已完成報到"
DONE_DESC = "您已完成報到，以下是您的報到資料"
ALREADY_DONE_TEXT = "狀態：已完成報到"


class Screen(str, enum.Enum):
    SEARCH = "search"
    CONFIRM = "confirm"
    SUCCESS = "success"


@dataclass
class KioskState:
    screen: Screen = Screen.SEARCH
    loading: bool = False
    phone_input: str = ""
    current_user: Optional[Dict[str, Any]] = None
    confirm_title: str = CONFIRM_TITLE
    confirm_desc: str = CONFIRM_DESC
    checkin_visible: bool = True
    success_text: str = ""


class KioskDisplay:
    """Where the controller draws screens and raises alerts"""

    def render(self, state: KioskState) -> None:
        raise NotImplementedError

    def alert(self, message: str) -> None:
        raise NotImplementedError


class KioskController:
    def __init__(
        self,
        api: KioskApiClient,
        display: KioskDisplay,
        time_zone: Optional[str] = None,
    ):
        self.api = api
        self.display = display
        self.time_zone = time_zone
        self.state = KioskState()

    def _alert(self, message: str) -> None:
        self.display.alert(message)

    def switch_view(self, screen: Screen) -> None:
        self.state.screen = screen
        self.display.render(self.state)

    def toggle_loading(self, show: bool) -> None:
        self.state.loading = show
        self.display.render(self.state)

    def submit_phone(self, raw_phone: Optional[str] = None) -> None:
        """Search screen submit (button or Enter)"""
        if raw_phone is not None:
            self.state.phone_input = raw_phone
        phone = strip_non_digits(self.state.phone_input)

        if not phone:
            self._alert(ENTER_PHONE_ALERT)
            return

        self.toggle_loading(True)
        try:
            result = self.api.query(phone)
            user = result.get("data")
            if result.get("success") and isinstance(user, dict):
                self.state.current_user = user
                self.render_confirm(self.state.current_user)
                self.switch_view(Screen.CONFIRM)
            else:
                self._alert(result.get("message") or QUERY_NOT_FOUND_ALERT)
        except KioskApiError:
            self._alert(CONNECTION_ERROR_ALERT)
        finally:
            self.toggle_loading(False)

    def render_confirm(self, user: Dict[str, Any]) -> None:
        if user.get("status") == AttendeeStatus.CHECKED_IN.value:
            self.state.confirm_title = DONE_TITLE
            self.state.confirm_desc = DONE_DESC
            self.state.checkin_visible = False
        else:
            self.state.confirm_title = CONFIRM_TITLE
            self.state.confirm_desc = CONFIRM_DESC
            self.state.checkin_visible = True

    def confirm_check_in(self) -> None:
        """Confirm screen check-in action"""
        if not self.state.current_user or not self.state.checkin_visible:
            return

        self.toggle_loading(True)
        try:
            result = self.api.check_in(self.state.current_user["id"])
            if result.get("success"):
                self.state.success_text = self._success_text(result.get("timestamp"))
                self.switch_view(Screen.SUCCESS)
            elif result.get("code") == "already_checked_in":
                # Another kiosk or a double tap got there first; the goal is met
                self.state.success_text = ALREADY_DONE_TEXT
                self.switch_view(Screen.SUCCESS)
            else:
                self._alert(result.get("message") or CHECKIN_FAILED_ALERT)
        except KioskApiError:
            self._alert(CONNECTION_ERROR_ALERT)
        finally:
            self.toggle_loading(False)

    def _success_text(self, timestamp: Optional[str]) -> str:
        if not timestamp:
            return ALREADY_DONE_TEXT
        try:
            return f"報到時間：{format_check_in_time(timestamp, self.time_zone)}"
        except ValueError:
            logger.warning(f"Unparseable check-in timestamp: {timestamp}")
            return f"報到時間：{timestamp}"

    def back(self) -> None:
        self.switch_view(Screen.SEARCH)

    def reset_app(self) -> None:
        self.state.current_user = None
        self.state.phone_input = ""
        self.state.success_text = ""
        self.switch_view(Screen.SEARCH)
