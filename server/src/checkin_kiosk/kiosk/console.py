#!/usr/bin/env python3
"""Terminal front-end for the kiosk.

    python -m checkin_kiosk.kiosk.console [--api-url URL]
"""

import argparse
from typing import Callable

from checkin_kiosk.config import config
from checkin_kiosk.kiosk.api_client import KioskApiClient
from checkin_kiosk.kiosk.controller import (
    KioskController,
    KioskDisplay,
    KioskState,
    Screen,
)
from checkin_kiosk.logging_config import setup_logging

QUIT_WORDS = {"q", "quit", "exit"}


class ConsoleDisplay(KioskDisplay):
    def __init__(self, write: Callable[[str], None] = print):
        self.write = write

    def alert(self, message: str) -> None:
        self.write(f"[!] {message}")

    def render(self, state: KioskState) -> None:
        if state.loading:
            self.write("處理中...")
            return

        if state.screen == Screen.CONFIRM and state.current_user:
            user = state.current_user
            self.write("")
            self.write(f"== {state.confirm_title} ==")
            self.write(state.confirm_desc)
            self.write(f"  學員編號：{user.get('id', '')}")
            self.write(f"  姓名：{user.get('name', '')}")
            self.write(f"  課程：{user.get('course_name', '')}")
            self.write(f"  日期：{user.get('course_date', '')}")
        elif state.screen == Screen.SUCCESS:
            self.write("")
            self.write("== 報到成功 ==")
            self.write(state.success_text)


def run_console(
    controller: KioskController, read: Callable[[str], str] = input
) -> None:
    """Drive the controller from line input until EOF or a quit word"""
    while True:
        state = controller.state
        try:
            if state.screen == Screen.SEARCH:
                line = read("請輸入手機號碼 (q 離開)：")
                if line.strip().lower() in QUIT_WORDS:
                    return
                controller.submit_phone(line)
            elif state.screen == Screen.CONFIRM:
                if state.checkin_visible:
                    line = read("[Enter] 確認報到  [b] 返回：")
                    if line.strip().lower() == "b":
                        controller.back()
                    else:
                        controller.confirm_check_in()
                else:
                    read("[Enter] 返回：")
                    controller.reset_app()
            else:
                read("[Enter] 回到首頁：")
                controller.reset_app()
        except EOFError:
            return


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Check-in kiosk (terminal)")
    parser.add_argument(
        "--api-url",
        default=config["kiosk_api_url"],
        help="Kiosk API endpoint (default: KIOSK_API_URL)",
    )
    args = parser.parse_args(argv)

    setup_logging("WARNING")
    controller = KioskController(
        KioskApiClient(args.api_url),
        ConsoleDisplay(),
        time_zone=config["time_zone"],
    )
    run_console(controller)


if __name__ == "__main__":
    main()
