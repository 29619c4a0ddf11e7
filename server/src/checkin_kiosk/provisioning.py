#!/usr/bin/env python3
"""One-time setup of the attendee table.

Run once before an event:

    python -m checkin_kiosk.provisioning            # store from ATTENDEE_STORE
    python -m checkin_kiosk.provisioning --store sheets
"""

import argparse

from sqlmodel import SQLModel

from checkin_kiosk.backends.sheets_client import SheetsClient
from checkin_kiosk.config import config
from checkin_kiosk.logging_config import get_logger, setup_logging
from checkin_kiosk.models.attendee import SHEET_HEADERS, Attendee

logger = get_logger(__name__)


def setup_sheet(sheets_client: SheetsClient) -> None:
    """Create the attendee tab if absent and write the frozen header row"""
    created = sheets_client.ensure_sheet(SHEET_HEADERS)
    state = "created" if created else "updated"
    logger.info(f"Sheet '{sheets_client.sheet_name}' {state} with headers")


def setup_database(engine) -> None:
    """Create the attendees table if absent"""
    SQLModel.metadata.create_all(engine, tables=[Attendee.__table__])
    logger.info("Table 'attendees' is ready")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Provision the attendee table")
    parser.add_argument(
        "--store",
        choices=["sheets", "sql"],
        default=config["attendee_store"],
        help="Attendee store to provision (default: ATTENDEE_STORE)",
    )
    args = parser.parse_args(argv)

    setup_logging()
    if args.store == "sheets":
        setup_sheet(
            SheetsClient(
                spreadsheet_id=config["spreadsheet_id"],
                sheet_name=config["sheet_name"],
                credentials_file=config["google_service_account_file"],
            )
        )
    else:
        from checkin_kiosk.models.database import engine

        setup_database(engine)


if __name__ == "__main__":
    main()
