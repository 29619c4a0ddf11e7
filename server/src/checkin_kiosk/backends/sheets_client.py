"""Google Sheets client for the attendee sheet.

API Reference: https://developers.google.com/workspace/sheets/api/reference/rest
"""

import logging
from typing import Any, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def column_letter(column: int) -> str:
    """1-based column number to A1 letters (1 -> A, 27 -> AA)"""
    if column < 1:
        raise ValueError(f"Column must be >= 1, got {column}")
    letters = ""
    while column:
        column, remainder = divmod(column - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


class SheetsClient:
    """Reads the whole sheet as a grid and writes single cells"""

    def __init__(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        credentials_file: Optional[str] = None,
        service=None,
    ):
        """
        Args:
            spreadsheet_id: ID from the spreadsheet URL
            sheet_name: Tab holding the attendee rows
            credentials_file: Service account JSON key file
            service: Prebuilt Sheets API resource (skips credential loading)
        """
        if not spreadsheet_id:
            raise RuntimeError(
                "SPREADSHEET_ID must be set when ATTENDEE_STORE is 'sheets'."
            )
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name

        if service is None:
            if not credentials_file:
                raise RuntimeError(
                    "GOOGLE_SERVICE_ACCOUNT_FILE must be set when ATTENDEE_STORE is 'sheets'."
                )
            creds = service_account.Credentials.from_service_account_file(
                credentials_file, scopes=SCOPES
            )
            service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        self.service = service

    def _a1(self, cell: str = "") -> str:
        quoted = "'" + self.sheet_name.replace("'", "''") + "'"
        return f"{quoted}!{cell}" if cell else quoted

    def get_values(self) -> List[List[Any]]:
        """
        Read every populated row of the sheet, header included.

        Numbers come back unformatted (a phone stored as a number stays a
        number) and dates come back as serial day numbers, independent of the
        spreadsheet locale. Trailing empty cells are omitted by the API.
        """
        result = (
            self.service.spreadsheets()
            .values()
            .get(
                spreadsheetId=self.spreadsheet_id,
                range=self._a1(),
                valueRenderOption="UNFORMATTED_VALUE",
                dateTimeRenderOption="SERIAL_NUMBER",
                majorDimension="ROWS",
            )
            .execute()
        )
        return result.get("values", [])

    def set_cell(self, row: int, column: int, value: Any) -> None:
        """Write one cell addressed by 1-based row and column"""
        cell = f"{column_letter(column)}{row}"
        self.service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=self._a1(cell),
            valueInputOption="RAW",
            body={"values": [[value]]},
        ).execute()
        logger.debug(f"Wrote {self._a1(cell)}")

    def ensure_sheet(self, headers: List[str]) -> bool:
        """
        Create the tab if it is missing, then write and freeze the header row.

        Returns:
            True if the tab was created, False if it already existed
        """
        metadata = (
            self.service.spreadsheets()
            .get(spreadsheetId=self.spreadsheet_id, fields="sheets.properties")
            .execute()
        )
        titles = [
            sheet.get("properties", {}).get("title")
            for sheet in metadata.get("sheets", [])
        ]

        created = self.sheet_name not in titles
        if created:
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={
                    "requests": [
                        {
                            "addSheet": {
                                "properties": {
                                    "title": self.sheet_name,
                                    "gridProperties": {"frozenRowCount": 1},
                                }
                            }
                        }
                    ]
                },
            ).execute()
            logger.info(f"Created sheet '{self.sheet_name}'")
        else:
            sheet_id = next(
                sheet["properties"]["sheetId"]
                for sheet in metadata["sheets"]
                if sheet["properties"].get("title") == self.sheet_name
            )
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={
                    "requests": [
                        {
                            "updateSheetProperties": {
                                "properties": {
                                    "sheetId": sheet_id,
                                    "gridProperties": {"frozenRowCount": 1},
                                },
                                "fields": "gridProperties.frozenRowCount",
                            }
                        }
                    ]
                },
            ).execute()

        last_column = column_letter(len(headers))
        self.service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=self._a1(f"A1:{last_column}1"),
            valueInputOption="RAW",
            body={"values": [headers]},
        ).execute()
        return created
