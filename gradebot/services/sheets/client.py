"""
Google Sheets Client

Gateway to one worksheet of a spreadsheet: reads rectangular ranges, writes
cells and ranges, and grows the grid when a write falls outside it.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import gspread
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ...core.addressing import qualify_range, to_cell_address
from ...core.table import Table, parse_sheet_data
from ...errors import GatewayError, SchemaPreconditionError

logger = logging.getLogger(__name__)


@contextmanager
def api_errors(action: str) -> Iterator[None]:
    """Re-raise Sheets API failures as GatewayError with status and body."""
    try:
        yield
    except gspread.exceptions.APIError as e:
        response = getattr(e, 'response', None)
        status = getattr(response, 'status_code', None)
        body = getattr(response, 'text', '') or str(e)
        logger.error(f"Error while {action}: {body}")
        raise GatewayError(f"Sheets API error while {action}", status=status, body=body) from e
    except HttpError as e:
        content = e.content.decode('utf-8', errors='replace') if isinstance(e.content, bytes) else str(e.content)
        logger.error(f"Error while {action}: {content}")
        raise GatewayError(f"Sheets API error while {action}", status=e.resp.status, body=content) from e


class SheetsClient:
    """
    Google Sheets gateway bound to a single worksheet.

    Value reads and writes go through gspread; grid metadata and resizing go
    through the Sheets v4 discovery service.
    """

    def __init__(
        self,
        credentials: Credentials,
        spreadsheet_id: str,
        sheet_name: str = "Sheet1"
    ):
        """
        Initialize Google Sheets client.

        Args:
            credentials: Authorized service account credentials
            spreadsheet_id: Google Sheets spreadsheet ID
            sheet_name: Worksheet title
        """
        self.credentials = credentials
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self._gspread_client = None
        self._sheets_service = None
        self._spreadsheet = None
        self._sheet_id: Optional[int] = None

    @property
    def gspread_client(self) -> gspread.Client:
        """Lazy-load gspread client."""
        if self._gspread_client is None:
            self._gspread_client = gspread.authorize(self.credentials)
        return self._gspread_client

    @property
    def sheets_service(self):
        """Lazy-load Google Sheets API service."""
        if self._sheets_service is None:
            self._sheets_service = build('sheets', 'v4', credentials=self.credentials, cache_discovery=False)
        return self._sheets_service

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            logger.info(f"Opening spreadsheet: {self.spreadsheet_id}")
            with api_errors("opening spreadsheet"):
                self._spreadsheet = self.gspread_client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    @property
    def sheet_id(self) -> int:
        if self._sheet_id is None:
            self._sheet_id = self.get_sheet_id(self.sheet_name)
        return self._sheet_id

    def read_range(self, range_name: str) -> Table:
        """
        Read a range of the worksheet.

        Args:
            range_name: A1 range without sheet prefix, e.g. 'A1:ZZ1000'

        Returns:
            Table of cell strings (trailing blanks are omitted by the API)
        """
        qualified = qualify_range(self.sheet_name, range_name)
        logger.info(f"Reading range {qualified}")
        with api_errors(f"loading data from {qualified}"):
            data = self.spreadsheet.values_get(qualified)
        return parse_sheet_data(data)

    def write_range(self, range_name: str, values: List[List[Any]], raw: bool = False) -> None:
        """
        Write a block of values starting at ``range_name``.

        Args:
            range_name: A1 range without sheet prefix
            values: Rows of values
            raw: Store values as-is instead of parsing them like typed input
        """
        qualified = qualify_range(self.sheet_name, range_name)
        logger.info(f"Writing {len(values)} rows to {qualified}")
        with api_errors(f"writing data {qualified}"):
            self.spreadsheet.values_update(
                qualified,
                params={'valueInputOption': 'RAW' if raw else 'USER_ENTERED'},
                body={
                    'range': qualified,
                    'majorDimension': 'ROWS',
                    'values': values
                }
            )

    def write_cell(self, row: int, col: int, value: Any, raw: bool = False) -> None:
        """
        Write one value at zero-based (row, col), growing the grid if needed.

        Identifiers and headers must be written with ``raw`` so that text such
        as "007" is not stored as the number 7.
        """
        self.ensure_capacity(row + 1, col + 1)
        self.write_range(to_cell_address(row, col), [[value]], raw=raw)

    def ensure_capacity(self, min_rows: int, min_columns: int) -> None:
        row_count, column_count = self.get_dimensions()
        if min_columns > column_count:
            self.expand_columns(min_columns)
        if min_rows > row_count:
            self.expand_rows(min_rows)

    def _sheet_properties(self) -> List[Dict[str, Any]]:
        with api_errors("loading table info"):
            response = self.sheets_service.spreadsheets().get(
                spreadsheetId=self.spreadsheet_id,
                fields='sheets.properties'
            ).execute()
        return [sheet.get('properties', {}) for sheet in response.get('sheets', [])]

    def get_sheet_id(self, sheet_name: str) -> int:
        """
        Resolve a worksheet title to its numeric sheet id.

        Raises:
            SchemaPreconditionError: If no worksheet has that title
        """
        for props in self._sheet_properties():
            if props.get('title') == sheet_name and 'sheetId' in props:
                return int(props['sheetId'])
        raise SchemaPreconditionError(f"Can't find the sheet '{sheet_name}'")

    def get_dimensions(self) -> Tuple[int, int]:
        """Current grid size of the worksheet as (row_count, column_count)."""
        sheet_id = self.sheet_id
        for props in self._sheet_properties():
            if props.get('sheetId') == sheet_id:
                grid = props.get('gridProperties', {})
                return int(grid.get('rowCount', 0)), int(grid.get('columnCount', 0))
        raise GatewayError(f"Can't get size of the sheet '{self.sheet_name}'")

    def expand_columns(self, new_count: int) -> None:
        logger.info(f"Expanding '{self.sheet_name}' to {new_count} columns")
        self._update_grid('columnCount', new_count)

    def expand_rows(self, new_count: int) -> None:
        logger.info(f"Expanding '{self.sheet_name}' to {new_count} rows")
        self._update_grid('rowCount', new_count)

    def _update_grid(self, field: str, count: int) -> Dict[str, Any]:
        return self.batch_update([{
            'updateSheetProperties': {
                'properties': {
                    'sheetId': self.sheet_id,
                    'gridProperties': {field: count}
                },
                'fields': f'gridProperties.{field}'
            }
        }])

    def batch_update(self, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Execute batch update requests on the spreadsheet.

        Args:
            requests: List of update request objects

        Returns:
            API response dictionary
        """
        body = {'requests': requests}
        logger.info(f"Executing {len(requests)} batch update requests")
        with api_errors("updating sheet properties"):
            return self.sheets_service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body=body
            ).execute()
