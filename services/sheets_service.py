import logging
import socket
from typing import Optional

import google.auth.exceptions
import httplib2
from google.oauth2.service_account import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import Config
from services.errors import RemoteApiError, RemoteTimeoutError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

_service = None


def get_service():
    global _service
    if _service is None:
        credentials = Credentials.from_service_account_file(Config.GOOGLE_CREDENTIALS_FILE, scopes=SCOPES)
        http = AuthorizedHttp(credentials, http=httplib2.Http(timeout=Config.HTTP_TIMEOUT_SECONDS))
        _service = build("sheets", "v4", http=http, cache_discovery=False)
    return _service


def _clear_request(sheet_id: int, width: int, clear_rows: Optional[int]) -> dict:
    grid_range = {"sheetId": sheet_id}
    if clear_rows is not None:
        grid_range.update({
            "startRowIndex": 0,
            "endRowIndex": clear_rows,
            "startColumnIndex": 0,
            "endColumnIndex": width,
        })
    return {"updateCells": {"range": grid_range, "fields": "userEnteredValue"}}


def _bold_header_request(sheet_id: int, width: int) -> dict:
    return {
        "repeatCell": {
            "range": {
                "sheetId": sheet_id,
                "startRowIndex": 0,
                "endRowIndex": 1,
                "startColumnIndex": 0,
                "endColumnIndex": width,
            },
            "cell": {"userEnteredFormat": {"textFormat": {"bold": True}}},
            "fields": "userEnteredFormat.textFormat.bold",
        }
    }


def write(sheet_id: int, sheet_name: str, header: list, rows: list,
          clear_rows: Optional[int] = None, service=None):
    """Replace a sheet's values with header + rows and bold the header.

    The clear covers the whole sheet unless clear_rows bounds it to that many
    rows by the header width.
    """
    width = len(header)
    try:
        spreadsheets = (service or get_service()).spreadsheets()
        spreadsheets.batchUpdate(
            spreadsheetId=Config.GOOGLE_SHEET_ID,
            body={"requests": [_clear_request(sheet_id, width, clear_rows)]},
        ).execute()

        spreadsheets.values().update(
            spreadsheetId=Config.GOOGLE_SHEET_ID,
            range=f"'{sheet_name}'!A1",
            valueInputOption="RAW",
            body={"values": [header, *rows]},
        ).execute()

        spreadsheets.batchUpdate(
            spreadsheetId=Config.GOOGLE_SHEET_ID,
            body={"requests": [_bold_header_request(sheet_id, width)]},
        ).execute()
    except (TimeoutError, socket.timeout) as e:
        raise RemoteTimeoutError(f"Google Sheets request timed out writing '{sheet_name}'") from e
    except (HttpError, httplib2.HttpLib2Error, google.auth.exceptions.GoogleAuthError,
            OSError, ValueError) as e:
        raise RemoteApiError(f"Google Sheets write to '{sheet_name}' failed: {e}") from e

    logger.info(f"Wrote {len(rows)} rows to sheet '{sheet_name}'")
