# backend/utils/sheets_client.py
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

import httpx
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from config import settings
from utils.exceptions import ConfigurationError, SheetsError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def column_letter(index: int) -> str:
    """Zero-based column index -> A1 column letters (0 -> A, 26 -> AA)."""
    letters = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def a1(sheet_name: str, col_index: int, row_number: int) -> str:
    # row_number is 1-based, as in the sheet UI
    return f"{sheet_name}!{column_letter(col_index)}{row_number}"


class GoogleSheetsStore:
    """Spreadsheets seen as named tabs of string grids, header row first."""

    def __init__(self, client_email: str = None, private_key: str = None,
                 api_url: str = None, timeout: float = None, transport: httpx.BaseTransport = None):
        self.client_email = client_email if client_email is not None else settings.GOOGLE_CLIENT_EMAIL
        self.private_key = private_key if private_key is not None else settings.private_key
        self.api_url = (api_url or settings.SHEETS_API_URL).rstrip("/")
        self.timeout = timeout or settings.SHEETS_TIMEOUT
        self.transport = transport
        self._credentials = None
        # Credentials are shared by the scheduler's worker threads
        self._auth_lock = threading.Lock()

    # ---- AUTH ----
    def _get_credentials(self):
        if not self.client_email or not self.private_key:
            raise ConfigurationError("GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY must be configured")
        if self._credentials is None:
            info = {
                "type": "service_account",
                "client_email": self.client_email,
                "private_key": self.private_key,
                "token_uri": "https://oauth2.googleapis.com/token",
            }
            self._credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        return self._credentials

    def _token(self) -> str:
        with self._auth_lock:
            credentials = self._get_credentials()
            if not credentials.valid:
                credentials.refresh(GoogleAuthRequest())
            return credentials.token

    def _request(self, method: str, path: str, params: Dict[str, Any] = None, json: Any = None) -> Dict[str, Any]:
        url = f"{self.api_url}/{path}"
        headers = {"Authorization": f"Bearer {self._token()}"}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(method, url, params=params, json=json, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Sheets API unreachable ({method} {path}): {e}")
            raise SheetsError(f"Sheets API request failed: {e}") from e

        if response.status_code >= 400:
            message, status = response.text, None
            try:
                error = response.json().get("error", {})
                message = error.get("message") or message
                status = error.get("status")
            except ValueError:
                pass
            logger.error(f"Sheets API error {response.status_code} ({method} {path}): {message}")
            raise SheetsError(message, status_code=response.status_code, status=status)

        return response.json() if response.content else {}

    # ---- VALUES ----
    def get_values(self, sheet_id: str, range_spec: str) -> List[List[str]]:
        data = self._request("GET", f"{sheet_id}/values/{range_spec}")
        return data.get("values", [])

    def append_values(self, sheet_id: str, range_spec: str, rows: List[List[Any]]) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"{sheet_id}/values/{range_spec}:append",
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": rows},
        )

    def update_values(self, sheet_id: str, range_spec: str, rows: List[List[Any]]) -> Dict[str, Any]:
        return self._request(
            "PUT",
            f"{sheet_id}/values/{range_spec}",
            params={"valueInputOption": "RAW"},
            json={"values": rows},
        )

    # ---- STRUCTURE ----
    def get_spreadsheet(self, sheet_id: str) -> Dict[str, Any]:
        return self._request("GET", sheet_id, params={"fields": "sheets.properties"})

    def batch_update(self, sheet_id: str, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._request("POST", f"{sheet_id}:batchUpdate", json={"requests": requests})

    def get_tab_id(self, sheet_id: str, title: str) -> Optional[int]:
        for sheet in self.get_spreadsheet(sheet_id).get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == title:
                return props.get("sheetId")
        return None

    def ensure_tab(self, sheet_id: str, title: str, headers: List[str]) -> bool:
        """Create the tab with a header row if it does not exist. Returns True if created."""
        if self.get_tab_id(sheet_id, title) is not None:
            return False
        self.batch_update(sheet_id, [{"addSheet": {"properties": {"title": title}}}])
        end = column_letter(len(headers) - 1)
        self.update_values(sheet_id, f"{title}!A1:{end}1", [headers])
        logger.info(f"Created tab {title} in spreadsheet {sheet_id}")
        return True

    def delete_rows(self, sheet_id: str, tab_id: int, row_indices: Iterable[int]) -> int:
        # Bottom-up so each deletion leaves the remaining indices valid
        indices = sorted(set(row_indices), reverse=True)
        if not indices:
            return 0
        requests = [
            {
                "deleteDimension": {
                    "range": {
                        "sheetId": tab_id,
                        "dimension": "ROWS",
                        "startIndex": idx,
                        "endIndex": idx + 1,
                    }
                }
            }
            for idx in indices
        ]
        self.batch_update(sheet_id, requests)
        return len(indices)
