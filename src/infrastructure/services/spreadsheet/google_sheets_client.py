"""Minimal Google Sheets v4 client for the spreadsheet stores.

Authenticates as a service account: a short-lived RS256 JWT assertion is
exchanged for an OAuth access token, which is cached until shortly before it
expires. Only the calls the stores need are implemented (list sheet titles,
add a sheet, append a row, read a column).

Every failure (network, HTTP status, malformed key) surfaces as
``SpreadsheetError`` so callers see a storage outage, never a half answer.
"""

import threading
import time
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx
import jwt
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.core.exceptions import SpreadsheetError

logger = get_logger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
TOKEN_LIFETIME_SECONDS = 3600
TOKEN_REFRESH_MARGIN_SECONDS = 60


class GoogleSheetsClient:
    """Synchronous Sheets client bound to one spreadsheet.

    Args:
        spreadsheet_id: ID of the target spreadsheet
        service_account_email: ``client_email`` of the service account
        private_key: PEM private key of the service account
        token_uri: OAuth token endpoint
        api_base: Sheets API base URL
        timeout: Per-request timeout in seconds
        http_client: Optional preconfigured ``httpx.Client`` (tests pass one
            with a mock transport)
    """

    def __init__(
        self,
        spreadsheet_id: str,
        service_account_email: str,
        private_key: str,
        token_uri: str = "https://oauth2.googleapis.com/token",
        api_base: str = "https://sheets.googleapis.com/v4/spreadsheets",
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        if not spreadsheet_id:
            raise SpreadsheetError("Spreadsheet ID is not configured", code="spreadsheet_not_configured")
        self.spreadsheet_id = spreadsheet_id
        self._service_account_email = service_account_email
        self._private_key = private_key
        self._token_uri = token_uri
        self._api_base = api_base.rstrip("/")
        self._http = http_client or httpx.Client(timeout=timeout)
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self._known_sheets: set = set()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def _build_assertion(self, now: int) -> str:
        claims = {
            "iss": self._service_account_email,
            "scope": SHEETS_SCOPE,
            "aud": self._token_uri,
            "iat": now,
            "exp": now + TOKEN_LIFETIME_SECONDS,
        }
        try:
            return jwt.encode(claims, self._private_key, algorithm="RS256")
        except (ValueError, TypeError, jwt.PyJWTError) as exc:
            raise SpreadsheetError(f"Invalid service account key: {exc}", code="spreadsheet_auth_failed") from exc

    def _access_token(self) -> str:
        with self._lock:
            if self._token and time.time() < self._token_expires_at - TOKEN_REFRESH_MARGIN_SECONDS:
                return self._token

            now = int(time.time())
            response = self._send(
                "POST",
                self._token_uri,
                data={
                    "grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer",
                    "assertion": self._build_assertion(now),
                },
                authenticated=False,
            )
            payload = response.json()
            token = payload.get("access_token")
            if not token:
                raise SpreadsheetError("Token endpoint returned no access token", code="spreadsheet_auth_failed")
            self._token = token
            self._token_expires_at = now + int(payload.get("expires_in", TOKEN_LIFETIME_SECONDS))
            logger.debug("google_sheets_token_refreshed")
            return token

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(0.5),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    def _send_with_retry(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        return self._http.request(method, url, **kwargs)

    def _send(self, method: str, url: str, authenticated: bool = True, **kwargs: Any) -> httpx.Response:
        if authenticated:
            kwargs.setdefault("headers", {})["Authorization"] = f"Bearer {self._access_token()}"
        try:
            response = self._send_with_retry(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("google_sheets_request_failed", method=method, error=str(exc))
            raise SpreadsheetError(f"Google Sheets request failed: {exc.__class__.__name__}") from exc

        if response.status_code >= 400:
            logger.error("google_sheets_http_error", method=method, status_code=response.status_code)
            raise SpreadsheetError(
                f"Google Sheets returned HTTP {response.status_code}", code="spreadsheet_http_error"
            )
        return response

    def _url(self, suffix: str = "") -> str:
        return f"{self._api_base}/{self.spreadsheet_id}{suffix}"

    @staticmethod
    def _range(sheet_title: str, cells: str) -> str:
        escaped = sheet_title.replace("'", "''")
        return quote(f"'{escaped}'!{cells}", safe="")

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def sheet_titles(self) -> List[str]:
        response = self._send("GET", self._url(), params={"fields": "sheets.properties.title"})
        return [sheet["properties"]["title"] for sheet in response.json().get("sheets", [])]

    def ensure_sheet(self, sheet_title: str, headers: Sequence[str]) -> None:
        """Create ``sheet_title`` with a header row unless it already exists."""
        if sheet_title in self._known_sheets:
            return
        if sheet_title not in self.sheet_titles():
            self._send(
                "POST",
                self._url(":batchUpdate"),
                json={"requests": [{"addSheet": {"properties": {"title": sheet_title}}}]},
            )
            self.append_row(sheet_title, list(headers))
            logger.info("google_sheet_created", sheet=sheet_title)
        self._known_sheets.add(sheet_title)

    def append_row(self, sheet_title: str, values: Sequence[Any]) -> None:
        self._send(
            "POST",
            self._url(f"/values/{self._range(sheet_title, 'A1')}:append"),
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": [list(values)]},
        )

    def read_column(self, sheet_title: str, column: str) -> List[str]:
        """Values of one column, header included, blanks as empty strings."""
        response = self._send(
            "GET",
            self._url(f"/values/{self._range(sheet_title, f'{column}:{column}')}"),
            params={"majorDimension": "COLUMNS"},
        )
        columns: List[List[str]] = response.json().get("values", [])
        return [str(value) for value in columns[0]] if columns else []

    def close(self) -> None:
        self._http.close()


def build_sheets_client(settings: Any) -> GoogleSheetsClient:
    """Create a client from the spreadsheet settings."""
    if not settings.spreadsheet_configured:
        raise SpreadsheetError("Google Sheets credentials are not configured", code="spreadsheet_not_configured")
    return GoogleSheetsClient(
        spreadsheet_id=settings.GOOGLE_SHEET_ID,
        service_account_email=settings.GOOGLE_SERVICE_ACCOUNT_EMAIL,
        private_key=settings.GOOGLE_PRIVATE_KEY.get_secret_value(),
        token_uri=settings.GOOGLE_TOKEN_URI,
        api_base=settings.GOOGLE_SHEETS_API_BASE,
        timeout=settings.GOOGLE_SHEETS_TIMEOUT_SECONDS,
    )
