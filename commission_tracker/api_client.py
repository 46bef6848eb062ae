# commission_tracker/api_client.py
"""Commission API client.

Thin wrapper over the remote invoicing/CRM REST API the dashboard reads
from: commissions and invoices for a date range, the OAuth login URL,
token verification, invoice sync and the admin salespeople list.

Every authenticated call sends the bearer token held by the session.
Responses are returned as plain dicts/lists; turning them into records
is the job of the page module.
"""
import logging
from datetime import date
from typing import Dict, List, Optional
from urllib.parse import quote

import requests

from .config import config
from .errors import ApiError, AuthenticationError, InvalidDateRangeError

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
}


class TrackerApiClient:
    """Client for the commission tracker REST API."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        api_config = config.get_api_config()
        self.base_url = (base_url or api_config["base_url"]).rstrip("/")
        self.timeout = timeout or api_config["timeout_seconds"]
        self.token = token
        self.session = session or requests.Session()

    # ==================== LOW LEVEL ====================

    def _headers(self, auth: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json", **NO_CACHE_HEADERS}
        if auth:
            if not self.token:
                raise AuthenticationError("Not signed in: no API token available")
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        json: Optional[Dict] = None,
        auth: bool = True,
    ) -> Dict:
        url = f"{self.base_url}{path}"
        headers = self._headers(auth)

        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(f"Could not reach the commission API: {e}") from e

        logger.info(f"{method} {path} response: status={resp.status_code}")

        if resp.status_code in (401, 403):
            raise AuthenticationError(
                f"Commission API rejected the token (HTTP {resp.status_code})",
                status_code=resp.status_code,
            )
        if resp.status_code >= 400:
            raise ApiError(
                f"API error: {resp.status_code} {resp.text[:200]}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError("Commission API returned a non-JSON body", status_code=resp.status_code) from e

        if not isinstance(data, dict):
            raise ApiError("Unexpected response shape from commission API", status_code=resp.status_code)
        return data

    @staticmethod
    def _range_params(start: date, end: date) -> Dict[str, str]:
        if start > end:
            raise InvalidDateRangeError(start, end)
        return {"start": start.isoformat(), "end": end.isoformat()}

    @staticmethod
    def _list_field(data: Dict, key: str) -> List[Dict]:
        value = data.get(key)
        if not isinstance(value, list):
            if value is not None:
                logger.warning(f"Expected a list under {key!r}, got {type(value).__name__}")
            return []
        return value

    # ==================== COMMISSIONS & INVOICES ====================

    def get_commissions_payload(self, start: date, end: date) -> Dict:
        """Full /api/commissions body: commissions plus the optional user block."""
        return self._request("GET", "/api/commissions", params=self._range_params(start, end))

    def get_commissions(self, start: date, end: date) -> List[Dict]:
        data = self.get_commissions_payload(start, end)
        commissions = self._list_field(data, "commissions")
        logger.info(f"Fetched {len(commissions)} commission rows for {start}..{end}")
        return commissions

    def get_invoices(self, start: date, end: date) -> List[Dict]:
        data = self._request("GET", "/api/invoices", params=self._range_params(start, end))
        invoices = self._list_field(data, "invoices")
        logger.info(f"Fetched {len(invoices)} invoices for {start}..{end}")
        return invoices

    def sync_invoices(self) -> Dict:
        """Ask the API to pull the latest invoices from Zoho Books."""
        data = self._request("POST", "/api/invoices/sync", json={})
        logger.info("Invoice sync requested")
        return data

    # ==================== AUTH ====================

    def get_auth_url(self) -> str:
        """URL of the invoicing system's OAuth consent page."""
        data = self._request("GET", "/api/auth/zoho", auth=False)
        auth_url = data.get("authUrl")
        if not auth_url:
            raise ApiError("Commission API did not return an authUrl")
        return auth_url

    def exchange_auth_code(self, code: str) -> Dict:
        """Trade the OAuth callback code for {'user': ..., 'token': ...}."""
        data = self._request("GET", "/api/auth/zoho/callback", params={"code": code}, auth=False)
        if not data.get("token"):
            raise ApiError("Commission API did not return a token for the OAuth code")
        if not isinstance(data.get("user"), dict):
            data["user"] = {}
        return data

    def verify_token(self) -> bool:
        """True when the API still accepts the current token."""
        try:
            self._request("GET", "/api/auth/verify")
        except AuthenticationError:
            return False
        return True

    # ==================== ADMIN ====================

    def get_salespeople(self) -> List[Dict]:
        data = self._request("GET", "/api/salespeople/all")
        return self._list_field(data, "salespeople")

    def set_salesperson_status(self, name: str, is_active: bool) -> Dict:
        path = f"/api/salespeople/{quote(name, safe='')}/status"
        logger.info(f"Setting salesperson {name!r} active={is_active}")
        return self._request("PUT", path, json={"isActive": bool(is_active)})
