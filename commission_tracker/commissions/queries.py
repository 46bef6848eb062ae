# commission_tracker/commissions/queries.py
"""
Data Loading for Commission Tracker

Handles all API interactions for the dashboard pages:
- Commission rows for a date range (plus the API's user block)
- Invoices for a date range
- Invoice sync from Zoho (drops the cache)
- Current / previous month bundle for the tracker tabs
- Salespeople list and active toggle (admin panel)

Raw responses are cached with @st.cache_data (keyed by token and range);
rows are converted to model objects and access-filtered after the cache.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

import streamlit as st

from ..api_client import TrackerApiClient
from ..config import config
from ..errors import ApiError, AuthenticationError
from .access_control import AccessControl
from .metrics import CommissionAggregator
from .models import CommissionRecord, DateRange, InvoiceRecord, Salesperson

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = config.get_app_setting("CACHE_TTL_SECONDS", 300)


# =============================================================================
# CACHED FETCHES
# =============================================================================

@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner="Loading commissions...")
def _fetch_commissions(token: str, start: date, end: date) -> Dict:
    payload = TrackerApiClient(token=token).get_commissions_payload(start, end)
    commissions = payload.get('commissions')
    return {
        'commissions': commissions if isinstance(commissions, list) else [],
        'user': payload.get('user') if isinstance(payload.get('user'), dict) else None,
    }


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner="Loading invoices...")
def _fetch_invoices(token: str, start: date, end: date) -> List[Dict]:
    return TrackerApiClient(token=token).get_invoices(start, end)


def clear_cache():
    """Drop cached API responses (Refresh button)."""
    _fetch_commissions.clear()
    _fetch_invoices.clear()
    logger.info("Commission data cache cleared")


class CommissionQueries:
    """
    Data loading class for the commission tracker.

    Usage:
        access = AccessControl(user_name, is_admin)
        queries = CommissionQueries(auth.get_token(), access)

        records = queries.get_commissions(date_range)
        invoices = queries.get_invoices(date_range)
    """

    def __init__(self, token: Optional[str], access_control: AccessControl):
        """
        Initialize with the session token and access control.

        Args:
            token: Bearer token from the session provider
            access_control: AccessControl instance for filtering
        """
        self.token = token
        self.access = access_control
        self.last_user: Optional[Dict] = None

    # =========================================================================
    # COMMISSIONS
    # =========================================================================

    def get_commissions(self, date_range: DateRange) -> List[CommissionRecord]:
        """
        Load commission rows for a range.

        Raises:
            AuthenticationError: token missing or rejected
            ApiError: any other API failure
        """
        payload = _fetch_commissions(self.token, date_range.start, date_range.end)

        if payload.get('user'):
            self.last_user = payload['user']

        records = [CommissionRecord.from_api(row) for row in payload['commissions']]
        return self.access.filter_commissions(records)

    # =========================================================================
    # INVOICES
    # =========================================================================

    def get_invoices(self, date_range: DateRange) -> List[InvoiceRecord]:
        """Load invoices for a range (access filtering happens at grouping)."""
        rows = _fetch_invoices(self.token, date_range.start, date_range.end)
        return [InvoiceRecord.from_api(row) for row in rows]

    # =========================================================================
    # MONTH BUNDLE
    # =========================================================================

    def load_month_data(self, reference: date) -> Dict:
        """
        Load current month, previous month and current month invoices.

        Each list is fetched on its own; a failing fetch leaves that list
        empty and is reported in 'errors'. Authentication failures are
        raised so the page can log the user out.

        Returns:
            Dict with current_range, previous_range, current, previous,
            invoices and errors
        """
        current_range = CommissionAggregator.compute_month_range(reference, 0)
        previous_range = CommissionAggregator.compute_month_range(reference, -1)

        result = {
            'current_range': current_range,
            'previous_range': previous_range,
            'current': [],
            'previous': [],
            'invoices': [],
            'errors': [],
        }

        loaders = [
            ('current', lambda: self.get_commissions(current_range)),
            ('previous', lambda: self.get_commissions(previous_range)),
            ('invoices', lambda: self.get_invoices(current_range)),
        ]

        for key, loader in loaders:
            try:
                result[key] = loader()
            except AuthenticationError:
                raise
            except ApiError as e:
                logger.error(f"Failed to load {key} data: {e}")
                result['errors'].append(f"{key}: {e}")

        logger.info(
            f"Month data loaded: current={len(result['current'])}, "
            f"previous={len(result['previous'])}, invoices={len(result['invoices'])}"
        )
        return result

    def sync_invoices(self) -> Dict:
        """Trigger an upstream invoice sync, then drop cached responses."""
        result = TrackerApiClient(token=self.token).sync_invoices()
        clear_cache()
        return result

    # =========================================================================
    # SALESPEOPLE (ADMIN)
    # =========================================================================

    def get_salespeople(self) -> List[Salesperson]:
        """Every salesperson with their active flag (not cached)."""
        rows = TrackerApiClient(token=self.token).get_salespeople()
        return [Salesperson.from_api(row) for row in rows]

    def set_salesperson_active(self, name: str, is_active: bool):
        """Toggle whether a salesperson is tracked; cached data is dropped."""
        if not self.access.can_view_all():
            raise AuthenticationError("Only admins can change salesperson status", status_code=403)

        TrackerApiClient(token=self.token).set_salesperson_status(name, is_active)
        clear_cache()
        logger.info(f"Salesperson {name} set active={is_active}")
