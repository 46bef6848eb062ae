# commission_tracker/commissions/models.py
"""
Data Model for Commission Tracker

Plain dataclasses built fresh from each API response:
- CommissionRecord: one row per sales rep for a queried period
- InvoiceRecord: one row per invoice, joined to reps by name only
- DateRange: inclusive (start, end) pair of calendar dates
- RepRollup / SummaryMetrics / ChartPoint: aggregator outputs
- InvoiceFilter: access-control filter for invoice grouping
- Salesperson: admin-panel row (active flag)

Upstream rows are coerced defensively in from_api(): one bad row must not
blank the whole dashboard.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Set

import pandas as pd

from ..errors import InvalidDateRangeError
from .constants import UNASSIGNED_REP, UNKNOWN_REP

logger = logging.getLogger(__name__)


# =============================================================================
# COERCION HELPERS
# =============================================================================

def to_float(value: Any) -> float:
    """Coerce an upstream numeric field to float; missing/garbage/NaN -> 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def to_count(value: Any) -> int:
    """Coerce an upstream count to a non-negative int."""
    number = to_float(value)
    return int(number) if number > 0 else 0


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO-8601 date/datetime string to a date; unparseable -> None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    parsed = pd.to_datetime(value, errors='coerce')
    if pd.isna(parsed):
        logger.debug(f"Could not parse date value: {value!r}")
        return None
    return parsed.date()


def normalize_rep_name(name: Optional[str]) -> str:
    """Map empty/None salesperson names to the 'Unassigned' label."""
    if name is None:
        return UNASSIGNED_REP
    name = str(name)
    return name if name.strip() else UNASSIGNED_REP


def _first_present(payload: Dict, *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


# =============================================================================
# RAW RECORDS
# =============================================================================

@dataclass
class CommissionRecord:
    """One rep's commission figures for a queried period."""
    rep_name: str
    commission: float = 0.0
    invoice_count: int = 0
    avg_per_invoice: Optional[float] = None

    @classmethod
    def from_api(cls, payload: Dict) -> 'CommissionRecord':
        """
        Build from an API row, e.g.
        {"repName": "Jane Doe", "commission": 120.5, "invoiceCount": 3}.

        Older views send the count as "invoices".
        """
        if not isinstance(payload, dict):
            logger.warning(f"Skipping malformed commission row: {payload!r}")
            payload = {}

        rep_name = _first_present(payload, 'repName', 'rep_name')
        if rep_name is None or not str(rep_name).strip():
            logger.warning("Commission row without repName, using 'Unknown'")
            rep_name = UNKNOWN_REP

        avg = _first_present(payload, 'avgPerInvoice', 'avg_per_invoice')

        return cls(
            rep_name=str(rep_name),
            commission=to_float(payload.get('commission')),
            invoice_count=to_count(_first_present(payload, 'invoiceCount', 'invoices', 'invoice_count')),
            avg_per_invoice=to_float(avg) if avg is not None else None,
        )


@dataclass
class InvoiceRecord:
    """One invoice row. salesperson_name is kept raw (may be None or '')."""
    invoice_number: str
    salesperson_name: Optional[str] = None
    invoice_date: Optional[date] = None
    total: float = 0.0
    commission: float = 0.0
    status: str = ''
    customer_name: str = ''
    due_date: Optional[date] = None
    balance: float = 0.0
    zoho_url: str = ''

    @property
    def rep_key(self) -> str:
        """Grouping key: salesperson name, 'Unassigned' when empty."""
        return normalize_rep_name(self.salesperson_name)

    @classmethod
    def from_api(cls, payload: Dict) -> 'InvoiceRecord':
        """Build from an API row; accepts both snake_case and camelCase keys."""
        if not isinstance(payload, dict):
            logger.warning(f"Skipping malformed invoice row: {payload!r}")
            payload = {}

        number = _first_present(payload, 'invoice_number', 'invoiceNumber', 'id')
        salesperson = _first_present(payload, 'salesperson_name', 'salespersonName', 'sales_rep_name')
        status = _first_present(payload, 'status')

        return cls(
            invoice_number=str(number) if number is not None else '',
            salesperson_name=str(salesperson) if salesperson is not None else None,
            invoice_date=parse_date(_first_present(payload, 'date', 'invoice_date')),
            total=to_float(payload.get('total')),
            commission=to_float(payload.get('commission')),
            status=str(status).strip().lower() if status is not None else '',
            customer_name=str(_first_present(payload, 'customer_name', 'customerName') or ''),
            due_date=parse_date(_first_present(payload, 'due_date', 'dueDate')),
            balance=to_float(payload.get('balance')),
            zoho_url=str(payload.get('zoho_url') or ''),
        )


# =============================================================================
# DATE RANGE
# =============================================================================

@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates, start <= end."""
    start: date
    end: date
    label: Optional[str] = None

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidDateRangeError(self.start, self.end)

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def display_label(self) -> str:
        if self.label:
            return self.label
        return f"{self.start.strftime('%b %d, %Y')} - {self.end.strftime('%b %d, %Y')}"

    def contains(self, day: Optional[date]) -> bool:
        if day is None:
            return False
        return self.start <= day <= self.end

    def to_query_params(self) -> Dict[str, str]:
        return {'start': self.start.isoformat(), 'end': self.end.isoformat()}


# =============================================================================
# AGGREGATOR OUTPUTS
# =============================================================================

@dataclass
class RepRollup:
    """Per-rep aggregate of one or more commission records."""
    rep_name: str
    total_commission: float = 0.0
    total_invoices: int = 0

    @property
    def avg_per_invoice(self) -> float:
        if self.total_invoices <= 0:
            return 0.0
        return self.total_commission / self.total_invoices

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rep_name': self.rep_name,
            'invoices': self.total_invoices,
            'commission': self.total_commission,
            'avg_per_invoice': self.avg_per_invoice,
        }


def commission_of(item: Any) -> float:
    """Commission amount of a rollup, record or API dict."""
    if isinstance(item, RepRollup):
        return item.total_commission
    if isinstance(item, CommissionRecord):
        return item.commission
    if isinstance(item, dict):
        return to_float(_first_present(item, 'totalCommission', 'total_commission', 'commission'))
    return to_float(getattr(item, 'commission', None))


def rep_name_of(item: Any) -> str:
    """Rep name of a rollup, record or API dict."""
    if isinstance(item, dict):
        name = _first_present(item, 'repName', 'rep_name')
    else:
        name = getattr(item, 'rep_name', None)
    if name is None or not str(name).strip():
        return UNKNOWN_REP
    return str(name)


@dataclass
class SummaryMetrics:
    """Global metrics for one result set."""
    total_commission: float = 0.0
    average_commission: float = 0.0
    top_performer: Optional[Any] = None
    rep_count: int = 0

    @classmethod
    def empty(cls) -> 'SummaryMetrics':
        return cls()

    @property
    def top_performer_name(self) -> Optional[str]:
        if self.top_performer is None:
            return None
        return rep_name_of(self.top_performer)

    @property
    def top_performer_commission(self) -> float:
        if self.top_performer is None:
            return 0.0
        return commission_of(self.top_performer)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_commission': self.total_commission,
            'average_commission': self.average_commission,
            'top_performer': self.top_performer_name,
            'top_performer_commission': self.top_performer_commission,
            'rep_count': self.rep_count,
        }


@dataclass
class ChartPoint:
    """One bar of the commission-by-rep chart."""
    name: str
    full_name: str
    commission: float


@dataclass
class InvoiceFilter:
    """
    Access-control filter for invoice grouping.

    Attributes:
        rep_names: Optional selection of (normalized) rep names to keep
        requester_is_admin: Admins see every rep's invoices
        requester_name: Non-admins only see invoices carrying exactly this name
    """
    rep_names: Optional[Set[str]] = None
    requester_is_admin: bool = True
    requester_name: Optional[str] = None


@dataclass
class Salesperson:
    """Admin-panel row: whether a rep is tracked, plus their invoice count."""
    name: str
    is_active: bool = True
    invoice_count: int = 0

    @classmethod
    def from_api(cls, payload: Dict) -> 'Salesperson':
        if not isinstance(payload, dict):
            payload = {}
        return cls(
            name=normalize_rep_name(payload.get('name')),
            is_active=bool(payload.get('isActive', True)),
            invoice_count=to_count(_first_present(payload, 'invoiceCount', 'invoice_count')),
        )
