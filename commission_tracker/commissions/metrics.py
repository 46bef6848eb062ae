# commission_tracker/commissions/metrics.py
"""
Commission Aggregation for Commission Tracker

Single shared home for every calculation the dashboard shows:
- Month bucketing (current / previous / any offset)
- Per-rep rollups (duplicate reps merged)
- Summary metrics (total, average, top performer)
- Invoice grouping with access control
- Chart series and CSV text
- Period comparison and invoice statistics

Everything here is pure: no network, no session state, no clock reads
(callers pass the reference date). Amounts are only rounded when they
are formatted for display, charts or CSV.
"""

import calendar
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd

from .constants import (
    CHART_LABEL_MAX_LENGTH,
    CSV_HEADERS,
    CURRENCY_SYMBOLS,
    DEFAULT_CURRENCY,
    ELLIPSIS,
    INVOICE_STATUSES,
)
from .models import (
    ChartPoint,
    CommissionRecord,
    DateRange,
    InvoiceFilter,
    InvoiceRecord,
    RepRollup,
    Salesperson,
    SummaryMetrics,
    commission_of,
    rep_name_of,
    to_count,
    to_float,
)

logger = logging.getLogger(__name__)


class CommissionAggregator:
    """
    Commission calculations for the tracker views.

    All methods are static - can be called without instantiation.

    Usage:
        month = CommissionAggregator.compute_month_range(date.today(), -1)
        rollups = CommissionAggregator.aggregate_by_rep(records)
        summary = CommissionAggregator.compute_summary(rollups)
        csv_text = CommissionAggregator.to_csv(rollups)
    """

    # =========================================================================
    # PERIOD DATE CALCULATIONS
    # =========================================================================

    @staticmethod
    def compute_month_range(reference: date, offset_months: int = 0) -> DateRange:
        """
        First and last calendar day of the month offset_months away.

        Args:
            reference: Any day inside the anchor month
            offset_months: 0 = anchor month, -1 = previous month, ...

        Returns:
            DateRange of plain dates (no time of day)
        """
        if isinstance(reference, datetime):
            reference = reference.date()

        month_index = reference.year * 12 + (reference.month - 1) + int(offset_months)
        year, month_zero = divmod(month_index, 12)
        month = month_zero + 1

        last_day = calendar.monthrange(year, month)[1]
        start = date(year, month, 1)
        end = date(year, month, last_day)

        return DateRange(start=start, end=end, label=start.strftime('%B %Y'))

    # =========================================================================
    # AGGREGATE BY REP
    # =========================================================================

    @staticmethod
    def aggregate_by_rep(records: Iterable[Any]) -> List[RepRollup]:
        """
        Merge commission records into one rollup per rep name.

        Rep names are matched exactly (case-sensitive). Output keeps the
        order in which each rep first appears; avg per invoice is always
        recomputed from the merged totals.

        Args:
            records: CommissionRecord objects or raw API dicts

        Returns:
            List of RepRollup
        """
        rollups: Dict[str, RepRollup] = {}
        commissions: Dict[str, List[float]] = {}

        for record in records or []:
            if not isinstance(record, CommissionRecord):
                record = CommissionRecord.from_api(record)

            rollup = rollups.get(record.rep_name)
            if rollup is None:
                rollup = RepRollup(rep_name=record.rep_name)
                rollups[record.rep_name] = rollup
                commissions[record.rep_name] = []

            commissions[record.rep_name].append(to_float(record.commission))
            rollup.total_invoices += to_count(record.invoice_count)

        # fsum keeps the totals independent of record order
        for rep_name, rollup in rollups.items():
            rollup.total_commission = math.fsum(commissions[rep_name])

        logger.debug(f"Aggregated commission records into {len(rollups)} rollups")
        return list(rollups.values())

    # =========================================================================
    # SUMMARY METRICS
    # =========================================================================

    @staticmethod
    def compute_summary(rollups: Iterable[Any]) -> SummaryMetrics:
        """
        Total, average and top performer over a result set.

        Top performer is the item with the strictly greatest commission;
        on ties the first one wins. Empty input returns the zero state.
        """
        items = list(rollups or [])
        if not items:
            return SummaryMetrics.empty()

        values = [commission_of(item) for item in items]
        total = math.fsum(values)
        top = None
        top_value = 0.0

        for item, value in zip(items, values):
            if top is None or value > top_value:
                top = item
                top_value = value

        return SummaryMetrics(
            total_commission=total,
            average_commission=total / len(items),
            top_performer=top,
            rep_count=len(items),
        )

    @staticmethod
    def compare_periods(current: SummaryMetrics, previous: SummaryMetrics) -> Dict:
        """
        Month-over-month change for the summary metrics.

        Returns:
            Dict with '<metric>_change' (absolute) and '<metric>_change_pct'
            (None when the previous value is zero)
        """
        comparison = {}

        for key in ('total_commission', 'average_commission', 'rep_count'):
            current_value = getattr(current, key, 0) or 0
            previous_value = getattr(previous, key, 0) or 0

            comparison[f'{key}_change'] = current_value - previous_value
            if previous_value:
                comparison[f'{key}_change_pct'] = (
                    (current_value - previous_value) / abs(previous_value) * 100
                )
            else:
                comparison[f'{key}_change_pct'] = None

        return comparison

    # =========================================================================
    # REP SELECTION
    # =========================================================================

    @staticmethod
    def filter_by_reps(items: Iterable[Any], selected: Optional[Set[str]] = None) -> List[Any]:
        """Keep items whose rep is selected (None keeps everything)."""
        items = list(items or [])
        if selected is None:
            return items
        return [item for item in items if rep_name_of(item) in selected]

    # =========================================================================
    # INVOICES
    # =========================================================================

    @staticmethod
    def group_invoices_by_rep(
        invoices: Iterable[Any],
        invoice_filter: Optional[InvoiceFilter] = None
    ) -> Dict[str, List[InvoiceRecord]]:
        """
        Group invoices by salesperson, enforcing access control.

        A non-admin requester only ever gets invoices whose raw salesperson
        name equals their own name, whatever the upstream already filtered.
        Empty/None names are grouped under 'Unassigned' after filtering.

        Args:
            invoices: InvoiceRecord objects or raw API dicts
            invoice_filter: Optional access filter / rep selection

        Returns:
            Dict of rep name -> invoices, groups in first-seen order
        """
        groups: Dict[str, List[InvoiceRecord]] = {}
        hidden = 0

        for invoice in invoices or []:
            if not isinstance(invoice, InvoiceRecord):
                invoice = InvoiceRecord.from_api(invoice)

            if invoice_filter is not None:
                if not invoice_filter.requester_is_admin:
                    requester = invoice_filter.requester_name
                    if not requester or invoice.salesperson_name != requester:
                        hidden += 1
                        continue

                if (invoice_filter.rep_names is not None
                        and invoice.rep_key not in invoice_filter.rep_names):
                    continue

            groups.setdefault(invoice.rep_key, []).append(invoice)

        if hidden:
            logger.warning(f"Access control hid {hidden} invoice(s) belonging to other reps")

        return groups

    @staticmethod
    def filter_invoices(
        invoices: Iterable[InvoiceRecord],
        status: Optional[str] = None,
        search: Optional[str] = None,
        date_range: Optional[DateRange] = None
    ) -> List[InvoiceRecord]:
        """
        Apply the invoice list filters.

        Args:
            status: Keep one status only (case-insensitive)
            search: Substring of invoice number, customer or salesperson
            date_range: Keep invoices dated inside the range
        """
        status = status.strip().lower() if status else None
        needle = search.strip().lower() if search else None

        result = []
        for invoice in invoices or []:
            if status and invoice.status != status:
                continue

            if needle:
                haystack = ' '.join([
                    invoice.invoice_number,
                    invoice.customer_name,
                    invoice.salesperson_name or '',
                ]).lower()
                if needle not in haystack:
                    continue

            if date_range is not None and not date_range.contains(invoice.invoice_date):
                continue

            result.append(invoice)

        return result

    @staticmethod
    def compute_invoice_stats(invoices: Iterable[InvoiceRecord]) -> Dict:
        """
        Invoice counts per status and money totals for the stats cards.

        Statuses outside the known set are counted under 'other_count'.
        """
        stats = {f'{status}_count': 0 for status in INVOICE_STATUSES}
        stats.update({'total_invoices': 0, 'other_count': 0})
        invoices = list(invoices or [])

        for invoice in invoices:
            stats['total_invoices'] += 1
            key = f'{invoice.status}_count'
            if invoice.status in INVOICE_STATUSES:
                stats[key] += 1
            else:
                stats['other_count'] += 1

        stats['total_amount'] = math.fsum(invoice.total for invoice in invoices)
        stats['total_commission'] = math.fsum(invoice.commission for invoice in invoices)
        stats['outstanding_balance'] = math.fsum(invoice.balance for invoice in invoices)

        return stats

    # =========================================================================
    # SALESPEOPLE (ADMIN)
    # =========================================================================

    @staticmethod
    def split_salespeople(
        people: Iterable[Any],
        search: Optional[str] = None
    ) -> Tuple[List[Salesperson], List[Salesperson]]:
        """
        Filter salespeople by a case-insensitive name search, then split
        them into (active, inactive), keeping API order.
        """
        needle = search.strip().lower() if search else None

        active, inactive = [], []
        for person in people or []:
            if not isinstance(person, Salesperson):
                person = Salesperson.from_api(person)
            if needle and needle not in person.name.lower():
                continue
            (active if person.is_active else inactive).append(person)

        return active, inactive

    # =========================================================================
    # CHART SERIES
    # =========================================================================

    @staticmethod
    def truncate_label(name: str, max_length: int = CHART_LABEL_MAX_LENGTH) -> str:
        """Cut a label to max_length characters, ending in '...' when cut."""
        if len(name) <= max_length:
            return name
        if max_length <= len(ELLIPSIS):
            return name[:max(max_length, 0)]
        return name[:max_length - len(ELLIPSIS)] + ELLIPSIS

    @staticmethod
    def to_chart_series(
        rollups: Iterable[Any],
        label_max_length: int = CHART_LABEL_MAX_LENGTH
    ) -> List[ChartPoint]:
        """
        Chart-ready points: short label, full name, commission rounded
        to cents. Input is not modified.
        """
        points = []
        for item in rollups or []:
            name = rep_name_of(item)
            points.append(ChartPoint(
                name=CommissionAggregator.truncate_label(name, label_max_length),
                full_name=name,
                commission=round(commission_of(item), 2),
            ))
        return points

    # =========================================================================
    # TABLES & CSV
    # =========================================================================

    @staticmethod
    def _as_rollup(item: Any) -> RepRollup:
        if isinstance(item, RepRollup):
            return item
        if isinstance(item, CommissionRecord):
            return RepRollup(item.rep_name, to_float(item.commission), to_count(item.invoice_count))
        record = CommissionRecord.from_api(item)
        return RepRollup(record.rep_name, record.commission, record.invoice_count)

    @staticmethod
    def rollups_to_dataframe(rollups: Iterable[Any]) -> pd.DataFrame:
        """Unrounded per-rep table (Rep Name, Invoices, Commission, Avg per Invoice)."""
        rows = []
        for item in rollups or []:
            rollup = CommissionAggregator._as_rollup(item)
            rows.append([
                rollup.rep_name,
                rollup.total_invoices,
                rollup.total_commission,
                rollup.avg_per_invoice,
            ])
        return pd.DataFrame(rows, columns=CSV_HEADERS)

    @staticmethod
    def to_csv(rollups: Iterable[Any]) -> str:
        """
        CSV text: header row plus one row per rollup, amounts with two
        decimals, '\\n' between rows and no newline after the last row.
        Names containing commas or quotes are quoted.
        """
        df = CommissionAggregator.rollups_to_dataframe(rollups)
        df['Commission'] = df['Commission'].map(lambda value: f"{value:.2f}")
        df['Avg per Invoice'] = df['Avg per Invoice'].map(lambda value: f"{value:.2f}")

        text = df.to_csv(index=False, lineterminator='\n')
        return text[:-1] if text.endswith('\n') else text

    @staticmethod
    def invoices_to_dataframe(invoices: Iterable[InvoiceRecord]) -> pd.DataFrame:
        """Invoice table for display and export."""
        columns = [
            'Invoice #', 'Customer', 'Salesperson', 'Date', 'Due Date',
            'Total', 'Commission', 'Balance', 'Status'
        ]
        rows = [
            [
                invoice.invoice_number,
                invoice.customer_name,
                invoice.rep_key,
                invoice.invoice_date,
                invoice.due_date,
                invoice.total,
                invoice.commission,
                invoice.balance,
                invoice.status,
            ]
            for invoice in invoices or []
        ]
        return pd.DataFrame(rows, columns=columns)

    # =========================================================================
    # DISPLAY FORMATTING
    # =========================================================================

    @staticmethod
    def format_currency(amount: float, currency: str = DEFAULT_CURRENCY) -> str:
        """Format an amount to two decimals, e.g. '$1,234.50' or '-$12.00'."""
        amount = to_float(amount)
        symbol = CURRENCY_SYMBOLS.get(currency.upper()) if currency else None
        body = f"{abs(amount):,.2f}"
        sign = '-' if round(amount, 2) < 0 else ''

        if symbol:
            return f"{sign}{symbol}{body}"
        return f"{sign}{body} {currency}".strip()
