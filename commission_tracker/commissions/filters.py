# commission_tracker/commissions/filters.py
"""
Filter Components for Commission Tracker

Renders filter UI elements:
- Period selector (Current Month / Previous Month / Custom Range)
- Custom date range form (start/end + Apply)
- Rep selector (admins only)
- Invoice status / search filters

Date ranges are validated here, before anything reaches the API or the
aggregator.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Set

import streamlit as st

from ..errors import InvalidDateRangeError
from .access_control import AccessControl
from .constants import INVOICE_STATUSES, PERIOD_CUSTOM, PERIOD_OFFSETS, PERIOD_TYPES
from .metrics import CommissionAggregator
from .models import DateRange

logger = logging.getLogger(__name__)


# =============================================================================
# STANDALONE HELPERS
# =============================================================================

def validate_date_range(start: Optional[date], end: Optional[date]) -> DateRange:
    """
    Build a custom DateRange from user input.

    Raises:
        InvalidDateRangeError: a date is missing or start is after end
    """
    if start is None or end is None:
        raise InvalidDateRangeError(start, end)
    return DateRange(start=start, end=end, label=f"{start.isoformat()} to {end.isoformat()}")


def resolve_period(
    period_type: str,
    reference: date,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None
) -> DateRange:
    """
    Date range for a period type.

    Args:
        period_type: 'Current Month', 'Previous Month' or 'Custom Range'
        reference: Today's date (passed in, never read here)
        custom_start: Custom start date (for 'Custom Range')
        custom_end: Custom end date (for 'Custom Range')
    """
    if period_type == PERIOD_CUSTOM:
        return validate_date_range(custom_start, custom_end)

    offset = PERIOD_OFFSETS.get(period_type)
    if offset is None:
        raise ValueError(f"Unknown period type: {period_type}")
    return CommissionAggregator.compute_month_range(reference, offset)


class CommissionFilters:
    """
    Filter UI for the commission tracker pages.

    Usage:
        filters = CommissionFilters(access)

        date_range = filters.render_period_selector(date.today())
        custom_range = filters.render_custom_range_form(month_range)
        selected_reps = filters.render_rep_selector(rep_names)
    """

    def __init__(self, access_control: AccessControl):
        self.access = access_control

    # =========================================================================
    # PERIOD SELECTOR
    # =========================================================================

    def render_period_selector(self, reference: date, key: str = "period") -> Optional[DateRange]:
        """
        Sidebar period picker: Current Month, Previous Month or Custom Range.

        Returns:
            Selected DateRange, or None when the custom dates are invalid
        """
        st.sidebar.header("📅 Period")
        period_type = st.sidebar.radio(
            "Period",
            options=PERIOD_TYPES,
            key=f"{key}_type",
            label_visibility="collapsed",
        )

        custom_start = custom_end = None
        if period_type == PERIOD_CUSTOM:
            default = CommissionAggregator.compute_month_range(reference, 0)
            custom_start = st.sidebar.date_input("Start Date", value=default.start, key=f"{key}_start")
            custom_end = st.sidebar.date_input("End Date", value=default.end, key=f"{key}_end")

        try:
            return resolve_period(period_type, reference, custom_start, custom_end)
        except InvalidDateRangeError as e:
            logger.warning(f"Rejected period selection: {e}")
            st.sidebar.error("⚠️ Start date must be on or before the end date")
            return None

    # =========================================================================
    # CUSTOM RANGE
    # =========================================================================

    def render_custom_range_form(
        self,
        default_range: DateRange,
        key: str = "custom_range"
    ) -> Optional[DateRange]:
        """
        Start/end date inputs inside a form - only applies on Apply.

        Returns:
            Applied DateRange, or None until a valid range was applied
        """
        state_key = f"{key}_applied"

        with st.form(key, clear_on_submit=False):
            col1, col2, col3 = st.columns([2, 2, 1])
            with col1:
                start = st.date_input("Start Date", value=default_range.start, key=f"{key}_start")
            with col2:
                end = st.date_input("End Date", value=default_range.end, key=f"{key}_end")
            with col3:
                st.markdown("&nbsp;")
                submitted = st.form_submit_button("Apply", type="primary", use_container_width=True)

        if submitted:
            try:
                st.session_state[state_key] = validate_date_range(start, end)
                logger.info(f"Custom range applied: {start} -> {end}")
            except InvalidDateRangeError:
                st.error("⚠️ Please select both dates, with the start date before the end date")
                st.session_state.pop(state_key, None)

        return st.session_state.get(state_key)

    # =========================================================================
    # REP SELECTOR
    # =========================================================================

    def render_rep_selector(self, rep_names: List[str], key: str = "rep_selector") -> Optional[Set[str]]:
        """
        Multiselect of reps for admins; everyone starts selected.

        Returns:
            Set of selected rep names, or None when the user cannot select
        """
        if not self.access.can_select_reps():
            return None

        st.sidebar.header("🎛️ Filters")
        selected = st.sidebar.multiselect(
            "Sales Reps",
            options=rep_names,
            default=rep_names,
            key=key,
            help="Untick reps to hide them from totals, charts and exports",
        )
        return set(self.access.validate_selected_reps(selected, rep_names))

    # =========================================================================
    # INVOICE FILTERS
    # =========================================================================

    @staticmethod
    def render_invoice_filters(key: str = "invoice_filters") -> Dict:
        """Status + free-text search for the invoice list."""
        col1, col2 = st.columns([1, 2])
        with col1:
            status = st.selectbox(
                "Status",
                options=["All"] + INVOICE_STATUSES,
                key=f"{key}_status",
                format_func=lambda s: s.title(),
            )
        with col2:
            search = st.text_input(
                "Search",
                placeholder="Invoice #, customer or salesperson",
                key=f"{key}_search",
            )

        return {
            'status': None if status == "All" else status,
            'search': search or None,
        }

    # =========================================================================
    # FILTER STATE HELPERS
    # =========================================================================

    @staticmethod
    def get_filter_summary(date_range: DateRange, selected: Optional[Set[str]], total_reps: int) -> str:
        """Human-readable summary of the current filters."""
        parts = [
            date_range.display_label,
            f"({date_range.start.strftime('%b %d')} - {date_range.end.strftime('%b %d')})",
        ]

        if selected is not None and len(selected) < total_reps:
            parts.append(f"{len(selected)} of {total_reps} reps")
        elif total_reps == 1:
            parts.append("1 rep")
        elif total_reps > 1:
            parts.append(f"{total_reps} reps")

        return " • ".join(parts)
