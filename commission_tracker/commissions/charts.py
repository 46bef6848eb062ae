# commission_tracker/commissions/charts.py
"""
Altair Chart Builders for Commission Tracker

All visualization components using Altair:
- KPI summary cards (using st.metric)
- Commission by rep bar chart
- Current vs previous month comparison
- Invoice status breakdown
"""

import logging
from typing import Dict, List, Optional

import altair as alt
import pandas as pd
import streamlit as st

from .constants import (
    CHART_HEIGHT,
    CHART_WIDTH,
    COLORS,
    DEFAULT_CURRENCY,
    INVOICE_STATUSES,
    PIE_CHART_HEIGHT,
    PIE_CHART_WIDTH,
)
from .metrics import CommissionAggregator
from .models import ChartPoint, SummaryMetrics

logger = logging.getLogger(__name__)


class CommissionCharts:
    """
    Chart builders for the commission tracker.

    All methods are static - can be called without instantiation.

    Usage:
        CommissionCharts.render_kpi_cards(summary, comparison)
        chart = CommissionCharts.build_commission_chart(points)
        st.altair_chart(chart, use_container_width=True)
    """

    # =========================================================================
    # KPI CARDS (Using st.metric)
    # =========================================================================

    @staticmethod
    def render_kpi_cards(
        summary: SummaryMetrics,
        comparison: Dict = None,
        currency: str = DEFAULT_CURRENCY
    ):
        """
        Render the three summary cards: total, average, top performer.

        Args:
            summary: SummaryMetrics for the displayed period
            comparison: Output of compare_periods() (optional, adds deltas)
            currency: Currency code for formatting
        """
        fmt = CommissionAggregator.format_currency

        with st.container(border=True):
            col1, col2, col3 = st.columns(3)

            with col1:
                delta = None
                if comparison and comparison.get('total_commission_change_pct') is not None:
                    delta = f"{comparison['total_commission_change_pct']:+.1f}% vs prev"
                st.metric(
                    label="Total Commission",
                    value=fmt(summary.total_commission, currency),
                    delta=delta,
                    help="Sum of commission across the reps shown",
                )

            with col2:
                delta = None
                if comparison and comparison.get('average_commission_change_pct') is not None:
                    delta = f"{comparison['average_commission_change_pct']:+.1f}% vs prev"
                st.metric(
                    label="Average per Rep",
                    value=fmt(summary.average_commission, currency),
                    delta=delta,
                    help=f"Total commission / {summary.rep_count} rep(s)",
                )

            with col3:
                if summary.top_performer is None:
                    st.metric(label="Top Performer", value="-")
                else:
                    st.metric(
                        label="Top Performer",
                        value=summary.top_performer_name,
                        delta=fmt(summary.top_performer_commission, currency),
                        delta_color="off",
                    )

    @staticmethod
    def render_invoice_stat_cards(stats: Dict, currency: str = DEFAULT_CURRENCY):
        """Invoice counts and totals for the Invoices page."""
        fmt = CommissionAggregator.format_currency

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Invoices", f"{stats['total_invoices']:,}")
        with col2:
            st.metric("Invoiced", fmt(stats['total_amount'], currency))
        with col3:
            st.metric("Commission", fmt(stats['total_commission'], currency))
        with col4:
            st.metric(
                "Outstanding",
                fmt(stats['outstanding_balance'], currency),
                delta=f"{stats['overdue_count']} overdue" if stats['overdue_count'] else None,
                delta_color="inverse",
            )

    # =========================================================================
    # COMMISSION BY REP
    # =========================================================================

    @staticmethod
    def build_commission_chart(
        points: List[ChartPoint],
        top_performer: Optional[str] = None,
        title: str = "💰 Commission by Rep"
    ) -> alt.Chart:
        """
        Bar chart of commission per rep.

        Args:
            points: Output of to_chart_series()
            top_performer: Full name of the rep to highlight
            title: Chart title
        """
        if not points:
            return CommissionCharts._empty_chart("No commission data for this period")

        df = pd.DataFrame([
            {
                'label': p.name,
                'rep': p.full_name,
                'commission': p.commission,
                'is_top': p.full_name == top_performer,
            }
            for p in points
        ])

        bars = alt.Chart(df).mark_bar().encode(
            x=alt.X('label:N', sort=None, title='Rep', axis=alt.Axis(labelAngle=-30)),
            y=alt.Y('commission:Q', title='Commission', axis=alt.Axis(format='$,.0f')),
            color=alt.condition(
                alt.datum.is_top,
                alt.value(COLORS['top_performer']),
                alt.value(COLORS['commission'])
            ),
            tooltip=[
                alt.Tooltip('rep:N', title='Rep'),
                alt.Tooltip('commission:Q', title='Commission', format='$,.2f'),
            ]
        )

        text = alt.Chart(df).mark_text(
            align='center', baseline='bottom', dy=-5, fontSize=10
        ).encode(
            x=alt.X('label:N', sort=None),
            y=alt.Y('commission:Q'),
            text=alt.Text('commission:Q', format='$,.0f'),
            color=alt.value(COLORS['text_dark'])
        )

        return alt.layer(bars, text).properties(
            width=CHART_WIDTH,
            height=CHART_HEIGHT,
            title=title
        )

    # =========================================================================
    # PERIOD COMPARISON
    # =========================================================================

    @staticmethod
    def build_comparison_chart(
        current: List[ChartPoint],
        previous: List[ChartPoint],
        current_label: str = "Current",
        previous_label: str = "Previous"
    ) -> alt.Chart:
        """
        Grouped bars: each rep's commission this period vs last.

        Reps missing from one period show a zero bar for it.
        """
        if not current and not previous:
            return CommissionCharts._empty_chart("No data available")

        order: List[str] = []
        labels: Dict[str, str] = {}
        values: Dict[str, Dict[str, float]] = {}

        for period, points in ((current_label, current), (previous_label, previous)):
            for p in points or []:
                if p.full_name not in values:
                    order.append(p.full_name)
                    labels[p.full_name] = p.name
                    values[p.full_name] = {current_label: 0.0, previous_label: 0.0}
                values[p.full_name][period] += p.commission

        rows = []
        for rep in order:
            for period in (current_label, previous_label):
                rows.append({
                    'label': labels[rep],
                    'rep': rep,
                    'period': period,
                    'commission': values[rep][period],
                })
        df = pd.DataFrame(rows)

        return alt.Chart(df).mark_bar().encode(
            x=alt.X('label:N', sort=[labels[r] for r in order], title='Rep', axis=alt.Axis(labelAngle=-30)),
            xOffset=alt.XOffset('period:N', sort=[current_label, previous_label]),
            y=alt.Y('commission:Q', title='Commission', axis=alt.Axis(format='$,.0f')),
            color=alt.Color(
                'period:N',
                scale=alt.Scale(
                    domain=[current_label, previous_label],
                    range=[COLORS['commission'], COLORS['previous']]
                ),
                legend=alt.Legend(title=None, orient='top')
            ),
            tooltip=[
                alt.Tooltip('rep:N', title='Rep'),
                alt.Tooltip('period:N', title='Period'),
                alt.Tooltip('commission:Q', title='Commission', format='$,.2f'),
            ]
        ).properties(
            width=CHART_WIDTH,
            height=CHART_HEIGHT,
            title="📊 Month over Month"
        )

    # =========================================================================
    # INVOICE STATUS
    # =========================================================================

    @staticmethod
    def build_invoice_status_chart(stats: Dict) -> alt.Chart:
        """Donut of invoice counts per status (from compute_invoice_stats)."""
        statuses = INVOICE_STATUSES + ['other']
        rows = [
            {'status': status.title(), 'count': stats.get(f'{status}_count', 0)}
            for status in statuses
            if stats.get(f'{status}_count', 0)
        ]

        if not rows:
            return CommissionCharts._empty_chart("No invoices")

        df = pd.DataFrame(rows)

        return alt.Chart(df).mark_arc(innerRadius=60).encode(
            theta=alt.Theta('count:Q'),
            color=alt.Color(
                'status:N',
                scale=alt.Scale(
                    domain=[s.title() for s in statuses],
                    range=[COLORS[s] for s in statuses]
                ),
                legend=alt.Legend(title='Status')
            ),
            tooltip=[
                alt.Tooltip('status:N', title='Status'),
                alt.Tooltip('count:Q', title='Invoices'),
            ]
        ).properties(
            width=PIE_CHART_WIDTH,
            height=PIE_CHART_HEIGHT,
            title="🧾 Invoices by Status"
        )

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    @staticmethod
    def _empty_chart(message: str = "No data available") -> alt.Chart:
        """Create an empty chart with a message."""
        return alt.Chart(pd.DataFrame({'note': [message]})).mark_text(
            text=message,
            fontSize=16,
            color=COLORS['text_light']
        ).properties(
            width=CHART_WIDTH,
            height=200
        )
