"""Tests for CommissionAggregator"""
import csv
import io
from datetime import date, datetime
from itertools import permutations

import pytest

from commission_tracker.commissions.metrics import CommissionAggregator
from commission_tracker.commissions.models import (
    CommissionRecord,
    InvoiceRecord,
    RepRollup,
    SummaryMetrics,
)


class TestComputeMonthRange:
    """Test cases for month bucketing"""

    def test_current_month_december(self):
        rng = CommissionAggregator.compute_month_range(date(2024, 12, 15), 0)

        assert rng.start == date(2024, 12, 1)
        assert rng.end == date(2024, 12, 31)
        assert rng.label == "December 2024"

    def test_previous_month_crosses_year(self):
        rng = CommissionAggregator.compute_month_range(date(2024, 1, 15), -1)

        assert rng.start == date(2023, 12, 1)
        assert rng.end == date(2023, 12, 31)

    def test_leap_february(self):
        rng = CommissionAggregator.compute_month_range(date(2024, 2, 10), 0)

        assert rng.end == date(2024, 2, 29)

    def test_previous_month_from_last_day(self):
        """March 31 -> February, never an overflowed day"""
        rng = CommissionAggregator.compute_month_range(date(2023, 3, 31), -1)

        assert rng.start == date(2023, 2, 1)
        assert rng.end == date(2023, 2, 28)

    def test_datetime_reference_gives_plain_dates(self):
        rng = CommissionAggregator.compute_month_range(datetime(2024, 6, 30, 23, 59), 0)

        assert type(rng.start) is date
        assert type(rng.end) is date
        assert rng.end == date(2024, 6, 30)

    def test_forward_offset(self):
        rng = CommissionAggregator.compute_month_range(date(2024, 11, 5), 2)

        assert rng.start == date(2025, 1, 1)
        assert rng.end == date(2025, 1, 31)


class TestAggregateByRep:
    """Test cases for per-rep rollups"""

    def test_duplicate_reps_are_merged(self):
        records = [
            {"repName": "Alice", "commission": 50, "invoiceCount": 2},
            {"repName": "Alice", "commission": 30, "invoiceCount": 1},
        ]

        rollups = CommissionAggregator.aggregate_by_rep(records)

        assert len(rollups) == 1
        assert rollups[0].total_commission == 80
        assert rollups[0].total_invoices == 3
        assert rollups[0].avg_per_invoice == pytest.approx(26.6667, rel=1e-4)

    def test_first_seen_order_kept(self):
        records = [
            CommissionRecord("Bob", 10, 1),
            CommissionRecord("Alice", 20, 1),
            CommissionRecord("Bob", 5, 1),
        ]

        rollups = CommissionAggregator.aggregate_by_rep(records)

        assert [r.rep_name for r in rollups] == ["Bob", "Alice"]
        assert rollups[0].total_commission == 15

    def test_names_are_case_sensitive(self):
        rollups = CommissionAggregator.aggregate_by_rep([
            CommissionRecord("alice", 1, 1),
            CommissionRecord("Alice", 1, 1),
        ])

        assert len(rollups) == 2

    def test_zero_invoices_average_is_zero(self):
        rollups = CommissionAggregator.aggregate_by_rep([CommissionRecord("Carol", 40, 0)])

        assert rollups[0].avg_per_invoice == 0

    def test_upstream_average_is_ignored(self):
        rollups = CommissionAggregator.aggregate_by_rep([
            {"repName": "Dan", "commission": 100, "invoiceCount": 4, "avgPerInvoice": 999},
        ])

        assert rollups[0].avg_per_invoice == 25

    def test_empty_input(self):
        assert CommissionAggregator.aggregate_by_rep([]) == []
        assert CommissionAggregator.aggregate_by_rep(None) == []

    def test_merged_total_ignores_record_order(self):
        records = [CommissionRecord("A", 0.1, 1), CommissionRecord("A", 0.2, 1), CommissionRecord("A", 0.3, 1)]

        totals = {
            CommissionAggregator.aggregate_by_rep(list(order))[0].total_commission
            for order in permutations(records)
        }

        assert totals == {0.6}


class TestComputeSummary:
    """Test cases for summary metrics"""

    def test_empty_is_zero_state(self):
        summary = CommissionAggregator.compute_summary([])

        assert summary.total_commission == 0
        assert summary.average_commission == 0
        assert summary.top_performer is None
        assert summary.top_performer_name is None
        assert summary.rep_count == 0

    def test_totals_and_average(self):
        rollups = [RepRollup("A", 100, 2), RepRollup("B", 50, 1), RepRollup("C", 30, 3)]

        summary = CommissionAggregator.compute_summary(rollups)

        assert summary.total_commission == 180
        assert summary.average_commission == 60
        assert summary.rep_count == 3
        assert summary.top_performer_name == "A"
        assert summary.top_performer_commission == 100

    def test_tie_goes_to_first(self):
        summary = CommissionAggregator.compute_summary([RepRollup("A", 100), RepRollup("B", 100)])

        assert summary.top_performer_name == "A"

    def test_top_performer_is_the_input_object(self):
        first = RepRollup("A", 10)
        best = RepRollup("B", 20)

        summary = CommissionAggregator.compute_summary([first, best])

        assert summary.top_performer is best

    def test_all_negative_amounts_still_pick_a_top(self):
        summary = CommissionAggregator.compute_summary([RepRollup("A", -5), RepRollup("B", -1)])

        assert summary.top_performer_name == "B"

    def test_accepts_api_dicts(self):
        summary = CommissionAggregator.compute_summary([
            {"repName": "A", "commission": 10},
            {"repName": "B", "commission": "25.5"},
        ])

        assert summary.total_commission == 35.5
        assert summary.top_performer_name == "B"

    def test_total_ignores_rollup_order(self):
        rollups = [RepRollup("A", 0.1), RepRollup("B", 0.2), RepRollup("C", 0.3), RepRollup("D", 1.1)]

        summaries = [CommissionAggregator.compute_summary(list(order)) for order in permutations(rollups)]

        totals = {s.total_commission for s in summaries}
        assert len(totals) == 1
        assert totals.pop() == pytest.approx(1.7)
        assert len({s.average_commission for s in summaries}) == 1

    def test_first_of_tied_top_wins_in_any_order_of_the_rest(self):
        first = RepRollup("A", 100)
        rest = [RepRollup("B", 100), RepRollup("C", 50.5), RepRollup("D", 0.1)]

        for order in permutations(rest):
            summary = CommissionAggregator.compute_summary([first, *order])
            assert summary.top_performer is first


class TestComparePeriods:
    """Test cases for month-over-month deltas"""

    def test_change_and_percent(self):
        current = SummaryMetrics(total_commission=150, average_commission=75, rep_count=2)
        previous = SummaryMetrics(total_commission=100, average_commission=100, rep_count=1)

        comparison = CommissionAggregator.compare_periods(current, previous)

        assert comparison['total_commission_change'] == 50
        assert comparison['total_commission_change_pct'] == pytest.approx(50.0)
        assert comparison['average_commission_change_pct'] == pytest.approx(-25.0)
        assert comparison['rep_count_change'] == 1

    def test_no_previous_gives_no_percent(self):
        comparison = CommissionAggregator.compare_periods(
            SummaryMetrics(total_commission=10, rep_count=1), SummaryMetrics.empty()
        )

        assert comparison['total_commission_change'] == 10
        assert comparison['total_commission_change_pct'] is None


class TestFilterByReps:

    def test_none_keeps_everything(self):
        rollups = [RepRollup("A"), RepRollup("B")]
        assert CommissionAggregator.filter_by_reps(rollups, None) == rollups

    def test_keeps_selected_only(self):
        rollups = [RepRollup("A"), RepRollup("B")]
        result = CommissionAggregator.filter_by_reps(rollups, {"B"})
        assert [r.rep_name for r in result] == ["B"]

    def test_empty_selection_keeps_nothing(self):
        assert CommissionAggregator.filter_by_reps([RepRollup("A")], set()) == []


class TestChartSeries:
    """Test cases for chart points and label truncation"""

    def test_long_name_truncated(self):
        points = CommissionAggregator.to_chart_series([RepRollup("Alexander Hamilton-Smith", 10)])

        assert points[0].name == "Alexander Ha..."
        assert len(points[0].name) == 15
        assert points[0].full_name == "Alexander Hamilton-Smith"

    def test_short_and_boundary_names_untouched(self):
        points = CommissionAggregator.to_chart_series([
            RepRollup("Jane Doe", 1),
            RepRollup("ExactlyFifteen!", 1),
        ])

        assert points[0].name == "Jane Doe"
        assert points[1].name == "ExactlyFifteen!"

    def test_commission_rounded_to_cents(self):
        points = CommissionAggregator.to_chart_series([RepRollup("A", 10.127)])

        assert points[0].commission == 10.13

    def test_input_not_modified(self):
        rollup = RepRollup("Alexander Hamilton-Smith", 10.126)

        CommissionAggregator.to_chart_series([rollup])

        assert rollup.rep_name == "Alexander Hamilton-Smith"
        assert rollup.total_commission == 10.126

    def test_custom_label_length(self):
        assert CommissionAggregator.truncate_label("Abcdefghij", 8) == "Abcde..."
        assert CommissionAggregator.truncate_label("Abcdefghij", 2) == "Ab"


class TestToCsv:
    """Test cases for CSV text"""

    def test_header_and_rows(self):
        text = CommissionAggregator.to_csv([RepRollup("Jane Doe", 120.5, 3), RepRollup("Bob", 40, 0)])

        lines = text.split('\n')
        assert lines[0] == "Rep Name,Invoices,Commission,Avg per Invoice"
        assert lines[1] == "Jane Doe,3,120.50,40.17"
        assert lines[2] == "Bob,0,40.00,0.00"

    def test_no_trailing_newline(self):
        text = CommissionAggregator.to_csv([RepRollup("Jane Doe", 1, 1)])

        assert not text.endswith('\n')
        assert len(text.split('\n')) == 2

    def test_empty_is_header_only(self):
        assert CommissionAggregator.to_csv([]) == "Rep Name,Invoices,Commission,Avg per Invoice"

    def test_comma_in_name_is_quoted(self):
        text = CommissionAggregator.to_csv([RepRollup("Smith, John", 100.5, 2)])

        rows = list(csv.reader(io.StringIO(text)))
        assert rows[1] == ["Smith, John", "2", "100.50", "50.25"]

    def test_multiple_rows_read_back_with_csv_reader(self):
        rollups = [
            RepRollup("Smith, John", 100.5, 2),
            RepRollup('Bob "The Closer" Lee', 75, 3),
            RepRollup("Plain Name", 0, 0),
        ]

        rows = list(csv.reader(io.StringIO(CommissionAggregator.to_csv(rollups))))

        assert rows == [
            ["Rep Name", "Invoices", "Commission", "Avg per Invoice"],
            ["Smith, John", "2", "100.50", "50.25"],
            ['Bob "The Closer" Lee', "3", "75.00", "25.00"],
            ["Plain Name", "0", "0.00", "0.00"],
        ]


class TestInvoices:
    """Test cases for invoice filters and stats"""

    def setup_method(self):
        self.invoices = [
            InvoiceRecord("INV-001", "Jane", date(2024, 3, 1), total=1000, commission=50,
                          status="paid", customer_name="Acme"),
            InvoiceRecord("INV-002", "Bob", date(2024, 3, 10), total=500, commission=25,
                          status="overdue", customer_name="Globex", balance=500),
            InvoiceRecord("INV-003", None, date(2024, 4, 2), total=200, commission=10,
                          status="sent", customer_name="Initech", balance=200),
        ]

    def test_filter_by_status(self):
        result = CommissionAggregator.filter_invoices(self.invoices, status="Overdue")
        assert [i.invoice_number for i in result] == ["INV-002"]

    def test_filter_by_search(self):
        result = CommissionAggregator.filter_invoices(self.invoices, search="acme")
        assert [i.invoice_number for i in result] == ["INV-001"]

    def test_filter_by_date_range(self):
        march = CommissionAggregator.compute_month_range(date(2024, 3, 1))

        result = CommissionAggregator.filter_invoices(self.invoices, date_range=march)

        assert [i.invoice_number for i in result] == ["INV-001", "INV-002"]

    def test_stats(self):
        stats = CommissionAggregator.compute_invoice_stats(self.invoices)

        assert stats['total_invoices'] == 3
        assert stats['paid_count'] == 1
        assert stats['overdue_count'] == 1
        assert stats['other_count'] == 1
        assert stats['total_amount'] == 1700
        assert stats['total_commission'] == 85
        assert stats['outstanding_balance'] == 700

    def test_dataframe_uses_unassigned(self):
        df = CommissionAggregator.invoices_to_dataframe(self.invoices)

        assert list(df['Salesperson']) == ["Jane", "Bob", "Unassigned"]


class TestSalespeople:

    def test_split_and_search(self):
        people = [
            {"name": "Jane Doe", "isActive": True, "invoiceCount": 4},
            {"name": "Bob", "isActive": False},
            {"name": "Janet", "isActive": False},
        ]

        active, inactive = CommissionAggregator.split_salespeople(people, "jan")

        assert [p.name for p in active] == ["Jane Doe"]
        assert [p.name for p in inactive] == ["Janet"]
        assert active[0].invoice_count == 4


class TestFormatCurrency:

    def test_dollar_format(self):
        assert CommissionAggregator.format_currency(1234.5) == "$1,234.50"

    def test_negative(self):
        assert CommissionAggregator.format_currency(-12) == "-$12.00"

    def test_unknown_currency_suffix(self):
        assert CommissionAggregator.format_currency(1234.5, "XYZ") == "1,234.50 XYZ"

    def test_garbage_is_zero(self):
        assert CommissionAggregator.format_currency(None) == "$0.00"
