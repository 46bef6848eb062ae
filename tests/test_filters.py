"""Tests for date range validation and filter helpers"""
from datetime import date

import pytest

from commission_tracker.errors import InvalidDateRangeError
from commission_tracker.commissions.filters import (
    CommissionFilters,
    resolve_period,
    validate_date_range,
)
from commission_tracker.commissions.models import DateRange


class TestValidateDateRange:

    def test_valid_range(self):
        rng = validate_date_range(date(2024, 1, 1), date(2024, 1, 31))

        assert rng.start == date(2024, 1, 1)
        assert rng.end == date(2024, 1, 31)
        assert rng.label == "2024-01-01 to 2024-01-31"

    def test_same_day_is_valid(self):
        assert validate_date_range(date(2024, 1, 5), date(2024, 1, 5)).days == 1

    def test_start_after_end(self):
        with pytest.raises(InvalidDateRangeError) as exc_info:
            validate_date_range(date(2024, 2, 1), date(2024, 1, 1))

        assert exc_info.value.start == date(2024, 2, 1)

    def test_missing_date(self):
        with pytest.raises(InvalidDateRangeError):
            validate_date_range(None, date(2024, 1, 1))


class TestResolvePeriod:

    def test_current_and_previous_month(self):
        today = date(2024, 3, 15)

        assert resolve_period("Current Month", today).start == date(2024, 3, 1)
        assert resolve_period("Previous Month", today).end == date(2024, 2, 29)

    def test_custom_range(self):
        rng = resolve_period("Custom Range", date(2024, 3, 15), date(2024, 1, 10), date(2024, 2, 10))

        assert rng.start == date(2024, 1, 10)

    def test_unknown_period(self):
        with pytest.raises(ValueError):
            resolve_period("Fiscal Year", date(2024, 3, 15))


class TestFilterHelpers:

    def test_filter_summary(self):
        rng = DateRange(date(2024, 3, 1), date(2024, 3, 31), "March 2024")

        assert CommissionFilters.get_filter_summary(rng, None, 4) == "March 2024 • (Mar 01 - Mar 31) • 4 reps"
        assert CommissionFilters.get_filter_summary(rng, {"A"}, 4) == "March 2024 • (Mar 01 - Mar 31) • 1 of 4 reps"
