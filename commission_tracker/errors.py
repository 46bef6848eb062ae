# commission_tracker/errors.py
"""
Exceptions raised by the Commission Tracker.

The aggregator itself never raises for bad rows or empty input; these
cover the edges around it (date-range input and the remote API).
"""

from typing import Optional


class CommissionTrackerError(Exception):
    """Base class for all Commission Tracker errors."""


class InvalidDateRangeError(CommissionTrackerError, ValueError):
    """Start date falls after end date, or one of them is missing."""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        if start is None or end is None:
            message = f"Invalid date range: both dates are required (start={start}, end={end})"
        else:
            message = f"Invalid date range: start {start} is after end {end}"
        super().__init__(message)


class ApiError(CommissionTrackerError):
    """Remote API call failed (transport error, non-2xx or bad body)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class AuthenticationError(ApiError):
    """Token missing, expired or rejected (HTTP 401/403)."""
