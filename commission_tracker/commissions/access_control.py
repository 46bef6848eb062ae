# commission_tracker/commissions/access_control.py
"""
Access Control for Commission Tracker

Handles data access based on the signed-in user:
- admin: Full access to every rep's commissions and invoices
- rep: Access to own rows only (matched on rep name)

The API is expected to filter already; these checks are applied again on
the client so a non-admin never sees another rep's rows.
"""

import logging
from typing import Iterable, List, Optional, Set

from .constants import FULL_ACCESS_LEVEL, SELF_ACCESS_LEVEL
from .models import InvoiceFilter, rep_name_of

logger = logging.getLogger(__name__)


class AccessControl:
    """
    Manage data access based on the user's admin flag and name.

    Usage:
        access = AccessControl(
            user_name=auth.get_user_display_name(),
            is_admin=auth.is_admin()
        )

        level = access.get_access_level()   # 'full' or 'self'
        records = access.filter_commissions(records)
        groups = CommissionAggregator.group_invoices_by_rep(
            invoices, access.build_invoice_filter(selected_reps)
        )
    """

    def __init__(self, user_name: Optional[str], is_admin: bool = False):
        """
        Initialize access control.

        Args:
            user_name: Signed-in rep's name as the API reports it
            is_admin: Admin flag from the session
        """
        self.user_name = user_name
        self.is_admin = bool(is_admin)

        logger.info(f"AccessControl initialized: user={self.user_name}, admin={self.is_admin}")

    # =========================================================================
    # ACCESS LEVEL DETERMINATION
    # =========================================================================

    def get_access_level(self) -> str:
        """
        Returns:
            'full' - Can view all reps
            'self' - Can view own data only
        """
        return FULL_ACCESS_LEVEL if self.is_admin else SELF_ACCESS_LEVEL

    def can_view_all(self) -> bool:
        return self.get_access_level() == FULL_ACCESS_LEVEL

    def can_select_reps(self) -> bool:
        """Only admins get the rep selector."""
        return self.can_view_all()

    # =========================================================================
    # DATA FILTERING
    # =========================================================================

    def filter_commissions(self, records: Iterable) -> List:
        """
        Keep only the commission rows this user may see.

        Args:
            records: CommissionRecord / RepRollup objects or API dicts

        Returns:
            Filtered list, input order kept
        """
        records = list(records or [])
        if self.can_view_all():
            return records

        if not self.user_name:
            logger.warning("No user name for self access, returning no commissions")
            return []

        filtered = [r for r in records if rep_name_of(r) == self.user_name]
        if len(filtered) < len(records):
            logger.debug(f"Filtered commissions: {len(records)} -> {len(filtered)} rows")
        return filtered

    def build_invoice_filter(self, selected_reps: Optional[Set[str]] = None) -> InvoiceFilter:
        """Invoice filter for group_invoices_by_rep()."""
        return InvoiceFilter(
            rep_names=set(selected_reps) if selected_reps is not None else None,
            requester_is_admin=self.is_admin,
            requester_name=self.user_name,
        )

    # =========================================================================
    # PERMISSION CHECKS
    # =========================================================================

    def validate_selected_reps(
        self,
        selected: Iterable[str],
        available: Iterable[str]
    ) -> List[str]:
        """
        Validate rep selection against what the user may access.

        Args:
            selected: Rep names the user picked
            available: Rep names present in the loaded data

        Returns:
            Rep names the user can actually view
        """
        available = list(available)
        if self.can_view_all():
            allowed = set(available)
        else:
            allowed = {name for name in available if name == self.user_name}

        selected = list(selected)
        valid = [name for name in selected if name in allowed]

        if len(valid) < len(selected):
            logger.warning(
                f"Some selected reps were filtered out: "
                f"selected={len(selected)}, valid={len(valid)}"
            )

        return valid

    def __repr__(self) -> str:
        return (
            f"AccessControl(user='{self.user_name}', "
            f"level='{self.get_access_level()}')"
        )
