"""Tests for AccessControl"""
from commission_tracker.commissions.access_control import AccessControl
from commission_tracker.commissions.models import CommissionRecord


class TestAccessControl:

    def setup_method(self):
        self.records = [
            CommissionRecord("Jane", 100, 2),
            CommissionRecord("Bob", 50, 1),
            {"repName": "Jane", "commission": 5},
        ]

    def test_admin_levels(self):
        access = AccessControl("Admin", is_admin=True)

        assert access.get_access_level() == "full"
        assert access.can_view_all()
        assert access.can_select_reps()

    def test_rep_levels(self):
        access = AccessControl("Jane")

        assert access.get_access_level() == "self"
        assert not access.can_select_reps()

    def test_admin_sees_everything(self):
        assert AccessControl("Admin", is_admin=True).filter_commissions(self.records) == self.records

    def test_rep_sees_own_rows(self):
        filtered = AccessControl("Jane").filter_commissions(self.records)

        assert len(filtered) == 2
        assert filtered[0] is self.records[0]

    def test_rep_without_name_sees_nothing(self):
        assert AccessControl(None).filter_commissions(self.records) == []

    def test_build_invoice_filter(self):
        invoice_filter = AccessControl("Bob").build_invoice_filter({"Bob"})

        assert invoice_filter.requester_is_admin is False
        assert invoice_filter.requester_name == "Bob"
        assert invoice_filter.rep_names == {"Bob"}

    def test_build_invoice_filter_without_selection(self):
        assert AccessControl("Admin", is_admin=True).build_invoice_filter().rep_names is None

    def test_validate_selected_reps(self):
        available = ["Jane", "Bob"]

        assert AccessControl("A", is_admin=True).validate_selected_reps(["Bob", "Ghost"], available) == ["Bob"]
        assert AccessControl("Jane").validate_selected_reps(["Jane", "Bob"], available) == ["Jane"]
