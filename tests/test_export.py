"""Tests for CSV / Excel export"""
from datetime import date

from openpyxl import load_workbook

from commission_tracker.commissions.export import CommissionExport, build_filename
from commission_tracker.commissions.metrics import CommissionAggregator
from commission_tracker.commissions.models import DateRange, InvoiceRecord, RepRollup


class TestCommissionExport:

    def setup_method(self):
        self.rollups = [RepRollup("Jane Doe", 120.5, 3), RepRollup("Smith, John", 40, 2)]
        self.summary = CommissionAggregator.compute_summary(self.rollups)
        self.date_range = DateRange(date(2024, 3, 1), date(2024, 3, 31), "March 2024")

    def test_filename(self):
        assert build_filename(self.date_range, "csv") == "commissions-2024-03-01-to-2024-03-31.csv"
        assert build_filename(self.date_range, ".xlsx") == "commissions-2024-03-01-to-2024-03-31.xlsx"

    def test_csv_bytes_match_text(self):
        data = CommissionExport.to_csv_bytes(self.rollups)

        assert data.decode('utf-8') == CommissionAggregator.to_csv(self.rollups)

    def test_report_sheets(self):
        output = CommissionExport().create_report(self.rollups, self.summary, self.date_range)

        wb = load_workbook(output)
        assert wb.sheetnames == ["Summary", "By Rep"]

        ws = wb["By Rep"]
        assert [c.value for c in ws[1]] == ["Rep Name", "Invoices", "Commission", "Avg per Invoice"]
        assert ws.cell(row=2, column=1).value == "Jane Doe"
        assert ws.cell(row=2, column=3).value == 120.5
        assert ws.cell(row=3, column=1).value == "Smith, John"

    def test_report_with_invoices(self):
        invoices = [
            InvoiceRecord("INV-1", "Jane Doe", date(2024, 3, 4), total=900, commission=45, status="paid"),
        ]

        output = CommissionExport().create_report(self.rollups, self.summary, self.date_range, invoices)

        wb = load_workbook(output)
        assert wb.sheetnames == ["Summary", "By Rep", "Invoices"]
        assert wb["Invoices"].cell(row=2, column=1).value == "INV-1"

    def test_summary_sheet_figures(self):
        output = CommissionExport().create_report(self.rollups, self.summary, self.date_range)

        ws = load_workbook(output)["Summary"]
        values = {ws.cell(row=r, column=1).value: ws.cell(row=r, column=2).value for r in range(1, ws.max_row + 1)}
        assert values["Total Commission"] == "$160.50"
        assert values["Top Performer"] == "Jane Doe"
        assert values["Period:"] == "March 2024"

    def test_empty_report(self):
        output = CommissionExport().create_report([], CommissionAggregator.compute_summary([]), self.date_range)

        ws = load_workbook(output)["Summary"]
        values = {ws.cell(row=r, column=1).value: ws.cell(row=r, column=2).value for r in range(1, ws.max_row + 1)}
        assert values["Top Performer"] == "-"
