# commission_tracker/commissions/export.py
"""
CSV and Excel Export for Commission Tracker

- CSV: per-rep table exactly as the aggregator renders it
- Excel: Summary, By Rep and Invoices sheets

Uses openpyxl for formatting capabilities.
"""

import logging
from datetime import datetime
from io import BytesIO
from typing import Iterable, List, Optional

import streamlit as st
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .constants import CSV_MIME, DEFAULT_CURRENCY, EXCEL_MIME, EXCEL_STYLES
from .metrics import CommissionAggregator
from .models import DateRange, InvoiceRecord, SummaryMetrics

logger = logging.getLogger(__name__)


def build_filename(date_range: DateRange, extension: str) -> str:
    """e.g. commissions-2024-03-01-to-2024-03-31.csv"""
    return (
        f"commissions-{date_range.start.isoformat()}"
        f"-to-{date_range.end.isoformat()}.{extension.lstrip('.')}"
    )


class CommissionExport:
    """
    Report generator for the commission tracker.

    Usage:
        exporter = CommissionExport()
        excel_bytes = exporter.create_report(rollups, summary, date_range, invoices)

        st.download_button(
            label="Download Report",
            data=excel_bytes,
            file_name=build_filename(date_range, "xlsx"),
            mime=EXCEL_MIME
        )
    """

    def __init__(self, currency: str = DEFAULT_CURRENCY):
        self.wb = None
        self.currency = currency
        self._init_styles()

    def _init_styles(self):
        self.header_fill = PatternFill(
            start_color=EXCEL_STYLES['header_fill_color'],
            end_color=EXCEL_STYLES['header_fill_color'],
            fill_type='solid'
        )
        self.header_font = Font(bold=True, color=EXCEL_STYLES['header_font_color'], size=11)
        self.title_font = Font(bold=True, size=16)
        self.subtitle_font = Font(bold=True, size=12)

        thin_border = Side(style='thin', color='000000')
        self.cell_border = Border(left=thin_border, right=thin_border, top=thin_border, bottom=thin_border)

        self.center_align = Alignment(horizontal='center', vertical='center')
        self.right_align = Alignment(horizontal='right', vertical='center')

        self.currency_format = EXCEL_STYLES['currency_format']
        self.date_format = EXCEL_STYLES['date_format']

    # =========================================================================
    # CSV
    # =========================================================================

    @staticmethod
    def to_csv_bytes(rollups: Iterable) -> bytes:
        return CommissionAggregator.to_csv(rollups).encode('utf-8')

    # =========================================================================
    # MAIN EXPORT METHOD
    # =========================================================================

    def create_report(
        self,
        rollups: List,
        summary: SummaryMetrics,
        date_range: DateRange,
        invoices: Optional[List[InvoiceRecord]] = None
    ) -> BytesIO:
        """
        Create formatted Excel report.

        Args:
            rollups: Per-rep rollups shown on screen
            summary: SummaryMetrics for the same rollups
            date_range: Period the report covers
            invoices: Optional invoices (adds the Invoices sheet)

        Returns:
            BytesIO containing Excel file
        """
        self.wb = Workbook()

        self._create_summary_sheet(summary, date_range)
        self._create_rep_sheet(rollups)

        if invoices:
            self._create_invoice_sheet(invoices)

        output = BytesIO()
        self.wb.save(output)
        output.seek(0)

        logger.info(f"Excel report created for {date_range.start} -> {date_range.end}")
        return output

    # =========================================================================
    # SUMMARY SHEET
    # =========================================================================

    def _create_summary_sheet(self, summary: SummaryMetrics, date_range: DateRange):
        ws = self.wb.active
        ws.title = "Summary"
        fmt = CommissionAggregator.format_currency

        ws.cell(row=1, column=1, value="Commission Report").font = self.title_font
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=3)

        info_rows = [
            ("Period:", date_range.display_label),
            ("Date Range:", f"{date_range.start.isoformat()} to {date_range.end.isoformat()}"),
            ("Generated:", datetime.now().strftime('%Y-%m-%d %H:%M')),
        ]
        row = 3
        for label, value in info_rows:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
            row += 1

        row += 1
        ws.cell(row=row, column=1, value="Key Figures").font = self.subtitle_font
        row += 1

        kpi_rows = [
            ("Total Commission", fmt(summary.total_commission, self.currency)),
            ("Average per Rep", fmt(summary.average_commission, self.currency)),
            ("Reps", f"{summary.rep_count:,}"),
            ("Top Performer", summary.top_performer_name or "-"),
        ]
        if summary.top_performer is not None:
            kpi_rows.append(("Top Performer Commission", fmt(summary.top_performer_commission, self.currency)))

        for label, value in kpi_rows:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value).alignment = self.right_align
            row += 1

        ws.column_dimensions['A'].width = 25
        ws.column_dimensions['B'].width = 28

    # =========================================================================
    # TABLE SHEETS
    # =========================================================================

    def _write_header(self, ws, columns):
        for col_idx, (header, width) in enumerate(columns, 1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = self.center_align
            cell.border = self.cell_border
            ws.column_dimensions[get_column_letter(col_idx)].width = width

    def _create_rep_sheet(self, rollups: List):
        ws = self.wb.create_sheet("By Rep")
        df = CommissionAggregator.rollups_to_dataframe(rollups)

        self._write_header(ws, [(col, 18 if col != 'Rep Name' else 28) for col in df.columns])

        for row_idx, row in enumerate(df.itertuples(index=False), 2):
            for col_idx, value in enumerate(row, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.cell_border
                if col_idx == 2:
                    cell.alignment = self.center_align
                elif col_idx > 2:
                    cell.number_format = self.currency_format
                    cell.alignment = self.right_align

        ws.freeze_panes = 'A2'

    def _create_invoice_sheet(self, invoices: List[InvoiceRecord]):
        ws = self.wb.create_sheet("Invoices")
        df = CommissionAggregator.invoices_to_dataframe(invoices)

        money_columns = {'Total', 'Commission', 'Balance'}
        date_columns = {'Date', 'Due Date'}

        self._write_header(ws, [(col, 15) for col in df.columns])

        for row_idx, row in enumerate(df.itertuples(index=False), 2):
            for col_idx, (column, value) in enumerate(zip(df.columns, row), 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.cell_border
                if column in money_columns:
                    cell.number_format = self.currency_format
                    cell.alignment = self.right_align
                elif column in date_columns:
                    cell.number_format = self.date_format

        ws.freeze_panes = 'A2'

    # =========================================================================
    # DOWNLOAD BUTTONS
    # =========================================================================

    def render_download_buttons(
        self,
        rollups: List,
        summary: SummaryMetrics,
        date_range: DateRange,
        invoices: Optional[List[InvoiceRecord]] = None,
        key: str = "export",
        include_excel: bool = True
    ):
        """CSV (+ Excel when enabled) download buttons side by side."""
        columns = st.columns(2 if include_excel else 1)

        with columns[0]:
            st.download_button(
                label="📄 Export CSV",
                data=self.to_csv_bytes(rollups),
                file_name=build_filename(date_range, "csv"),
                mime=CSV_MIME,
                key=f"{key}_csv",
                use_container_width=True,
                disabled=not rollups,
            )

        if not include_excel:
            return

        with columns[1]:
            st.download_button(
                label="📊 Export Excel",
                data=self.create_report(rollups, summary, date_range, invoices),
                file_name=build_filename(date_range, "xlsx"),
                mime=EXCEL_MIME,
                key=f"{key}_xlsx",
                use_container_width=True,
                disabled=not rollups,
            )
