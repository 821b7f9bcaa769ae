"""
Excel export module for invoice data.

Handles:
- Writing row-shaped invoice data to an in-memory workbook
- USD currency formatting
- Header styling and alternating row fills
"""

import logging
from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from invoice_desk.config import get_config
from invoice_desk.models.invoice import CURRENCY_COLUMNS

logger = logging.getLogger(__name__)

EXCEL_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ExcelExporter:
    """
    Exports row-shaped data to Excel workbooks.

    Features:
    - USD currency formatting ("$"#,##0.00)
    - One row per record, headers taken from the row keys
    - Professional formatting
    - Returns bytes suitable for a browser download
    """

    MIN_COLUMN_WIDTH = 10
    MAX_COLUMN_WIDTH = 45

    def __init__(self, currency_format: str = '"$"#,##0.00'):
        """Initialize the Excel exporter."""
        self.currency_format = currency_format
        self._setup_styles()

    def _setup_styles(self):
        """Set up Excel styles for formatting."""
        # Header style
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

        # Border style
        thin_border = Side(style="thin", color="CCCCCC")
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border,
        )

        # Alternating row colors
        self.even_row_fill = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")

    def export(
        self,
        rows: list[dict],
        columns: Optional[list[str]] = None,
        sheet_title: str = "Invoice Data",
    ) -> bytes:
        """
        Export rows to an Excel workbook.

        Args:
            rows: Records to write, one dict per row
            columns: Column order; defaults to the keys of the first row
            sheet_title: Worksheet name

        Returns:
            The .xlsx file content
        """
        headers = list(columns) if columns else (list(rows[0].keys()) if rows else [])

        wb = Workbook()
        ws = wb.active
        # Excel limits sheet titles to 31 characters
        ws.title = sheet_title[:31]

        self._write_headers(ws, headers)

        for i, row_data in enumerate(rows):
            row_num = i + 2
            self._write_row(ws, row_num, headers, row_data)

            # Apply alternating row colors
            if row_num % 2 == 0:
                for col in range(1, len(headers) + 1):
                    ws.cell(row=row_num, column=col).fill = self.even_row_fill

        self._set_column_widths(ws, headers, rows)

        buffer = BytesIO()
        wb.save(buffer)
        logger.info(f"Exported {len(rows)} rows to sheet '{ws.title}'")

        return buffer.getvalue()

    def _write_headers(self, ws, headers: list[str]):
        """Write header row with formatting."""
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment
            cell.border = self.cell_border

        # Freeze header row
        ws.freeze_panes = "A2"

    def _write_row(self, ws, row_num: int, headers: list[str], row_data: dict):
        """Write a single data row."""
        for col, key in enumerate(headers, start=1):
            value = row_data.get(key)
            cell = ws.cell(row=row_num, column=col, value=value)
            cell.border = self.cell_border

            # Apply number format for currency columns
            if key in CURRENCY_COLUMNS and value is not None:
                cell.number_format = self.currency_format

    def _set_column_widths(self, ws, headers: list[str], rows: list[dict]):
        """Approximate auto-fit from header and value lengths."""
        for col, key in enumerate(headers, start=1):
            longest = max(
                [len(str(key))] + [len(str(row.get(key, ""))) for row in rows]
            )
            width = min(max(longest + 2, self.MIN_COLUMN_WIDTH), self.MAX_COLUMN_WIDTH)
            ws.column_dimensions[get_column_letter(col)].width = width


def export_rows_to_excel(
    rows: list[dict],
    columns: Optional[list[str]] = None,
    sheet_title: str = "Invoice Data",
    currency_format: Optional[str] = None,
) -> bytes:
    """
    Convenience function to export rows to Excel.

    Args:
        rows: Records to write
        columns: Column order
        sheet_title: Worksheet name
        currency_format: Number format for money columns; defaults to the app setting

    Returns:
        The .xlsx file content
    """
    exporter = ExcelExporter(currency_format or get_config().excel_currency_format)
    return exporter.export(rows, columns=columns, sheet_title=sheet_title)
