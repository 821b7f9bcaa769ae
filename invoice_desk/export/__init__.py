"""Export module for writing invoice data to CSV and Excel downloads."""

from .csv_export import CSV_MIME_TYPE, export_rows_to_csv
from .excel import EXCEL_MIME_TYPE, ExcelExporter, export_rows_to_excel

__all__ = [
    "CSV_MIME_TYPE",
    "EXCEL_MIME_TYPE",
    "ExcelExporter",
    "export_rows_to_csv",
    "export_rows_to_excel",
]
