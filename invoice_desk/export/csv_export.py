"""CSV export of row-shaped invoice data."""

import logging
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

CSV_MIME_TYPE = "text/csv"


def export_rows_to_csv(rows: list[dict], columns: Optional[list[str]] = None) -> bytes:
    """
    Export rows to CSV.

    Args:
        rows: Records to write, one dict per row
        columns: Column order; defaults to the keys of the first row

    Returns:
        UTF-8 encoded CSV content with a header line
    """
    df = pd.DataFrame(rows, columns=columns)
    logger.info(f"Exported {len(df)} rows to CSV")
    return df.to_csv(index=False).encode("utf-8")
