"""Display helpers shared by the UI panels."""

from datetime import date
from typing import Optional

from invoice_desk.models.invoice import InvoiceStatus, date_part

STATUS_COLORS = {
    InvoiceStatus.PAID.value: "green",
    InvoiceStatus.PENDING.value: "orange",
}


def format_currency(amount: Optional[float]) -> str:
    """Format an amount as USD, e.g. 1234.5 -> '$1,234.50'."""
    value = float(amount or 0.0)
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse the date portion of an ISO-8601 string; None when unparseable."""
    try:
        return date.fromisoformat(date_part(value))
    except ValueError:
        return None


def format_date(value: Optional[str]) -> str:
    """Format an ISO-8601 string as M/D/YYYY, falling back to the raw text."""
    parsed = parse_date(value)
    if parsed is None:
        return value or ""
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, "gray")


def status_badge(status: str) -> str:
    """Streamlit markdown for a colored status label."""
    return f":{status_color(status)}[**{status}**]"
