"""Data models for invoices and their line items."""

from .invoice import (
    Invoice,
    InvoiceHeaderUpdate,
    InvoiceItem,
    InvoiceItemUpdate,
    InvoiceStatus,
)

__all__ = [
    "Invoice",
    "InvoiceHeaderUpdate",
    "InvoiceItem",
    "InvoiceItemUpdate",
    "InvoiceStatus",
]
