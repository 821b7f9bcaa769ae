"""
Read-through cache of server data and the page-level state.

The server owns every invoice; InvoiceStore only remembers the last
successful reads and which of them must be fetched again. Mutations
never touch cached data directly: they invalidate, and the next render
refetches.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from invoice_desk.api.client import APIClientError, InvoiceAPIClient
from invoice_desk.models.invoice import Invoice

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load invoices"


class InvoiceStore:
    """Cached invoice list and per-invoice details with stale flags."""

    def __init__(self, client: InvoiceAPIClient):
        self.client = client
        self._invoices: list[Invoice] = []
        self._list_stale = True
        self._details: dict[int, Invoice] = {}
        self._stale_details: set[int] = set()
        self._requested: set[int] = set()
        self.has_loaded_list = False
        self.error: Optional[str] = None

    def invoices(self) -> list[Invoice]:
        """The invoice list, refetched first if stale. Keeps old data on failure."""
        if self._list_stale:
            try:
                self._invoices = self.client.list_invoices()
            except APIClientError as e:
                logger.warning(f"Invoice list fetch failed: {e}")
                self.error = str(e) or LOAD_FAILED
            else:
                self.error = None
                self.has_loaded_list = True
            # A failed fetch is not repeated until something invalidates again
            self._list_stale = False
        return self._invoices

    def invoice(self, invoice_id: int) -> Optional[Invoice]:
        """One invoice with items, refetched if stale; None if never fetched successfully."""
        if self.is_detail_stale(invoice_id):
            self._requested.add(invoice_id)
            try:
                self._details[invoice_id] = self.client.get_invoice(invoice_id)
            except APIClientError as e:
                logger.warning(f"Invoice {invoice_id} fetch failed: {e}")
            self._stale_details.discard(invoice_id)
        return self._details.get(invoice_id)

    def is_list_stale(self) -> bool:
        return self._list_stale

    def is_detail_stale(self, invoice_id: int) -> bool:
        return invoice_id not in self._requested or invoice_id in self._stale_details

    def invalidate_invoices(self) -> None:
        """Mark the list and every cached detail for refetch."""
        self._list_stale = True
        self._stale_details.update(self._requested)

    def invalidate_invoice(self, invoice_id: int) -> None:
        """Mark one invoice's detail for refetch."""
        if invoice_id in self._requested:
            self._stale_details.add(invoice_id)

    def forget(self, invoice_id: int) -> None:
        self._requested.discard(invoice_id)
        self._details.pop(invoice_id, None)
        self._stale_details.discard(invoice_id)


@dataclass
class PageState:
    """State owned by the page and passed explicitly to each panel."""
    store: InvoiceStore
    selected: Optional[Invoice] = None
    alerts: list[str] = field(default_factory=list)

    @property
    def selected_id(self) -> Optional[int]:
        return self.selected.order_id if self.selected else None

    def select(self, invoice: Invoice) -> None:
        self.selected = invoice

    def close(self) -> None:
        self.selected = None

    def display_invoice(self) -> Optional[Invoice]:
        """Fetched detail of the selection, falling back to its list summary."""
        if self.selected is None:
            return None
        return self.store.invoice(self.selected.order_id) or self.selected

    def push_alert(self, message: str) -> None:
        self.alerts.append(message)

    def pop_alerts(self) -> list[str]:
        alerts, self.alerts = self.alerts, []
        return alerts

    def after_upload(self) -> None:
        self.store.invalidate_invoices()

    def after_update(self) -> None:
        self.store.invalidate_invoices()
        if self.selected is not None:
            self.store.invalidate_invoice(self.selected.order_id)

    def after_delete(self, invoice_id: int) -> None:
        self.store.invalidate_invoices()
        self.store.forget(invoice_id)
        if self.selected_id == invoice_id:
            self.close()
