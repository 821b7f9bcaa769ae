"""
Invoice list workflow: deletion behind an explicit confirmation step.

A row is never removed locally. After a successful delete the caller
invalidates the list so the next fetch drops it; after a failure the
row simply stays.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from invoice_desk.api.client import APIClientError, InvoiceAPIClient

logger = logging.getLogger(__name__)

DELETE_FAILED = "Failed to delete invoice"


@dataclass
class DeleteOutcome:
    invoice_id: int
    success: bool
    message: str = ""


class DeleteTracker:
    """
    Tracks the confirm-then-delete steps for the list.

    request() opens the confirmation for one row and cancel() closes it.
    confirm() marks the pending row as deleting, so the next render shows
    it busy; perform() then sends the request. is_busy() is true for the
    deleting row only, from confirm() until perform() returns.
    """

    def __init__(self):
        self.pending_id: Optional[int] = None
        self.deleting_id: Optional[int] = None

    def request(self, invoice_id: int) -> None:
        self.pending_id = invoice_id

    def cancel(self) -> None:
        self.pending_id = None

    def is_busy(self, invoice_id: int) -> bool:
        return self.deleting_id == invoice_id

    def confirm(self) -> int:
        if self.pending_id is None:
            raise ValueError("No deletion is awaiting confirmation")

        self.deleting_id, self.pending_id = self.pending_id, None
        return self.deleting_id

    def perform(self, client: InvoiceAPIClient) -> DeleteOutcome:
        if self.deleting_id is None:
            raise ValueError("No confirmed deletion to perform")

        invoice_id = self.deleting_id
        try:
            client.delete_invoice(invoice_id)
        except APIClientError as e:
            logger.error(f"Delete of invoice {invoice_id} failed: {e}")
            return DeleteOutcome(invoice_id=invoice_id, success=False, message=DELETE_FAILED)
        finally:
            self.deleting_id = None

        return DeleteOutcome(invoice_id=invoice_id, success=True)
