"""
Invoice detail workflow: the edit session and its save batch.

The detail panel moves through three modes:

    VIEWING --begin_edit--> EDITING --begin_save--> SAVING
    SAVING  --success-----> VIEWING
    SAVING  --failure-----> EDITING   (edits retained)
    EDITING --cancel------> VIEWING   (edits discarded)

Saving is an ordered batch: the header update first, then one update per
touched line item. A failed header update stops the batch; item updates
are independent of each other and nothing is rolled back.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from invoice_desk.api.client import APIClientError, InvoiceAPIClient
from invoice_desk.models.invoice import (
    Invoice,
    InvoiceHeaderUpdate,
    InvoiceItemUpdate,
    InvoiceStatus,
    date_part,
)

logger = logging.getLogger(__name__)

SAVE_FAILED = "Failed to save changes"

EDITABLE_ITEM_FIELDS = (
    "product_name",
    "product_description",
    "quantity",
    "unit_price",
    "line_total",
)


class DetailMode(Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"


@dataclass
class HeaderForm:
    """Editable copy of an invoice's header fields."""
    invoice_number: str = ""
    order_date: str = ""
    due_date: str = ""
    customer_name: str = ""
    customer_address: str = ""
    status: str = InvoiceStatus.PENDING.value

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "HeaderForm":
        return cls(
            invoice_number=invoice.invoice_number,
            order_date=date_part(invoice.order_date),
            due_date=date_part(invoice.due_date),
            customer_name=invoice.customer_name,
            customer_address=invoice.customer_address or "",
            status=invoice.status,
        )


class SaveStatus(Enum):
    SUCCESS = "success"
    PARTIAL = "partial"  # Header saved, at least one item failed
    FAILED = "failed"    # Header update failed, no item was attempted


@dataclass
class SaveResult:
    status: SaveStatus
    header_saved: bool = False
    saved_item_ids: list[int] = field(default_factory=list)
    failed_item_ids: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == SaveStatus.SUCCESS

    @property
    def wrote_anything(self) -> bool:
        return self.header_saved or bool(self.saved_item_ids)


class EditSession:
    """Panel state for one invoice: mode, header form and item edit buffer."""

    def __init__(self, invoice: Invoice):
        self.invoice_id = invoice.order_id
        self.mode = DetailMode.VIEWING
        self.form = HeaderForm.from_invoice(invoice)
        self.item_edits: dict[int, dict[str, Any]] = {}
        # Bumped whenever the form is reset so widgets re-read their values
        self.generation = 0
        self.last_result: Optional[SaveResult] = None

    @property
    def is_editing(self) -> bool:
        return self.mode in (DetailMode.EDITING, DetailMode.SAVING)

    def matches(self, invoice: Invoice) -> bool:
        return self.invoice_id == invoice.order_id

    def sync(self, invoice: Invoice) -> None:
        """Refresh the read-mode values from the latest copy of the invoice."""
        if self.mode == DetailMode.VIEWING:
            self.form = HeaderForm.from_invoice(invoice)

    def begin_edit(self, invoice: Invoice) -> None:
        if self.mode != DetailMode.VIEWING:
            return
        self.form = HeaderForm.from_invoice(invoice)
        self.item_edits = {}
        self.last_result = None
        self.mode = DetailMode.EDITING
        self.generation += 1

    def cancel(self, invoice: Invoice) -> None:
        """Discard all edits; the form is re-derived from the original invoice."""
        self.form = HeaderForm.from_invoice(invoice)
        self.item_edits = {}
        self.last_result = None
        self.mode = DetailMode.VIEWING
        self.generation += 1

    def update_header(self, **fields: Any) -> None:
        if self.mode != DetailMode.EDITING:
            raise ValueError("Invoice is not being edited")

        unknown = set(fields) - set(HeaderForm.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown header field(s): {', '.join(sorted(unknown))}")

        status = fields.get("status")
        if status is not None and status not in InvoiceStatus.values():
            raise ValueError(f"Invalid status '{status}'. Expected one of {InvoiceStatus.values()}")

        self.form = replace(self.form, **fields)

    def update_item(self, item_id: int, field_name: str, value: Any) -> None:
        if self.mode != DetailMode.EDITING:
            raise ValueError("Invoice is not being edited")
        if field_name not in EDITABLE_ITEM_FIELDS:
            raise ValueError(f"Unknown item field '{field_name}'")
        if field_name == "quantity" and value is not None and value < 0:
            raise ValueError("Quantity cannot be negative")

        self.item_edits.setdefault(item_id, {})[field_name] = value

    def item_value(self, invoice: Invoice, item_id: int, field_name: str) -> Any:
        """Current value of an item field: the edit if set, else the original."""
        value = self.item_edits.get(item_id, {}).get(field_name)
        if value is not None:
            return value
        item = invoice.find_item(item_id)
        return getattr(item, field_name) if item else None

    def build_header_update(self, invoice: Invoice) -> InvoiceHeaderUpdate:
        """Header payload; the three totals come from the original invoice."""
        return InvoiceHeaderUpdate(
            invoice_number=self.form.invoice_number,
            order_date=self.form.order_date,
            due_date=self.form.due_date or None,
            customer_name=self.form.customer_name,
            customer_address=self.form.customer_address or None,
            status=self.form.status,
            sub_total=invoice.sub_total if invoice.sub_total is not None else 0.0,
            tax_amount=invoice.tax_amount if invoice.tax_amount is not None else 0.0,
            total_amount=invoice.total_amount,
        )

    def build_item_updates(self, invoice: Invoice) -> list[InvoiceItemUpdate]:
        """One payload per touched item still present on the invoice."""
        updates = []
        for item_id, edits in self.item_edits.items():
            item = invoice.find_item(item_id)
            if item is None or not edits:
                continue
            values = {name: self.item_value(invoice, item_id, name) for name in EDITABLE_ITEM_FIELDS}
            updates.append(InvoiceItemUpdate(detail_id=item_id, **values))
        return updates

    def begin_save(self) -> None:
        if self.mode != DetailMode.EDITING:
            raise ValueError("Invoice is not being edited")
        self.mode = DetailMode.SAVING

    def finish_save(self, result: SaveResult) -> None:
        self.last_result = result
        if result.ok:
            self.item_edits = {}
            self.mode = DetailMode.VIEWING
            self.generation += 1
        else:
            self.mode = DetailMode.EDITING


def save_invoice_changes(
    client: InvoiceAPIClient,
    invoice: Invoice,
    session: EditSession,
) -> SaveResult:
    """
    Run the save batch for an edit session.

    The session may already be SAVING when the panel marked it in an
    earlier render. Payloads are built before any request, so a value the
    models reject fails the batch without writing anything.

    Args:
        client: API client
        invoice: The invoice as it was before editing
        session: Session holding the edited values

    Returns:
        SaveResult aggregating the header and item outcomes
    """
    if session.mode != DetailMode.SAVING:
        session.begin_save()
    result = SaveResult(status=SaveStatus.SUCCESS)

    try:
        header_update = session.build_header_update(invoice)
        item_updates = session.build_item_updates(invoice)
    except ValidationError as e:
        logger.error(f"Edits of invoice {invoice.order_id} are not valid: {e}")
        result.status = SaveStatus.FAILED
        session.finish_save(result)
        return result

    try:
        client.update_invoice(invoice.order_id, header_update)
    except APIClientError as e:
        logger.error(f"Header update of invoice {invoice.order_id} failed: {e}")
        result.status = SaveStatus.FAILED
        session.finish_save(result)
        return result
    result.header_saved = True

    for update in item_updates:
        try:
            client.update_item(invoice.order_id, update)
        except APIClientError as e:
            logger.error(
                f"Update of item {update.detail_id} on invoice {invoice.order_id} failed: {e}"
            )
            result.failed_item_ids.append(update.detail_id)
        else:
            result.saved_item_ids.append(update.detail_id)

    if result.failed_item_ids:
        result.status = SaveStatus.PARTIAL

    logger.info(
        f"Saved invoice {invoice.order_id}: {result.status.value} "
        f"({len(result.saved_item_ids)} item(s) saved, {len(result.failed_item_ids)} failed)"
    )
    session.finish_save(result)
    return result
