"""
Invoice data models.

Mirrors the records served by the extraction API. The server uses
PascalCase keys on reads and camelCase keys on writes; models accept
either the wire alias or the Python field name.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Column order for exported line items
ITEM_EXPORT_COLUMNS = [
    "Product Name",
    "Description",
    "Quantity",
    "Unit Price",
    "Line Total",
]

# Column order for the bulk invoice export
SUMMARY_EXPORT_COLUMNS = [
    "Invoice Number",
    "Customer",
    "Order Date",
    "Due Date",
    "Status",
    "Subtotal",
    "Tax",
    "Total",
]

CURRENCY_COLUMNS = {"Unit Price", "Line Total", "Subtotal", "Tax", "Total"}


class InvoiceStatus(str, Enum):
    """Statuses selectable in the edit form."""
    PENDING = "Pending"
    PAID = "Paid"
    CANCELLED = "Cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


def date_part(value: Optional[str]) -> str:
    """Return the YYYY-MM-DD portion of an ISO-8601 string ('' for None)."""
    if not value:
        return ""
    return value.split("T")[0]


class InvoiceItem(BaseModel):
    """A single line item belonging to one invoice."""
    model_config = ConfigDict(populate_by_name=True)

    detail_id: int = Field(alias="SalesOrderDetailID")
    product_name: str = Field("", alias="ProductName")
    product_description: Optional[str] = Field(None, alias="ProductDescription")
    quantity: int = Field(0, alias="Quantity")
    unit_price: float = Field(0.0, alias="UnitPrice")
    line_total: float = Field(0.0, alias="LineTotal")

    def to_export_row(self) -> dict:
        return {
            "Product Name": self.product_name,
            "Description": self.product_description or "",
            "Quantity": self.quantity,
            "Unit Price": self.unit_price,
            "Line Total": self.line_total,
        }


class Invoice(BaseModel):
    """An extracted invoice. Summaries from the list endpoint may omit items."""
    model_config = ConfigDict(populate_by_name=True)

    order_id: int = Field(alias="SalesOrderID")
    invoice_number: str = Field("", alias="InvoiceNumber")
    order_date: str = Field("", alias="OrderDate")
    due_date: Optional[str] = Field(None, alias="DueDate")
    customer_name: str = Field("", alias="CustomerName")
    customer_address: Optional[str] = Field(None, alias="CustomerAddress")
    sub_total: Optional[float] = Field(None, alias="SubTotal")
    tax_amount: Optional[float] = Field(None, alias="TaxAmount")
    total_amount: float = Field(0.0, alias="TotalAmount")
    status: str = Field(InvoiceStatus.PENDING.value, alias="Status")
    created_at: Optional[str] = Field(None, alias="CreatedAt")
    updated_at: Optional[str] = Field(None, alias="UpdatedAt")
    document_path: Optional[str] = Field(None, alias="DocumentPath")
    items: Optional[list[InvoiceItem]] = None

    @property
    def display_label(self) -> str:
        return self.invoice_number or f"#{self.order_id}"

    @property
    def items_total(self) -> float:
        """Sum of the item line totals, shown next to the subtotal."""
        return sum(item.line_total for item in self.items or [])

    def find_item(self, detail_id: int) -> Optional[InvoiceItem]:
        for item in self.items or []:
            if item.detail_id == detail_id:
                return item
        return None

    def item_export_rows(self) -> list[dict]:
        return [item.to_export_row() for item in self.items or []]

    def to_summary_row(self) -> dict:
        return {
            "Invoice Number": self.display_label,
            "Customer": self.customer_name,
            "Order Date": date_part(self.order_date),
            "Due Date": date_part(self.due_date),
            "Status": self.status,
            "Subtotal": self.sub_total if self.sub_total is not None else 0.0,
            "Tax": self.tax_amount if self.tax_amount is not None else 0.0,
            "Total": self.total_amount,
        }


def invoice_summary_rows(invoices: list[Invoice]) -> list[dict]:
    """Flatten the visible invoice list for the bulk export."""
    return [invoice.to_summary_row() for invoice in invoices]


class InvoiceHeaderUpdate(BaseModel):
    """Full replacement of an invoice's non-item fields."""
    model_config = ConfigDict(populate_by_name=True)

    invoice_number: str = Field(alias="invoiceNumber")
    order_date: str = Field(alias="orderDate")
    due_date: Optional[str] = Field(None, alias="dueDate")
    customer_name: str = Field(alias="customerName")
    customer_address: Optional[str] = Field(None, alias="customerAddress")
    status: str
    sub_total: float = Field(0.0, alias="subTotal")
    tax_amount: float = Field(0.0, alias="taxAmount")
    total_amount: float = Field(alias="totalAmount")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class InvoiceItemUpdate(BaseModel):
    """Full replacement of one line item's fields."""
    model_config = ConfigDict(populate_by_name=True)

    detail_id: int = Field(exclude=True)
    product_name: str = Field(alias="productName")
    product_description: Optional[str] = Field(None, alias="productDescription")
    quantity: int
    unit_price: float = Field(alias="unitPrice")
    line_total: float = Field(alias="lineTotal")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
