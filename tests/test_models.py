from invoice_desk.models.invoice import (
    ITEM_EXPORT_COLUMNS,
    SUMMARY_EXPORT_COLUMNS,
    Invoice,
    InvoiceHeaderUpdate,
    InvoiceItemUpdate,
    InvoiceStatus,
    date_part,
    invoice_summary_rows,
)


def test_invoice_parses_wire_format(invoice_42_data):
    invoice = Invoice.model_validate(invoice_42_data)

    assert invoice.order_id == 42
    assert invoice.invoice_number == "INV-0042"
    assert invoice.customer_address == "1 Main St"
    assert invoice.sub_total == 150.0
    assert len(invoice.items) == 2
    assert invoice.items[1].product_description is None
    assert invoice.find_item(2).product_name == "Gadget"
    assert invoice.find_item(99) is None


def test_summary_without_items_and_optional_fields(invoice_7_data):
    invoice = Invoice.model_validate(invoice_7_data)

    assert invoice.items is None
    assert invoice.due_date is None
    assert invoice.sub_total is None
    assert invoice.display_label == "#7"
    assert invoice.items_total == 0
    assert invoice.item_export_rows() == []


def test_items_total_is_sum_of_line_totals(invoice_42_data):
    invoice_42_data["SubTotal"] = 999.0  # not cross-validated
    invoice = Invoice.model_validate(invoice_42_data)

    assert invoice.items_total == 150.0
    assert invoice.sub_total == 999.0


def test_date_part():
    assert date_part("2024-03-01T12:30:00Z") == "2024-03-01"
    assert date_part("2024-03-01") == "2024-03-01"
    assert date_part(None) == ""
    assert date_part("") == ""


def test_status_values():
    assert InvoiceStatus.values() == ["Pending", "Paid", "Cancelled"]


def test_header_update_payload_uses_camel_case():
    update = InvoiceHeaderUpdate(
        invoice_number="INV-1",
        order_date="2024-03-01",
        due_date=None,
        customer_name="Acme",
        customer_address=None,
        status="Paid",
        sub_total=10.0,
        tax_amount=1.0,
        total_amount=11.0,
    )

    assert update.to_payload() == {
        "invoiceNumber": "INV-1",
        "orderDate": "2024-03-01",
        "dueDate": None,
        "customerName": "Acme",
        "customerAddress": None,
        "status": "Paid",
        "subTotal": 10.0,
        "taxAmount": 1.0,
        "totalAmount": 11.0,
    }


def test_item_update_payload_excludes_detail_id():
    update = InvoiceItemUpdate(
        detail_id=5,
        product_name="Widget",
        product_description="Blue",
        quantity=3,
        unit_price=2.5,
        line_total=7.5,
    )

    payload = update.to_payload()
    assert payload == {
        "productName": "Widget",
        "productDescription": "Blue",
        "quantity": 3,
        "unitPrice": 2.5,
        "lineTotal": 7.5,
    }
    assert update.detail_id == 5


def test_export_rows_follow_column_order(invoice_42_data, invoice_7_data):
    invoice = Invoice.model_validate(invoice_42_data)
    rows = invoice.item_export_rows()

    assert list(rows[0].keys()) == ITEM_EXPORT_COLUMNS
    assert rows[1]["Description"] == ""

    summary = invoice_summary_rows([invoice, Invoice.model_validate(invoice_7_data)])
    assert [row["Invoice Number"] for row in summary] == ["INV-0042", "#7"]
    assert list(summary[0].keys()) == SUMMARY_EXPORT_COLUMNS
    assert summary[0]["Order Date"] == "2024-03-01"
    assert summary[1]["Due Date"] == ""
    assert summary[1]["Subtotal"] == 0.0
