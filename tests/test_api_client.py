import pytest
import requests

from conftest import FakeResponse
from invoice_desk.api.client import (
    APIConnectionError,
    APIResponseError,
    error_message_from,
)
from invoice_desk.models.invoice import InvoiceHeaderUpdate, InvoiceItemUpdate


def test_list_invoices(client, fake_session, invoice_42_data, invoice_7_data):
    fake_session.queue(FakeResponse(200, [invoice_42_data, invoice_7_data]))

    invoices = client.list_invoices()

    assert [invoice.order_id for invoice in invoices] == [42, 7]
    call = fake_session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://api.test/api/invoices"
    assert call["timeout"] == 5
    assert call["verify"] is True


def test_get_invoice(client, fake_session, invoice_42_data):
    fake_session.queue(FakeResponse(200, invoice_42_data))

    invoice = client.get_invoice(42)

    assert invoice.order_id == 42
    assert fake_session.calls[0]["url"] == "http://api.test/api/invoices/42"


def test_base_url_trailing_slash_is_ignored(api_config, fake_session, invoice_42_data):
    from invoice_desk.api.client import InvoiceAPIClient

    api_config.base_url = "http://api.test/"
    client = InvoiceAPIClient(config=api_config, session=fake_session)
    fake_session.queue(FakeResponse(200, invoice_42_data))

    client.get_invoice(42)

    assert fake_session.calls[0]["url"] == "http://api.test/api/invoices/42"


def test_malformed_list_body_raises_response_error(client, fake_session):
    fake_session.queue(FakeResponse(200, {"not": "a list"}))

    with pytest.raises(APIResponseError) as excinfo:
        client.list_invoices()
    assert str(excinfo.value) == "Failed to fetch invoices"


def test_invalid_invoice_record_raises_response_error(client, fake_session):
    fake_session.queue(FakeResponse(200, [{"InvoiceNumber": "missing id"}]))

    with pytest.raises(APIResponseError):
        client.list_invoices()


def test_non_json_body_raises_response_error(client, fake_session):
    fake_session.queue(FakeResponse(200, None, text="<html>oops</html>"))

    with pytest.raises(APIResponseError):
        client.get_invoice(1)


def test_upload_posts_multipart_file(client, fake_session):
    fake_session.queue(FakeResponse(200, {"id": 12}))

    result = client.upload_document("invoice.pdf", b"%PDF-1.4", "application/pdf")

    assert result == {"id": 12}
    call = fake_session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://api.test/api/upload"
    assert call["files"] == {"file": ("invoice.pdf", b"%PDF-1.4", "application/pdf")}
    assert call["timeout"] == 60


def test_upload_error_uses_server_message(client, fake_session):
    fake_session.queue(FakeResponse(400, {"error": "Unsupported document layout"}))

    with pytest.raises(APIResponseError) as excinfo:
        client.upload_document("invoice.pdf", b"%PDF", "application/pdf")

    assert str(excinfo.value) == "Unsupported document layout"
    assert excinfo.value.status_code == 400


def test_upload_error_without_json_uses_fallback(client, fake_session):
    fake_session.queue(FakeResponse(502, None, text="Bad Gateway"))

    with pytest.raises(APIResponseError) as excinfo:
        client.upload_document("invoice.pdf", b"%PDF", "application/pdf")

    assert str(excinfo.value) == "Upload failed"


def test_connection_failure_raises_connection_error(client, fake_session):
    fake_session.queue(requests.exceptions.ConnectionError("refused"))

    with pytest.raises(APIConnectionError) as excinfo:
        client.delete_invoice(7)

    assert str(excinfo.value) == "Delete failed"


def test_timeout_raises_connection_error(client, fake_session):
    fake_session.queue(requests.exceptions.Timeout("slow"))

    with pytest.raises(APIConnectionError):
        client.list_invoices()


def test_update_invoice_sends_put(client, fake_session):
    fake_session.queue(FakeResponse(200, {"ok": True}))
    update = InvoiceHeaderUpdate(
        invoice_number="INV-0042",
        order_date="2024-03-01",
        customer_name="Acme Corp",
        status="Paid",
        sub_total=150.0,
        tax_amount=15.0,
        total_amount=165.0,
    )

    client.update_invoice(42, update)

    call = fake_session.calls[0]
    assert call["method"] == "PUT"
    assert call["url"] == "http://api.test/api/invoices/42"
    assert call["json"]["status"] == "Paid"
    assert call["json"]["totalAmount"] == 165.0


def test_update_item_sends_put_to_item_path(client, fake_session):
    fake_session.queue(FakeResponse(204))
    update = InvoiceItemUpdate(
        detail_id=3,
        product_name="Widget",
        product_description="",
        quantity=1,
        unit_price=1.0,
        line_total=1.0,
    )

    client.update_item(42, update)

    call = fake_session.calls[0]
    assert call["url"] == "http://api.test/api/invoices/42/items/3"
    assert "detail_id" not in call["json"]


def test_delete_invoice(client, fake_session):
    fake_session.queue(FakeResponse(200, {"deleted": True}))

    client.delete_invoice(7)

    assert fake_session.calls[0]["method"] == "DELETE"
    assert fake_session.calls[0]["url"] == "http://api.test/api/invoices/7"


def test_error_message_from_ignores_non_dict_bodies():
    assert error_message_from(FakeResponse(500, ["boom"]), "Fallback") == "Fallback"
    assert error_message_from(FakeResponse(500, {"error": ""}), "Fallback") == "Fallback"
    assert error_message_from(FakeResponse(500, {"error": "Nope"}), "Fallback") == "Nope"
