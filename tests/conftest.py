import os
import sys
from typing import Any, Optional

import pytest

# Ensure the package is importable when running tests from repo root
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from invoice_desk.api.client import InvoiceAPIClient
from invoice_desk.config import ApiConfig


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ("" if body is None else str(body))

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("Expecting value")
        return self._body


class FakeSession:
    """Records requests and replays queued responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


INVOICE_42 = {
    "SalesOrderID": 42,
    "InvoiceNumber": "INV-0042",
    "OrderDate": "2024-03-01T00:00:00",
    "DueDate": "2024-03-31T00:00:00",
    "CustomerName": "Acme Corp",
    "CustomerAddress": "1 Main St",
    "SubTotal": 150.0,
    "TaxAmount": 15.0,
    "TotalAmount": 165.0,
    "Status": "Pending",
    "CreatedAt": "2024-03-01T10:00:00",
    "items": [
        {
            "SalesOrderDetailID": 1,
            "ProductName": "Widget",
            "ProductDescription": "Blue widget",
            "Quantity": 2,
            "UnitPrice": 50.0,
            "LineTotal": 100.0,
        },
        {
            "SalesOrderDetailID": 2,
            "ProductName": "Gadget",
            "ProductDescription": None,
            "Quantity": 1,
            "UnitPrice": 50.0,
            "LineTotal": 50.0,
        },
    ],
}

INVOICE_7 = {
    "SalesOrderID": 7,
    "InvoiceNumber": "",
    "OrderDate": "2024-01-15T00:00:00",
    "DueDate": None,
    "CustomerName": "Globex",
    "TotalAmount": 99.5,
    "Status": "Paid",
    "CreatedAt": "2024-01-15T09:00:00",
}


@pytest.fixture
def api_config():
    return ApiConfig(base_url="http://api.test", timeout=5, upload_timeout=60, verify_ssl=True)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(api_config, fake_session):
    return InvoiceAPIClient(config=api_config, session=fake_session)


@pytest.fixture
def invoice_42_data():
    return {**INVOICE_42, "items": [dict(item) for item in INVOICE_42["items"]]}


@pytest.fixture
def invoice_7_data():
    return dict(INVOICE_7)
