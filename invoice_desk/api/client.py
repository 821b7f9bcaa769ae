"""
REST client for the invoice extraction API.

Wraps the CRUD endpoints consumed by the UI:

- GET    /api/invoices
- GET    /api/invoices/{id}
- POST   /api/upload
- PUT    /api/invoices/{id}
- PUT    /api/invoices/{id}/items/{itemId}
- DELETE /api/invoices/{id}

Transport failures, non-2xx responses and malformed bodies are all
raised as APIClientError subclasses carrying a user-facing message.
Nothing is retried.
"""

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from invoice_desk.config import ApiConfig, get_config
from invoice_desk.models.invoice import (
    Invoice,
    InvoiceHeaderUpdate,
    InvoiceItemUpdate,
)

logger = logging.getLogger(__name__)


class APIClientError(Exception):
    """Base exception for API client errors."""
    pass


class APIConnectionError(APIClientError):
    """Error reaching the API server."""
    pass


class APIResponseError(APIClientError):
    """Non-2xx status or unreadable response body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def error_message_from(response: requests.Response, fallback: str) -> str:
    """Return the `error` field of a JSON error body, or the fallback."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


class InvoiceAPIClient:
    """Client for the invoice extraction REST API."""

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or get_config().api
        self.session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    def _request(
        self,
        method: str,
        path: str,
        fallback_message: str,
        timeout: Optional[int] = None,
        **kwargs,
    ) -> requests.Response:
        url = f"{self.config.api_root}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                timeout=timeout or self.config.timeout,
                verify=self.config.verify_ssl,
                **kwargs,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"{method} {url} timed out: {e}")
            raise APIConnectionError(fallback_message) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise APIConnectionError(fallback_message) from e

        if not response.ok:
            message = error_message_from(response, fallback_message)
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise APIResponseError(message, status_code=response.status_code)

        return response

    @staticmethod
    def _json(response: requests.Response, fallback_message: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise APIResponseError(fallback_message, status_code=response.status_code) from e

    def list_invoices(self) -> list[Invoice]:
        """Fetch invoice summaries in server order."""
        fallback = "Failed to fetch invoices"
        data = self._json(self._request("GET", "/invoices", fallback), fallback)
        if not isinstance(data, list):
            raise APIResponseError(fallback)
        try:
            return [Invoice.model_validate(entry) for entry in data]
        except ValidationError as e:
            logger.warning(f"Malformed invoice list: {e}")
            raise APIResponseError(fallback) from e

    def get_invoice(self, invoice_id: int) -> Invoice:
        """Fetch one invoice including its line items."""
        fallback = "Failed to fetch invoice"
        data = self._json(self._request("GET", f"/invoices/{invoice_id}", fallback), fallback)
        try:
            return Invoice.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Malformed invoice {invoice_id}: {e}")
            raise APIResponseError(fallback) from e

    def upload_document(
        self,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> dict:
        """Upload a document for extraction as multipart form data (field `file`)."""
        fallback = "Upload failed"
        response = self._request(
            "POST",
            "/upload",
            fallback,
            timeout=self.config.upload_timeout,
            files={"file": (filename, content, content_type)},
        )
        data = self._json(response, fallback)
        logger.info(f"Uploaded {filename} ({len(content):,} bytes)")
        return data if isinstance(data, dict) else {"result": data}

    def update_invoice(self, invoice_id: int, update: InvoiceHeaderUpdate) -> None:
        """Replace all header fields of an invoice."""
        self._request(
            "PUT",
            f"/invoices/{invoice_id}",
            "Update failed",
            json=update.to_payload(),
        )
        logger.info(f"Updated invoice {invoice_id}")

    def update_item(self, invoice_id: int, update: InvoiceItemUpdate) -> None:
        """Replace all fields of one line item."""
        self._request(
            "PUT",
            f"/invoices/{invoice_id}/items/{update.detail_id}",
            "Item update failed",
            json=update.to_payload(),
        )
        logger.info(f"Updated item {update.detail_id} of invoice {invoice_id}")

    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice; the server removes its items."""
        self._request("DELETE", f"/invoices/{invoice_id}", "Delete failed")
        logger.info(f"Deleted invoice {invoice_id}")
