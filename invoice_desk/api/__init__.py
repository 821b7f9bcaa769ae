"""API module for talking to the invoice extraction backend."""

from .client import (
    APIClientError,
    APIConnectionError,
    APIResponseError,
    InvoiceAPIClient,
)

__all__ = [
    "APIClientError",
    "APIConnectionError",
    "APIResponseError",
    "InvoiceAPIClient",
]
