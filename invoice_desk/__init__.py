"""
Invoice Desk - Browser front-end for invoice document extraction.

This package provides functionality for:
- Uploading invoice documents to the extraction API
- Browsing, editing and deleting extracted invoices
- CSV and Excel export of invoices and line items
"""

__version__ = "0.1.0"
__author__ = "Invoice Desk"
