"""Workflow module: framework-free logic behind the upload, list and detail panels."""

from .editing import DetailMode, EditSession, SaveResult, SaveStatus, save_invoice_changes
from .listing import DeleteOutcome, DeleteTracker
from .store import InvoiceStore, PageState
from .upload import UploadCandidate, UploadOutcome, UploadRejected, submit_upload, validate_upload

__all__ = [
    "DeleteOutcome",
    "DeleteTracker",
    "DetailMode",
    "EditSession",
    "InvoiceStore",
    "PageState",
    "SaveResult",
    "SaveStatus",
    "UploadCandidate",
    "UploadOutcome",
    "UploadRejected",
    "save_invoice_changes",
    "submit_upload",
    "validate_upload",
]
