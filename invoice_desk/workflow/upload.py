"""
Upload workflow: client-side checks and submission of one document.

Handles:
- Content type resolution from the browser type or the file extension
- Rejection of unsupported, empty or undecodable files before any request
- Advisory size warnings (the server enforces the real limit)
- Image preview thumbnails
"""

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from invoice_desk.api.client import APIClientError, InvoiceAPIClient
from invoice_desk.config import UploadConfig

logger = logging.getLogger(__name__)

UPLOAD_FAILED = "Upload failed"
UPLOAD_SUCCEEDED = "Invoice uploaded and processed successfully!"


class UploadRejected(Exception):
    """The file was refused before anything was sent."""
    pass


@dataclass
class UploadCandidate:
    """A single file picked or dropped by the user."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()


@dataclass
class UploadCheck:
    """Result of a passed client-side check."""
    content_type: str
    warnings: list[str] = field(default_factory=list)


@dataclass
class UploadOutcome:
    """Result of one upload attempt."""
    success: bool
    message: str
    response: Optional[dict] = None
    warnings: list[str] = field(default_factory=list)
    request_sent: bool = False


def describe_accepted_types(config: UploadConfig) -> str:
    labels = {
        ".pdf": "PDF",
        ".png": "PNG",
        ".jpg": "JPG",
        ".webp": "WebP",
        ".txt": "TXT",
    }
    names = [labels[ext] for ext in config.accepted_extensions if ext in labels]
    if len(names) > 1:
        return f"{', '.join(names[:-1])}, or {names[-1]}"
    return "".join(names)


def resolve_content_type(candidate: UploadCandidate, config: UploadConfig) -> Optional[str]:
    """Return an accepted content type for the candidate, or None."""
    content_type = (candidate.content_type or "").split(";")[0].strip().lower()
    if content_type in config.accepted_types:
        return content_type

    for accepted, extensions in config.accepted_types.items():
        if candidate.extension in extensions:
            # Browsers report octet-stream for some files; trust the extension then
            if not content_type or content_type == "application/octet-stream":
                return accepted
    return None


def validate_upload(candidate: UploadCandidate, config: UploadConfig) -> UploadCheck:
    """
    Check a file before it is sent.

    Raises:
        UploadRejected: unsupported type, empty file, or undecodable image
    """
    content_type = resolve_content_type(candidate, config)
    if content_type is None:
        raise UploadRejected(
            f"Unsupported file type. Supports {describe_accepted_types(config)}"
        )

    if candidate.size == 0:
        raise UploadRejected("The selected file is empty")

    if content_type.startswith("image/"):
        try:
            with Image.open(BytesIO(candidate.content)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logger.info(f"Rejected {candidate.filename}: not a readable image ({e})")
            raise UploadRejected("The selected file is not a valid image") from e

    warnings = []
    if candidate.size > config.max_file_size_bytes:
        warnings.append(
            f"File is {candidate.size / (1024 * 1024):.1f}MB; the server may reject files "
            f"over {config.max_file_size_mb}MB"
        )

    return UploadCheck(content_type=content_type, warnings=warnings)


def submit_upload(
    client: InvoiceAPIClient,
    candidate: UploadCandidate,
    config: UploadConfig,
) -> UploadOutcome:
    """
    Validate and upload one document.

    No retry is attempted; on failure the user resubmits manually.
    """
    try:
        check = validate_upload(candidate, config)
    except UploadRejected as e:
        return UploadOutcome(success=False, message=str(e))

    for warning in check.warnings:
        logger.warning(f"{candidate.filename}: {warning}")

    try:
        response = client.upload_document(
            candidate.filename,
            candidate.content,
            check.content_type,
        )
    except APIClientError as e:
        logger.error(f"Upload of {candidate.filename} failed: {e}")
        return UploadOutcome(
            success=False,
            message=str(e) or UPLOAD_FAILED,
            warnings=check.warnings,
            request_sent=True,
        )

    return UploadOutcome(
        success=True,
        message=UPLOAD_SUCCEEDED,
        response=response,
        warnings=check.warnings,
        request_sent=True,
    )


def build_preview(content: bytes, max_size: tuple[int, int] = (480, 640)) -> Optional[Image.Image]:
    """Return a thumbnail of an image upload, or None if it cannot be decoded."""
    try:
        img = Image.open(BytesIO(content))
        img.load()
    except (UnidentifiedImageError, OSError):
        return None

    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    img.thumbnail(max_size)
    return img
