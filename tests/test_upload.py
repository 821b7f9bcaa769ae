from io import BytesIO

import pytest
from PIL import Image

from invoice_desk.api.client import APIConnectionError, APIResponseError
from invoice_desk.config import UploadConfig
from invoice_desk.workflow.upload import (
    UPLOAD_FAILED,
    UploadCandidate,
    UploadRejected,
    build_preview,
    describe_accepted_types,
    resolve_content_type,
    submit_upload,
    validate_upload,
)


class RecordingClient:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else {"SalesOrderID": 1}
        self.error = error
        self.uploads = []

    def upload_document(self, filename, content, content_type):
        self.uploads.append((filename, content, content_type))
        if self.error:
            raise self.error
        return self.result


def _png_bytes(size=(40, 20)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color="white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def upload_config():
    return UploadConfig()


def test_describe_accepted_types(upload_config):
    assert describe_accepted_types(upload_config) == "PDF, PNG, JPG, WebP, or TXT"


def test_resolve_content_type_prefers_browser_type(upload_config):
    candidate = UploadCandidate("scan.bin", b"x", "application/pdf")
    assert resolve_content_type(candidate, upload_config) == "application/pdf"


def test_resolve_content_type_falls_back_to_extension(upload_config):
    candidate = UploadCandidate("Invoice.JPEG", b"x", "application/octet-stream")
    assert resolve_content_type(candidate, upload_config) == "image/jpeg"

    missing = UploadCandidate("notes.txt", b"x", None)
    assert resolve_content_type(missing, upload_config) == "text/plain"


def test_unsupported_type_is_rejected_before_any_request(upload_config):
    client = RecordingClient()
    candidate = UploadCandidate("report.docx", b"PK\x03\x04", "application/msword")

    outcome = submit_upload(client, candidate, upload_config)

    assert not outcome.success
    assert outcome.request_sent is False
    assert "Unsupported file type" in outcome.message
    assert client.uploads == []


def test_empty_file_is_rejected(upload_config):
    with pytest.raises(UploadRejected):
        validate_upload(UploadCandidate("invoice.pdf", b"", "application/pdf"), upload_config)


def test_corrupt_image_is_rejected(upload_config):
    with pytest.raises(UploadRejected):
        validate_upload(UploadCandidate("scan.png", b"not really a png", "image/png"), upload_config)


def test_valid_image_passes(upload_config):
    check = validate_upload(UploadCandidate("scan.png", _png_bytes(), "image/png"), upload_config)

    assert check.content_type == "image/png"
    assert check.warnings == []


def test_size_limit_is_advisory():
    config = UploadConfig(max_file_size_mb=0)
    client = RecordingClient()

    outcome = submit_upload(client, UploadCandidate("invoice.pdf", b"%PDF-1.4", "application/pdf"), config)

    assert outcome.success
    assert len(outcome.warnings) == 1
    assert len(client.uploads) == 1


def test_successful_upload(upload_config):
    client = RecordingClient(result={"SalesOrderID": 99})

    outcome = submit_upload(client, UploadCandidate("invoice.pdf", b"%PDF-1.4", "application/pdf"), upload_config)

    assert outcome.success
    assert outcome.request_sent
    assert outcome.response == {"SalesOrderID": 99}
    assert client.uploads == [("invoice.pdf", b"%PDF-1.4", "application/pdf")]


def test_server_error_message_is_shown(upload_config):
    client = RecordingClient(error=APIResponseError("File too large", status_code=413))

    outcome = submit_upload(client, UploadCandidate("invoice.pdf", b"%PDF", "application/pdf"), upload_config)

    assert not outcome.success
    assert outcome.message == "File too large"
    assert len(client.uploads) == 1


def test_connection_error_uses_fallback(upload_config):
    client = RecordingClient(error=APIConnectionError(""))

    outcome = submit_upload(client, UploadCandidate("invoice.txt", b"total 10", "text/plain"), upload_config)

    assert not outcome.success
    assert outcome.message == UPLOAD_FAILED


def test_build_preview_thumbnails_images():
    preview = build_preview(_png_bytes(size=(2000, 1000)), max_size=(200, 200))

    assert preview is not None
    assert max(preview.size) <= 200


def test_build_preview_returns_none_for_non_images():
    assert build_preview(b"%PDF-1.4") is None
