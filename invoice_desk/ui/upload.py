"""Upload panel: one document per submission, in a dropzone or compact style."""

import logging
import time
from typing import Optional

import streamlit as st

from invoice_desk.api.client import InvoiceAPIClient
from invoice_desk.config import AppConfig, UploadStyle
from invoice_desk.workflow.store import PageState
from invoice_desk.workflow.upload import (
    UploadCandidate,
    build_preview,
    describe_accepted_types,
    submit_upload,
)

logger = logging.getLogger(__name__)


def _init_upload_state():
    if "upload_widget_key" not in st.session_state:
        st.session_state.upload_widget_key = 0
    if "upload_handled_id" not in st.session_state:
        st.session_state.upload_handled_id = None
    if "upload_error" not in st.session_state:
        st.session_state.upload_error = None
    if "upload_pending" not in st.session_state:
        st.session_state.upload_pending = None


def _file_token(uploaded_file) -> str:
    return getattr(uploaded_file, "file_id", None) or f"{uploaded_file.name}:{uploaded_file.size}"


def _queue_upload(uploaded_file):
    """Hold the picked file and rerun so the panel renders disabled before sending."""
    st.session_state.upload_handled_id = _file_token(uploaded_file)
    st.session_state.upload_error = None
    st.session_state.upload_pending = UploadCandidate(
        filename=uploaded_file.name,
        content=uploaded_file.getvalue(),
        content_type=uploaded_file.type,
    )
    st.rerun()


def _send_pending_upload(page: PageState, client: InvoiceAPIClient, config: AppConfig):
    """Submit the held file and report the outcome."""
    candidate = st.session_state.upload_pending

    with st.spinner("Processing document... Please wait while we analyze your file"):
        outcome = submit_upload(client, candidate, config.upload)
        # Settle state before the next element call; a queued rerun interrupts there
        st.session_state.upload_pending = None
        if outcome.success:
            page.after_upload()
            # A new widget key clears the picked file
            st.session_state.upload_widget_key += 1
        else:
            st.session_state.upload_error = outcome.message

    if not outcome.success:
        st.rerun()

    for warning in outcome.warnings:
        st.warning(warning)
    st.success(outcome.message, icon="✅")
    time.sleep(config.upload.success_delay_seconds)
    st.rerun()


def render_upload_section(
    page: PageState,
    client: InvoiceAPIClient,
    config: AppConfig,
    style: Optional[UploadStyle] = None,
):
    """Render the file upload section."""
    _init_upload_state()
    style = style or config.upload_style
    busy = st.session_state.upload_pending is not None

    st.header("📄 Upload Invoice")

    accepted = describe_accepted_types(config.upload)
    help_text = f"Supports {accepted} (Max {config.upload.max_file_size_mb}MB)"
    uploader_key = f"invoice_upload_{st.session_state.upload_widget_key}"
    extensions = [ext.lstrip(".") for ext in config.upload.accepted_extensions]

    if style == UploadStyle.DROPZONE:
        uploaded_file = st.file_uploader(
            "Click to upload or drag and drop",
            type=extensions,
            accept_multiple_files=False,
            key=uploader_key,
            help=help_text,
            disabled=busy,
        )
        st.caption(help_text)

        if (
            uploaded_file
            and not busy
            and _file_token(uploaded_file) != st.session_state.upload_handled_id
        ):
            _queue_upload(uploaded_file)
    else:
        uploaded_file = st.file_uploader(
            "Choose an invoice file",
            type=extensions,
            accept_multiple_files=False,
            key=uploader_key,
            help=help_text,
            label_visibility="collapsed",
            disabled=busy,
        )

        if uploaded_file and (uploaded_file.type or "").startswith("image/"):
            preview = build_preview(uploaded_file.getvalue())
            if preview is not None:
                st.image(preview, caption=uploaded_file.name)

        if st.button(
            "⬆️ Upload",
            key="upload_submit",
            type="primary",
            disabled=uploaded_file is None or busy,
            use_container_width=True,
        ):
            _queue_upload(uploaded_file)

    if busy:
        _send_pending_upload(page, client, config)

    if st.session_state.upload_error:
        st.error(st.session_state.upload_error)
