"""
Invoice Desk - Main Streamlit UI

Browser front-end for the invoice extraction API.

Features:
- Document upload (PDF, images, text)
- Invoice list with delete confirmation
- Editable invoice header and line items
- CSV and Excel export
"""

import logging
import sys
from pathlib import Path

import streamlit as st

# Add package directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from invoice_desk.api.client import InvoiceAPIClient
from invoice_desk.config import (
    UploadStyle,
    get_config,
    session_config,
    validate_system_requirements,
)
from invoice_desk.ui.invoice_detail import render_invoice_detail
from invoice_desk.ui.invoice_list import render_invoice_list
from invoice_desk.ui.upload import render_upload_section
from invoice_desk.workflow.store import InvoiceStore, PageState

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _connect():
    """(Re)create the API client and a fresh page state for the configured URL."""
    config = st.session_state.config
    client = InvoiceAPIClient(config.api)
    st.session_state.client = client
    st.session_state.page = PageState(store=InvoiceStore(client))
    st.session_state.pop("edit_session", None)
    logger.info(f"Using invoice API at {config.api.base_url}")


def init_session_state():
    """Initialize Streamlit session state."""
    if "config" not in st.session_state:
        # Sidebar overrides apply to this browser session only
        st.session_state.config = session_config()

    if "client" not in st.session_state or "page" not in st.session_state:
        _connect()

    if "system_validated" not in st.session_state:
        st.session_state.system_validated = False

    if "validation_results" not in st.session_state:
        st.session_state.validation_results = None


def validate_system():
    """Validate system requirements on startup."""
    if not st.session_state.system_validated:
        with st.spinner("Checking API connection..."):
            results = validate_system_requirements(st.session_state.config)
            st.session_state.validation_results = results
            st.session_state.system_validated = True

    return st.session_state.validation_results


def show_validation_status():
    """Display system validation problems."""
    results = st.session_state.validation_results
    if not results:
        return

    if not results["python_deps"]["installed"]:
        st.error(f"⚠️ {results['python_deps']['message']}")

    if not results["api"]["available"]:
        st.warning(f"⚠️ {results['api']['message']}")


def render_sidebar():
    """Render the settings sidebar."""
    config = st.session_state.config

    with st.sidebar:
        st.header("⚙️ Settings")

        st.subheader("API Connection")
        base_url = st.text_input(
            "API URL",
            value=config.api.base_url,
            help="Base URL of the extraction API, e.g. http://localhost:8080",
        )
        if base_url and base_url.rstrip("/") != config.api.base_url.rstrip("/"):
            config.api.base_url = base_url.rstrip("/")
            st.session_state.system_validated = False
            _connect()
            st.rerun()

        results = st.session_state.validation_results or {}
        api = results.get("api", {})
        if api.get("available"):
            st.success(f"✅ {api.get('message', 'API connected')}")
        else:
            st.error("❌ API not reachable")

        if st.button("🔄 Refresh Status"):
            st.session_state.system_validated = False
            st.rerun()

        st.divider()

        st.subheader("Upload Settings")
        style_names = {
            UploadStyle.DROPZONE: "Dropzone (upload on drop)",
            UploadStyle.COMPACT: "Compact (pick, then upload)",
        }
        config.upload_style = st.selectbox(
            "Upload Style",
            options=list(style_names.keys()),
            index=list(style_names.keys()).index(config.upload_style),
            format_func=lambda x: style_names[x],
        )
        st.caption(f"Max file size: {config.upload.max_file_size_mb}MB (checked by the server)")

        st.divider()

        if st.button("🔃 Reload Invoices", use_container_width=True):
            st.session_state.page.store.invalidate_invoices()
            st.rerun()


def main():
    """Main application entry point."""
    config = get_config()
    st.set_page_config(
        page_title=config.page_title,
        page_icon="📄",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    # Initialize
    init_session_state()
    config = st.session_state.config
    client = st.session_state.client
    page = st.session_state.page

    # Header
    st.title(f"📄 {config.page_title}")
    st.markdown(config.page_subtitle)

    # Validate system on first load
    validate_system()
    show_validation_status()

    # Sidebar
    render_sidebar()

    error_slot = st.empty()

    for alert in page.pop_alerts():
        st.error(alert)

    left, right = st.columns([2, 1])

    with left:
        render_upload_section(page, client, config)
        st.divider()

        list_slot = st.empty()
        if page.store.is_list_stale() and not page.store.has_loaded_list:
            with list_slot.container():
                render_invoice_list(page, client, [], loading=True)

        invoices = page.store.invoices()
        with list_slot.container():
            render_invoice_list(page, client, invoices)

    if page.store.error:
        error_slot.error(page.store.error)

    with right:
        invoice = page.display_invoice()
        if invoice is not None:
            render_invoice_detail(page, client, invoice)
        else:
            st.info("Select an invoice to view details")


if __name__ == "__main__":
    main()
