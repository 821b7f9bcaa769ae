"""Invoice list panel: selection, confirmed deletion and bulk export."""

import logging

import streamlit as st

from invoice_desk.api.client import InvoiceAPIClient
from invoice_desk.export import (
    CSV_MIME_TYPE,
    EXCEL_MIME_TYPE,
    export_rows_to_csv,
    export_rows_to_excel,
)
from invoice_desk.formatting import format_currency, format_date, status_badge
from invoice_desk.models.invoice import SUMMARY_EXPORT_COLUMNS, Invoice, invoice_summary_rows
from invoice_desk.workflow.listing import DeleteTracker
from invoice_desk.workflow.store import PageState

logger = logging.getLogger(__name__)


def _get_tracker() -> DeleteTracker:
    if "delete_tracker" not in st.session_state:
        st.session_state.delete_tracker = DeleteTracker()
    return st.session_state.delete_tracker


@st.dialog("Delete Invoice", dismissible=False)
def _confirm_delete_dialog(tracker: DeleteTracker, invoice: Invoice):
    st.write(
        f"Are you sure you want to delete invoice {invoice.display_label}? "
        "This action cannot be undone."
    )

    cancel_col, delete_col = st.columns(2)
    if cancel_col.button("Cancel", key="delete_cancel", use_container_width=True):
        tracker.cancel()
        st.rerun()

    if delete_col.button("Delete", key="delete_confirm", type="primary", use_container_width=True):
        tracker.confirm()
        st.rerun()


def _perform_delete(page: PageState, client: InvoiceAPIClient, tracker: DeleteTracker):
    """Send the confirmed deletion; its row was rendered busy beforehand."""
    with st.spinner("Deleting invoice..."):
        outcome = tracker.perform(client)
        # Hooks run before the next element call; a queued rerun interrupts there
        if outcome.success:
            page.after_delete(outcome.invoice_id)
        else:
            page.push_alert(outcome.message)
    st.rerun()


def _render_export_buttons(invoices: list[Invoice]):
    rows = invoice_summary_rows(invoices)
    csv_col, excel_col = st.columns(2)
    csv_col.download_button(
        "⬇️ Export CSV",
        data=export_rows_to_csv(rows, columns=SUMMARY_EXPORT_COLUMNS),
        file_name="invoices.csv",
        mime=CSV_MIME_TYPE,
        use_container_width=True,
    )
    excel_col.download_button(
        "⬇️ Export Excel",
        data=export_rows_to_excel(rows, columns=SUMMARY_EXPORT_COLUMNS, sheet_title="Invoices"),
        file_name="invoices.xlsx",
        mime=EXCEL_MIME_TYPE,
        use_container_width=True,
    )


def _render_row(page: PageState, tracker: DeleteTracker, invoice: Invoice):
    is_selected = page.selected_id == invoice.order_id
    busy = tracker.is_busy(invoice.order_id)

    with st.container(border=True):
        info_col, amount_col, open_col, delete_col = st.columns([5, 2, 1, 1])

        with info_col:
            marker = "▶ " if is_selected else ""
            st.markdown(f"{marker}**{invoice.display_label}** &nbsp; {status_badge(invoice.status)}")
            st.caption(f"{invoice.customer_name} · {format_date(invoice.order_date)}")

        amount_col.markdown(f"**{format_currency(invoice.total_amount)}**")

        if open_col.button(
            "Open",
            key=f"open_invoice_{invoice.order_id}",
            type="primary" if is_selected else "secondary",
        ):
            page.select(invoice)
            st.rerun()

        if delete_col.button(
            "⏳" if busy else "🗑️",
            key=f"delete_invoice_{invoice.order_id}",
            disabled=busy,
            help="Delete invoice",
        ):
            tracker.request(invoice.order_id)
            st.rerun()


def render_invoice_list(
    page: PageState,
    client: InvoiceAPIClient,
    invoices: list[Invoice],
    loading: bool = False,
):
    """Render invoices in server order."""
    tracker = _get_tracker()

    if loading and not invoices:
        st.header("🧾 Invoices")
        st.info("Loading invoices...")
        return

    st.header(f"🧾 Invoices ({len(invoices)})")

    if not invoices:
        st.info("No invoices yet. Upload your first invoice to get started.")
    else:
        _render_export_buttons(invoices)
        for invoice in invoices:
            _render_row(page, tracker, invoice)

    pending = next((invoice for invoice in invoices if invoice.order_id == tracker.pending_id), None)
    if pending is not None:
        _confirm_delete_dialog(tracker, pending)
    elif tracker.pending_id is not None:
        # The row is gone from the list
        tracker.cancel()

    if tracker.deleting_id is not None:
        _perform_delete(page, client, tracker)
