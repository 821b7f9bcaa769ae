"""Invoice detail panel: read view, edit form, save and per-invoice export."""

import logging
from typing import Any

import streamlit as st

from invoice_desk.api.client import InvoiceAPIClient
from invoice_desk.export import (
    CSV_MIME_TYPE,
    EXCEL_MIME_TYPE,
    export_rows_to_csv,
    export_rows_to_excel,
)
from invoice_desk.formatting import format_currency, format_date, parse_date, status_badge
from invoice_desk.models.invoice import ITEM_EXPORT_COLUMNS, Invoice, InvoiceStatus
from invoice_desk.workflow.editing import (
    SAVE_FAILED,
    DetailMode,
    EditSession,
    save_invoice_changes,
)
from invoice_desk.workflow.store import PageState

logger = logging.getLogger(__name__)


def _get_session(invoice: Invoice) -> EditSession:
    """Session for the shown invoice; switching invoices drops unsaved edits."""
    session = st.session_state.get("edit_session")
    if session is None or not session.matches(invoice):
        session = EditSession(invoice)
        st.session_state.edit_session = session
    session.sync(invoice)
    return session


def _differs(old: Any, new: Any) -> bool:
    # Text inputs turn None into ""
    return (old if old is not None else "") != (new if new is not None else "")


def _render_export_menu(invoice: Invoice):
    rows = invoice.item_export_rows()
    base_name = f"invoice-{invoice.invoice_number or invoice.order_id}-items"

    with st.popover("⬇️ Export", use_container_width=True):
        st.download_button(
            "Export Items to CSV",
            data=export_rows_to_csv(rows, columns=ITEM_EXPORT_COLUMNS),
            file_name=f"{base_name}.csv",
            mime=CSV_MIME_TYPE,
            use_container_width=True,
        )
        st.download_button(
            "Export Items to Excel",
            data=export_rows_to_excel(rows, columns=ITEM_EXPORT_COLUMNS, sheet_title="Line Items"),
            file_name=f"{base_name}.xlsx",
            mime=EXCEL_MIME_TYPE,
            use_container_width=True,
        )


def _render_read_view(invoice: Invoice, session: EditSession):
    form = session.form

    col1, col2 = st.columns(2)
    with col1:
        st.caption("INVOICE NUMBER")
        st.markdown(f"`{form.invoice_number or 'N/A'}`")
        st.caption("CUSTOMER NAME")
        st.markdown(form.customer_name or "—")
        st.caption("DUE DATE")
        st.markdown(format_date(form.due_date) or "—")
    with col2:
        st.caption("ORDER DATE")
        st.markdown(format_date(form.order_date) or "—")
        st.caption("STATUS")
        st.markdown(status_badge(form.status))
        st.caption("ADDRESS")
        st.markdown(form.customer_address or "—")

    st.subheader("Line Items")
    items = invoice.items or []
    if not items:
        st.caption("No line items")
    for item in items:
        with st.container(border=True):
            st.markdown(f"**{item.product_name}**")
            if item.product_description:
                st.caption(item.product_description)
            st.markdown(
                f"{item.quantity} × {format_currency(item.unit_price)} = "
                f"**{format_currency(item.line_total)}**"
            )

    st.divider()
    amounts = [
        ("Subtotal", invoice.sub_total),
        ("Tax", invoice.tax_amount),
        ("Total", invoice.total_amount),
    ]
    for label, amount in amounts:
        st.markdown(f"{label}: **{format_currency(amount)}**")
    if items:
        st.caption(f"Items total: {format_currency(invoice.items_total)}")


def _apply_item_edit(session: EditSession, invoice: Invoice, item_id: int, field_name: str, value: Any):
    if not _differs(session.item_value(invoice, item_id, field_name), value):
        return
    try:
        session.update_item(item_id, field_name, value)
    except ValueError as e:
        st.warning(str(e))


def _render_edit_form(invoice: Invoice, session: EditSession):
    """Edit widgets; while saving they render disabled and edits are not applied."""
    form = session.form
    locked = session.mode == DetailMode.SAVING

    def key(name: str) -> str:
        return f"detail_{invoice.order_id}_{session.generation}_{name}"

    statuses = InvoiceStatus.values()
    if form.status not in statuses:
        # Keep a server-side status selectable until the user picks another
        statuses = [form.status] + statuses

    col1, col2 = st.columns(2)
    with col1:
        invoice_number = st.text_input(
            "Invoice Number", value=form.invoice_number, key=key("invoice_number"), disabled=locked
        )
        customer_name = st.text_input(
            "Customer Name", value=form.customer_name, key=key("customer_name"), disabled=locked
        )
        due_date = st.date_input(
            "Due Date",
            value=parse_date(form.due_date),
            format="YYYY-MM-DD",
            key=key("due_date"),
            disabled=locked,
        )
    with col2:
        order_date = st.date_input(
            "Order Date",
            value=parse_date(form.order_date),
            format="YYYY-MM-DD",
            key=key("order_date"),
            disabled=locked,
        )
        status = st.selectbox(
            "Status",
            options=statuses,
            index=statuses.index(form.status),
            key=key("status"),
            disabled=locked,
        )
    customer_address = st.text_area(
        "Customer Address",
        value=form.customer_address,
        height=80,
        key=key("customer_address"),
        disabled=locked,
    )

    if not locked:
        changes = {
            "invoice_number": invoice_number,
            "customer_name": customer_name,
            "customer_address": customer_address,
            "order_date": order_date.isoformat() if order_date else "",
            "due_date": due_date.isoformat() if due_date else "",
        }
        changes = {name: value for name, value in changes.items() if _differs(getattr(form, name), value)}
        if status != form.status:
            changes["status"] = status
        if changes:
            session.update_header(**changes)

    st.subheader("Line Items")
    for item in invoice.items or []:
        item_id = item.detail_id

        def item_key(name: str) -> str:
            return key(f"item_{item_id}_{name}")

        with st.container(border=True):
            values = {
                "product_name": st.text_input(
                    "Product Name",
                    value=session.item_value(invoice, item_id, "product_name") or "",
                    key=item_key("product_name"),
                    disabled=locked,
                ),
                "product_description": st.text_input(
                    "Description",
                    value=session.item_value(invoice, item_id, "product_description") or "",
                    key=item_key("product_description"),
                    disabled=locked,
                ),
            }
            qty_col, price_col, total_col = st.columns(3)
            values["quantity"] = qty_col.number_input(
                "Qty",
                # Credit lines may arrive negative; new values are checked on update
                min_value=min(0, item.quantity),
                step=1,
                value=int(session.item_value(invoice, item_id, "quantity") or 0),
                key=item_key("quantity"),
                disabled=locked,
            )
            values["unit_price"] = price_col.number_input(
                "Unit Price",
                step=0.01,
                format="%.2f",
                value=float(session.item_value(invoice, item_id, "unit_price") or 0.0),
                key=item_key("unit_price"),
                disabled=locked,
            )
            values["line_total"] = total_col.number_input(
                "Line Total",
                step=0.01,
                format="%.2f",
                value=float(session.item_value(invoice, item_id, "line_total") or 0.0),
                key=item_key("line_total"),
                disabled=locked,
            )

        if not locked:
            for field_name, value in values.items():
                _apply_item_edit(session, invoice, item_id, field_name, value)


def _save(page: PageState, client: InvoiceAPIClient, invoice: Invoice, session: EditSession):
    """Run the save batch; the form was rendered locked beforehand."""
    with st.spinner("Saving changes..."):
        result = save_invoice_changes(client, invoice, session)
        # Hooks run before the next element call; a queued rerun interrupts there
        if result.wrote_anything:
            page.after_update()
    st.rerun()


def render_invoice_detail(page: PageState, client: InvoiceAPIClient, invoice: Invoice):
    """Render the detail panel for one invoice."""
    session = _get_session(invoice)

    title_col, export_col, close_col = st.columns([4, 2, 1])
    title_col.header("Invoice Details")
    with export_col:
        _render_export_menu(invoice)
    if close_col.button("✖", key="close_detail", help="Close"):
        page.close()
        st.rerun()

    if not session.is_editing:
        _render_read_view(invoice, session)
        if st.button("✏️ Edit", key="edit_invoice", use_container_width=True):
            session.begin_edit(invoice)
            st.rerun()
        return

    if session.last_result is not None and not session.last_result.ok:
        st.error(SAVE_FAILED)

    _render_edit_form(invoice, session)

    saving = session.mode == DetailMode.SAVING
    save_col, cancel_col = st.columns(2)
    if save_col.button(
        "⏳ Saving..." if saving else "💾 Save Changes",
        key="save_invoice",
        type="primary",
        disabled=saving,
        use_container_width=True,
    ):
        session.begin_save()
        st.rerun()
    if cancel_col.button("Cancel", key="cancel_edit", disabled=saving, use_container_width=True):
        session.cancel(invoice)
        st.rerun()

    if saving:
        _save(page, client, invoice, session)
