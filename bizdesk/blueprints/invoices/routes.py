"""
Invoice routes.

- list (search by customer name / invoice number / id)
- detail
- status: direct edit to active / paid / cancelled
- download: PDF stub
"""

from __future__ import annotations

import logging

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from flask_login import login_required

from ...context import current_context
from ...errors import BizdeskError
from ...invoicing import invoice_document, set_invoice_status
from ...models import INVOICE_STATUSES
from ...utils import filter_invoices
from .. import flash_error

logger = logging.getLogger(__name__)

invoices_bp = Blueprint("invoices", __name__, url_prefix="/invoices")


@invoices_bp.route("/")
@login_required
def list_invoices():
    ctx = current_context()
    term = (request.args.get("q") or "").strip()
    customers = ctx.store.index("customers")

    invoices = filter_invoices(ctx.store.snapshot("invoices"), term, customers)
    invoices.sort(key=lambda inv: inv["created_at"], reverse=True)

    return render_template("invoices/list.html", invoices=invoices, customers=customers, q=term)


@invoices_bp.route("/<int:invoice_id>")
@login_required
def detail(invoice_id: int):
    ctx = current_context()
    invoice = ctx.store.get("invoices", invoice_id)
    if invoice is None:
        abort(404)

    return render_template(
        "invoices/detail.html",
        invoice=invoice,
        customer=ctx.store.get("customers", invoice["customer_id"]),
        statuses=INVOICE_STATUSES,
    )


@invoices_bp.route("/<int:invoice_id>/status", methods=["POST"])
@login_required
def status(invoice_id: int):
    new_status = (request.form.get("status") or "").strip()
    try:
        set_invoice_status(current_context(), invoice_id, new_status)
    except BizdeskError as exc:
        flash_error(exc)
    else:
        flash(f"Invoice marked as {new_status}.", "success")
    return redirect(url_for("invoices.detail", invoice_id=invoice_id))


@invoices_bp.route("/<int:invoice_id>/download")
@login_required
def download(invoice_id: int):
    invoice = current_context().store.get("invoices", invoice_id)
    if invoice is None:
        abort(404)

    try:
        invoice_document(invoice)
    except NotImplementedError as exc:
        logger.info("PDF requested for invoice %s: %s", invoice_id, exc)
        flash(
            f"Invoice {invoice['invoice_number']} would be downloaded as PDF in a production environment.",
            "info",
        )
    return redirect(url_for("invoices.detail", invoice_id=invoice_id))
