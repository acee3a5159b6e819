"""
Quotation routes.

- list (search by customer name / id / product name)
- new: line items posted as parallel product_id[] / quantity[] lists
- approve / reject
- invoice: generate an invoice (additional items as description[] / amount[])
- delete (any status, invoices are kept)

Line parsing happens here; all business rules live in lifecycle / pricing / invoicing.
"""

from __future__ import annotations

from datetime import date, timedelta

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required

from ...context import current_context
from ...errors import BizdeskError, ConsistencyWarning, ValidationError
from ...invoicing import AdditionalItem, InvoiceMetadata, default_invoice_number
from ...lifecycle import (
    approve_quotation,
    can_generate_invoice,
    create_quotation,
    delete_quotation,
    generate_invoice,
    reject_quotation,
)
from ...models import INVOICE_TYPES
from ...pricing import LineRequest
from ...utils import filter_quotations, parse_date, parse_decimal, parse_optional_int
from .. import flash_error

quotations_bp = Blueprint("quotations", __name__, url_prefix="/quotations")

BLANK_LINE_ROWS = 5


# ---------------------------------------------------------------------
# Form parsing
# ---------------------------------------------------------------------
def _parse_lines(form) -> list[LineRequest]:
    """Rows with neither product nor quantity are ignored (blank form rows)."""
    lines = []
    for raw_product, raw_quantity in zip(form.getlist("product_id"), form.getlist("quantity")):
        raw_product = (raw_product or "").strip()
        raw_quantity = (raw_quantity or "").strip()
        if not raw_product and not raw_quantity:
            continue

        product_id = parse_optional_int(raw_product)
        if product_id is None:
            raise ValidationError("please select a product for each quotation item", field="product_id")

        quantity = parse_optional_int(raw_quantity)
        lines.append(LineRequest(product_id=product_id, quantity=quantity))
    return lines


def _line_rows(form=None) -> list[dict]:
    """Form rows for the line-item table: submitted rows first, then blanks."""
    rows = []
    if form is not None:
        for raw_product, raw_quantity in zip(form.getlist("product_id"), form.getlist("quantity")):
            raw_product = (raw_product or "").strip()
            raw_quantity = (raw_quantity or "").strip()
            if raw_product or raw_quantity:
                rows.append({"product_id": raw_product, "quantity": raw_quantity})
    while len(rows) < BLANK_LINE_ROWS:
        rows.append({"product_id": "", "quantity": ""})
    return rows


def _parse_additional_items(form) -> list[AdditionalItem]:
    items = []
    for raw_description, raw_amount in zip(form.getlist("extra_description"), form.getlist("extra_amount")):
        description = (raw_description or "").strip()
        if not description and not (raw_amount or "").strip():
            continue
        items.append(AdditionalItem(description=description, amount=parse_decimal(raw_amount)))
    return items


def _invoice_defaults() -> dict:
    return {
        "invoice_number": default_invoice_number(),
        "invoice_date": date.today().isoformat(),
        "payment_terms": current_app.config["DEFAULT_PAYMENT_TERMS"],
        "warranty_period": current_app.config["DEFAULT_WARRANTY_PERIOD"],
        "notes": "",
        "type": "customer",
    }


# ---------------------------------------------------------------------
# List
# ---------------------------------------------------------------------
@quotations_bp.route("/")
@login_required
def list_quotations():
    ctx = current_context()
    term = (request.args.get("q") or "").strip()
    customers = ctx.store.index("customers")

    quotations = filter_quotations(ctx.store.snapshot("quotations"), term, customers)
    quotations.sort(key=lambda q: q["created_at"], reverse=True)

    return render_template(
        "quotations/list.html",
        quotations=quotations,
        customers=customers,
        q=term,
        can_generate_invoice=can_generate_invoice,
    )


# ---------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------
@quotations_bp.route("/new", methods=["GET", "POST"])
@login_required
def create():
    ctx = current_context()
    customers = sorted(ctx.store.snapshot("customers"), key=lambda c: c["name"].lower())
    products = sorted(ctx.store.snapshot("products"), key=lambda p: p["name"].lower())
    validity_days = current_app.config["DEFAULT_QUOTATION_VALIDITY_DAYS"]

    if request.method == "POST":
        try:
            quotation_id = create_quotation(
                ctx,
                customer_id=parse_optional_int(request.form.get("customer_id")),
                lines=_parse_lines(request.form),
                valid_until=parse_date(request.form.get("valid_until")),
                notes=request.form.get("notes"),
                validity_days=validity_days,
            )
        except BizdeskError as exc:
            flash_error(exc)
            return render_template(
                "quotations/new.html",
                customers=customers,
                products=products,
                form=request.form,
                rows=_line_rows(request.form),
            )

        flash(f"Quotation #{quotation_id} created successfully.", "success")
        return redirect(url_for("quotations.list_quotations"))

    return render_template(
        "quotations/new.html",
        customers=customers,
        products=products,
        form={"valid_until": (date.today() + timedelta(days=validity_days)).isoformat()},
        rows=_line_rows(),
    )


# ---------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------
@quotations_bp.route("/<int:quotation_id>/approve", methods=["POST"])
@login_required
def approve(quotation_id: int):
    try:
        approve_quotation(current_context(), quotation_id)
    except BizdeskError as exc:
        flash_error(exc)
    else:
        flash(f"Quotation #{quotation_id} approved.", "success")
    return redirect(url_for("quotations.list_quotations"))


@quotations_bp.route("/<int:quotation_id>/reject", methods=["POST"])
@login_required
def reject(quotation_id: int):
    try:
        reject_quotation(current_context(), quotation_id)
    except BizdeskError as exc:
        flash_error(exc)
    else:
        flash(f"Quotation #{quotation_id} rejected.", "info")
    return redirect(url_for("quotations.list_quotations"))


# ---------------------------------------------------------------------
# Invoice generation
# ---------------------------------------------------------------------
@quotations_bp.route("/<int:quotation_id>/invoice", methods=["GET", "POST"])
@login_required
def invoice(quotation_id: int):
    ctx = current_context()
    quotation = ctx.store.get("quotations", quotation_id)
    if quotation is None:
        abort(404)

    customer = ctx.store.get("customers", quotation["customer_id"])

    if request.method == "POST":
        metadata = InvoiceMetadata(
            invoice_number=request.form.get("invoice_number", ""),
            invoice_date=parse_date(request.form.get("invoice_date")),
            payment_terms=request.form.get("payment_terms", ""),
            warranty_period=request.form.get("warranty_period"),
            notes=request.form.get("notes"),
        )
        try:
            invoice_id = generate_invoice(
                ctx,
                quotation_id,
                metadata,
                additional_items=_parse_additional_items(request.form),
                invoice_type=(request.form.get("type") or "customer").strip(),
            )
        except ConsistencyWarning as exc:
            flash_error(exc)
            return redirect(url_for("invoices.detail", invoice_id=exc.invoice_id))
        except BizdeskError as exc:
            flash_error(exc)
            return render_template(
                "quotations/invoice.html",
                quotation=quotation,
                customer=customer,
                form=request.form,
                invoice_types=INVOICE_TYPES,
            )

        flash("Invoice generated successfully.", "success")
        return redirect(url_for("invoices.detail", invoice_id=invoice_id))

    if not can_generate_invoice(quotation["status"]):
        flash(f"Quotation #{quotation_id} is already invoiced.", "warning")
        return redirect(url_for("quotations.list_quotations"))

    return render_template(
        "quotations/invoice.html",
        quotation=quotation,
        customer=customer,
        form=_invoice_defaults(),
        invoice_types=INVOICE_TYPES,
    )


# ---------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------
@quotations_bp.route("/<int:quotation_id>/delete", methods=["POST"])
@login_required
def delete(quotation_id: int):
    try:
        delete_quotation(current_context(), quotation_id)
    except BizdeskError as exc:
        flash_error(exc)
    else:
        flash("Quotation deleted successfully.", "success")
    return redirect(url_for("quotations.list_quotations"))
