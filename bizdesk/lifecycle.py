"""
bizdesk/lifecycle.py

Quotation lifecycle.

    create ──> pending ──approve──> approved ─┐
                  │  └──reject───> rejected ──┤
                  └───────────────────────────┴──generate-invoice──> invoiced (terminal)

- create: always "pending"; lines priced via pricing.price_lines() BEFORE any write.
- approve / reject: direct status overwrite, items and total untouched.
- generate-invoice: allowed from any status except "invoiced" (approval first is
  NOT required). Two writes, no transaction:
      1) create invoice      -> on failure: StoreError, quotation unchanged
      2) status = invoiced   -> on failure: ConsistencyWarning(invoice_id, quotation_id)
- delete: any status, no cascade to invoices already generated.

Once "invoiced" the quotation is immutable (approve/reject/re-invoice refused).
Two clients invoicing the same quotation at the same moment can both pass the
"already invoiced" check; the store offers no locking to prevent it.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterable, Sequence

from .errors import AlreadyInvoicedError, ConsistencyWarning, NotFoundError, StoreError, ValidationError
from .invoicing import AdditionalItem, InvoiceMetadata, derive_invoice
from .models import (
    QUOTATION_APPROVED,
    QUOTATION_INVOICED,
    QUOTATION_PENDING,
    QUOTATION_REJECTED,
)
from .pricing import LineRequest, price_lines

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY_DAYS = 30


def can_generate_invoice(status: str | None) -> bool:
    return status != QUOTATION_INVOICED


def _load_quotation(ctx, quotation_id: Any) -> dict:
    quotation = ctx.store.get("quotations", quotation_id)
    if quotation is None:
        raise NotFoundError("quotations", quotation_id, f"quotation {quotation_id} not found")
    return quotation


# ---------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------
def create_quotation(
    ctx,
    customer_id: Any,
    lines: Sequence[LineRequest],
    valid_until: date | None = None,
    notes: str | None = None,
    validity_days: int = DEFAULT_VALIDITY_DAYS,
) -> Any:
    """Validate, price and persist a new quotation in "pending". Returns its id."""
    if customer_id is None:
        raise ValidationError("please select a customer", field="customer_id")
    if ctx.store.get("customers", customer_id) is None:
        raise NotFoundError("customers", customer_id, f"customer {customer_id} not found")

    products = {}
    for line in lines:
        product = ctx.store.get("products", line.product_id)
        if product is not None:
            products[line.product_id] = product

    priced = price_lines(lines, products)

    if valid_until is None:
        valid_until = date.today() + timedelta(days=validity_days)

    quotation_id = ctx.store.create(
        "quotations",
        {
            "customer_id": customer_id,
            "items": priced.item_records(),
            "total_amount": priced.total,
            "valid_until": valid_until,
            "status": QUOTATION_PENDING,
            "notes": (notes or "").strip() or None,
        },
    )
    logger.info(
        "Quotation %s created for customer %s: %d line(s), total %s",
        quotation_id,
        customer_id,
        len(priced.lines),
        priced.total,
    )
    return quotation_id


# ---------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------
def _review(ctx, quotation_id: Any, status: str) -> None:
    quotation = _load_quotation(ctx, quotation_id)
    if quotation["status"] == QUOTATION_INVOICED:
        raise AlreadyInvoicedError(quotation_id)

    ctx.store.update("quotations", quotation_id, {"status": status})
    logger.info("Quotation %s: %s -> %s (%s)", quotation_id, quotation["status"], status, ctx.email)


def approve_quotation(ctx, quotation_id: Any) -> None:
    _review(ctx, quotation_id, QUOTATION_APPROVED)


def reject_quotation(ctx, quotation_id: Any) -> None:
    _review(ctx, quotation_id, QUOTATION_REJECTED)


# ---------------------------------------------------------------------
# Invoice generation (two-step saga)
# ---------------------------------------------------------------------
def generate_invoice(
    ctx,
    quotation_id: Any,
    metadata: InvoiceMetadata,
    additional_items: Iterable[AdditionalItem] = (),
    invoice_type: str = "customer",
) -> Any:
    """
    Create the invoice for a quotation and mark the quotation "invoiced".

    Returns the new invoice id.

    Raises:
    - NotFoundError / AlreadyInvoicedError / ValidationError: nothing written
    - StoreError: invoice write failed, nothing written
    - ConsistencyWarning: invoice written, quotation status NOT updated
      (store failure, or the quotation was removed in between)
    """
    quotation = _load_quotation(ctx, quotation_id)
    if not can_generate_invoice(quotation["status"]):
        raise AlreadyInvoicedError(quotation_id)

    invoice = derive_invoice(quotation, metadata, additional_items, invoice_type)

    invoice_id = ctx.store.create("invoices", invoice)

    try:
        ctx.store.update("quotations", quotation_id, {"status": QUOTATION_INVOICED})
    except (StoreError, NotFoundError) as exc:
        logger.error(
            "Invoice %s created but quotation %s (was %r) not marked invoiced: manual reconciliation needed",
            invoice_id,
            quotation_id,
            quotation["status"],
        )
        raise ConsistencyWarning(invoice_id, quotation_id) from exc

    logger.info(
        "Invoice %s (%s) generated from quotation %s, total %s",
        invoice_id,
        invoice["invoice_number"],
        quotation_id,
        invoice["total_amount"],
    )
    return invoice_id


# ---------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------
def delete_quotation(ctx, quotation_id: Any) -> None:
    """Remove a quotation in any status. Generated invoices are kept."""
    ctx.store.remove("quotations", quotation_id)
    logger.info("Quotation %s deleted by %s", quotation_id, ctx.email)
