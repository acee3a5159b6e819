"""
bizdesk/invoicing.py

Invoice derivation from a quotation.

Rules:
- items are a verbatim (deep) copy of the quotation's items: NEVER re-priced
  against current product data.
- total_amount = quotation.total_amount + sum(additional_items.amount).
- status starts as "active"; "paid" / "cancelled" are set by direct edit
  (set_invoice_status), no transition rules apply.
- invoice_number is caller-supplied and NOT checked for uniqueness.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping

from .errors import ValidationError
from .models import INVOICE_ACTIVE, INVOICE_STATUSES, INVOICE_TYPES
from .utils import money, parse_decimal, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdditionalItem:
    """Invoice-only charge without a product reference."""

    description: str
    amount: Decimal

    def validate(self) -> None:
        if not (self.description or "").strip():
            raise ValidationError("additional item description is required", field="description")
        if self.amount is None:
            raise ValidationError(
                f"amount is required for '{self.description}'", field="amount"
            )
        amount = parse_decimal(self.amount)
        if amount is None:
            raise ValidationError(
                f"amount for '{self.description}' must be a number", field="amount"
            )
        if amount < 0:
            raise ValidationError(
                f"amount for '{self.description}' must be zero or positive", field="amount"
            )

    def to_record(self) -> dict[str, Any]:
        return {"description": self.description.strip(), "amount": money(parse_decimal(self.amount))}


@dataclass(frozen=True)
class InvoiceMetadata:
    invoice_number: str
    invoice_date: date | None
    payment_terms: str
    warranty_period: str | None = None
    notes: str | None = None

    def validate(self) -> None:
        if not (self.invoice_number or "").strip():
            raise ValidationError("invoice number is required", field="invoice_number")
        if self.invoice_date is None:
            raise ValidationError("invoice date is required", field="invoice_date")
        if not (self.payment_terms or "").strip():
            raise ValidationError("payment terms are required", field="payment_terms")


def default_invoice_number(now: datetime | None = None) -> str:
    """Form default: INV- + last 6 digits of the epoch milliseconds."""
    now = now or datetime.now()
    millis = int(now.timestamp() * 1000)
    return f"INV-{str(millis)[-6:]}"


def derive_invoice(
    quotation: Mapping[str, Any],
    metadata: InvoiceMetadata,
    additional_items: Iterable[AdditionalItem] = (),
    invoice_type: str = "customer",
) -> dict[str, Any]:
    """Build the invoice record for `quotation`. Pure: nothing is written."""
    metadata.validate()

    if invoice_type not in INVOICE_TYPES:
        raise ValidationError(
            f"invoice type must be one of: {', '.join(INVOICE_TYPES)}", field="type"
        )

    extras = list(additional_items)
    for extra in extras:
        extra.validate()
    extra_records = [extra.to_record() for extra in extras]

    total = to_decimal(quotation["total_amount"])
    for extra in extra_records:
        total += extra["amount"]

    return {
        "quotation_id": quotation["id"],
        "customer_id": quotation["customer_id"],
        "items": copy.deepcopy(list(quotation.get("items") or [])),
        "additional_items": extra_records,
        "invoice_number": metadata.invoice_number.strip(),
        "invoice_date": metadata.invoice_date,
        "payment_terms": metadata.payment_terms.strip(),
        "warranty_period": (metadata.warranty_period or "").strip() or None,
        "notes": (metadata.notes or "").strip() or None,
        "type": invoice_type,
        "status": INVOICE_ACTIVE,
        "total_amount": money(total),
    }


def set_invoice_status(ctx, invoice_id: Any, status: str) -> None:
    """Direct edit of the invoice status (active / paid / cancelled)."""
    if status not in INVOICE_STATUSES:
        raise ValidationError(
            f"invoice status must be one of: {', '.join(INVOICE_STATUSES)}", field="status"
        )
    ctx.store.update("invoices", invoice_id, {"status": status})
    logger.info("Invoice %s marked %s by %s", invoice_id, status, ctx.email)


def invoice_document(invoice: Mapping[str, Any]) -> bytes:
    """PDF rendering of an invoice."""
    raise NotImplementedError(
        f"PDF generation is not available for invoice {invoice.get('invoice_number')}"
    )
