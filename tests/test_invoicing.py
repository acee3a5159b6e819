from datetime import date, datetime
from decimal import Decimal

import pytest

from bizdesk.errors import NotFoundError, ValidationError
from bizdesk.invoicing import (
    AdditionalItem,
    InvoiceMetadata,
    default_invoice_number,
    derive_invoice,
    invoice_document,
    set_invoice_status,
)

QUOTATION = {
    "id": 7,
    "customer_id": 3,
    "status": "approved",
    "total_amount": Decimal("250.00"),
    "items": [
        {
            "product_id": 1,
            "product_name": "Panel A",
            "quantity": 2,
            "unit_price": Decimal("100.00"),
            "subtotal": Decimal("200.00"),
        }
    ],
}

METADATA = InvoiceMetadata(
    invoice_number="INV-1",
    invoice_date=date(2025, 1, 31),
    payment_terms="Net 30",
)


def test_derive_invoice_without_extras_matches_quotation_total():
    invoice = derive_invoice(QUOTATION, METADATA)

    assert invoice["total_amount"] == Decimal("250.00")
    assert invoice["additional_items"] == []
    assert invoice["quotation_id"] == 7
    assert invoice["customer_id"] == 3
    assert invoice["type"] == "customer"
    assert invoice["status"] == "active"
    assert invoice["warranty_period"] is None


def test_derived_items_do_not_alias_quotation_items():
    invoice = derive_invoice(QUOTATION, METADATA)
    invoice["items"][0]["quantity"] = 99
    assert QUOTATION["items"][0]["quantity"] == 2


def test_derive_invoice_sums_additional_items():
    invoice = derive_invoice(
        QUOTATION,
        METADATA,
        [AdditionalItem("Installation", Decimal("75")), AdditionalItem("Transport", Decimal("0"))],
        invoice_type="company",
    )
    assert invoice["total_amount"] == Decimal("325.00")
    assert invoice["type"] == "company"


@pytest.mark.parametrize(
    "extra",
    [
        AdditionalItem("", Decimal("10")),
        AdditionalItem("Installation", None),
        AdditionalItem("Discount", Decimal("-5")),
        AdditionalItem("Installation", Decimal("Infinity")),
        AdditionalItem("Installation", Decimal("NaN")),
        AdditionalItem("Installation", "abc"),
    ],
)
def test_invalid_additional_items(extra):
    with pytest.raises(ValidationError) as excinfo:
        derive_invoice(QUOTATION, METADATA, [extra])
    assert excinfo.value.field in ("description", "amount")


@pytest.mark.parametrize(
    "metadata, field",
    [
        (InvoiceMetadata("", date(2025, 1, 1), "Net 30"), "invoice_number"),
        (InvoiceMetadata("INV-1", None, "Net 30"), "invoice_date"),
        (InvoiceMetadata("INV-1", date(2025, 1, 1), " "), "payment_terms"),
    ],
)
def test_metadata_required_fields(metadata, field):
    with pytest.raises(ValidationError) as excinfo:
        derive_invoice(QUOTATION, metadata)
    assert excinfo.value.field == field


def test_invalid_invoice_type():
    with pytest.raises(ValidationError):
        derive_invoice(QUOTATION, METADATA, invoice_type="proforma")


def test_default_invoice_number_uses_last_six_millisecond_digits():
    number = default_invoice_number(datetime(2025, 1, 1, 12, 0, 0))
    assert number.startswith("INV-")
    assert len(number) == 10
    assert number[4:].isdigit()


def test_set_invoice_status(store, employee_ctx):
    invoice_id = store.create("invoices", dict(derive_invoice(QUOTATION, METADATA)))

    set_invoice_status(employee_ctx, invoice_id, "paid")
    assert store.get("invoices", invoice_id)["status"] == "paid"

    set_invoice_status(employee_ctx, invoice_id, "active")
    assert store.get("invoices", invoice_id)["status"] == "active"

    with pytest.raises(ValidationError):
        set_invoice_status(employee_ctx, invoice_id, "overdue")
    with pytest.raises(NotFoundError):
        set_invoice_status(employee_ctx, 999, "paid")


def test_invoice_document_is_not_available():
    with pytest.raises(NotImplementedError):
        invoice_document({"invoice_number": "INV-1"})
