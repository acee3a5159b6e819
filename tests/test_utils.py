from datetime import date
from decimal import Decimal

import pytest

from bizdesk.utils import (
    filter_customers,
    filter_invoices,
    filter_products,
    filter_quotations,
    format_currency,
    format_date,
    money,
    parse_date,
    parse_decimal,
    parse_optional_int,
)


@pytest.mark.parametrize(
    "amount, expected",
    [
        ("1234567", "₹12,34,567"),
        (Decimal("999.50"), "₹1,000"),
        (Decimal("0"), "₹0"),
        (Decimal("100000"), "₹1,00,000"),
        (None, "₹0"),
        (Decimal("-2500"), "-₹2,500"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_date():
    assert format_date(date(2025, 3, 4)) == "04/03/2025"
    assert format_date(None) == ""


def test_money_rounds_half_up():
    assert money(Decimal("2.675")) == Decimal("2.68")
    assert money(Decimal("2.665")) == Decimal("2.67")


def test_parsers():
    assert parse_decimal("12,5") == Decimal("12.5")
    assert parse_decimal("") is None
    assert parse_decimal("NaN") is None
    assert parse_decimal("Infinity") is None
    assert parse_optional_int(" 7 ") == 7
    assert parse_optional_int("7.5") is None
    assert parse_date("2025-02-28") == date(2025, 2, 28)
    assert parse_date("28/02/2025") is None


CUSTOMERS = {
    1: {"id": 1, "name": "Acme Traders", "email": "a@acme.example", "location": "Chennai", "phone": "9876543210"},
    2: {"id": 2, "name": "Blue Ocean", "email": "hi@blue.example", "location": "Goa", "phone": "9123456780"},
}


def test_filter_customers():
    records = list(CUSTOMERS.values())
    assert filter_customers(records, "") == records
    assert [c["id"] for c in filter_customers(records, "GOA")] == [2]
    assert [c["id"] for c in filter_customers(records, "98765")] == [1]


def test_filter_products_by_term_and_type():
    records = [
        {"name": "Panel", "type": "solar_panel", "make": "Waaree", "voltage": "24V", "rating": "330W"},
        {"name": "Inverter", "type": "inverter", "make": "Luminous", "voltage": "48V", "rating": "5kW"},
    ]
    assert len(filter_products(records, "", "all")) == 2
    assert [p["name"] for p in filter_products(records, "", "inverter")] == ["Inverter"]
    assert [p["name"] for p in filter_products(records, "waaree")] == ["Panel"]
    assert filter_products(records, "waaree", "inverter") == []


def test_filter_quotations_and_invoices_join_customer_name():
    quotations = [
        {"id": 10, "customer_id": 1, "items": [{"product_name": "Panel A"}]},
        {"id": 11, "customer_id": 2, "items": [{"product_name": "Battery"}]},
    ]
    assert [q["id"] for q in filter_quotations(quotations, "acme", CUSTOMERS)] == [10]
    assert [q["id"] for q in filter_quotations(quotations, "battery", CUSTOMERS)] == [11]

    invoices = [
        {"id": 1, "customer_id": 2, "invoice_number": "INV-482913"},
        {"id": 2, "customer_id": 99, "invoice_number": "INV-000001"},
    ]
    assert [i["id"] for i in filter_invoices(invoices, "blue", CUSTOMERS)] == [1]
    assert [i["id"] for i in filter_invoices(invoices, "000001", CUSTOMERS)] == [2]
