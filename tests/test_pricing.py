from decimal import Decimal

import pytest

from bizdesk.errors import (
    EmptyQuotationError,
    InsufficientStockError,
    UnknownProductError,
    ValidationError,
)
from bizdesk.pricing import LineRequest, price_lines

CATALOGUE = {
    1: {"id": 1, "name": "Panel A", "price": Decimal("100.00"), "quantity": 10},
    2: {"id": 2, "name": "Inverter B", "price": Decimal("50.00"), "quantity": 5},
    3: {"id": 3, "name": "Clamp", "price": Decimal("0.335"), "quantity": 100},
}


def test_price_lines_totals_subtotals():
    priced = price_lines([LineRequest(1, 2), LineRequest(2, 1)], CATALOGUE)

    assert [line.subtotal for line in priced.lines] == [Decimal("200.00"), Decimal("50.00")]
    assert priced.total == Decimal("250.00")
    assert priced.item_records()[0] == {
        "product_id": 1,
        "product_name": "Panel A",
        "quantity": 2,
        "unit_price": Decimal("100.00"),
        "subtotal": Decimal("200.00"),
    }


def test_total_does_not_depend_on_line_order():
    forward = price_lines([LineRequest(1, 3), LineRequest(2, 4), LineRequest(3, 7)], CATALOGUE)
    backward = price_lines([LineRequest(3, 7), LineRequest(2, 4), LineRequest(1, 3)], CATALOGUE)
    assert forward.total == backward.total


def test_unit_price_rounds_half_up():
    priced = price_lines([LineRequest(3, 3)], CATALOGUE)
    assert priced.lines[0].unit_price == Decimal("0.34")
    assert priced.total == Decimal("1.02")


def test_quantity_equal_to_stock_is_accepted():
    priced = price_lines([LineRequest(2, 5)], CATALOGUE)
    assert priced.total == Decimal("250.00")


def test_empty_quotation_rejected():
    with pytest.raises(EmptyQuotationError):
        price_lines([], CATALOGUE)


def test_unknown_product():
    with pytest.raises(UnknownProductError) as excinfo:
        price_lines([LineRequest(1, 1), LineRequest(99, 1)], CATALOGUE)
    assert "unknown product: 99" in str(excinfo.value)


def test_insufficient_stock_names_product_and_available():
    with pytest.raises(InsufficientStockError) as excinfo:
        price_lines([LineRequest(2, 6)], CATALOGUE)

    assert excinfo.value.available == 5
    assert excinfo.value.requested == 6
    assert "only 5 units of Inverter B" in str(excinfo.value)


@pytest.mark.parametrize("quantity", [0, -1, None, 1.5, True])
def test_quantity_must_be_positive_integer(quantity):
    with pytest.raises(ValidationError) as excinfo:
        price_lines([LineRequest(1, quantity)], CATALOGUE)
    assert excinfo.value.field == "quantity"


def test_first_failing_line_wins():
    with pytest.raises(ValidationError):
        price_lines([LineRequest(1, 0), LineRequest(99, 1)], CATALOGUE)
