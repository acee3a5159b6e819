"""
bizdesk/pricing.py

Pricing / total calculator for quotation line items.

price_lines() is PURE: it reads product prices and on-hand quantities from the
lookup it is given and never touches inventory. Stock is only changed through
inventory.adjust_quantity().

All checks run before anything is persisted, so a rejected quotation never
leaves a partial record behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Sequence

from .errors import EmptyQuotationError, InsufficientStockError, UnknownProductError, ValidationError
from .utils import money, to_decimal


@dataclass(frozen=True)
class LineRequest:
    """What the user asked for: a product and a quantity."""

    product_id: Any
    quantity: int


@dataclass(frozen=True)
class PricedLine:
    product_id: Any
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    def to_record(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "subtotal": self.subtotal,
        }


@dataclass(frozen=True)
class PricedQuotation:
    lines: tuple[PricedLine, ...]
    total: Decimal

    def item_records(self) -> list[dict[str, Any]]:
        return [line.to_record() for line in self.lines]


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def price_line(request: LineRequest, product: Mapping[str, Any] | None) -> PricedLine:
    """Price one line against the current product record."""
    if not _is_positive_int(request.quantity):
        raise ValidationError(
            f"quantity must be a positive whole number (got {request.quantity!r})",
            field="quantity",
        )

    if product is None:
        raise UnknownProductError(request.product_id)

    available = int(product.get("quantity") or 0)
    name = product.get("name") or str(request.product_id)
    if request.quantity > available:
        raise InsufficientStockError(name, available, request.quantity)

    unit_price = money(to_decimal(product.get("price")))
    return PricedLine(
        product_id=request.product_id,
        product_name=name,
        quantity=request.quantity,
        unit_price=unit_price,
        subtotal=money(unit_price * request.quantity),
    )


def price_lines(
    requests: Sequence[LineRequest],
    products: Mapping[Any, Mapping[str, Any]],
) -> PricedQuotation:
    """
    Price every requested line and compute the grand total.

    Raises (first failure wins, in line order):
    - EmptyQuotationError: no lines at all
    - ValidationError: quantity is not a positive integer
    - UnknownProductError: product id not in `products`
    - InsufficientStockError: quantity exceeds the product's on-hand quantity
    """
    if not requests:
        raise EmptyQuotationError()

    lines = tuple(price_line(request, products.get(request.product_id)) for request in requests)
    total = money(sum((line.subtotal for line in lines), Decimal("0.00")))
    return PricedQuotation(lines=lines, total=total)
