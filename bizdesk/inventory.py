"""
bizdesk/inventory.py

Product catalogue and stock.

- Creating and deleting products is admin-only; editing is open to every user.
- quantity is an integer >= 0 and price a non-negative amount.
- adjust_quantity() applies a signed delta and refuses to go below zero.
- is_low_stock() flags products with LOW_STOCK_THRESHOLD units or fewer on hand.

Adjustments are read-modify-write against the store without locking: two
concurrent adjustments of the same product race and the last write wins.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .errors import InsufficientStockError, NotFoundError, ValidationError
from .models import PRODUCT_TYPES, PRODUCT_UNITS
from .utils import money, parse_decimal, parse_optional_int

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 5

REQUIRED_TEXT_FIELDS = (
    ("voltage", "Voltage"),
    ("rating", "Rating"),
    ("make", "Make/Brand"),
)


def is_low_stock(product: Mapping[str, Any]) -> bool:
    return int(product.get("quantity") or 0) <= LOW_STOCK_THRESHOLD


def validate_product(form: Mapping[str, Any]) -> dict[str, Any]:
    """Clean and validate product input. Returns the product record."""
    name = (form.get("name") or "").strip()
    if len(name) < 2:
        raise ValidationError("product name must be at least 2 characters", field="name")

    product_type = (form.get("type") or "").strip()
    if product_type not in PRODUCT_TYPES:
        raise ValidationError("please select a product type", field="type")

    record: dict[str, Any] = {"name": name, "type": product_type}

    for field, label in REQUIRED_TEXT_FIELDS:
        value = (form.get(field) or "").strip()
        if not value:
            raise ValidationError(f"{label} is required", field=field)
        record[field] = value

    quantity = form.get("quantity")
    if not isinstance(quantity, int):
        quantity = parse_optional_int(quantity)
    if quantity is None or quantity < 0:
        raise ValidationError("quantity must be a whole number of 0 or more", field="quantity")
    record["quantity"] = quantity

    unit = (form.get("unit") or "").strip()
    if unit not in PRODUCT_UNITS:
        raise ValidationError("unit is required", field="unit")
    record["unit"] = unit

    price = parse_decimal(form.get("price"))
    if price is None or price < 0:
        raise ValidationError("price must be a number of 0 or more", field="price")
    record["price"] = money(price)

    return record


def create_product(ctx, form: Mapping[str, Any]) -> Any:
    ctx.require_admin("add products")
    record = validate_product(form)
    product_id = ctx.store.create("products", record)
    logger.info("Product %s (%s) added by %s", product_id, record["name"], ctx.email)
    return product_id


def update_product(ctx, product_id: Any, form: Mapping[str, Any]) -> None:
    record = validate_product(form)
    ctx.store.update("products", product_id, record)
    logger.info("Product %s updated by %s", product_id, ctx.email)


def delete_product(ctx, product_id: Any) -> None:
    ctx.require_admin("delete products")
    ctx.store.remove("products", product_id)
    logger.info("Product %s deleted by %s", product_id, ctx.email)


def adjust_quantity(ctx, product_id: Any, delta: int) -> int:
    """Apply a signed stock delta. Returns the new on-hand quantity."""
    if not isinstance(delta, int) or isinstance(delta, bool) or delta == 0:
        raise ValidationError("adjustment must be a non-zero whole number", field="delta")

    product = ctx.store.get("products", product_id)
    if product is None:
        raise NotFoundError("products", product_id, f"product {product_id} not found")

    current = int(product["quantity"] or 0)
    new_quantity = current + delta
    if new_quantity < 0:
        logger.info(
            "Rejected adjustment %+d on product %s: only %d on hand", delta, product_id, current
        )
        raise InsufficientStockError(product["name"], current, -delta)

    ctx.store.update("products", product_id, {"quantity": new_quantity})
    logger.info(
        "Product %s stock %d -> %d (%+d) by %s", product_id, current, new_quantity, delta, ctx.email
    )
    return new_quantity
