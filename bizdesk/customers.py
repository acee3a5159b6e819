"""Customer validation and CRUD (create/delete are admin-only)."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from .errors import ValidationError

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_LENGTHS = (
    ("name", 2, "Name"),
    ("address", 5, "Address"),
    ("location", 2, "Location"),
    ("phone", 10, "Phone"),
)


def validate_customer(form: Mapping[str, Any]) -> dict[str, Any]:
    record: dict[str, Any] = {}

    for field, minimum, label in MIN_LENGTHS:
        value = (form.get(field) or "").strip()
        if len(value) < minimum:
            raise ValidationError(f"{label} must be at least {minimum} characters", field=field)
        record[field] = value

    email = (form.get("email") or "").strip()
    if not EMAIL_RE.match(email):
        raise ValidationError("invalid email address", field="email")
    record["email"] = email

    record["scope"] = (form.get("scope") or "").strip() or None
    return record


def create_customer(ctx, form: Mapping[str, Any]) -> Any:
    ctx.require_admin("add customers")
    record = validate_customer(form)
    customer_id = ctx.store.create("customers", record)
    logger.info("Customer %s (%s) added by %s", customer_id, record["name"], ctx.email)
    return customer_id


def update_customer(ctx, customer_id: Any, form: Mapping[str, Any]) -> None:
    ctx.store.update("customers", customer_id, validate_customer(form))
    logger.info("Customer %s updated by %s", customer_id, ctx.email)


def delete_customer(ctx, customer_id: Any) -> None:
    ctx.require_admin("delete customers")
    ctx.store.remove("customers", customer_id)
    logger.info("Customer %s deleted by %s", customer_id, ctx.email)
