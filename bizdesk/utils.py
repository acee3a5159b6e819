"""
Utility functions shared across the app. This includes:
- money helpers: to_decimal / money (2-decimal, half-up).
- form parsers: parse_decimal / parse_optional_int / parse_date.
- display formatting: format_currency (Indian grouping, no decimals) / format_date.
- search-as-you-type filters for the list pages (operate on store records).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Mapping


# ---------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------
def to_decimal(value) -> Decimal:
    """Convert Numeric/None/str/int to Decimal safely."""
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(x: Decimal) -> Decimal:
    return x.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


# ---------------------------------------------------------------------
# Parsing helpers (form input)
# ---------------------------------------------------------------------
def parse_decimal(value: str | None) -> Decimal | None:
    """Parse decimal from user input (accepts comma or dot)."""
    if value is None:
        return None
    raw = str(value).strip().replace(",", ".")
    if raw == "":
        return None
    try:
        parsed = Decimal(raw)
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_optional_int(value: str | None) -> int | None:
    """Parse optional int from form/query."""
    if value is None:
        return None
    raw = str(value).strip()
    if raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def parse_date(value: str | None) -> date | None:
    """Parse an ISO date (YYYY-MM-DD) as sent by <input type="date">."""
    if not value:
        return None
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


# ---------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------
def _group_indian(digits: str) -> str:
    """12345678 -> 1,23,45,678"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount, symbol: str = "₹") -> str:
    value = to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{_group_indian(str(abs(int(value))))}"


def format_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


# ---------------------------------------------------------------------
# List filters (case-insensitive, empty term = everything)
# ---------------------------------------------------------------------
def _contains(value: Any, term: str) -> bool:
    return term in str(value or "").lower()


def filter_customers(records: Iterable[Mapping[str, Any]], term: str | None) -> list:
    records = list(records)
    term = (term or "").strip().lower()
    if not term:
        return records
    return [
        c for c in records
        if _contains(c.get("name"), term)
        or _contains(c.get("email"), term)
        or _contains(c.get("location"), term)
        or term in str(c.get("phone") or "")
    ]


def filter_products(
    records: Iterable[Mapping[str, Any]],
    term: str | None,
    type_filter: str | None = "all",
) -> list:
    filtered = list(records)

    if type_filter and type_filter != "all":
        filtered = [p for p in filtered if p.get("type") == type_filter]

    term = (term or "").strip().lower()
    if term:
        filtered = [
            p for p in filtered
            if _contains(p.get("name"), term)
            or _contains(p.get("make"), term)
            or _contains(p.get("voltage"), term)
            or _contains(p.get("rating"), term)
        ]
    return filtered


def _customer_name(customers: Mapping[Any, Mapping[str, Any]], customer_id) -> str:
    customer = customers.get(customer_id)
    return customer.get("name", "") if customer else ""


def filter_quotations(
    records: Iterable[Mapping[str, Any]],
    term: str | None,
    customers: Mapping[Any, Mapping[str, Any]],
) -> list:
    records = list(records)
    term = (term or "").strip().lower()
    if not term:
        return records
    return [
        q for q in records
        if _contains(_customer_name(customers, q.get("customer_id")), term)
        or _contains(q.get("id"), term)
        or any(_contains(item.get("product_name"), term) for item in q.get("items") or [])
    ]


def filter_invoices(
    records: Iterable[Mapping[str, Any]],
    term: str | None,
    customers: Mapping[Any, Mapping[str, Any]],
) -> list:
    records = list(records)
    term = (term or "").strip().lower()
    if not term:
        return records
    return [
        inv for inv in records
        if _contains(_customer_name(customers, inv.get("customer_id")), term)
        or _contains(inv.get("invoice_number"), term)
        or _contains(inv.get("id"), term)
    ]
