"""
bizdesk/stats.py

Dashboard aggregates: collection counts, total sales, products by category
and monthly sales.

compute_stats() is a pure function of the four collection snapshots.
LiveStats keeps a current view by subscribing to the store: every committed
change to one of the collections replaces that collection's snapshot and the
aggregates are recomputed.
"""

from __future__ import annotations

import calendar
import logging
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping

from .models import INVOICE_CANCELLED
from .utils import money, to_decimal

logger = logging.getLogger(__name__)

STATS_COLLECTIONS = ("customers", "products", "quotations", "invoices")
MONTHS_SHOWN = 6


def _month_label(year: int, month: int) -> str:
    return f"{calendar.month_abbr[month]} {year % 100:02d}"


def products_by_category(products: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    counts: dict[str, int] = {}
    for product in products:
        category = product.get("type") or "Other"
        counts[category] = counts.get(category, 0) + 1
    return [{"name": name, "value": value} for name, value in counts.items()]


def sales_summary(invoices: Iterable[Mapping[str, Any]]) -> tuple[Decimal, list[dict[str, Any]]]:
    """Total and per-month sales of non-cancelled invoices (last 6 months with sales)."""
    total = Decimal("0.00")
    monthly: dict[tuple[int, int], Decimal] = {}

    for invoice in invoices:
        if invoice.get("status") == INVOICE_CANCELLED:
            continue
        amount = to_decimal(invoice.get("total_amount"))
        total += amount

        invoice_date = invoice.get("invoice_date")
        if invoice_date is None:
            continue
        key = (invoice_date.year, invoice_date.month)
        monthly[key] = monthly.get(key, Decimal("0.00")) + amount

    recent = sorted(monthly)[-MONTHS_SHOWN:]
    return money(total), [
        {"month": _month_label(year, month), "amount": money(monthly[(year, month)])}
        for year, month in recent
    ]


def compute_stats(
    customers: Iterable[Mapping[str, Any]],
    products: Iterable[Mapping[str, Any]],
    quotations: Iterable[Mapping[str, Any]],
    invoices: Iterable[Mapping[str, Any]],
) -> dict[str, Any]:
    products = list(products)
    invoices = list(invoices)
    total_sales, monthly_sales = sales_summary(invoices)

    return {
        "customers": len(list(customers)),
        "products": len(products),
        "quotations": len(list(quotations)),
        "invoices": len(invoices),
        "total_sales": total_sales,
        "products_by_category": products_by_category(products),
        "monthly_sales": monthly_sales,
    }


class LiveStats:
    """Aggregates kept current through store subscriptions."""

    def __init__(self, store):
        self._snapshots: dict[str, list[dict[str, Any]]] = {name: [] for name in STATS_COLLECTIONS}
        self.stats: dict[str, Any] = compute_stats([], [], [], [])
        self._unsubscribers: list[Callable[[], None]] = [
            store.subscribe(name, self._listener(name)) for name in STATS_COLLECTIONS
        ]

    def _listener(self, collection: str) -> Callable[[list[dict[str, Any]]], None]:
        def on_change(records: list[dict[str, Any]]) -> None:
            self._snapshots[collection] = records
            self.stats = compute_stats(*(self._snapshots[name] for name in STATS_COLLECTIONS))
            logger.debug("Dashboard stats refreshed after %s change", collection)

        return on_change

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
