"""
bizdesk/errors.py

Error taxonomy for the business-management core.

Every error is recoverable at the call site. Routes catch BizdeskError,
flash the message and redirect; nothing is retried automatically.

- ValidationError: bad input shape/range, raised before any write.
- NotFoundError: a referenced record (customer, product, quotation...) is missing.
- InsufficientStockError: requested or adjusted quantity exceeds what is on hand.
- AlreadyInvoicedError: the quotation is invoiced and therefore immutable.
- PermissionDeniedError: the current role may not perform the action.
- StoreError: I/O failure from the entity store; nothing is assumed persisted.
- ConsistencyWarning: an invoice was written but the quotation status was not.
  Data was partially written, so this is surfaced distinctly from a failure.
"""

from __future__ import annotations

from typing import Any


class BizdeskError(Exception):
    """Base class for all domain errors."""

    flash_category = "danger"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(BizdeskError):
    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class EmptyQuotationError(ValidationError):
    def __init__(self):
        super().__init__("empty quotation: add at least one product", field="items")


class NotFoundError(BizdeskError):
    def __init__(self, collection: str, record_id: Any, message: str | None = None):
        super().__init__(message or f"not found: {record_id} in {collection}")
        self.collection = collection
        self.record_id = record_id


class UnknownProductError(NotFoundError):
    def __init__(self, product_id: Any):
        super().__init__("products", product_id, f"unknown product: {product_id}")


class InsufficientStockError(BizdeskError):
    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f"insufficient stock: only {available} units of {product_name} are available"
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


class AlreadyInvoicedError(BizdeskError):
    def __init__(self, quotation_id: Any):
        super().__init__(f"already invoiced: quotation {quotation_id}")
        self.quotation_id = quotation_id


class PermissionDeniedError(BizdeskError):
    def __init__(self, action: str):
        super().__init__(f"permission denied: only administrators can {action}")
        self.action = action


class StoreError(BizdeskError):
    def __init__(self, message: str = "store error: the operation could not be saved"):
        super().__init__(message)


class ConsistencyWarning(BizdeskError):
    """Invoice created, quotation status update failed. Needs manual reconciliation."""

    flash_category = "warning"

    def __init__(self, invoice_id: Any, quotation_id: Any):
        super().__init__(
            f"invoice {invoice_id} was created but quotation {quotation_id} "
            "could not be marked as invoiced; reconcile manually"
        )
        self.invoice_id = invoice_id
        self.quotation_id = quotation_id
