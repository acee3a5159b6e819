"""
bizdesk – Domain Models

Collections:
- users       (login + role: admin / employee)
- customers
- products    (inventory, quantity on hand never negative)
- quotations  (own their QuotationItem lines)
- invoices    (own a FROZEN copy of the quotation lines + their own additional items)

Cross-collection references (quotation -> customer, item -> product,
invoice -> quotation/customer) are plain id columns, not foreign keys:
records are referenced, never owned, and removal never cascades across
collections.

Every model converts to/from a plain dict record (to_record / from_record)
so the EntityStore can expose document-style collections.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from .errors import ValidationError
from .extensions import db
from .utils import money, to_decimal


# ---------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------
ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"
USER_ROLES = (ROLE_ADMIN, ROLE_EMPLOYEE)

PRODUCT_TYPES = {
    "solar_panel": "Solar Panel",
    "inverter": "Inverter",
    "battery": "Battery",
    "controller": "Charge Controller",
    "mounting": "Mounting Structure",
    "cable": "Cables",
    "accessory": "Accessory",
}

PRODUCT_UNITS = {
    "piece": "Piece",
    "set": "Set",
    "meter": "Meter",
    "kg": "Kilogram",
    "bundle": "Bundle",
}

QUOTATION_PENDING = "pending"
QUOTATION_APPROVED = "approved"
QUOTATION_REJECTED = "rejected"
QUOTATION_INVOICED = "invoiced"
QUOTATION_STATUSES = (QUOTATION_PENDING, QUOTATION_APPROVED, QUOTATION_REJECTED, QUOTATION_INVOICED)

INVOICE_ACTIVE = "active"
INVOICE_PAID = "paid"
INVOICE_CANCELLED = "cancelled"
INVOICE_STATUSES = (INVOICE_ACTIVE, INVOICE_PAID, INVOICE_CANCELLED)

INVOICE_TYPES = ("customer", "company")


# ---------------------------------------------------------------------
# Record conversion
# ---------------------------------------------------------------------
class RecordMixin:
    """dict <-> model conversion used by the EntityStore."""

    # Scalar fields accepted on create and returned by to_record (besides id/created_at)
    RECORD_FIELDS: tuple[str, ...] = ()
    # Fields a partial update may touch
    UPDATABLE_FIELDS: frozenset[str] = frozenset()

    def _assign(self, record: Mapping[str, Any], fields) -> None:
        # Only keys that are present: omitted keys fall back to column defaults
        for field in fields:
            if field in record:
                setattr(self, field, record[field])

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        instance = cls()
        instance._assign(record, cls.RECORD_FIELDS + ("created_at",))
        return instance

    def apply(self, partial: Mapping[str, Any]) -> None:
        unknown = set(partial) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"fields cannot be updated on {self.__tablename__}: {', '.join(sorted(unknown))}"
            )
        self._assign(partial, self.UPDATABLE_FIELDS)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {"id": self.id}
        for field in self.RECORD_FIELDS:
            record[field] = getattr(self, field)
        record["created_at"] = self.created_at
        return record


# ---------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------
class User(UserMixin, RecordMixin, db.Model):
    """Login user. Role gates destructive actions and creation entry points."""

    __tablename__ = "users"

    RECORD_FIELDS = ("email", "role", "name")
    UPDATABLE_FIELDS = frozenset({"role", "name", "is_active"})

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=ROLE_EMPLOYEE, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    @classmethod
    def from_record(cls, record):
        user = super().from_record(record)
        password = record.get("password")
        if not password:
            raise ValidationError("password is required", field="password")
        user.set_password(password)
        return user

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def display_name(self) -> str:
        return self.name or self.email

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"


# ---------------------------------------------------------------------
# Customers & inventory
# ---------------------------------------------------------------------
class Customer(RecordMixin, db.Model):
    __tablename__ = "customers"

    RECORD_FIELDS = ("name", "email", "phone", "address", "location", "scope")
    UPDATABLE_FIELDS = frozenset(RECORD_FIELDS)

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(50), nullable=False)
    address = db.Column(db.String(500), nullable=False)
    location = db.Column(db.String(255), nullable=False, index=True)

    # Optional free-text scope of work
    scope = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<Customer {self.name}>"


class Product(RecordMixin, db.Model):
    __tablename__ = "products"

    RECORD_FIELDS = ("name", "type", "voltage", "rating", "make", "quantity", "unit", "price")
    UPDATABLE_FIELDS = frozenset(RECORD_FIELDS)

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False, index=True)
    type = db.Column(db.String(50), nullable=False, index=True)
    voltage = db.Column(db.String(50), nullable=False)
    rating = db.Column(db.String(50), nullable=False)
    make = db.Column(db.String(120), nullable=False)

    quantity = db.Column(db.Integer, nullable=False, default=0)
    unit = db.Column(db.String(20), nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_record(self):
        record = super().to_record()
        record["price"] = to_decimal(self.price)
        record["updated_at"] = self.updated_at
        return record

    @property
    def type_label(self) -> str:
        return PRODUCT_TYPES.get(self.type, self.type)

    def __repr__(self):
        return f"<Product {self.name} qty={self.quantity}>"


# ---------------------------------------------------------------------
# Quotations
# ---------------------------------------------------------------------
class Quotation(RecordMixin, db.Model):
    __tablename__ = "quotations"

    RECORD_FIELDS = ("customer_id", "total_amount", "valid_until", "status", "notes")
    # Items and total are fixed at creation
    UPDATABLE_FIELDS = frozenset({"status", "notes", "valid_until"})

    id = db.Column(db.Integer, primary_key=True)

    customer_id = db.Column(db.Integer, nullable=False, index=True)

    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    valid_until = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=QUOTATION_PENDING, index=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    items = db.relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.position",
    )

    @classmethod
    def from_record(cls, record):
        quotation = super().from_record(record)
        quotation.items = [
            QuotationItem.from_line(position, line)
            for position, line in enumerate(record.get("items") or [])
        ]
        return quotation

    def to_record(self):
        record = super().to_record()
        record["total_amount"] = to_decimal(self.total_amount)
        record["items"] = [item.to_line() for item in self.items]
        return record

    def __repr__(self):
        return f"<Quotation {self.id} {self.status}>"


class LineMixin:
    """Shared product line columns (quotation lines and their frozen invoice copies)."""

    LINE_FIELDS = ("product_id", "product_name", "quantity", "unit_price", "subtotal")

    position = db.Column(db.Integer, nullable=False, default=0)

    product_id = db.Column(db.Integer, nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    subtotal = db.Column(db.Numeric(12, 2), nullable=False)

    @classmethod
    def from_line(cls, position: int, line: Mapping[str, Any]):
        return cls(
            position=position,
            product_id=line["product_id"],
            product_name=line.get("product_name"),
            quantity=int(line["quantity"]),
            unit_price=money(to_decimal(line["unit_price"])),
            subtotal=money(to_decimal(line["subtotal"])),
        )

    def to_line(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": to_decimal(self.unit_price),
            "subtotal": to_decimal(self.subtotal),
        }


class QuotationItem(LineMixin, db.Model):
    __tablename__ = "quotation_items"

    id = db.Column(db.Integer, primary_key=True)

    quotation_id = db.Column(
        db.Integer,
        db.ForeignKey("quotations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    quotation = db.relationship("Quotation", back_populates="items")


# ---------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------
class Invoice(RecordMixin, db.Model):
    __tablename__ = "invoices"

    RECORD_FIELDS = (
        "quotation_id",
        "customer_id",
        "invoice_number",
        "invoice_date",
        "payment_terms",
        "warranty_period",
        "notes",
        "type",
        "status",
        "total_amount",
    )
    # Items, additional items and total are frozen at generation time
    UPDATABLE_FIELDS = frozenset({"status", "notes"})

    id = db.Column(db.Integer, primary_key=True)

    quotation_id = db.Column(db.Integer, nullable=False, index=True)
    customer_id = db.Column(db.Integer, nullable=False, index=True)

    # Business-supplied, NOT unique
    invoice_number = db.Column(db.String(50), nullable=False, index=True)
    invoice_date = db.Column(db.Date, nullable=False, index=True)
    payment_terms = db.Column(db.String(255), nullable=False)
    warranty_period = db.Column(db.String(255), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    type = db.Column(db.String(20), nullable=False, default="customer")
    status = db.Column(db.String(20), nullable=False, default=INVOICE_ACTIVE, index=True)

    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    items = db.relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )

    additional_items = db.relationship(
        "InvoiceAdditionalItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceAdditionalItem.position",
    )

    @classmethod
    def from_record(cls, record):
        invoice = super().from_record(record)
        invoice.items = [
            InvoiceItem.from_line(position, line)
            for position, line in enumerate(record.get("items") or [])
        ]
        invoice.additional_items = [
            InvoiceAdditionalItem(
                position=position,
                description=extra["description"],
                amount=money(to_decimal(extra["amount"])),
            )
            for position, extra in enumerate(record.get("additional_items") or [])
        ]
        return invoice

    def to_record(self):
        record = super().to_record()
        record["total_amount"] = to_decimal(self.total_amount)
        record["items"] = [item.to_line() for item in self.items]
        record["additional_items"] = [
            {"description": extra.description, "amount": to_decimal(extra.amount)}
            for extra in self.additional_items
        ]
        return record

    def __repr__(self):
        return f"<Invoice {self.invoice_number} {self.status}>"


class InvoiceItem(LineMixin, db.Model):
    """Frozen copy of a quotation line."""

    __tablename__ = "invoice_items"

    id = db.Column(db.Integer, primary_key=True)

    invoice_id = db.Column(
        db.Integer,
        db.ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    invoice = db.relationship("Invoice", back_populates="items")


class InvoiceAdditionalItem(db.Model):
    """Non-product charge added at invoice time (installation, transport...)."""

    __tablename__ = "invoice_additional_items"

    id = db.Column(db.Integer, primary_key=True)

    invoice_id = db.Column(
        db.Integer,
        db.ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    position = db.Column(db.Integer, nullable=False, default=0)
    description = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    invoice = db.relationship("Invoice", back_populates="additional_items")
