"""
bizdesk/store.py

Entity store: document-style collections (customers, products, quotations,
invoices, users) on top of SQLAlchemy.

Contract:
- create(collection, record) -> id     (creation timestamp assigned if omitted)
- update(collection, id, partial)      (merge; NotFoundError if id is absent)
- remove(collection, id)               (no cascade to other collections)
- get(collection, id) / snapshot(collection)
- subscribe(collection, callback)      (called once immediately with the current
                                        snapshot, then with a fresh full snapshot
                                        after every committed mutation; [] if empty)

IMPORTANT:
- Every mutating call is ONE commit. There is no transaction spanning two calls:
  callers that need two writes (quotation -> invoice) must handle partial failure.
- Any SQLAlchemyError is rolled back and re-raised as StoreError.
- Listeners are per store instance (one store per app), in-process only.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Mapping

from sqlalchemy.exc import SQLAlchemyError

from .errors import NotFoundError, StoreError, ValidationError
from .models import Customer, Invoice, Product, Quotation, User

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Listener = Callable[[list[Record]], None]

COLLECTIONS = {
    "customers": Customer,
    "products": Product,
    "quotations": Quotation,
    "invoices": Invoice,
    "users": User,
}


class EntityStore:
    """Document collections over a Flask-SQLAlchemy handle."""

    def __init__(self, db):
        self._db = db
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------
    def _model(self, collection: str):
        model = COLLECTIONS.get(collection)
        if model is None:
            raise ValidationError(f"unknown collection: {collection}")
        return model

    def _load(self, collection: str, record_id: Any):
        model = self._model(collection)
        try:
            return self._db.session.get(model, record_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"store error: could not read {collection}") from exc

    def _commit(self, collection: str, action: str) -> None:
        try:
            self._db.session.commit()
        except SQLAlchemyError as exc:
            self._db.session.rollback()
            logger.error("Store %s on %s failed: %s", action, collection, exc)
            raise StoreError(f"store error: could not {action} record in {collection}") from exc

    def _notify(self, collection: str) -> None:
        listeners = list(self._listeners.get(collection, ()))
        if not listeners:
            return

        # Already committed: fan-out failures are logged, never raised
        try:
            records = self.snapshot(collection)
        except StoreError:
            logger.exception("Could not load %s snapshot for listeners", collection)
            return

        for listener in listeners:
            try:
                listener(list(records))
            except Exception:
                logger.exception("Listener %r on %s failed", listener, collection)

    # -----------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------
    def get(self, collection: str, record_id: Any) -> Record | None:
        instance = self._load(collection, record_id)
        return instance.to_record() if instance is not None else None

    def snapshot(self, collection: str) -> list[Record]:
        model = self._model(collection)
        try:
            rows = model.query.order_by(model.id.asc()).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"store error: could not read {collection}") from exc
        return [row.to_record() for row in rows]

    def index(self, collection: str) -> dict[Any, Record]:
        """Snapshot keyed by id (lookup tables for joins in views)."""
        return {record["id"]: record for record in self.snapshot(collection)}

    # -----------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------
    def create(self, collection: str, record: Mapping[str, Any]) -> Any:
        model = self._model(collection)
        instance = model.from_record(record)

        self._db.session.add(instance)
        self._commit(collection, "create")

        logger.debug("Created %s/%s", collection, instance.id)
        self._notify(collection)
        return instance.id

    def update(self, collection: str, record_id: Any, partial: Mapping[str, Any]) -> None:
        instance = self._load(collection, record_id)
        if instance is None:
            raise NotFoundError(collection, record_id)

        instance.apply(partial)
        self._commit(collection, "update")

        logger.debug("Updated %s/%s fields=%s", collection, record_id, sorted(partial))
        self._notify(collection)

    def remove(self, collection: str, record_id: Any) -> None:
        instance = self._load(collection, record_id)
        if instance is None:
            raise NotFoundError(collection, record_id)

        self._db.session.delete(instance)
        self._commit(collection, "remove")

        logger.debug("Removed %s/%s", collection, record_id)
        self._notify(collection)

    # -----------------------------------------------------------------
    # Subscriptions
    # -----------------------------------------------------------------
    def subscribe(self, collection: str, callback: Listener) -> Callable[[], None]:
        """Register a listener; returns an unsubscribe function."""
        self._model(collection)
        self._listeners[collection].append(callback)
        callback(self.snapshot(collection))

        def unsubscribe() -> None:
            if callback in self._listeners[collection]:
                self._listeners[collection].remove(callback)

        return unsubscribe
