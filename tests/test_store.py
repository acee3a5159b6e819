from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from bizdesk.context import AppContext
from bizdesk.errors import NotFoundError, StoreError, ValidationError
from bizdesk.extensions import db
from bizdesk.lifecycle import create_quotation
from bizdesk.pricing import LineRequest


def test_create_get_and_snapshot(store, customer_id):
    customer = store.get("customers", customer_id)

    assert customer["id"] == customer_id
    assert customer["name"] == "Acme Traders"
    assert customer["created_at"] is not None
    assert store.snapshot("customers") == [customer]
    assert store.index("customers") == {customer_id: customer}


def test_get_missing_returns_none(store):
    assert store.get("products", 1) is None


def test_update_merges_partial_record(store, products):
    store.update("products", products["a"], {"quantity": 3})

    product = store.get("products", products["a"])
    assert product["quantity"] == 3
    assert product["price"] == Decimal("100.00")
    assert product["name"] == "Panel A"


def test_update_and_remove_missing_record(store):
    with pytest.raises(NotFoundError):
        store.update("customers", 99, {"name": "Nobody"})
    with pytest.raises(NotFoundError):
        store.remove("customers", 99)


def test_unknown_collection(store):
    with pytest.raises(ValidationError):
        store.snapshot("suppliers")
    with pytest.raises(ValidationError):
        store.subscribe("suppliers", lambda records: None)


def test_frozen_fields_cannot_be_updated(store, customer_id, products):
    quotation_id = create_quotation(AppContext(store), customer_id, [LineRequest(products["a"], 1)])

    with pytest.raises(ValidationError):
        store.update("quotations", quotation_id, {"total_amount": Decimal("1.00")})
    assert store.get("quotations", quotation_id)["total_amount"] == Decimal("100.00")


def test_subscribe_delivers_snapshot_immediately(store):
    received = []
    store.subscribe("customers", received.append)
    assert received == [[]]


def test_subscribers_see_every_commit(store):
    received = []
    unsubscribe = store.subscribe("products", received.append)

    product_id = store.create(
        "products",
        {
            "name": "Rail",
            "type": "mounting",
            "voltage": "-",
            "rating": "3m",
            "make": "Acme",
            "quantity": 4,
            "unit": "piece",
            "price": Decimal("900"),
        },
    )
    store.update("products", product_id, {"quantity": 2})
    store.remove("products", product_id)

    assert [len(snapshot) for snapshot in received] == [0, 1, 1, 0]
    assert received[2][0]["quantity"] == 2

    unsubscribe()
    store.create(
        "products",
        {
            "name": "Rail 2",
            "type": "mounting",
            "voltage": "-",
            "rating": "3m",
            "make": "Acme",
            "quantity": 4,
            "unit": "piece",
            "price": Decimal("900"),
        },
    )
    assert len(received) == 4


def test_failing_listener_does_not_break_writes(store, customer_id):
    def broken(records):
        if any(record["location"] == "Madurai" for record in records):
            raise RuntimeError("listener bug")

    store.subscribe("customers", broken)
    store.update("customers", customer_id, {"location": "Madurai"})

    assert store.get("customers", customer_id)["location"] == "Madurai"


def test_commit_failure_is_rolled_back(store, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db.session, "commit", failing_commit)

    with pytest.raises(StoreError):
        store.create(
            "customers",
            {
                "name": "Ghost",
                "email": "ghost@example.com",
                "phone": "0000000000",
                "address": "Nowhere street",
                "location": "Void",
            },
        )

    monkeypatch.undo()
    assert store.snapshot("customers") == []


def test_snapshot_failure_after_commit_is_not_reported(store, customer_id, monkeypatch):
    store.subscribe("customers", lambda records: None)

    def failing_snapshot(collection):
        raise StoreError()

    monkeypatch.setattr(store, "snapshot", failing_snapshot)
    store.update("customers", customer_id, {"location": "Salem"})
    monkeypatch.undo()

    assert store.get("customers", customer_id)["location"] == "Salem"
