from decimal import Decimal

import pytest

from bizdesk import create_app
from bizdesk.accounts import register_user
from bizdesk.context import AppContext
from bizdesk.extensions import db, get_store
from bizdesk.models import ROLE_ADMIN, ROLE_EMPLOYEE


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "WTF_CSRF_ENABLED": False,
            "SECRET_KEY": "test",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return get_store()


@pytest.fixture
def admin_ctx(store):
    return AppContext(store=store, role=ROLE_ADMIN, email="admin@example.com")


@pytest.fixture
def employee_ctx(store):
    return AppContext(store=store, role=ROLE_EMPLOYEE, email="staff@example.com")


@pytest.fixture
def users(store):
    register_user(store, "admin@example.com", "admin-pass", ROLE_ADMIN, "Admin")
    register_user(store, "staff@example.com", "staff-pass", ROLE_EMPLOYEE, "Staff")
    return {
        "admin": ("admin@example.com", "admin-pass"),
        "employee": ("staff@example.com", "staff-pass"),
    }


@pytest.fixture
def login(client, users):
    def _login(role="admin"):
        email, password = users[role]
        return client.post("/auth/login", data={"email": email, "password": password})

    return _login


@pytest.fixture
def customer_id(store):
    return store.create(
        "customers",
        {
            "name": "Acme Traders",
            "email": "billing@acme.example",
            "phone": "9876543210",
            "address": "14 Station Road",
            "location": "Chennai",
            "scope": None,
        },
    )


@pytest.fixture
def make_product(store):
    def _make(name, price, quantity, product_type="solar_panel"):
        return store.create(
            "products",
            {
                "name": name,
                "type": product_type,
                "voltage": "24V",
                "rating": "330W",
                "make": "Acme",
                "quantity": quantity,
                "unit": "piece",
                "price": Decimal(price),
            },
        )

    return _make


@pytest.fixture
def products(make_product):
    """Panel A: 100.00 x 10 on hand, Inverter B: 50.00 x 5 on hand."""
    return {
        "a": make_product("Panel A", "100.00", 10),
        "b": make_product("Inverter B", "50.00", 5, product_type="inverter"),
    }
