import pytest

from bizdesk.customers import create_customer, delete_customer, update_customer, validate_customer
from bizdesk.errors import NotFoundError, PermissionDeniedError, ValidationError
from bizdesk.lifecycle import create_quotation
from bizdesk.pricing import LineRequest

CUSTOMER_FORM = {
    "name": "Sunrise Apartments",
    "email": "office@sunrise.example",
    "phone": "9988776655",
    "address": "22 Lake View Road",
    "location": "Kochi",
    "scope": "",
}


def test_validate_customer_blank_scope_is_none():
    record = validate_customer(CUSTOMER_FORM)
    assert record["scope"] is None
    assert record["name"] == "Sunrise Apartments"


@pytest.mark.parametrize(
    "field, value",
    [
        ("name", "A"),
        ("address", "Road"),
        ("location", "K"),
        ("phone", "12345"),
        ("email", "not-an-email"),
    ],
)
def test_validate_customer_rejects(field, value):
    with pytest.raises(ValidationError) as excinfo:
        validate_customer({**CUSTOMER_FORM, field: value})
    assert excinfo.value.field == field


def test_only_admin_creates_and_deletes(store, admin_ctx, employee_ctx):
    with pytest.raises(PermissionDeniedError):
        create_customer(employee_ctx, CUSTOMER_FORM)

    customer_id = create_customer(admin_ctx, CUSTOMER_FORM)

    with pytest.raises(PermissionDeniedError):
        delete_customer(employee_ctx, customer_id)

    delete_customer(admin_ctx, customer_id)
    assert store.get("customers", customer_id) is None


def test_employee_updates_customer(store, employee_ctx, customer_id):
    update_customer(employee_ctx, customer_id, {**CUSTOMER_FORM, "scope": "10 kW"})

    customer = store.get("customers", customer_id)
    assert customer["scope"] == "10 kW"
    assert customer["location"] == "Kochi"


def test_update_missing_customer(employee_ctx):
    with pytest.raises(NotFoundError):
        update_customer(employee_ctx, 77, CUSTOMER_FORM)


def test_deleting_customer_keeps_quotations(store, admin_ctx, customer_id, products):
    quotation_id = create_quotation(admin_ctx, customer_id, [LineRequest(products["a"], 1)])

    delete_customer(admin_ctx, customer_id)

    assert store.get("quotations", quotation_id)["customer_id"] == customer_id
