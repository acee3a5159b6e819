"""
Seed helpers for the business dashboard.

- Inserts a small demo catalogue (solar products) and a few customers.
- Idempotent: collections that already hold records are left untouched.
- Goes through the EntityStore so subscribers see the new records.
"""

from decimal import Decimal

DEMO_CUSTOMERS = [
    {
        "name": "Sharma Residency",
        "email": "accounts@sharmaresidency.in",
        "phone": "9876543210",
        "address": "12 MG Road, Indiranagar",
        "location": "Bengaluru",
        "scope": "5 kW rooftop installation",
    },
    {
        "name": "Green Valley School",
        "email": "admin@greenvalley.edu.in",
        "phone": "9123456780",
        "address": "Plot 44, Sector 7",
        "location": "Pune",
        "scope": None,
    },
]

DEMO_PRODUCTS = [
    {
        "name": "Mono PERC Panel 540W",
        "type": "solar_panel",
        "voltage": "41.6V",
        "rating": "540W",
        "make": "Waaree",
        "quantity": 120,
        "unit": "piece",
        "price": Decimal("14500.00"),
    },
    {
        "name": "Hybrid Inverter 5kW",
        "type": "inverter",
        "voltage": "48V",
        "rating": "5kW",
        "make": "Luminous",
        "quantity": 15,
        "unit": "piece",
        "price": Decimal("62000.00"),
    },
    {
        "name": "Lithium Battery 100Ah",
        "type": "battery",
        "voltage": "51.2V",
        "rating": "100Ah",
        "make": "Exide",
        "quantity": 20,
        "unit": "piece",
        "price": Decimal("85000.00"),
    },
    {
        "name": "DC Cable 4 sq mm",
        "type": "cable",
        "voltage": "1500V",
        "rating": "4 sq mm",
        "make": "Polycab",
        "quantity": 500,
        "unit": "meter",
        "price": Decimal("48.00"),
    },
]


def seed_demo_data(store) -> dict:
    """Insert demo customers and products into empty collections. Returns counts added."""
    added = {"customers": 0, "products": 0}

    if not store.snapshot("customers"):
        for record in DEMO_CUSTOMERS:
            store.create("customers", record)
            added["customers"] += 1

    if not store.snapshot("products"):
        for record in DEMO_PRODUCTS:
            store.create("products", record)
            added["products"] += 1

    return added
