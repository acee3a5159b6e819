"""
Customers blueprint package.

Exposes customers_bp for app factory registration; routes live in routes.py.
"""

from .routes import customers_bp  # noqa: F401
