"""
Invoices blueprint package.

Exposes invoices_bp for app factory registration; routes live in routes.py.
"""

from .routes import invoices_bp  # noqa: F401
