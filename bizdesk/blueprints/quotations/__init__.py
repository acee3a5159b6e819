"""
Quotations blueprint package.

Exposes quotations_bp for app factory registration; routes live in routes.py.
"""

from .routes import quotations_bp  # noqa: F401
