"""
Products blueprint package.

Exposes products_bp for app factory registration; routes live in routes.py.
"""

from .routes import products_bp  # noqa: F401
