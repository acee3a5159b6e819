"""
bizdesk/security.py

Access control helpers.

Key rules:
- UI is never trusted; all permission checks are server-side.
- Admin: full access (including delete customer/product and the
  "add customer" / "add product" / "register user" entry points).
- Employee: every other read/write.

Domain functions enforce the same rules through AppContext.require_admin();
the decorator here only short-circuits whole admin pages with a 403.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Tuple

from flask import render_template
from flask_login import current_user


def _forbidden() -> Tuple[str, int]:
    """Render a consistent 403 page."""
    return render_template("errors/403.html"), 403


def is_admin() -> bool:
    """Return True if current user is authenticated and admin."""
    return bool(current_user.is_authenticated and getattr(current_user, "is_admin", False))


def admin_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator: admin-only."""
    @wraps(view_func)
    def wrapper(*args: Any, **kwargs: Any):
        if not is_admin():
            return _forbidden()
        return view_func(*args, **kwargs)

    return wrapper
