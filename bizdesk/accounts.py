"""User registration shared by the register page, seed-admin bootstrap and the CLI."""

from __future__ import annotations

import logging
from typing import Any

from .customers import EMAIL_RE
from .errors import ValidationError
from .models import USER_ROLES, User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def register_user(store, email: str, password: str, role: str, name: str | None = None) -> Any:
    email = (email or "").strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("invalid email address", field="email")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    if role not in USER_ROLES:
        raise ValidationError(f"role must be one of: {', '.join(USER_ROLES)}", field="role")
    if User.query.filter_by(email=email).first() is not None:
        raise ValidationError("a user with this email already exists", field="email")

    user_id = store.create(
        "users",
        {"email": email, "password": password, "role": role, "name": (name or "").strip() or None},
    )
    logger.info("Registered %s user %s", role, email)
    return user_id
