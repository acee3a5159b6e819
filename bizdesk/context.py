"""
bizdesk/context.py

Explicit application context threaded into every domain operation:
the entity store plus the acting user's role. Domain code never reads
current_user / current_app itself; routes build the context once per
request with current_context().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flask_login import current_user

from .errors import PermissionDeniedError
from .extensions import get_store
from .models import ROLE_ADMIN, ROLE_EMPLOYEE
from .store import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContext:
    store: EntityStore
    role: str = ROLE_EMPLOYEE
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def require_admin(self, action: str) -> None:
        if not self.is_admin:
            logger.warning("Denied %r for %s (role=%s)", action, self.email, self.role)
            raise PermissionDeniedError(action)


def current_context() -> AppContext:
    """Context for the logged-in user of the current request."""
    return AppContext(
        store=get_store(),
        role=getattr(current_user, "role", ROLE_EMPLOYEE),
        email=getattr(current_user, "email", None),
    )
