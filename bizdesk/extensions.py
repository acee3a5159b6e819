"""
Central place for Flask extensions and the per-app entity store handle.

Extension instances are module globals (initialized in create_app()).
The entity store is NOT a module global: each app gets its own EntityStore,
registered under app.extensions[STORE_KEY], so subscriptions never leak
between app instances.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import current_app
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect

if TYPE_CHECKING:
    from .store import EntityStore

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()

STORE_KEY = "bizdesk_store"


def get_store() -> "EntityStore":
    """Return the entity store bound to the current app."""
    return current_app.extensions[STORE_KEY]
