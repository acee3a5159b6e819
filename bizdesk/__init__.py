"""
bizdesk/__init__.py

Flask application factory for the business-management dashboard
(customers, inventory products, quotations, invoices).

- Server-side rendering; every business rule runs in the domain modules
  (pricing, lifecycle, invoicing, inventory, customers), never in templates.
- SQLite for dev; any SQLAlchemy URL via DATABASE_URL.
- UI is never trusted: role checks are enforced server-side.

Navigation:
- Sidebar items are filtered for visibility (admin-only entry points hidden
  from employees), BUT permissions are enforced in routes / domain code.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import click
from flask import Flask, redirect, url_for
from flask_login import current_user

from .extensions import STORE_KEY, csrf, db, login_manager, migrate
from .models import ROLE_EMPLOYEE, USER_ROLES, User
from .store import EntityStore
from .utils import format_currency, format_date

# Blueprint imports kept inside create_app() to reduce import side effects.


# -------------------------------------------------------------------
# NAVIGATION STRUCTURE (UI visibility only; security enforced in routes)
# -------------------------------------------------------------------

NAV_SECTIONS = [
    {
        "key": "overview",
        "label": "Overview",
        "items": [
            {"label": "Dashboard", "endpoint": "dashboard.index", "admin_only": False},
        ],
    },
    {
        "key": "sales",
        "label": "Sales",
        "items": [
            {"label": "Customers", "endpoint": "customers.list_customers", "admin_only": False},
            {"label": "Add Customer", "endpoint": "customers.create", "admin_only": True},
            {"label": "Quotations", "endpoint": "quotations.list_quotations", "admin_only": False},
            {"label": "New Quotation", "endpoint": "quotations.create", "admin_only": False},
            {"label": "Invoices", "endpoint": "invoices.list_invoices", "admin_only": False},
        ],
    },
    {
        "key": "inventory",
        "label": "Inventory",
        "items": [
            {"label": "Products", "endpoint": "products.list_products", "admin_only": False},
            {"label": "Add Product", "endpoint": "products.create", "admin_only": True},
        ],
    },
    {
        "key": "admin",
        "label": "Administration",
        "items": [
            {"label": "Register User", "endpoint": "auth.register", "admin_only": True},
        ],
    },
]


def _configure_logging(app: Flask) -> None:
    """Apply LOG_LEVEL to the app logger and the bizdesk.* module loggers."""
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)

    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(level)
    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        package_logger.addHandler(handler)


def create_app(config_overrides: Mapping[str, Any] | None = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object("config.Config")
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message_category = "info"

    # One entity store per app (its subscriptions are app-local)
    app.extensions[STORE_KEY] = EntityStore(db)

    @login_manager.user_loader
    def load_user(user_id: str) -> User | None:
        """Load user for Flask-Login."""
        try:
            return db.session.get(User, int(user_id))
        except ValueError:
            return None

    # ----------------------------------------------------------------------
    # Blueprints
    # ----------------------------------------------------------------------
    from .blueprints.auth import auth_bp
    from .blueprints.customers import customers_bp
    from .blueprints.dashboard import dashboard_bp
    from .blueprints.invoices import invoices_bp
    from .blueprints.products import products_bp
    from .blueprints.quotations import quotations_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(quotations_bp)
    app.register_blueprint(invoices_bp)

    # ----------------------------------------------------------------------
    # Template helpers
    # ----------------------------------------------------------------------
    @app.template_filter("currency")
    def currency_filter(amount):
        return format_currency(amount, app.config.get("CURRENCY_SYMBOL", "₹"))

    app.add_template_filter(format_date, "date")

    @app.context_processor
    def inject_globals():
        """
        Inject navigation filtered by user.

        SECURITY NOTE:
        - This only filters visibility. Routes enforce permissions.
        """
        visible_sections = []

        if current_user.is_authenticated:
            for section in NAV_SECTIONS:
                visible_items = [
                    item
                    for item in section["items"]
                    if not item.get("admin_only", False) or current_user.is_admin
                ]
                if visible_items:
                    visible_sections.append(
                        {"key": section["key"], "label": section["label"], "items": visible_items}
                    )

        return {"config": app.config, "nav_sections": visible_sections}

    # ----------------------------------------------------------------------
    # CLI
    # ----------------------------------------------------------------------
    @app.cli.command("create-user")
    @click.argument("email")
    @click.argument("password")
    @click.option("--role", type=click.Choice(USER_ROLES), default=ROLE_EMPLOYEE, show_default=True)
    @click.option("--name", default=None, help="Display name.")
    def create_user_command(email, password, role, name):
        """Register a user (use --role admin for the first account)."""
        from .accounts import register_user
        from .errors import BizdeskError

        try:
            user_id = register_user(app.extensions[STORE_KEY], email, password, role, name)
        except BizdeskError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"User {email} created (id={user_id}, role={role}).")

    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Seed demo customers and products."""
        from .seed import seed_demo_data

        added = seed_demo_data(app.extensions[STORE_KEY])
        click.echo(f"Demo data seeded: {added['customers']} customers, {added['products']} products.")

    # ----------------------------------------------------------------------
    # Home
    # ----------------------------------------------------------------------
    @app.route("/")
    def index():
        """Home: redirect to dashboard or login."""
        if current_user.is_authenticated:
            return redirect(url_for("dashboard.index"))
        return redirect(url_for("auth.login"))

    return app
