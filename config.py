"""
Application configuration.
This module defines the configuration settings for the Flask application, including database connection, secret key,
logging level and the business defaults used by the quotation and invoice forms. It uses environment variables for
sensitive information and defaults for development. In production, make sure to set the appropriate environment
variables and secure the secret key.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Base configuration shared by all environments."""

    # IMPORTANT: change this in production
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me-please")

    # Database: SQLite for development (simple file in project folder)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'bizdesk.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CSRF protection for forms
    WTF_CSRF_ENABLED = True

    # App UI name (used in templates)
    APP_NAME = "Business Dashboard"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Form defaults
    DEFAULT_QUOTATION_VALIDITY_DAYS = int(os.environ.get("DEFAULT_QUOTATION_VALIDITY_DAYS", "30"))
    DEFAULT_PAYMENT_TERMS = "100% advance payment"
    DEFAULT_WARRANTY_PERIOD = "1 year standard warranty"

    # Single fixed money format (Indian grouping, no decimals)
    CURRENCY_SYMBOL = "₹"
