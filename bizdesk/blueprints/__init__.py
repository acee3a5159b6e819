"""
Blueprints package.

flash_error() is shared by every blueprint: domain errors become a flash
message (category from the error class) and the route redirects.
"""

from __future__ import annotations

from flask import flash

from ..errors import BizdeskError


def flash_error(exc: BizdeskError) -> None:
    message = exc.message[:1].upper() + exc.message[1:]
    flash(message, exc.flash_category)
