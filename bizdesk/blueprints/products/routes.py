"""
Product (inventory) routes.

- list: newest first, search (name/make/voltage/rating) + type filter
- create: admin only entry point
- edit: any user
- adjust: signed stock delta, never below zero
- delete: admin only
"""

from __future__ import annotations

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from flask_login import login_required

from ...context import current_context
from ...errors import BizdeskError
from ...inventory import (
    adjust_quantity,
    create_product,
    delete_product,
    is_low_stock,
    update_product,
)
from ...models import PRODUCT_TYPES, PRODUCT_UNITS
from ...security import admin_required
from ...utils import filter_products, parse_optional_int
from .. import flash_error

products_bp = Blueprint("products", __name__, url_prefix="/products")


def _form_context(product, is_new: bool) -> dict:
    return {
        "product": product,
        "is_new": is_new,
        "product_types": PRODUCT_TYPES,
        "product_units": PRODUCT_UNITS,
    }


@products_bp.route("/")
@login_required
def list_products():
    ctx = current_context()
    term = (request.args.get("q") or "").strip()
    type_filter = (request.args.get("type") or "all").strip()

    products = filter_products(ctx.store.snapshot("products"), term, type_filter)
    products.sort(key=lambda p: p["created_at"], reverse=True)

    return render_template(
        "products/list.html",
        products=products,
        q=term,
        type_filter=type_filter,
        product_types=PRODUCT_TYPES,
        product_units=PRODUCT_UNITS,
        is_low_stock=is_low_stock,
    )


@products_bp.route("/new", methods=["GET", "POST"])
@login_required
@admin_required
def create():
    if request.method == "POST":
        try:
            create_product(current_context(), request.form)
        except BizdeskError as exc:
            flash_error(exc)
            return render_template("products/form.html", **_form_context(request.form, True))

        flash("Product added successfully.", "success")
        return redirect(url_for("products.list_products"))

    return render_template("products/form.html", **_form_context({}, True))


@products_bp.route("/<int:product_id>/edit", methods=["GET", "POST"])
@login_required
def edit(product_id: int):
    ctx = current_context()
    product = ctx.store.get("products", product_id)
    if product is None:
        abort(404)

    if request.method == "POST":
        try:
            update_product(ctx, product_id, request.form)
        except BizdeskError as exc:
            flash_error(exc)
            return render_template("products/form.html", **_form_context(request.form, False))

        flash("Product updated successfully.", "success")
        return redirect(url_for("products.list_products"))

    return render_template("products/form.html", **_form_context(product, False))


@products_bp.route("/<int:product_id>/adjust", methods=["POST"])
@login_required
def adjust(product_id: int):
    delta = parse_optional_int(request.form.get("delta"))
    if delta is None:
        flash("Enter a whole number to add or remove.", "danger")
        return redirect(url_for("products.list_products"))

    try:
        adjust_quantity(current_context(), product_id, delta)
    except BizdeskError as exc:
        flash_error(exc)
    else:
        action = "added to" if delta > 0 else "removed from"
        flash(f"{abs(delta)} unit(s) {action} inventory.", "success")
    return redirect(url_for("products.list_products"))


@products_bp.route("/<int:product_id>/delete", methods=["POST"])
@login_required
@admin_required
def delete(product_id: int):
    try:
        delete_product(current_context(), product_id)
    except BizdeskError as exc:
        flash_error(exc)
    else:
        flash("Product deleted successfully.", "success")
    return redirect(url_for("products.list_products"))
