"""
Customer routes.

- list (search by name/email/location/phone)
- create (admin only entry point)
- edit (any user)
- delete (admin only)
"""

from __future__ import annotations

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from flask_login import login_required

from ...context import current_context
from ...customers import create_customer, delete_customer, update_customer
from ...errors import BizdeskError
from ...security import admin_required
from ...utils import filter_customers
from .. import flash_error

customers_bp = Blueprint("customers", __name__, url_prefix="/customers")


@customers_bp.route("/")
@login_required
def list_customers():
    ctx = current_context()
    term = (request.args.get("q") or "").strip()

    customers = filter_customers(ctx.store.snapshot("customers"), term)
    customers.sort(key=lambda c: c["name"].lower())

    return render_template("customers/list.html", customers=customers, q=term)


@customers_bp.route("/new", methods=["GET", "POST"])
@login_required
@admin_required
def create():
    if request.method == "POST":
        try:
            create_customer(current_context(), request.form)
        except BizdeskError as exc:
            flash_error(exc)
            return render_template("customers/form.html", customer=request.form, is_new=True)

        flash("Customer added successfully.", "success")
        return redirect(url_for("customers.list_customers"))

    return render_template("customers/form.html", customer={}, is_new=True)


@customers_bp.route("/<int:customer_id>/edit", methods=["GET", "POST"])
@login_required
def edit(customer_id: int):
    ctx = current_context()
    customer = ctx.store.get("customers", customer_id)
    if customer is None:
        abort(404)

    if request.method == "POST":
        try:
            update_customer(ctx, customer_id, request.form)
        except BizdeskError as exc:
            flash_error(exc)
            return render_template("customers/form.html", customer=request.form, is_new=False)

        flash("Customer updated successfully.", "success")
        return redirect(url_for("customers.list_customers"))

    return render_template("customers/form.html", customer=customer, is_new=False)


@customers_bp.route("/<int:customer_id>/delete", methods=["POST"])
@login_required
@admin_required
def delete(customer_id: int):
    try:
        delete_customer(current_context(), customer_id)
    except BizdeskError as exc:
        flash_error(exc)
    else:
        flash("Customer deleted successfully.", "success")
    return redirect(url_for("customers.list_customers"))
