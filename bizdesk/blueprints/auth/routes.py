"""
Authentication Routes

Provides:
- /auth/login
- /auth/logout
- /auth/seed-admin (first system bootstrap)
- /auth/register   (admin creates admin/employee accounts)

Rules:
- Only active users may log in.
- seed-admin is only available while the system has no users at all.
"""

from flask import (
    Blueprint,
    render_template,
    redirect,
    url_for,
    flash,
    request,
)
from flask_login import (
    login_user,
    logout_user,
    login_required,
    current_user,
)

from ...accounts import register_user
from ...errors import BizdeskError
from ...extensions import get_store
from ...models import ROLE_ADMIN, USER_ROLES, User
from ...security import admin_required
from .. import flash_error


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


# ============================================================
# LOGIN
# ============================================================

@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    """Authenticate a user by email + password."""

    if current_user.is_authenticated:
        return redirect(url_for("dashboard.index"))

    if request.method == "POST":
        email = request.form.get("email", "").strip().lower()
        password = request.form.get("password", "")

        user = User.query.filter_by(email=email).first()

        if not user or not user.check_password(password):
            flash("Invalid email or password.", "danger")
            return render_template("auth/login.html"), 401

        if not user.is_active:
            flash("This account is disabled.", "danger")
            return render_template("auth/login.html"), 403

        login_user(user)
        flash("Logged in successfully.", "success")

        next_url = request.args.get("next")
        if not next_url or not next_url.startswith("/") or next_url.startswith("//"):
            next_url = url_for("dashboard.index")
        return redirect(next_url)

    return render_template("auth/login.html")


# ============================================================
# LOGOUT
# ============================================================

@auth_bp.route("/logout")
@login_required
def logout():
    """Log out the current user."""
    logout_user()
    flash("Logged out successfully.", "info")
    return redirect(url_for("auth.login"))


# ============================================================
# SEED FIRST ADMIN (BOOTSTRAP)
# ============================================================

@auth_bp.route("/seed-admin", methods=["GET", "POST"])
def seed_admin():
    """Bootstrap the FIRST admin. Blocked as soon as any user exists."""

    if User.query.count() > 0:
        flash("A user already exists.", "warning")
        return redirect(url_for("auth.login"))

    if request.method == "POST":
        try:
            register_user(
                get_store(),
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                role=ROLE_ADMIN,
                name=request.form.get("name"),
            )
        except BizdeskError as exc:
            flash_error(exc)
            return render_template("auth/seed_admin.html")

        flash("Administrator created. Please log in.", "success")
        return redirect(url_for("auth.login"))

    return render_template("auth/seed_admin.html")


# ============================================================
# REGISTER (ADMIN ONLY)
# ============================================================

@auth_bp.route("/register", methods=["GET", "POST"])
@login_required
@admin_required
def register():
    """Create a new admin or employee account."""

    if request.method == "POST":
        try:
            register_user(
                get_store(),
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                role=(request.form.get("role") or "").strip(),
                name=request.form.get("name"),
            )
        except BizdeskError as exc:
            flash_error(exc)
            return render_template("auth/register.html", roles=USER_ROLES)

        flash("User registered.", "success")
        return redirect(url_for("auth.register"))

    return render_template("auth/register.html", roles=USER_ROLES)
