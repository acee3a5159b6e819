"""
Dashboard routes: aggregate statistics.

The LiveStats view is created lazily per app (first request, under a lock so
concurrent first requests share one instance) and then kept current by store
subscriptions, so a page view never recomputes from scratch.
"""

from __future__ import annotations

import threading

from flask import Blueprint, current_app, jsonify, render_template
from flask_login import login_required

from ...extensions import get_store
from ...stats import LiveStats

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")

LIVE_STATS_KEY = "bizdesk_live_stats"

_live_stats_lock = threading.Lock()


def _live_stats() -> LiveStats:
    live = current_app.extensions.get(LIVE_STATS_KEY)
    if live is not None:
        return live

    with _live_stats_lock:
        live = current_app.extensions.get(LIVE_STATS_KEY)
        if live is None:
            live = LiveStats(get_store())
            current_app.extensions[LIVE_STATS_KEY] = live
    return live


@dashboard_bp.route("/")
@login_required
def index():
    return render_template("dashboard/index.html", stats=_live_stats().stats)


@dashboard_bp.route("/stats.json")
@login_required
def stats_json():
    stats = dict(_live_stats().stats)
    stats["total_sales"] = str(stats["total_sales"])
    stats["monthly_sales"] = [
        {"month": row["month"], "amount": str(row["amount"])} for row in stats["monthly_sales"]
    ]
    return jsonify(stats)
