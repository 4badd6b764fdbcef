"""
Main routes (landing page, health).
"""

from flask import Blueprint, current_app, flash, render_template

from models.access import ViewState
from routes.helpers import enter_view, get_portal, redirect_to_view

main_bp = Blueprint("main", __name__)


@main_bp.route("/", methods=["GET"])
def landing():
    """
    Landing page.

    Every visit with a stored token fetches the profile again and sends the
    user wherever their subscription now allows (dashboard or plan selection,
    or login when the token is no longer valid). The payment provider sends
    the browser back here after checkout, so a new subscription is picked up
    on that visit.
    """
    portal = get_portal()

    if portal.has_session:
        portal.reload_profile()
        if not portal.has_session:
            flash("Your session has expired. Please sign in again.", "info")
        return redirect_to_view(portal.home_view)

    denied = enter_view(portal, ViewState.LANDING)
    if denied:
        return denied

    return render_template("landing.html")


@main_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    portal = get_portal()
    states = current_app.config["PORTAL_STATES"]

    return {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "backend": current_app.config["GATEWAY"].base_url,
        "checks": {
            "session": "present" if portal.has_session else "absent",
            "cached_sessions": len(states),
        },
    }
