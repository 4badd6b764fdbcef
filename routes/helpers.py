"""
Shared route plumbing.

Every screen route follows the same pattern:

    portal = get_portal()
    denied = enter_view(portal, ViewState.DASHBOARD)
    if denied:
        return denied
    return render_template(...)

enter_view() runs startup reconciliation (once per session state) and the
access check, and returns a redirect when the requested screen is not the
one the user may see.
"""

from typing import Optional

from flask import current_app, flash, g, redirect, session, url_for

from core.session_store import SessionStore
from models.access import ViewState
from services.portal import PortalController


VIEW_ENDPOINTS = {
    ViewState.LANDING: "main.landing",
    ViewState.LOGIN: "auth.login",
    ViewState.REGISTER: "auth.register",
    ViewState.SUBSCRIPTION_SELECTION: "subscription.select_plan",
    ViewState.DASHBOARD: "dashboard.dashboard",
    ViewState.PROFILE: "profile.profile",
}

SUBSCRIPTION_REQUIRED_MESSAGE = (
    "Subscription required to use this feature. Please choose a plan."
)


def get_portal() -> PortalController:
    """Controller for the current request (one per request)."""
    if "portal" not in g:
        g.portal = PortalController(
            SessionStore(session),
            current_app.config["GATEWAY"],
            current_app.config["PORTAL_STATES"],
        )
    return g.portal


def view_url(view: ViewState) -> str:
    return url_for(VIEW_ENDPOINTS[view])


def redirect_to_view(view: ViewState):
    return redirect(view_url(view))


def enter_view(portal: PortalController, target: ViewState):
    """
    Reconcile, then navigate to target.

    Returns:
        A redirect response when the user ends up elsewhere, else None
    """
    portal.start(requested_view=target)
    # A reconciliation that just ran already weighed a protected target; a
    # 403 on its list call must not be walked back by a second navigate
    if not (portal.profile_checked and target.is_protected):
        portal.navigate(target)

    # Entering the dashboard may itself hit a 403, so compare the final view
    if portal.view is not target:
        if portal.view is ViewState.SUBSCRIPTION_SELECTION and target.is_protected:
            flash(SUBSCRIPTION_REQUIRED_MESSAGE, "warning")
        elif portal.view is ViewState.LOGIN and not target.is_public:
            flash("Please sign in to continue.", "info")
        return redirect_to_view(portal.view)

    return None


def flash_error(message: Optional[str], category: str = "error") -> None:
    flash(message or "Something went wrong. Please try again.", category)
