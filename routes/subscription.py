"""
Subscription routes.

Handles:
- /subscribe          - plan selection screen
- /subscribe/checkout - open a hosted checkout session and leave the app

The checkout hand-off is a whole-page redirect to the payment provider, not
an in-app transition. When the provider sends the user back to "/", the
landing route reconciles and picks up the new subscription status.
"""

from flask import Blueprint, current_app, redirect, render_template, request

from core.exceptions import (
    AuthenticationError,
    DuplicateSubmissionError,
    PartsQuestError,
)
from models.access import Feature, ViewState
from routes.helpers import enter_view, flash_error, get_portal, redirect_to_view
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

subscription_bp = Blueprint("subscription", __name__)


@subscription_bp.route("/subscribe", methods=["GET"])
def select_plan():
    """Plan catalog. Requires a session; open to every tier."""
    portal = get_portal()
    denied = enter_view(portal, ViewState.SUBSCRIPTION_SELECTION)
    if denied:
        return denied

    return render_template(
        "subscription.html",
        plans=current_app.config["PLAN_CATALOG"].plans,
        can_checkout=Feature.CHECKOUT in portal.features,
    )


@subscription_bp.route("/subscribe/checkout", methods=["POST"])
def checkout():
    """Create a checkout session and redirect the browser to the provider."""
    portal = get_portal()
    portal.start()

    price_id = request.form.get("price_id", "")
    plan = current_app.config["PLAN_CATALOG"].find_by_price_id(price_id)
    if plan is None:
        logger.warning(f"Checkout requested for unknown price id {price_id!r}")
        flash_error("Unknown plan. Please choose one of the plans below.")
        return redirect_to_view(ViewState.SUBSCRIPTION_SELECTION)

    try:
        checkout_url = portal.start_checkout(plan.price_id)
    except AuthenticationError as e:
        flash_error(e.message, "info")
        return redirect_to_view(portal.view)
    except DuplicateSubmissionError as e:
        flash_error(e.message, "warning")
        return redirect_to_view(ViewState.SUBSCRIPTION_SELECTION)
    except PartsQuestError as e:
        flash_error(e.message)
        return redirect_to_view(portal.home_view)

    logger.info(f"Redirecting to checkout for plan {plan.key}")
    return redirect(checkout_url, code=303)
