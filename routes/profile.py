"""
Profile route.

GET shows the signed-in user's details, POST sends changes. The backend's
answer replaces the whole profile; email cannot be changed here.
"""

from flask import Blueprint, flash, render_template, request

from core.exceptions import (
    AuthenticationError,
    DuplicateSubmissionError,
    GatewayError,
    SubscriptionRequiredError,
)
from models.access import ViewState
from models.profile import ProfileUpdate
from modules import forms
from routes.helpers import (
    SUBSCRIPTION_REQUIRED_MESSAGE,
    enter_view,
    flash_error,
    get_portal,
    redirect_to_view,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

profile_bp = Blueprint("profile", __name__)


@profile_bp.route("/profile", methods=["GET", "POST"])
def profile():
    """
    GET: Profile form prefilled from the current profile
    POST: Update, then show the refreshed profile
    """
    portal = get_portal()
    denied = enter_view(portal, ViewState.PROFILE)
    if denied:
        return denied

    if request.method == "GET":
        return render_template(
            "profile.html",
            profile=portal.profile,
            form=ProfileUpdate.from_profile(portal.profile),
        )

    update = forms.profile_update(request.form)

    try:
        portal.update_profile(update)
    except AuthenticationError as e:
        flash_error(e.message, "info")
        return redirect_to_view(portal.view)
    except SubscriptionRequiredError:
        flash(SUBSCRIPTION_REQUIRED_MESSAGE, "warning")
        return redirect_to_view(portal.view)
    except DuplicateSubmissionError as e:
        flash_error(e.message, "warning")
        return redirect_to_view(ViewState.PROFILE)
    except GatewayError as e:
        logger.warning(f"Profile update failed: {e}")
        flash_error(e.message)
        return render_template("profile.html", profile=portal.profile, form=update), 400

    flash("Profile updated successfully!", "success")
    return redirect_to_view(portal.view)
