"""
Dashboard routes.

Handles:
- /dashboard                - part request list, search, voice, upgrade tab
- /dashboard/part-requests  - create a part request
- /dashboard/search         - set the search text (typed or voice transcript)

A 403 from the backend on any part request call moves the user to plan
selection with an explanatory message; the cached list is kept as it was.
"""

from flask import (
    Blueprint,
    current_app,
    flash,
    render_template,
    request,
)

from core.exceptions import (
    AuthenticationError,
    DuplicateSubmissionError,
    GatewayError,
    PartRequestValidationError,
    SubscriptionRequiredError,
)
from models.access import Feature, ViewState
from models.part_request import Urgency
from modules import forms
from modules.voice import detect_voice_capture
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

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/dashboard", methods=["GET"])
def dashboard():
    """Main workspace. Active or free subscription required."""
    portal = get_portal()
    denied = enter_view(portal, ViewState.DASHBOARD)
    if denied:
        return denied

    features = portal.features
    voice = detect_voice_capture(
        request.headers.get("User-Agent"),
        locale=current_app.config.get("VOICE_LOCALE", "en-US"),
    )

    return render_template(
        "dashboard.html",
        part_requests=portal.part_requests,
        part_requests_loaded=portal.state.workspace.loaded,
        search_query=portal.search_query,
        urgencies=[u.value for u in Urgency],
        features=features,
        can_voice_call=Feature.VOICE_CALLING in features,
        can_upgrade=Feature.CHECKOUT in features,
        voice=voice,
        pro_plan=current_app.config["PLAN_CATALOG"].pro,
        submitting=portal.is_submitting("part_request"),
    )


@dashboard_bp.route("/dashboard/part-requests", methods=["POST"])
def create_part_request():
    """Validate locally, submit, reload the list."""
    portal = get_portal()
    denied = enter_view(portal, ViewState.DASHBOARD)
    if denied:
        return denied

    draft = forms.part_request_draft(
        request.form,
        current_app.config.get("MAX_DESCRIPTION_LENGTH", 2000),
    )

    try:
        portal.create_part_request(draft)
    except PartRequestValidationError as e:
        for message in e.errors.values():
            flash_error(message)
        return redirect_to_view(ViewState.DASHBOARD)
    except SubscriptionRequiredError:
        flash(SUBSCRIPTION_REQUIRED_MESSAGE, "warning")
        return redirect_to_view(portal.view)
    except AuthenticationError as e:
        flash_error(e.message, "info")
        return redirect_to_view(portal.view)
    except DuplicateSubmissionError as e:
        flash_error(e.message, "warning")
        return redirect_to_view(ViewState.DASHBOARD)
    except GatewayError as e:
        logger.warning(f"Part request creation failed: {e}")
        flash_error(e.message)
        return redirect_to_view(ViewState.DASHBOARD)

    flash("Part request created successfully!", "success")
    return redirect_to_view(ViewState.DASHBOARD)


@dashboard_bp.route("/dashboard/search", methods=["POST"])
def search():
    """Search field value; the voice widget posts its transcript here too."""
    portal = get_portal()
    denied = enter_view(portal, ViewState.DASHBOARD)
    if denied:
        return denied

    query = forms.sanitize_text(
        request.form.get("query", ""),
        current_app.config.get("MAX_SEARCH_LENGTH", 500),
    )
    source = "voice" if request.form.get("source") == "voice" else "typed"

    try:
        portal.set_search_query(query)
    except SubscriptionRequiredError:
        flash(SUBSCRIPTION_REQUIRED_MESSAGE, "warning")
        return redirect_to_view(portal.view)

    if query:
        logger.debug(f"Search text set ({source}, {len(query)} chars)")
        if source == "voice":
            flash(f'Voice input received: "{query}"', "info")

    return redirect_to_view(ViewState.DASHBOARD)
