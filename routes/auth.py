"""
Authentication routes.

Handles:
- /login    - sign-in form and action
- /register - sign-up form and action
- /logout   - drop the session

Login and registration deliberately land on different screens: a login with
an active subscription goes straight to the dashboard, a new account always
goes to plan selection first.
"""

from flask import Blueprint, render_template, request, session

from core.exceptions import (
    DuplicateSubmissionError,
    GatewayError,
    ValidationError,
)
from models.access import ViewState
from modules import forms
from routes.helpers import enter_view, flash_error, get_portal, redirect_to_view
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    """
    GET: Sign-in form
    POST: Authenticate, then dashboard (active) or plan selection (anything else)
    """
    portal = get_portal()

    if request.method == "GET":
        denied = enter_view(portal, ViewState.LOGIN)
        if denied:
            return denied
        return render_template("auth.html", mode="login", form={})

    email = forms.sanitize_text(request.form.get("email", ""), forms.MAX_FIELD_LENGTH)
    password = request.form.get("password", "")

    if not email or not password:
        flash_error("Email and password are required.")
        return render_template("auth.html", mode="login", form={"email": email}), 400

    try:
        view = portal.login(email, password)
    except DuplicateSubmissionError as e:
        flash_error(e.message, "warning")
        return redirect_to_view(ViewState.LOGIN)
    except GatewayError as e:
        logger.info(f"Login failed (status={e.status_code})")
        flash_error(e.message)
        return render_template("auth.html", mode="login", form={"email": email}), 400

    session.permanent = True
    return redirect_to_view(view)


@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    """
    GET: Sign-up form
    POST: Create the account, then plan selection (always)
    """
    portal = get_portal()

    if request.method == "GET":
        denied = enter_view(portal, ViewState.REGISTER)
        if denied:
            return denied
        return render_template("auth.html", mode="register", form={})

    # Echo back everything but the password
    echo = {key: value for key, value in request.form.items() if key != "password"}

    try:
        view = portal.register(forms.registration(request.form))
    except ValidationError as e:
        for message in e.errors.values():
            flash_error(message)
        return render_template("auth.html", mode="register", form=echo), 400
    except DuplicateSubmissionError as e:
        flash_error(e.message, "warning")
        return redirect_to_view(ViewState.REGISTER)
    except GatewayError as e:
        logger.info(f"Registration failed (status={e.status_code})")
        flash_error(e.message)
        return render_template("auth.html", mode="register", form=echo), 400

    session.permanent = True
    return redirect_to_view(view)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Clear token, profile and cached part requests together."""
    view = get_portal().logout()
    return redirect_to_view(view)
