"""
Form input helpers.

Request form values are sanitized (markup stripped with bleach, trimmed,
length-capped) and turned into model objects. Validation rules live on the
models; this module only does the form-to-model step.
"""

from typing import Mapping

import bleach

from core.exceptions import ProfileValidationError
from models.part_request import PartRequestDraft, DEFAULT_URGENCY
from models.profile import ProfileUpdate, Registration


MAX_FIELD_LENGTH = 200
MIN_PASSWORD_LENGTH = 6


def sanitize_text(text: str, max_length: int = None) -> str:
    """Sanitize user input text."""
    if not text:
        return ""
    text = text.strip()
    text = bleach.clean(text, tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def part_request_draft(form: Mapping[str, str], max_description_length: int) -> PartRequestDraft:
    """Unvalidated draft from the dashboard form."""
    return PartRequestDraft(
        part_number=sanitize_text(form.get("part_number", ""), MAX_FIELD_LENGTH),
        description=sanitize_text(form.get("description", ""), max_description_length),
        quantity=form.get("quantity", "1"),
        target_price=form.get("target_price") or None,
        urgency=form.get("urgency") or DEFAULT_URGENCY.value,
    )


def profile_update(form: Mapping[str, str]) -> ProfileUpdate:
    return ProfileUpdate(
        first_name=sanitize_text(form.get("first_name", ""), MAX_FIELD_LENGTH),
        last_name=sanitize_text(form.get("last_name", ""), MAX_FIELD_LENGTH),
        company=sanitize_text(form.get("company", ""), MAX_FIELD_LENGTH),
        phone=sanitize_text(form.get("phone", ""), MAX_FIELD_LENGTH),
    )


def registration(form: Mapping[str, str]) -> Registration:
    """
    Sign-up form value.

    Raises:
        ProfileValidationError: Missing email or short password
    """
    email = sanitize_text(form.get("email", ""), MAX_FIELD_LENGTH)
    # Passwords are sent verbatim
    password = form.get("password", "")

    errors = {}
    if not email or "@" not in email:
        errors["email"] = "A valid email address is required."
    if len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    if errors:
        raise ProfileValidationError(errors)

    return Registration(
        email=email,
        password=password,
        first_name=sanitize_text(form.get("first_name", ""), MAX_FIELD_LENGTH),
        last_name=sanitize_text(form.get("last_name", ""), MAX_FIELD_LENGTH),
        company=sanitize_text(form.get("company", ""), MAX_FIELD_LENGTH),
        phone=sanitize_text(form.get("phone", ""), MAX_FIELD_LENGTH),
    )
