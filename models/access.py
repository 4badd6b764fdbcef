"""
Access-control vocabulary: screens, subscription tiers and features.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ViewState(Enum):
    """
    The screen currently shown. Exactly one is active at a time.

    Lifecycle:
        LANDING -> LOGIN/REGISTER -> (SUBSCRIPTION_SELECTION | DASHBOARD) <-> PROFILE
        logout and a rejected session go to LOGIN
    """

    LANDING = "landing"
    LOGIN = "login"
    REGISTER = "register"
    SUBSCRIPTION_SELECTION = "subscription-selection"
    DASHBOARD = "dashboard"
    PROFILE = "profile"

    @property
    def is_public(self) -> bool:
        """Reachable without a session."""
        return self in PUBLIC_VIEWS

    @property
    def is_protected(self) -> bool:
        """Requires a session AND a usable subscription tier."""
        return self in PROTECTED_VIEWS


PUBLIC_VIEWS = frozenset({ViewState.LANDING, ViewState.LOGIN, ViewState.REGISTER})
PROTECTED_VIEWS = frozenset({ViewState.DASHBOARD, ViewState.PROFILE})


class SubscriptionStatus(Enum):
    """Server-authoritative subscription tier."""

    FREE = "free"
    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SubscriptionStatus"]:
        """
        Map the backend's string onto a tier.

        Unknown or missing values return None; access control treats None
        exactly like INACTIVE.
        """
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def grants_workspace(self) -> bool:
        """Dashboard and profile are open to this tier."""
        return self in (SubscriptionStatus.ACTIVE, SubscriptionStatus.FREE)


class Feature(Enum):
    """Feature surfaces gated by subscription tier."""

    PART_REQUESTS = "part_requests"
    PROFILE = "profile"
    PARTS_SEARCH = "parts_search"
    UNLIMITED_SEARCH = "unlimited_search"
    VOICE_CALLING = "voice_calling"
    CHECKOUT = "checkout"
