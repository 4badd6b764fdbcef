"""
View router: the finite-state controller over ViewState.

Transitions come from three places:
    (a) access decisions from reconciliation (apply)
    (b) explicit user navigation, checked against access rules (navigate)
    (c) "subscription required" signals from the backend (require_subscription)

Initial state is LANDING. There is no terminal state; logout and a rejected
session both go to LOGIN.

The router does not talk to the backend. Every method returns the view that
is active afterwards; loading the part request list on entering the
dashboard is the controller's job.
"""

from __future__ import annotations

from typing import Optional

from models.access import SubscriptionStatus, ViewState
from services.access import AccessDecision, can_view, fallback_view
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class ViewRouter:
    """
    Holds the active screen. Exactly one view is active at a time.

    Attributes:
        current: The active ViewState
    """

    def __init__(self, initial: ViewState = ViewState.LANDING):
        self._current = initial

    @property
    def current(self) -> ViewState:
        return self._current

    def apply(self, decision: AccessDecision) -> ViewState:
        """Move to the view chosen by reconciliation."""
        return self._move(decision.view, reason="access decision")

    def navigate(
        self,
        target: ViewState,
        has_session: bool,
        status: Optional[SubscriptionStatus],
        plan_choice_pending: bool = False
    ) -> ViewState:
        """
        Explicit user navigation (links, "back to dashboard", plan toggles).

        A refused protected screen falls back to LOGIN without a session and
        to SUBSCRIPTION_SELECTION with one.
        """
        if can_view(target, has_session, status, plan_choice_pending):
            destination = target
        else:
            destination = fallback_view(has_session)
            logger.info(
                f"Navigation to {target.value} refused "
                f"(session={has_session}, status={status.value if status else None}, "
                f"plan_choice_pending={plan_choice_pending}); "
                f"redirecting to {destination.value}"
            )

        return self._move(destination, reason="navigation")

    def require_subscription(self) -> ViewState:
        """Backend said "upgrade required" (HTTP 403)."""
        return self._move(ViewState.SUBSCRIPTION_SELECTION, reason="subscription required")

    def reset(self, view: ViewState = ViewState.LANDING) -> ViewState:
        """Logged-out default."""
        return self._move(view, reason="session cleared")

    def _move(self, destination: ViewState, reason: str) -> ViewState:
        previous = self._current
        self._current = destination
        if previous is not destination:
            logger.info(f"view {previous.value} -> {destination.value} ({reason})")
        return destination
