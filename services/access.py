"""
Access evaluation and session reconciliation.

Everything here is a pure function of its inputs: no I/O, no Flask, no
mutable state. The PortalController gathers the inputs (token presence,
profile fetch outcome, trigger) and applies the returned AccessDecision.

Reconciliation policy:

    trigger           token  fetch      status           -> view
    ----------------  -----  ---------  ---------------  ------------------------
    any               no     -          -                landing (no network call)
    startup/reload    yes    failed     -                login, clear session
    startup/reload    yes    succeeded  active|free      dashboard + refresh list
                                                         (profile if requested)
    startup/reload    yes    succeeded  other/unknown    subscription-selection
    login             yes    succeeded  active           dashboard, refresh list
    login             yes    succeeded  other/unknown    subscription-selection
    registration      yes    -          anything         subscription-selection

Login trusts the returned status directly and only "active" opens the
dashboard there. Registration never opens the dashboard and never re-fetches
the profile: the user embedded in the registration response is authoritative.
A requested view never overrides subscription-selection.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from models.access import Feature, SubscriptionStatus, ViewState


class FetchOutcome(Enum):
    """Result of the profile fetch that fed a reconciliation."""

    NOT_ATTEMPTED = "not_attempted"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


class ReconcileTrigger(Enum):
    """What caused the reconciliation."""

    STARTUP = "startup"
    PROFILE_RELOAD = "profile_reload"
    LOGIN = "login"
    REGISTRATION = "registration"


@dataclass(frozen=True)
class ReconcileInput:
    has_token: bool
    fetch_outcome: FetchOutcome = FetchOutcome.NOT_ATTEMPTED
    status: Optional[SubscriptionStatus] = None
    trigger: ReconcileTrigger = ReconcileTrigger.STARTUP
    requested_view: Optional[ViewState] = None


@dataclass(frozen=True)
class AccessDecision:
    """What the controller must do next."""

    view: ViewState
    features: FrozenSet[Feature]
    clear_session: bool = False
    refresh_part_requests: bool = False


_ACTIVE_FEATURES = frozenset({
    Feature.PART_REQUESTS,
    Feature.PROFILE,
    Feature.PARTS_SEARCH,
    Feature.UNLIMITED_SEARCH,
    Feature.VOICE_CALLING,
})
_FREE_FEATURES = frozenset({
    Feature.PART_REQUESTS,
    Feature.PROFILE,
    Feature.PARTS_SEARCH,
    Feature.CHECKOUT,
})
_UNSUBSCRIBED_FEATURES = frozenset({Feature.CHECKOUT})


def allowed_features(has_session: bool, status: Optional[SubscriptionStatus]) -> FrozenSet[Feature]:
    """Feature set for a session/tier combination. No session means nothing."""
    if not has_session:
        return frozenset()
    if status is SubscriptionStatus.ACTIVE:
        return _ACTIVE_FEATURES
    if status is SubscriptionStatus.FREE:
        return _FREE_FEATURES
    return _UNSUBSCRIBED_FEATURES


def can_view(
    view: ViewState,
    has_session: bool,
    status: Optional[SubscriptionStatus],
    plan_choice_pending: bool = False
) -> bool:
    """
    Whether a screen may be shown.

    Public screens are always reachable. Subscription selection needs a
    session. Dashboard and profile need a session and an active or free tier,
    and stay closed while a plan choice is pending after registration or a
    login that landed on plan selection.
    """
    if view.is_public:
        return True
    if not has_session:
        return False
    if view.is_protected:
        if plan_choice_pending:
            return False
        return status is not None and status.grants_workspace
    return True


def fallback_view(has_session: bool) -> ViewState:
    """Where a denied protected screen sends the user."""
    return ViewState.SUBSCRIPTION_SELECTION if has_session else ViewState.LOGIN


def reconcile(inputs: ReconcileInput) -> AccessDecision:
    """Derive the next screen from session and subscription data."""
    if not inputs.has_token:
        return AccessDecision(view=ViewState.LANDING, features=frozenset())

    if inputs.trigger is ReconcileTrigger.REGISTRATION:
        return _subscription_selection(inputs.status)

    if inputs.fetch_outcome is not FetchOutcome.SUCCEEDED:
        return AccessDecision(view=ViewState.LOGIN, features=frozenset(), clear_session=True)

    status = inputs.status

    if inputs.trigger is ReconcileTrigger.LOGIN:
        if status is SubscriptionStatus.ACTIVE:
            return _workspace(status, inputs.requested_view)
        return _subscription_selection(status)

    if status is not None and status.grants_workspace:
        return _workspace(status, inputs.requested_view)
    return _subscription_selection(status)


def _workspace(status: SubscriptionStatus, requested_view: Optional[ViewState]) -> AccessDecision:
    view = ViewState.PROFILE if requested_view is ViewState.PROFILE else ViewState.DASHBOARD
    return AccessDecision(
        view=view,
        features=allowed_features(True, status),
        refresh_part_requests=view is ViewState.DASHBOARD,
    )


def _subscription_selection(status: Optional[SubscriptionStatus]) -> AccessDecision:
    return AccessDecision(
        view=ViewState.SUBSCRIPTION_SELECTION,
        features=allowed_features(True, status),
    )
