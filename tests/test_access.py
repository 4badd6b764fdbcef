"""
Unit tests for access evaluation and session reconciliation.

The decision function is pure, so these tests cover the policy table
directly without any gateway or Flask involvement.
"""

import pytest

from models.access import Feature, SubscriptionStatus, ViewState
from services.access import (
    FetchOutcome,
    ReconcileInput,
    ReconcileTrigger,
    allowed_features,
    can_view,
    fallback_view,
    reconcile,
)


ALL_STATUSES = [SubscriptionStatus.ACTIVE, SubscriptionStatus.FREE, SubscriptionStatus.INACTIVE, None]
WORKSPACE_STATUSES = [SubscriptionStatus.ACTIVE, SubscriptionStatus.FREE]
GATED_STATUSES = [SubscriptionStatus.INACTIVE, None]


def fetched(status, trigger=ReconcileTrigger.STARTUP, requested_view=None):
    return ReconcileInput(
        has_token=True,
        fetch_outcome=FetchOutcome.SUCCEEDED,
        status=status,
        trigger=trigger,
        requested_view=requested_view,
    )


class TestReconcileWithoutToken:
    """No token means landing and nothing else."""

    @pytest.mark.parametrize("trigger", list(ReconcileTrigger))
    def test_no_token_goes_to_landing(self, trigger):
        decision = reconcile(ReconcileInput(has_token=False, trigger=trigger))

        assert decision.view is ViewState.LANDING
        assert decision.features == frozenset()
        assert decision.refresh_part_requests is False
        assert decision.clear_session is False

    def test_no_token_ignores_requested_dashboard(self):
        decision = reconcile(ReconcileInput(
            has_token=False,
            requested_view=ViewState.DASHBOARD,
        ))

        assert decision.view is ViewState.LANDING


class TestReconcileStartup:
    """Startup and reload: active/free open the workspace, everything else is gated."""

    def test_fetch_failure_clears_session_and_goes_to_login(self):
        decision = reconcile(ReconcileInput(
            has_token=True,
            fetch_outcome=FetchOutcome.FAILED,
        ))

        assert decision.view is ViewState.LOGIN
        assert decision.clear_session is True
        assert decision.features == frozenset()

    @pytest.mark.parametrize("status", WORKSPACE_STATUSES)
    def test_workspace_statuses_open_dashboard_and_refresh(self, status):
        decision = reconcile(fetched(status))

        assert decision.view is ViewState.DASHBOARD
        assert decision.refresh_part_requests is True
        assert Feature.PART_REQUESTS in decision.features

    @pytest.mark.parametrize("status", GATED_STATUSES)
    def test_other_statuses_go_to_subscription_selection(self, status):
        decision = reconcile(fetched(status))

        assert decision.view is ViewState.SUBSCRIPTION_SELECTION
        assert decision.refresh_part_requests is False
        assert decision.features == frozenset({Feature.CHECKOUT})

    @pytest.mark.parametrize("status", GATED_STATUSES)
    @pytest.mark.parametrize("requested", [ViewState.DASHBOARD, ViewState.PROFILE])
    def test_requested_view_never_overrides_subscription_selection(self, status, requested):
        decision = reconcile(fetched(status, requested_view=requested))

        assert decision.view is ViewState.SUBSCRIPTION_SELECTION

    def test_requested_profile_is_honoured_for_active_user(self):
        decision = reconcile(fetched(SubscriptionStatus.ACTIVE, requested_view=ViewState.PROFILE))

        assert decision.view is ViewState.PROFILE
        assert decision.refresh_part_requests is False

    def test_profile_reload_follows_startup_rules(self):
        decision = reconcile(fetched(SubscriptionStatus.FREE, trigger=ReconcileTrigger.PROFILE_RELOAD))

        assert decision.view is ViewState.DASHBOARD


class TestReconcileLogin:
    """Login trusts the returned status: only "active" opens the dashboard."""

    def test_login_active_goes_to_dashboard(self):
        decision = reconcile(fetched(SubscriptionStatus.ACTIVE, trigger=ReconcileTrigger.LOGIN))

        assert decision.view is ViewState.DASHBOARD
        assert decision.refresh_part_requests is True

    @pytest.mark.parametrize("status", [SubscriptionStatus.INACTIVE, SubscriptionStatus.FREE, None])
    def test_login_not_active_goes_to_subscription_selection(self, status):
        decision = reconcile(fetched(status, trigger=ReconcileTrigger.LOGIN))

        assert decision.view is ViewState.SUBSCRIPTION_SELECTION
        assert decision.refresh_part_requests is False


class TestReconcileRegistration:
    """A new account always picks a plan first, whatever the response says."""

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_registration_always_goes_to_subscription_selection(self, status):
        decision = reconcile(ReconcileInput(
            has_token=True,
            fetch_outcome=FetchOutcome.NOT_ATTEMPTED,
            status=status,
            trigger=ReconcileTrigger.REGISTRATION,
            requested_view=ViewState.DASHBOARD,
        ))

        assert decision.view is ViewState.SUBSCRIPTION_SELECTION
        assert decision.refresh_part_requests is False
        assert decision.clear_session is False


class TestAccessPredicates:
    """can_view / allowed_features / fallback_view."""

    @pytest.mark.parametrize("status", ALL_STATUSES)
    @pytest.mark.parametrize("view", [ViewState.DASHBOARD, ViewState.PROFILE])
    def test_protected_views_require_active_or_free(self, view, status):
        expected = status in WORKSPACE_STATUSES

        assert can_view(view, True, status) is expected

    @pytest.mark.parametrize("status", WORKSPACE_STATUSES)
    @pytest.mark.parametrize("view", [ViewState.DASHBOARD, ViewState.PROFILE])
    def test_pending_plan_choice_closes_protected_views(self, view, status):
        assert can_view(view, True, status, plan_choice_pending=True) is False
        assert can_view(ViewState.SUBSCRIPTION_SELECTION, True, status, plan_choice_pending=True)

    @pytest.mark.parametrize("view", list(ViewState))
    def test_without_session_only_public_views(self, view):
        assert can_view(view, False, SubscriptionStatus.ACTIVE) is view.is_public

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_subscription_selection_open_to_any_session(self, status):
        assert can_view(ViewState.SUBSCRIPTION_SELECTION, True, status) is True

    def test_feature_sets_by_tier(self):
        active = allowed_features(True, SubscriptionStatus.ACTIVE)
        free = allowed_features(True, SubscriptionStatus.FREE)

        assert Feature.VOICE_CALLING in active
        assert Feature.CHECKOUT not in active
        assert Feature.VOICE_CALLING not in free
        assert Feature.CHECKOUT in free
        assert allowed_features(False, SubscriptionStatus.ACTIVE) == frozenset()

    def test_fallback_view(self):
        assert fallback_view(True) is ViewState.SUBSCRIPTION_SELECTION
        assert fallback_view(False) is ViewState.LOGIN
