"""
Unit tests for the view router state machine.
"""

import pytest

from models.access import SubscriptionStatus, ViewState
from services.access import AccessDecision
from services.view_router import ViewRouter


# Fixtures

@pytest.fixture
def router():
    return ViewRouter()


class TestViewRouter:
    """Transitions from decisions, navigation and 403 signals."""

    def test_initial_state_is_landing(self, router):
        assert router.current is ViewState.LANDING

    def test_apply_decision(self, router):
        view = router.apply(AccessDecision(view=ViewState.DASHBOARD, features=frozenset()))

        assert view is ViewState.DASHBOARD
        assert router.current is ViewState.DASHBOARD

    def test_navigate_public_view_without_session(self, router):
        view = router.navigate(ViewState.REGISTER, False, None)

        assert view is ViewState.REGISTER

    def test_navigate_dashboard_without_session_goes_to_login(self, router):
        view = router.navigate(ViewState.DASHBOARD, False, None)

        assert view is ViewState.LOGIN
        assert router.current is ViewState.LOGIN

    @pytest.mark.parametrize("status", [SubscriptionStatus.INACTIVE, None])
    def test_navigate_dashboard_unsubscribed_goes_to_subscription_selection(self, router, status):
        router.navigate(ViewState.DASHBOARD, True, status)

        assert router.current is ViewState.SUBSCRIPTION_SELECTION

    @pytest.mark.parametrize("target", [ViewState.DASHBOARD, ViewState.PROFILE])
    def test_pending_plan_choice_keeps_workspace_closed(self, router, target):
        view = router.navigate(target, True, SubscriptionStatus.FREE, plan_choice_pending=True)

        assert view is ViewState.SUBSCRIPTION_SELECTION

    def test_back_to_dashboard_from_profile(self, router):
        router.navigate(ViewState.PROFILE, True, SubscriptionStatus.FREE)
        view = router.navigate(ViewState.DASHBOARD, True, SubscriptionStatus.FREE)

        assert view is ViewState.DASHBOARD

    def test_require_subscription_overrides_dashboard(self, router):
        router.navigate(ViewState.DASHBOARD, True, SubscriptionStatus.ACTIVE)
        router.require_subscription()

        assert router.current is ViewState.SUBSCRIPTION_SELECTION

    def test_reset_returns_to_logged_out_view(self, router):
        router.navigate(ViewState.DASHBOARD, True, SubscriptionStatus.ACTIVE)

        router.reset(ViewState.LOGIN)
        assert router.current is ViewState.LOGIN

        router.reset()
        assert router.current is ViewState.LANDING
