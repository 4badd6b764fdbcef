"""
Application state and its single owner.

AppState is the explicit state struct for one signed-in browser session:
profile, part request cache, active view, search text and the in-flight
form markers. PortalController is the only code that mutates it. Routes
build a controller per request and call its operations.

State lifetime:
    Only the bearer token survives a reload (SessionStore). PortalStateStore
    keeps AppState per token in process memory; a token it has never seen
    (first request, or after a restart) gets a fresh, unreconciled state and
    the first screen request rebuilds it from the backend.

Consistency:
    - No profile without a token: _clear_session() drops token, profile,
      cache and search text and moves the router in one step.
    - Every "subscription required" signal, whatever triggered it, goes
      through _require_subscription().
    - Every rejected token (401) goes through _force_logout().
    - After registration, or a login that lands on plan selection, dashboard
      and profile stay closed (plan_choice_pending) until a profile fetch.

Usage (in a route):
    portal = get_portal()
    portal.start(requested_view=ViewState.DASHBOARD)
    portal.navigate(ViewState.DASHBOARD)
    if portal.view is not ViewState.DASHBOARD:
        return redirect(view_url(portal.view))
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Set

from core.exceptions import (
    AuthenticationError,
    DuplicateSubmissionError,
    GatewayError,
    NetworkError,
    PartsQuestError,
    SubscriptionRequiredError,
)
from core.gateway import GatewayResponse, RemoteGateway
from core.session_store import SessionStore, mask_token
from models.access import Feature, SubscriptionStatus, ViewState
from models.part_request import PartRequest, PartRequestDraft
from models.profile import ProfileUpdate, Registration, UserProfile
from services.access import (
    FetchOutcome,
    ReconcileInput,
    ReconcileTrigger,
    allowed_features,
    can_view,
    reconcile,
)
from services.view_router import ViewRouter
from services.workspace import PartRequestWorkspace
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


@dataclass
class AppState:
    """Everything the client knows about one session besides the token."""

    workspace: PartRequestWorkspace
    router: ViewRouter = field(default_factory=ViewRouter)
    profile: Optional[UserProfile] = None
    search_query: str = ""
    reconciled: bool = False
    plan_choice_pending: bool = False
    """Set after registration, or a login that lands on plan selection.
    Dashboard and profile stay closed until a profile fetch clears it."""

    in_flight: Set[str] = field(default_factory=set)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


DEFAULT_IDLE_SECONDS = 60 * 60


class PortalStateStore:
    """
    Thread-safe AppState registry keyed by bearer token.

    Flask serves requests on several threads; all registry access goes through
    one lock. State objects themselves are only touched by the controller.

    Eviction:
        A state not looked up for idle_seconds is dropped on the next lookup.
        Its token may still be valid; the next request with it gets a fresh
        state and reconciles from the backend again.
    """

    def __init__(
        self,
        gateway: RemoteGateway,
        idle_seconds: float = DEFAULT_IDLE_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        self._gateway = gateway
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._states: Dict[str, AppState] = {}
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def new_state(self) -> AppState:
        return AppState(workspace=PartRequestWorkspace(self._gateway))

    def for_token(self, token: Optional[str]) -> AppState:
        """State bound to token; anonymous callers get a throwaway state."""
        if not token:
            return self.new_state()

        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            state = self._states.get(token)
            if state is None:
                state = self.new_state()
                self._states[token] = state
                logger.debug(f"New state for {mask_token(token)}")
            self._last_seen[token] = now
            return state

    def bind(self, token: str, state: AppState) -> None:
        with self._lock:
            self._states[token] = state
            self._last_seen[token] = self._clock()

    def discard(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._states.pop(token, None)
            self._last_seen.pop(token, None)

    def _evict_idle(self, now: float) -> None:
        # Caller holds the lock
        cutoff = now - self.idle_seconds
        idle = [token for token, seen in self._last_seen.items() if seen < cutoff]
        for token in idle:
            del self._states[token]
            del self._last_seen[token]
        if idle:
            logger.info(f"Evicted {len(idle)} idle session state(s)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)


class PortalController:
    """
    Single owner of AppState mutations.

    Operations raise PartsQuestError subclasses after the state transition
    they imply has been applied, so a caller only needs to show the message
    and render portal.view.
    """

    def __init__(self, store: SessionStore, gateway: RemoteGateway, states: PortalStateStore):
        self._store = store
        self._gateway = gateway
        self._states = states
        self.state = states.for_token(store.get_token())
        # True once this controller fetched the profile (this request)
        self.profile_checked = False

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def token(self) -> Optional[str]:
        return self._store.get_token()

    @property
    def has_session(self) -> bool:
        return self._store.has_token()

    @property
    def view(self) -> ViewState:
        return self.state.router.current

    @property
    def home_view(self) -> ViewState:
        """Where "home" leads: dashboard when allowed, else the gate."""
        if not self.has_session:
            return ViewState.LOGIN if self.view is ViewState.LOGIN else ViewState.LANDING
        if can_view(ViewState.DASHBOARD, True, self.status, self.plan_choice_pending):
            return ViewState.DASHBOARD
        return ViewState.SUBSCRIPTION_SELECTION

    @property
    def plan_choice_pending(self) -> bool:
        return self.state.plan_choice_pending

    @property
    def profile(self) -> Optional[UserProfile]:
        return self.state.profile

    @property
    def status(self) -> Optional[SubscriptionStatus]:
        return self.state.profile.subscription_status if self.state.profile else None

    @property
    def features(self) -> FrozenSet[Feature]:
        features = allowed_features(self.has_session, self.status)
        if self.has_session and self.plan_choice_pending:
            # Plan selection must be completable whatever the embedded tier
            features = features | {Feature.CHECKOUT}
        return features

    @property
    def part_requests(self) -> List[PartRequest]:
        return self.state.workspace.items

    @property
    def search_query(self) -> str:
        return self.state.search_query

    def is_submitting(self, form: str) -> bool:
        with self.state.lock:
            return form in self.state.in_flight

    # =========================================================================
    # RECONCILIATION
    # =========================================================================

    def start(self, requested_view: Optional[ViewState] = None) -> ViewState:
        """
        Startup reconciliation, once per state.

        Without a token nothing is fetched and the view is LANDING. With a
        token the profile is fetched before any protected view can be shown.
        """
        if not self.has_session:
            self.state.router.apply(reconcile(ReconcileInput(has_token=False)))
            return self.view

        if self.state.reconciled:
            return self.view

        return self._reload(ReconcileTrigger.STARTUP, requested_view)

    def reload_profile(self, requested_view: Optional[ViewState] = None) -> ViewState:
        """
        Fetch the profile again and reconcile, whatever is cached.

        Used on every landing visit with a token, which is also where the
        payment provider sends the browser back after checkout.
        """
        return self._reload(ReconcileTrigger.PROFILE_RELOAD, requested_view)

    def _reload(self, trigger: ReconcileTrigger, requested_view: Optional[ViewState]) -> ViewState:
        token = self.token
        if not token:
            self.state.router.apply(reconcile(ReconcileInput(has_token=False)))
            return self.view

        response = self._gateway.fetch_profile(token)
        profile = _profile_from(response)
        self.profile_checked = True

        if profile is None:
            logger.warning(
                f"Profile fetch failed for {mask_token(token)} "
                f"(status={response.status_code}); clearing session"
            )
            decision = reconcile(ReconcileInput(
                has_token=True,
                fetch_outcome=FetchOutcome.FAILED,
                trigger=trigger,
                requested_view=requested_view,
            ))
            self._clear_session(decision.view)
            return self.view

        self.state.profile = profile
        self.state.plan_choice_pending = False
        decision = reconcile(ReconcileInput(
            has_token=True,
            fetch_outcome=FetchOutcome.SUCCEEDED,
            status=profile.subscription_status,
            trigger=trigger,
            requested_view=requested_view,
        ))
        self._apply(decision.view, decision.refresh_part_requests)
        self.state.reconciled = True
        return self.view

    # =========================================================================
    # AUTHENTICATION
    # =========================================================================

    def login(self, email: str, password: str) -> ViewState:
        """
        Sign in. "active" opens the dashboard; any other status goes to
        subscription selection.

        Raises:
            AuthenticationError: Bad credentials (no session created)
            GatewayError / NetworkError: Other failures (state unchanged)
        """
        with self.submission("login"):
            response = self._gateway.login(email, password).raise_for_error()
            token, profile = _session_from(response)

            self._adopt_session(token, profile)
            decision = reconcile(ReconcileInput(
                has_token=True,
                fetch_outcome=FetchOutcome.SUCCEEDED,
                status=profile.subscription_status,
                trigger=ReconcileTrigger.LOGIN,
            ))
            self.state.plan_choice_pending = decision.view is ViewState.SUBSCRIPTION_SELECTION
            self._apply(decision.view, decision.refresh_part_requests)
            logger.info(f"Login {mask_token(token)}: status={_status_label(profile)} -> {self.view.value}")
            return self.view

    def register(self, registration: Registration) -> ViewState:
        """
        Create an account. Always lands on subscription selection.

        The user embedded in the response is kept as-is; the profile is not
        fetched again here.
        """
        with self.submission("register"):
            response = self._gateway.register(registration.to_payload()).raise_for_error()
            token, profile = _session_from(response)

            self._adopt_session(token, profile)
            decision = reconcile(ReconcileInput(
                has_token=True,
                fetch_outcome=FetchOutcome.NOT_ATTEMPTED,
                status=profile.subscription_status,
                trigger=ReconcileTrigger.REGISTRATION,
            ))
            self.state.plan_choice_pending = True
            self.state.router.apply(decision)
            logger.info(f"Registered {mask_token(token)} -> {self.view.value}")
            return self.view

    def logout(self) -> ViewState:
        logger.info(f"Logout {mask_token(self.token)}")
        self._clear_session(ViewState.LOGIN)
        return self.view

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def navigate(self, target: ViewState) -> ViewState:
        """
        Explicit navigation, checked against access rules.

        Entering the dashboard with nothing cached loads the part request list.
        """
        self._route_to(target)
        if self.view is ViewState.DASHBOARD and not self.state.workspace.loaded:
            self._refresh_quietly()
        return self.view

    # =========================================================================
    # PROFILE
    # =========================================================================

    def update_profile(self, update: ProfileUpdate) -> UserProfile:
        """Send profile changes; the response replaces the profile wholesale."""
        token = self._require_token()
        with self.submission("profile"):
            response = self._gateway.update_profile(token, update.to_payload())
            self._raise_for(response)

            profile = _profile_from(response)
            if profile is None:
                raise NetworkError(
                    "The updated profile could not be read. Please reload.",
                    operation=response.operation,
                )
            self.state.profile = profile
            # A tier change in the response can revoke the current screen
            self._route_to(self.view)
            return profile

    # =========================================================================
    # PART REQUESTS
    # =========================================================================

    def refresh_part_requests(self) -> List[PartRequest]:
        token = self._require_token()
        try:
            return self.state.workspace.refresh(token)
        except GatewayError as e:
            self._handle_gateway_error(e)
            raise

    def create_part_request(self, draft: PartRequestDraft) -> List[PartRequest]:
        """
        Validate, submit, reload the list.

        Raises:
            PartRequestValidationError: No network call was made
            SubscriptionRequiredError: View moved to subscription selection
            AuthenticationError: Session cleared, view moved to login
            DuplicateSubmissionError: Same form already in flight
        """
        token = self._require_token()
        with self.submission("part_request"):
            try:
                return self.state.workspace.create(token, draft)
            except GatewayError as e:
                self._handle_gateway_error(e)
                raise

    # =========================================================================
    # SEARCH
    # =========================================================================

    def set_search_query(self, text: str) -> str:
        """Search field value, typed or from a voice transcript."""
        self._require_token()
        if Feature.PARTS_SEARCH not in self.features:
            self._require_subscription()
            raise SubscriptionRequiredError(operation="search")
        self.state.search_query = text
        return text

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    def start_checkout(self, price_id: str) -> str:
        """
        Open a hosted checkout session.

        Returns:
            The provider URL the browser must be redirected to (whole page)
        """
        token = self._require_token()
        if Feature.CHECKOUT not in self.features:
            raise PartsQuestError("Your subscription is already active.")

        with self.submission("checkout"):
            response = self._gateway.create_checkout_session(token, price_id)
            self._raise_for(response)
            checkout_url = response.data["checkout_url"]
            logger.info(f"Checkout session opened for {mask_token(token)}")
            return checkout_url

    # =========================================================================
    # IN-FLIGHT GUARD
    # =========================================================================

    @contextmanager
    def submission(self, form: str) -> Iterator[None]:
        """
        Coarse in-flight flag for one form.

        Raises:
            DuplicateSubmissionError: The same form is already being submitted
        """
        with self.state.lock:
            if form in self.state.in_flight:
                raise DuplicateSubmissionError(form)
            self.state.in_flight.add(form)
        try:
            yield
        finally:
            with self.state.lock:
                self.state.in_flight.discard(form)

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _apply(self, view: ViewState, refresh_part_requests: bool) -> None:
        self._route_to(view)
        if refresh_part_requests and self.view is ViewState.DASHBOARD:
            self._refresh_quietly()

    def _route_to(self, target: ViewState) -> ViewState:
        return self.state.router.navigate(
            target, self.has_session, self.status, self.state.plan_choice_pending
        )

    def _refresh_quietly(self) -> None:
        """Background list load; failures are logged, not shown."""
        try:
            self.refresh_part_requests()
        except SubscriptionRequiredError:
            logger.info("Part request list refused: subscription required")
        except AuthenticationError:
            logger.info("Part request list refused: session rejected")
        except GatewayError as e:
            logger.warning(f"Part request list failed: {e.message}")

    def _handle_gateway_error(self, error: GatewayError) -> None:
        if isinstance(error, SubscriptionRequiredError):
            self._require_subscription()
        elif isinstance(error, AuthenticationError):
            self._force_logout()

    def _raise_for(self, response: GatewayResponse) -> None:
        if response.error is not None:
            self._handle_gateway_error(response.error)
            raise response.error

    def _require_subscription(self) -> None:
        """The one transition to subscription selection for 403 signals."""
        self.state.router.require_subscription()

    def _force_logout(self) -> None:
        logger.warning(f"Session {mask_token(self.token)} rejected by backend; logging out")
        self._clear_session(ViewState.LOGIN)

    def _adopt_session(self, token: str, profile: UserProfile) -> None:
        previous = self.token
        if previous and previous != token:
            self._states.discard(previous)
        self._store.set_token(token)
        self.state.profile = profile
        self.state.workspace.clear()
        self.state.search_query = ""
        self.state.reconciled = True
        self.state.plan_choice_pending = False
        self._states.bind(token, self.state)

    def _clear_session(self, view: ViewState) -> None:
        """Token, profile, cache and search text go together."""
        self._states.discard(self.token)
        self._store.clear()
        self.state.profile = None
        self.state.workspace.clear()
        self.state.search_query = ""
        self.state.reconciled = False
        self.state.plan_choice_pending = False
        self.state.router.reset(view)

    def _require_token(self) -> str:
        token = self.token
        if not token:
            self._clear_session(ViewState.LOGIN)
            raise AuthenticationError("Please sign in to continue.")
        return token


def _profile_from(response: GatewayResponse) -> Optional[UserProfile]:
    if not response.ok:
        return None
    user = response.data.get("user")
    if not isinstance(user, dict):
        return None
    return UserProfile.from_dict(user)


def _session_from(response: GatewayResponse):
    token = response.data.get("token")
    user = response.data.get("user")
    if not isinstance(token, str) or not token or not isinstance(user, dict):
        logger.error(f"{response.operation} response missing token or user")
        raise GatewayError(
            "Unexpected response from server. Please try again.",
            status_code=response.status_code,
            operation=response.operation,
        )
    return token, UserProfile.from_dict(user)


def _status_label(profile: UserProfile) -> str:
    return profile.subscription_status.value if profile.subscription_status else "unknown"
