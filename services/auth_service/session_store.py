"""
Session store - single source of truth for who is signed in.

Lifecycle: UNKNOWN (loading) -> AUTHENTICATED(session) | ANONYMOUS.
Every transition replaces the state object in one assignment and then
notifies subscribers synchronously, in registration order.
One store exists per browser session; BookingUI keeps it in st.session_state.
"""

from typing import Callable, List, Optional

from services.auth_service.models import Session, SessionState, SessionStatus
from services.exceptions import AuthError
from utils.logging_config import (
    SESSION_INITIALIZE, SESSION_SIGN_OUT, get_error_tracker, get_logger, log_auth_event
)

SessionListener = Callable[[SessionState], None]


class SessionStore:
    """
    Injectable session state container.

    ``identity`` is the remote identity service adapter; it must provide
    ``get_session()`` and ``sign_out()``.
    """

    def __init__(self, identity, error_tracker=None):
        self.identity = identity
        self.logger = get_logger(__name__)
        self._error_tracker = error_tracker
        self._state = SessionState.unknown()
        self._listeners: List[SessionListener] = []
        self._initialized = False

    @property
    def error_tracker(self):
        if self._error_tracker is None:
            self._error_tracker = get_error_tracker()
        return self._error_tracker

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def session(self) -> Optional[Session]:
        return self._state.session

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener for state transitions

        Returns:
            Callable that removes the listener; safe to call more than once
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, new_state: SessionState) -> None:
        self._state = new_state
        # Listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(new_state)

    def initialize(self) -> SessionState:
        """
        Resolve the initial state from the identity service.
        Only the first call reaches the network; later calls return the current state.
        """
        if self._initialized:
            return self._state
        self._initialized = True

        try:
            session = self.identity.get_session()
        except AuthError as e:
            self.error_tracker.track_error(e, SESSION_INITIALIZE)
            session = None

        if session is not None:
            log_auth_event(self.logger, "initialized", session.user_id, status="authenticated")
            self._transition(SessionState.authenticated(session))
        else:
            log_auth_event(self.logger, "initialized", status="anonymous")
            self._transition(SessionState.anonymous())
        return self._state

    def on_signed_in(self, session: Session) -> None:
        """Sign-in success callback; the only way into AUTHENTICATED after startup"""
        self._initialized = True
        current = self._state.session
        if self._state.is_authenticated and current == session:
            return
        log_auth_event(self.logger, "signed_in", session.user_id)
        self._transition(SessionState.authenticated(session))

    def sign_out(self) -> None:
        """
        Sign out remotely and locally.
        The local transition to ANONYMOUS happens whether or not the remote call succeeds.
        """
        user_id = self._state.session.user_id if self._state.session else None
        try:
            self.identity.sign_out()
        except AuthError as e:
            self.error_tracker.track_error(e, SESSION_SIGN_OUT, user_id=user_id)
        finally:
            self._initialized = True
            log_auth_event(self.logger, "signed_out", user_id)
            self._transition(SessionState.anonymous())

    def expire(self) -> None:
        """Session ended outside the app (token expired or revoked)"""
        if self._state.status is SessionStatus.ANONYMOUS:
            return
        user_id = self._state.session.user_id if self._state.session else None
        self._initialized = True
        log_auth_event(self.logger, "expired", user_id)
        self._transition(SessionState.anonymous())

