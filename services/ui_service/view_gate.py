"""
View gate for the dashboard - combines session state with the appointment fetch.

Per mount:
    UNKNOWN        -> LOADING_SESSION (placeholder, nothing else)
    ANONYMOUS      -> REDIRECTING (navigate to the auth page)
    AUTHENTICATED  -> FETCHING -> POPULATED | EMPTY | ERROR

The decision is re-evaluated on every session store transition while mounted.
A session whose token is past ``expires_at``, or that the data service rejects,
is expired through the store, which lands the gate in REDIRECTING.
Each fetch takes a generation number; a result whose generation is no longer
current, or that arrives after unmount, is dropped.
"""

from enum import Enum
from typing import Callable, List, Optional

from config.app_config import AppConfig, get_config
from services.appointment_service.fetcher import AppointmentFetcher
from services.appointment_service.models import Appointment
from services.auth_service.models import Session, SessionState, SessionStatus
from services.auth_service.session_store import SessionStore
from services.exceptions import FetchError, SessionExpiredError
from utils.logging_config import APPOINTMENT_FETCH, get_error_tracker, get_logger


class GateStatus(Enum):
    """What the dashboard should render"""
    UNMOUNTED = "unmounted"
    LOADING_SESSION = "loading_session"
    REDIRECTING = "redirecting"
    FETCHING = "fetching"
    POPULATED = "populated"
    EMPTY = "empty"
    ERROR = "error"


class DashboardView:
    """
    Protected dashboard controller.

    Collaborators:
        navigator: object with ``navigate(route)``
        notifier: object with ``error(title, description)``
    """

    def __init__(self, store: SessionStore, fetcher: AppointmentFetcher, navigator, notifier,
                 config: Optional[AppConfig] = None, error_tracker=None):
        self.store = store
        self.fetcher = fetcher
        self.navigator = navigator
        self.notifier = notifier
        self.config = config or get_config()
        self.logger = get_logger(__name__)
        self._error_tracker = error_tracker

        self.status = GateStatus.UNMOUNTED
        self.appointments: List[Appointment] = []
        self.error_message: Optional[str] = None
        self.session: Optional[Session] = None

        self._mounted = False
        self._generation = 0
        self._fetched_for: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def error_tracker(self):
        if self._error_tracker is None:
            self._error_tracker = get_error_tracker()
        return self._error_tracker

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def booking_route(self) -> str:
        return self.config.appointments.booking_route

    @property
    def show_book_now(self) -> bool:
        """Empty list (not an error) offers the booking shortcut"""
        return self.status is GateStatus.EMPTY

    def mount(self) -> GateStatus:
        if self._mounted:
            return self.status
        self._mounted = True
        self._fetched_for = None
        self._unsubscribe = self.store.subscribe(self._on_session_change)
        self._evaluate(self.store.state)
        return self.status

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        self._generation += 1
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.status = GateStatus.UNMOUNTED

    def refresh(self) -> GateStatus:
        """Fetch again for the current session, replacing the displayed set"""
        if self._mounted and self.session is not None:
            self._load(self.session.user_id)
        return self.status

    def _on_session_change(self, state: SessionState) -> None:
        self._evaluate(state)

    def _evaluate(self, state: SessionState) -> None:
        if not self._mounted:
            return

        if state.status is SessionStatus.UNKNOWN:
            self.status = GateStatus.LOADING_SESSION
            return

        if state.status is SessionStatus.ANONYMOUS:
            was_redirecting = self.status is GateStatus.REDIRECTING
            self._generation += 1
            self._fetched_for = None
            self.session = None
            self.appointments = []
            self.error_message = None
            self.status = GateStatus.REDIRECTING
            if not was_redirecting:
                self.navigator.navigate(self.config.auth.auth_route)
            return

        session = state.session
        if session.is_expired():
            self.logger.info("Session token past its expiry", extra={"user_id": session.user_id})
            self.store.expire()
            return

        self.session = session
        if self._fetched_for == session.user_id:
            return
        self._fetched_for = session.user_id
        self._load(session.user_id)

    def _is_current(self, generation: int) -> bool:
        return self._mounted and generation == self._generation

    def _load(self, user_id: str) -> None:
        self._generation += 1
        generation = self._generation
        self.status = GateStatus.FETCHING
        self.error_message = None

        try:
            appointments = self.fetcher.fetch(user_id)
        except SessionExpiredError:
            if not self._is_current(generation):
                return
            # The store transition re-enters _evaluate and redirects
            self.logger.info("Data service rejected the session token", extra={"user_id": user_id})
            self.store.expire()
            return
        except FetchError as e:
            if not self._is_current(generation):
                self.logger.debug("Discarding stale appointment fetch failure")
                return
            self.error_tracker.track_error(e, APPOINTMENT_FETCH, user_id=user_id)
            self.notifier.error(self.config.ui.fetch_error_title, self.config.ui.fetch_error_message)
            self.appointments = []
            self.error_message = self.config.ui.fetch_error_message
            self.status = GateStatus.ERROR
            return

        if not self._is_current(generation):
            self.logger.debug("Discarding stale appointment fetch result")
            return

        self.appointments = appointments
        self.status = GateStatus.POPULATED if appointments else GateStatus.EMPTY
