"""
Navigation auth button state, derived from the session store.
"""

from enum import Enum
from typing import Optional

from config.app_config import AuthConfig, get_config
from services.auth_service.models import SessionStatus
from services.auth_service.session_store import SessionStore
from utils.logging_config import get_logger, log_user_interaction


class AuthButtonState(Enum):
    LOADING = "loading"
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


_STATE_BY_STATUS = {
    SessionStatus.UNKNOWN: AuthButtonState.LOADING,
    SessionStatus.AUTHENTICATED: AuthButtonState.SIGNED_IN,
    SessionStatus.ANONYMOUS: AuthButtonState.SIGNED_OUT,
}


class AuthButton:
    """Sign in / dashboard + sign out control"""

    def __init__(self, store: SessionStore, navigator, config: Optional[AuthConfig] = None):
        self.store = store
        self.navigator = navigator
        self.config = config or get_config().auth
        self.logger = get_logger(__name__)

    @property
    def state(self) -> AuthButtonState:
        return _STATE_BY_STATUS[self.store.status]

    @property
    def disabled(self) -> bool:
        return self.state is AuthButtonState.LOADING

    def open_dashboard(self) -> None:
        self.navigator.navigate(self.config.dashboard_route)

    def open_sign_in(self) -> None:
        self.navigator.navigate(self.config.auth_route)

    def sign_out(self) -> None:
        log_user_interaction(self.logger, "sign_out")
        self.store.sign_out()
