"""
Authentication flow controller - login and registration form submission.

The two modes are separate form states (LoginForm / SignupForm); switching
mode always builds a fresh form.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union

from config.app_config import AuthConfig, get_config
from services.auth_service.models import LoginCredentials, SignupCredentials
from services.auth_service.session_store import SessionStore
from services.auth_service.validation import login_errors, signup_errors
from services.exceptions import AuthError, SubmissionInProgressError, ValidationError
from utils.logging_config import get_logger, log_user_interaction

SIGNUP_CONFIRMATION = "Please check your email to verify your account."


@dataclass
class LoginForm:
    """Login mode form state"""
    errors: Dict[str, str] = field(default_factory=dict)
    submitting: bool = False
    notice: Optional[str] = None

    mode = "login"

    @property
    def disabled(self) -> bool:
        return self.submitting


@dataclass
class SignupForm:
    """Registration mode form state"""
    errors: Dict[str, str] = field(default_factory=dict)
    submitting: bool = False

    mode = "signup"

    @property
    def disabled(self) -> bool:
        return self.submitting


AuthForm = Union[LoginForm, SignupForm]


class AuthAction(Enum):
    """What the page should do after a successful submission"""
    NAVIGATE_HOME = "navigate_home"
    SWITCH_TO_LOGIN = "switch_to_login"


@dataclass(frozen=True)
class AuthOutcome:
    action: AuthAction
    message: str


class AuthFlowController:
    """
    Drives the auth page.

    Collaborators:
        store: SessionStore receiving the new session on login
        identity: remote identity adapter (sign_in_with_password, sign_up)
        navigator: object with ``navigate(route)``
        notifier: object with ``success(title, description)`` and ``error(title, description)``
    """

    def __init__(self, store: SessionStore, identity, navigator, notifier,
                 config: Optional[AuthConfig] = None):
        self.store = store
        self.identity = identity
        self.navigator = navigator
        self.notifier = notifier
        self.config = config or get_config().auth
        self.logger = get_logger(__name__)
        self.form: AuthForm = LoginForm()

    @property
    def mode(self) -> str:
        return self.form.mode

    def mount(self) -> bool:
        """
        Redirect home if a session already exists.

        Returns:
            True if redirected (no form should be shown)
        """
        state = self.store.initialize()
        if state.is_authenticated:
            self.logger.debug("Session already present; leaving auth page")
            self.navigator.navigate(self.config.home_route)
            return True
        return False

    def _ensure_idle(self) -> None:
        if self.form.submitting:
            raise SubmissionInProgressError("A submission is already in progress")

    def switch_to_login(self, notice: Optional[str] = None) -> LoginForm:
        self._ensure_idle()
        self.form = LoginForm(notice=notice)
        return self.form

    def switch_to_signup(self) -> SignupForm:
        self._ensure_idle()
        self.form = SignupForm()
        return self.form

    def submit_login(self, credentials: LoginCredentials) -> AuthOutcome:
        """
        Validate and submit login credentials

        Raises:
            ValidationError: a field failed client-side validation (no network call)
            AuthError: the identity service rejected the credentials
            SubmissionInProgressError: the form is already submitting
        """
        form = self.form
        if not isinstance(form, LoginForm):
            raise RuntimeError("Login submitted while the registration form is active")
        self._ensure_idle()

        form.errors = login_errors(credentials, self.config.password_min_length)
        if form.errors:
            raise ValidationError.from_errors(form.errors)

        log_user_interaction(self.logger, "login_submit")
        form.submitting = True
        try:
            session = self.identity.sign_in_with_password(credentials.email, credentials.password)
        except AuthError as e:
            self.logger.warning(f"Login rejected: {e.message}")
            self.notifier.error("Login failed", e.message)
            raise
        finally:
            form.submitting = False

        self.store.on_signed_in(session)
        self.notifier.success("Login successful", "Welcome back!")
        self.navigator.navigate(self.config.home_route)
        return AuthOutcome(AuthAction.NAVIGATE_HOME, "Welcome back!")

    def submit_signup(self, credentials: SignupCredentials) -> AuthOutcome:
        """
        Validate and submit a registration.
        Success never creates a session; the account needs email verification first.

        Raises:
            ValidationError: a field failed client-side validation (no network call)
            AuthError: the identity service rejected the registration
            SubmissionInProgressError: the form is already submitting
        """
        form = self.form
        if not isinstance(form, SignupForm):
            raise RuntimeError("Registration submitted while the login form is active")
        self._ensure_idle()

        form.errors = signup_errors(credentials, self.config.password_min_length)
        if form.errors:
            raise ValidationError.from_errors(form.errors)

        log_user_interaction(self.logger, "signup_submit")
        form.submitting = True
        try:
            self.identity.sign_up(credentials.email, credentials.password)
        except AuthError as e:
            self.logger.warning(f"Registration rejected: {e.message}")
            self.notifier.error("Registration failed", e.message)
            raise
        finally:
            form.submitting = False

        self.notifier.success("Registration successful", SIGNUP_CONFIRMATION)
        self.switch_to_login(notice=SIGNUP_CONFIRMATION)
        return AuthOutcome(AuthAction.SWITCH_TO_LOGIN, SIGNUP_CONFIRMATION)
