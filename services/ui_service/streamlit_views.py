"""
Streamlit presentation for the booking client.
Holds one set of controllers per browser session in st.session_state and
renders the auth page, the dashboard and the navigation button.
"""

import streamlit as st
from typing import Any, Dict, List, Optional

from config.app_config import get_config
from services.appointment_service.fetcher import create_appointment_fetcher
from services.appointment_service.models import Appointment
from services.auth_service.auth_flow import AuthFlowController, LoginForm
from services.auth_service.models import LoginCredentials, SignupCredentials
from services.auth_service.session_store import SessionStore
from services.exceptions import AuthError, SubmissionInProgressError, ValidationError
from services.ui_service.auth_button import AuthButton, AuthButtonState
from services.ui_service.view_gate import DashboardView, GateStatus
from utils.logging_config import get_logger, log_user_interaction

ROUTE_KEY = "route"
NOTIFICATIONS_KEY = "pending_notifications"
UI_KEY = "booking_ui"


class StreamlitNavigator:
    """Route held in session state; the page reruns once the controllers are done"""

    def __init__(self, default_route: str = "/"):
        if ROUTE_KEY not in st.session_state:
            st.session_state[ROUTE_KEY] = default_route
        self.rerun_requested = False

    @property
    def current_route(self) -> str:
        return st.session_state[ROUTE_KEY]

    def navigate(self, route: str) -> None:
        if st.session_state[ROUTE_KEY] != route:
            st.session_state[ROUTE_KEY] = route
            self.rerun_requested = True

    def rerun_if_requested(self) -> None:
        if self.rerun_requested:
            self.rerun_requested = False
            st.rerun()


class StreamlitNotifier:
    """Queues toasts so they survive the rerun that usually follows them"""

    def _queue(self) -> List[Dict[str, str]]:
        if NOTIFICATIONS_KEY not in st.session_state:
            st.session_state[NOTIFICATIONS_KEY] = []
        return st.session_state[NOTIFICATIONS_KEY]

    def success(self, title: str, description: str) -> None:
        self._queue().append({"icon": "✅", "title": title, "description": description})

    def error(self, title: str, description: str) -> None:
        self._queue().append({"icon": "🚨", "title": title, "description": description})

    def flush(self) -> None:
        queue = self._queue()
        while queue:
            notification = queue.pop(0)
            st.toast(f"**{notification['title']}** {notification['description']}",
                     icon=notification["icon"])


class BookingUI:
    """
    Per-browser-session wiring of the store and controllers.
    """

    def __init__(self):
        from infrastructure.external.supabase_auth_client import SupabaseAuthClient

        self.logger = get_logger(__name__)
        self.config = get_config()
        self.navigator = StreamlitNavigator(self.config.auth.home_route)
        self.notifier = StreamlitNotifier()

        self.identity = SupabaseAuthClient(self.config.supabase)
        self.store = SessionStore(self.identity)
        self.fetcher = create_appointment_fetcher(token_provider=self._access_token)
        self.auth_button = AuthButton(self.store, self.navigator, self.config.auth)

        self._auth_flow: Optional[AuthFlowController] = None
        self._dashboard: Optional[DashboardView] = None
        self._mounted_route: Optional[str] = None

    def _access_token(self) -> Optional[str]:
        session = self.store.session
        return session.access_token if session else None

    def _mount_route(self, route: str) -> None:
        """Create controllers when a page is entered; tear them down when it is left"""
        if route == self._mounted_route:
            return

        if self._dashboard is not None:
            self._dashboard.unmount()
            self._dashboard = None
        self._auth_flow = None
        self._mounted_route = route
        log_user_interaction(self.logger, "page_view", route=route)

        if route == self.config.auth.auth_route:
            self._auth_flow = AuthFlowController(
                self.store, self.identity, self.navigator, self.notifier, self.config.auth
            )
            self._auth_flow.mount()
        elif route == self.config.auth.dashboard_route:
            self._dashboard = DashboardView(
                self.store, self.fetcher, self.navigator, self.notifier, self.config
            )
            self._dashboard.mount()

    def run(self) -> None:
        """Render the current route"""
        st.set_page_config(page_title=self.config.ui.app_title, layout="centered")
        self.store.initialize()
        self._mount_route(self.navigator.current_route)
        self.navigator.rerun_if_requested()
        # After mounting, so a failed dashboard fetch is announced in this run
        self.notifier.flush()

        self.render_auth_button()

        route = self.navigator.current_route
        if route == self.config.auth.auth_route:
            self.render_auth_page()
        elif route == self.config.auth.dashboard_route:
            self.render_dashboard()
        elif route == self.config.appointments.booking_route:
            self.render_booking_page()
        else:
            self.render_home()

        self.navigator.rerun_if_requested()

    def render_auth_button(self):
        button = self.auth_button
        with st.sidebar:
            st.markdown(f"## {self.config.ui.app_title}")
            if button.state is AuthButtonState.LOADING:
                st.button("Loading...", disabled=True, use_container_width=True)
            elif button.state is AuthButtonState.SIGNED_IN:
                if st.button("👤 Dashboard", use_container_width=True):
                    button.open_dashboard()
                if st.button("🚪 Sign Out", use_container_width=True):
                    button.sign_out()
                    self.navigator.rerun_requested = True
            else:
                if st.button("🔑 Sign In", type="primary", use_container_width=True):
                    button.open_sign_in()

    def render_home(self):
        st.title(self.config.ui.app_title)
        st.write("Browse and book your appointments.")
        if self.store.session is not None and st.button("Go to dashboard"):
            self.navigator.navigate(self.config.auth.dashboard_route)

    def render_booking_page(self):
        st.title("Book an Appointment")
        st.info("Bookings are made with our team directly for now.")
        if st.button("⬅️ Back to dashboard"):
            self.navigator.navigate(self.config.auth.dashboard_route)

    def render_auth_page(self):
        flow = self._auth_flow
        if flow is None or self.store.state.is_authenticated:
            return

        if isinstance(flow.form, LoginForm):
            st.header("Welcome Back")
            st.caption("Sign in to your account to continue")
            self._render_login_form(flow)
        else:
            st.header("Create Account")
            st.caption("Fill out the form to create a new account")
            self._render_signup_form(flow)

    def _render_field_error(self, errors: Dict[str, str], field: str):
        if field in errors:
            st.error(errors[field])

    def _render_login_form(self, flow: AuthFlowController):
        form = flow.form
        if form.notice:
            st.success(form.notice)

        with st.form("login_form"):
            email = st.text_input("Email", placeholder="your.email@example.com", disabled=form.disabled)
            self._render_field_error(form.errors, "email")
            password = st.text_input("Password", type="password", placeholder="******",
                                     disabled=form.disabled)
            self._render_field_error(form.errors, "password")
            submitted = st.form_submit_button("Sign In", type="primary", disabled=form.disabled,
                                              use_container_width=True)

        if submitted:
            try:
                with st.spinner("Logging in..."):
                    flow.submit_login(LoginCredentials(email=email, password=password))
            except (ValidationError, AuthError, SubmissionInProgressError):
                # Field errors are on the form; remote errors were already notified
                pass
            self.navigator.rerun_requested = True

        if st.button("Don't have an account? Sign up", disabled=form.disabled):
            flow.switch_to_signup()
            self.navigator.rerun_requested = True

    def _render_signup_form(self, flow: AuthFlowController):
        form = flow.form
        with st.form("signup_form"):
            email = st.text_input("Email", placeholder="your.email@example.com", disabled=form.disabled)
            self._render_field_error(form.errors, "email")
            password = st.text_input("Password", type="password", placeholder="******",
                                     disabled=form.disabled)
            self._render_field_error(form.errors, "password")
            confirm_password = st.text_input("Confirm Password", type="password", placeholder="******",
                                             disabled=form.disabled)
            self._render_field_error(form.errors, "confirm_password")
            submitted = st.form_submit_button("Sign Up", type="primary", disabled=form.disabled,
                                              use_container_width=True)

        if submitted:
            try:
                with st.spinner("Creating Account..."):
                    flow.submit_signup(SignupCredentials(
                        email=email, password=password, confirm_password=confirm_password
                    ))
            except (ValidationError, AuthError, SubmissionInProgressError):
                pass
            self.navigator.rerun_requested = True

        if st.button("Already have an account? Sign in", disabled=form.disabled):
            flow.switch_to_login()
            self.navigator.rerun_requested = True

    def render_dashboard(self):
        view = self._dashboard
        if view is None:
            return

        if view.status is GateStatus.LOADING_SESSION:
            st.info("Loading dashboard...")
            return
        if view.status in (GateStatus.REDIRECTING, GateStatus.UNMOUNTED) or view.session is None:
            return

        st.title(self.config.ui.dashboard_title)
        session = view.session

        col1, col2 = st.columns(2)
        with col1:
            st.subheader("Profile")
            st.write(f"Email: {session.email}")
            st.write(f"User ID: {session.short_user_id}")
            st.write(f"Last Sign In: {session.last_sign_in_display}")
        with col2:
            st.subheader("Recent Activity")
            st.write("No recent activity to display.")

        header, action = st.columns([3, 1])
        with header:
            st.subheader("📅 Upcoming Appointments")
        with action:
            if st.button("➕ Book New"):
                self.navigator.navigate(view.booking_route)

        if view.status is GateStatus.FETCHING:
            st.info("Loading appointments...")
        elif view.status is GateStatus.POPULATED:
            columns = st.columns(2)
            for index, appointment in enumerate(view.appointments):
                with columns[index % 2]:
                    self.render_appointment_card(appointment)
        else:
            if view.error_message:
                st.error(view.error_message)
            st.write(self.config.ui.empty_appointments_message)
            if view.show_book_now and st.button("Schedule an Appointment", type="primary"):
                self.navigator.navigate(view.booking_route)

        st.subheader("Resources")
        st.markdown("\n".join(f"- {resource}" for resource in self.config.ui.resources))

    def render_appointment_card(self, appointment: Appointment):
        fields: Dict[str, Any] = appointment.display_fields()
        with st.container(border=True):
            st.markdown(f"**{fields['event_type']}** :{appointment.status.badge_style}[{fields['status']}]")
            st.write(f"🗓️ {appointment.when_display}")
            st.write(f"📍 {fields['location']}")
            if fields["details"]:
                st.caption(f"🏷️ {fields['details']}")


def get_booking_ui() -> BookingUI:
    """Get the BookingUI for the current browser session"""
    if UI_KEY not in st.session_state:
        st.session_state[UI_KEY] = BookingUI()
    return st.session_state[UI_KEY]
