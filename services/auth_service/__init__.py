"""
Auth service - session lifecycle, credential validation and the login/registration flow.
"""

from .models import Session, SessionState, SessionStatus, LoginCredentials, SignupCredentials
from .session_store import SessionStore
from .auth_flow import AuthFlowController, AuthOutcome, AuthAction, LoginForm, SignupForm

__all__ = [
    'Session',
    'SessionState',
    'SessionStatus',
    'LoginCredentials',
    'SignupCredentials',
    'SessionStore',
    'AuthFlowController',
    'AuthOutcome',
    'AuthAction',
    'LoginForm',
    'SignupForm'
]
