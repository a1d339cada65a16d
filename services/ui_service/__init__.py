"""
UI service - view gating, navigation state and Streamlit rendering.
"""

from .view_gate import DashboardView, GateStatus
from .auth_button import AuthButton, AuthButtonState

# Lazy import so the controllers can be used without a Streamlit runtime
def get_booking_ui():
    from .streamlit_views import get_booking_ui as _get_booking_ui
    return _get_booking_ui()

__all__ = [
    'DashboardView',
    'GateStatus',
    'AuthButton',
    'AuthButtonState',
    'get_booking_ui'
]
