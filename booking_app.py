import streamlit as st

from services.ui_service.streamlit_views import get_booking_ui
from services.exceptions import ConfigurationError
from utils.logging_config import UI_STARTUP, get_error_tracker

# Initialize logging and error tracking
error_tracker = get_error_tracker()


def main():
    """Entry point: ``streamlit run booking_app.py``"""
    try:
        ui = get_booking_ui()
    except ConfigurationError as e:
        error_tracker.track_error(e, UI_STARTUP)
        st.error("The booking service is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY.")
        return
    ui.run()


main()
