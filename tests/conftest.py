"""
Shared fixtures: isolated configuration and fresh global singletons per test.
"""

import logging
import pytest
from unittest.mock import Mock

import config.app_config as app_config
import utils.logging_config as logging_config
from services.auth_service.models import Session


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point every test at a throwaway Supabase project and log directory"""
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.test")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-test-key")
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.chdir(tmp_path)

    app_config._config = None
    logging_config._error_tracker = None
    yield
    app_config._config = None
    logging_config._error_tracker = None
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "booking_handler", False):
            root_logger.removeHandler(handler)
            handler.close()


@pytest.fixture
def session():
    return Session(
        user_id="u1-0000-1111-2222",
        email="user@example.com",
        access_token="access-token",
        refresh_token="refresh-token",
    )


@pytest.fixture
def error_tracker():
    return Mock()


@pytest.fixture
def navigator():
    return Mock()


@pytest.fixture
def notifier():
    return Mock()
