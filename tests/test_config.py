"""
Tests for configuration system
"""

import pytest
from config.app_config import (
    AppConfig, SupabaseConfig, AuthConfig, AppointmentsConfig, UIConfig,
    LoggingConfig, get_config, reload_config
)


class TestSupabaseConfig:
    """Test remote service configuration"""

    def test_from_secrets_prefers_env_under_pytest(self, monkeypatch):
        """Test environment variables are used while running tests"""
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
        monkeypatch.setenv("SUPABASE_TIMEOUT_SECONDS", "3.5")

        config = SupabaseConfig.from_secrets()

        assert config.url == "https://example.supabase.co"
        assert config.anon_key == "anon-key"
        assert config.timeout_seconds == 3.5

    def test_endpoint_urls(self):
        """Test auth and rest base URLs tolerate a trailing slash"""
        config = SupabaseConfig(url="https://example.supabase.co/", anon_key="k")

        assert config.auth_url == "https://example.supabase.co/auth/v1"
        assert config.rest_url == "https://example.supabase.co/rest/v1"


class TestSectionDefaults:
    """Test default configuration values"""

    def test_auth_defaults(self):
        config = AuthConfig()

        assert config.password_min_length == 6
        assert config.home_route == "/"
        assert config.auth_route == "/auth"
        assert config.dashboard_route == "/dashboard"

    def test_appointments_defaults(self):
        config = AppointmentsConfig()

        assert config.page_size == 10
        assert config.order_column == "date"
        assert config.table == "appointments"
        assert config.booking_route == "/booking"

    def test_ui_defaults(self):
        config = UIConfig()

        assert config.fetch_error_title == "Failed to load appointments"
        assert len(config.resources) == 3


class TestAppConfig:
    """Test main application configuration"""

    def test_default_initialization(self):
        """Test default configuration initialization"""
        config = AppConfig()

        assert isinstance(config.supabase, SupabaseConfig)
        assert isinstance(config.auth, AuthConfig)
        assert isinstance(config.appointments, AppointmentsConfig)
        assert isinstance(config.ui, UIConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_environment_detection(self, monkeypatch):
        """Test environment detection"""
        monkeypatch.setenv("APP_ENV", "production")
        assert AppConfig().environment == "production"

        monkeypatch.setenv("APP_ENV", "development")
        assert AppConfig().environment == "development"

    def test_load_reads_credentials(self):
        """Test the base load picks up the Supabase credentials"""
        config = AppConfig.load()

        assert config.environment == "test"
        assert config.supabase.url == "https://project.supabase.test"
        assert config.supabase.anon_key == "anon-test-key"

    def test_validate_reports_missing_credentials(self):
        """Test validation flags an unconfigured remote service"""
        config = AppConfig()
        config.logging.enable_file_logging = False

        errors = config.validate()

        assert "Supabase URL is required" in errors
        assert "Supabase anon key is required" in errors

    def test_validate_rejects_non_positive_page_size(self):
        config = AppConfig(supabase=SupabaseConfig(url="https://x.test", anon_key="k"))
        config.logging.enable_file_logging = False
        config.appointments.page_size = 0

        assert config.validate() == ["Appointment page size must be positive"]

    def test_to_dict_omits_secrets(self):
        config = AppConfig(supabase=SupabaseConfig(url="https://x.test", anon_key="secret"))

        assert "secret" not in config.to_dict().values()
        assert config.to_dict()["page_size"] == 10


class TestGlobalConfig:
    """Test the cached configuration instance"""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_config_builds_new_instance(self):
        first = get_config()
        assert reload_config() is not first

    def test_missing_credentials_warn(self, monkeypatch):
        """Test configuration errors surface as warnings, not exceptions"""
        monkeypatch.delenv("SUPABASE_URL")

        with pytest.warns(UserWarning, match="Supabase URL is required"):
            reload_config()

    def test_get_config_applies_development_overrides(self, monkeypatch):
        """Test APP_ENV=development reaches the running configuration"""
        monkeypatch.setenv("APP_ENV", "development")

        config = reload_config()

        assert config.debug is True
        assert config.ui.app_title == "Appointments (DEV)"
        assert config.logging.log_file == "logs/dev-app.log"
        assert config.supabase.timeout_seconds == 30.0
        assert config.supabase.url == "https://project.supabase.test"

    def test_get_config_applies_production_overrides(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("DEBUG", "true")

        config = reload_config()

        assert config.debug is False
        assert config.logging.level == "INFO"
        assert config.logging.log_file == "logs/prod-app.log"
        assert config.supabase.anon_key == "anon-test-key"
