"""
Unified Configuration System for the appointment booking client

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import streamlit as st
import os
from pathlib import Path


@dataclass
class SupabaseConfig:
    """Remote identity and data service settings"""
    url: str = ""
    anon_key: str = ""
    timeout_seconds: float = 10.0

    @classmethod
    def from_secrets(cls) -> 'SupabaseConfig':
        """Load Supabase config from Streamlit secrets"""
        # In test environment, prefer environment variables
        if os.getenv("PYTEST_CURRENT_TEST") is not None:
            return cls._from_env()

        try:
            return cls(
                url=st.secrets.get("SUPABASE_URL", ""),
                anon_key=st.secrets.get("SUPABASE_ANON_KEY", ""),
                timeout_seconds=float(st.secrets.get("SUPABASE_TIMEOUT_SECONDS", 10.0))
            )
        except Exception:
            # Fallback to environment variables if secrets not available
            return cls._from_env()

    @classmethod
    def _from_env(cls) -> 'SupabaseConfig':
        return cls(
            url=os.getenv("SUPABASE_URL", ""),
            anon_key=os.getenv("SUPABASE_ANON_KEY", ""),
            timeout_seconds=float(os.getenv("SUPABASE_TIMEOUT_SECONDS", "10.0"))
        )

    @property
    def auth_url(self) -> str:
        return f"{self.url.rstrip('/')}/auth/v1"

    @property
    def rest_url(self) -> str:
        return f"{self.url.rstrip('/')}/rest/v1"


@dataclass
class AuthConfig:
    """Authentication flow configuration"""
    password_min_length: int = 6
    home_route: str = "/"
    auth_route: str = "/auth"
    dashboard_route: str = "/dashboard"


@dataclass
class AppointmentsConfig:
    """Appointment retrieval configuration"""
    table: str = "appointments"
    page_size: int = 10
    order_column: str = "date"
    booking_route: str = "/booking"


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "Appointments"
    dashboard_title: str = "User Dashboard"
    empty_appointments_message: str = "No upcoming appointments."
    fetch_error_title: str = "Failed to load appointments"
    fetch_error_message: str = "Couldn't retrieve your appointment data."
    resources: List[str] = field(default_factory=lambda: [
        "Personal Development Guide",
        "Mindfulness Exercises",
        "Recommended Reading",
    ])


@dataclass
class LoggingConfig:
    """Logging and monitoring configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = True
    log_file: str = "logs/app.log"


@dataclass
class AppConfig:
    """Main application configuration"""
    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    appointments: AppointmentsConfig = field(default_factory=AppointmentsConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Base configuration: defaults plus Supabase credentials"""
        config = cls()

        # Load remote service configuration from secrets/environment
        config.supabase = SupabaseConfig.from_secrets()
        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if not self.supabase.url:
            errors.append("Supabase URL is required")
        if not self.supabase.anon_key:
            errors.append("Supabase anon key is required")

        if self.appointments.page_size <= 0:
            errors.append("Appointment page size must be positive")

        if self.auth.password_min_length < 1:
            errors.append("Password minimum length must be at least 1")

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Non-secret settings, for diagnostics"""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "supabase_url": self.supabase.url,
            "page_size": self.appointments.page_size,
            "password_min_length": self.auth.password_min_length,
        }


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance, with the APP_ENV overrides applied"""
    global _config
    if _config is None:
        from config.environments import get_environment_config
        _config = get_environment_config()

        # Validate configuration
        errors = _config.validate()
        if errors:
            import warnings
            for error in errors:
                warnings.warn(f"Configuration error: {error}")

    return _config


def reload_config() -> AppConfig:
    """Reload configuration (useful for testing)"""
    global _config
    _config = None
    return get_config()


def get_supabase_config() -> SupabaseConfig:
    """Get remote service configuration"""
    return get_config().supabase
