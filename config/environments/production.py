"""
Production environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig


@dataclass
class ProductionConfig(AppConfig):
    """Production environment configuration"""

    def __post_init__(self):

        self.environment = "production"
        self.debug = False

        # Production logging - less verbose, focus on errors
        self.logging.level = "INFO"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/prod-app.log"

        self.supabase.timeout_seconds = 10.0


def get_production_config() -> ProductionConfig:
    """Get production-specific configuration"""
    return ProductionConfig()
