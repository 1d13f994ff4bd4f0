"""
Guitar Repair API Configuration
Environment variable loading with validation and safe defaults
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Configuration validation error"""
    pass


class Config:
    """Application configuration with environment variable validation"""

    # Application configuration
    APP_ENV: str = "development"
    APP_LOG_LEVEL: str = "INFO"

    # Storage configuration
    REPAIR_DB_PATH: str = "data/repair_history.json"
    REPAIR_PDF_PATH: str = "data/repair_catalog.pdf"

    # Rate limiting
    RATE_LIMIT_DEFAULT: str = "120/minute"
    RATE_LIMIT_ENABLED: bool = True

    # Listing
    LIST_PAGE_SIZE_MAX: int = 10000

    def __init__(self):
        """Initialize and validate configuration"""
        self._load_optional_env_vars()
        self._validate_config()

    def _load_optional_env_vars(self) -> None:
        """Load optional environment variables with defaults"""
        self.APP_ENV = os.getenv("APP_ENV", self.APP_ENV)
        self.APP_LOG_LEVEL = os.getenv("APP_LOG_LEVEL", self.APP_LOG_LEVEL).upper()

        self.REPAIR_DB_PATH = os.getenv("REPAIR_DB_PATH", self.REPAIR_DB_PATH)
        self.REPAIR_PDF_PATH = os.getenv("REPAIR_PDF_PATH", self.REPAIR_PDF_PATH)

        self.RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", self.RATE_LIMIT_DEFAULT)
        self.RATE_LIMIT_ENABLED = os.getenv(
            "RATE_LIMIT_ENABLED", str(self.RATE_LIMIT_ENABLED)
        ).lower() in ("true", "1", "yes")

        try:
            self.LIST_PAGE_SIZE_MAX = int(
                os.getenv("LIST_PAGE_SIZE_MAX", str(self.LIST_PAGE_SIZE_MAX))
            )
        except ValueError:
            raise ConfigError("LIST_PAGE_SIZE_MAX must be an integer")

    def _validate_config(self) -> None:
        """Validate configuration values"""
        if self.APP_LOG_LEVEL not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid APP_LOG_LEVEL: {self.APP_LOG_LEVEL} (expected one of {', '.join(LOG_LEVELS)})"
            )

        if not self.REPAIR_DB_PATH.strip():
            raise ConfigError("REPAIR_DB_PATH must not be empty")

        if "/" not in self.RATE_LIMIT_DEFAULT:
            raise ConfigError(
                "Invalid RATE_LIMIT_DEFAULT: expected '<count>/<period>', e.g. 120/minute"
            )

        if self.LIST_PAGE_SIZE_MAX < 1:
            raise ConfigError("LIST_PAGE_SIZE_MAX must be at least 1")

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.APP_ENV.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.APP_ENV.lower() == "development"


# Global configuration instance
try:
    config = Config()
except ConfigError as e:
    print(f"Configuration Error: {e}")
    print("\nCheck the variables listed in .env.example.")
    raise
