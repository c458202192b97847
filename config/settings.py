"""
COVID-19 Russia Monitor - Configuration Settings

Centralized configuration management using Pydantic Settings.
Loads configuration from environment variables and .env files.

Every setting has a default that reproduces a plain run against the
ministry page with a local SQLite store, so a bare checkout works
without any environment at all.

Usage:
    from config.settings import get_settings

    settings = get_settings()
    print(settings.source_url)
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# Determine Project Root
# =============================================================================

def get_project_root() -> Path:
    """Get the project root directory."""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback to the config directory's parent
    return Path(__file__).resolve().parent.parent


PROJECT_ROOT = get_project_root()


# =============================================================================
# Settings Classes
# =============================================================================

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden by environment variables.
    Prefix is not used to keep variable names simple.
    """

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production, test)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite:///data/covid_russia.db",
        description="SQLAlchemy connection string for the key-value and dataset stores",
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements (for debugging)",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Optional[str] = Field(
        default="logs/app.log",
        description="Log file path (relative to project root or absolute)",
    )
    log_format: str = Field(
        default="json",
        description="Log format (json or text)",
    )
    log_max_bytes: int = Field(
        default=10_485_760,  # 10 MB
        description="Maximum log file size before rotation",
    )
    log_backup_count: int = Field(
        default=5,
        description="Number of backup log files to keep",
    )

    # -------------------------------------------------------------------------
    # Source
    # -------------------------------------------------------------------------
    source_url: str = Field(
        default="https://www.rosminzdrav.ru/ministry/covid19",
        description="Status page to fetch",
    )
    read_me_url: str = Field(
        default="https://apify.com/krakorj/covid-russia",
        description="Documentation link stored in every record as readMe",
    )
    article_selector: str = Field(
        default="article div.row div.col-md-12 p span",
        description="CSS selector of the article block holding the statistics",
    )
    source_timezone: str = Field(
        default="UTC",
        description=(
            "IANA zone the page's bylines are written in. UTC keeps the "
            "existing history comparable; the site actually publishes "
            "Moscow time (Europe/Moscow)"
        ),
    )

    # -------------------------------------------------------------------------
    # Stores
    # -------------------------------------------------------------------------
    kv_store_name: str = Field(
        default="COVID-19-RUSSIA",
        description="Key-value store holding the latest record",
    )
    history_dataset_name: str = Field(
        default="COVID-19-RUSSIA-HISTORY",
        description="Append-only dataset holding the de-duplicated history",
    )
    default_store_name: str = Field(
        default="default",
        description="Store and dataset receiving the per-run OUTPUT and raw feed",
    )
    latest_key: str = Field(
        default="LATEST",
        description="Key of the latest record in the key-value store",
    )
    output_key: str = Field(
        default="OUTPUT",
        description="Key of the per-run debug snapshot",
    )

    # -------------------------------------------------------------------------
    # Scraping
    # -------------------------------------------------------------------------
    user_agent: str = Field(
        default="CovidRussiaMonitor/1.0 (+https://apify.com/krakorj/covid-russia)",
        description="User agent for web requests",
    )
    scrape_timeout_seconds: int = Field(
        default=30,
        description="Timeout for a single HTTP request",
    )
    max_request_retries: int = Field(
        default=1,
        description="Retries of a failed page before the failure callback runs",
    )
    handle_page_timeout_secs: int = Field(
        default=60,
        description="Timeout for fetching and processing one page",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is valid."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of {valid_envs}")
        return v_lower

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {"json", "text"}:
            raise ValueError(f"Invalid log format: {v}. Must be json or text")
        return v_lower

    @field_validator("source_timezone")
    @classmethod
    def validate_source_timezone(cls, v: str) -> str:
        """Ensure the zone name resolves in the tz database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone: {v}")
        return v

    @field_validator("max_request_retries")
    @classmethod
    def validate_max_request_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_request_retries cannot be negative")
        return v

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        return PROJECT_ROOT

    @property
    def source_tzinfo(self) -> ZoneInfo:
        """Time zone used to interpret the page's wall-clock bylines."""
        return ZoneInfo(self.source_timezone)

    def get_log_file_path(self) -> Optional[Path]:
        """Get the absolute path to the log file."""
        if not self.log_file:
            return None
        log_path = Path(self.log_file)
        if log_path.is_absolute():
            return log_path
        return PROJECT_ROOT / log_path


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Settings are cached after first load. To reload settings (e.g., in tests),
    call get_settings.cache_clear() first.

    Returns:
        Settings instance with all configuration loaded
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing reload on next access."""
    get_settings.cache_clear()


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "PROJECT_ROOT",
]
