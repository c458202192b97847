"""
COVID-19 Russia Monitor - Application Startup

Handles process initialization, validation, and shutdown around a crawl.

Usage:
    from startup import initialize_application, shutdown_application

    result = initialize_application()
    if not result.success:
        sys.exit(1)

    shutdown_application()
"""

import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import ValidationError

from config.settings import get_settings
from config.logging import setup_logging


logger = logging.getLogger(__name__)


@dataclass
class StartupResult:
    """Result of startup validation."""

    success: bool = True
    settings_valid: bool = False
    database_connected: bool = False

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add_error(self, message: str) -> None:
        """Add an error and mark as failed."""
        self.errors.append(message)
        self.success = False

    def add_warning(self, message: str) -> None:
        """Add a warning (doesn't fail startup)."""
        self.warnings.append(message)


def validate_settings() -> tuple[bool, list[str], list[str]]:
    """
    Validate application settings.

    Returns:
        Tuple of (is_valid, error messages, warning messages)
    """
    errors = []
    warnings = []

    try:
        settings = get_settings()
    except ValidationError as e:
        return False, [f"Invalid settings: {e}"], []

    if not settings.database_url:
        errors.append("DATABASE_URL is not configured")
    if not settings.source_url:
        errors.append("SOURCE_URL is not configured")
    if not settings.latest_key:
        errors.append("LATEST_KEY is not configured")

    if settings.is_production and settings.debug:
        errors.append("DEBUG should be False in production")

    if settings.source_timezone == "UTC":
        warnings.append(
            "SOURCE_TIMEZONE is UTC; the ministry publishes Moscow time, so "
            "source timestamps are shifted by the zone offset"
        )

    return len(errors) == 0, errors, warnings


def validate_database() -> tuple[bool, str]:
    """
    Validate database connection and create the store tables.

    Returns:
        Tuple of (is_connected, message)
    """
    from database.connection import init_database

    if init_database():
        return True, "Database connection successful"
    return False, "Database initialization failed"


def initialize_application(skip_database: bool = False) -> StartupResult:
    """
    Initialize the application and validate its dependencies.

    Args:
        skip_database: Skip database validation (for testing)

    Returns:
        StartupResult with validation details
    """
    result = StartupResult()

    # Settings are needed by logging, so check them first
    settings_valid, settings_errors, settings_warnings = validate_settings()
    result.settings_valid = settings_valid
    if not settings_valid:
        for error in settings_errors:
            result.add_error(error)
        # Fall back to plain stderr logging so the errors are visible
        logging.basicConfig(level=logging.INFO)
        for error in result.errors:
            logger.error(f"Settings error: {error}")
        return result

    setup_logging()
    logger.info("=" * 60)
    logger.info("COVID-19 Russia Monitor - Starting")
    logger.info("=" * 60)

    settings = get_settings()
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Source: {settings.source_url}")

    for warning in settings_warnings:
        result.add_warning(warning)

    if not skip_database:
        db_valid, db_message = validate_database()
        result.database_connected = db_valid
        if db_valid:
            logger.info(f"Database: {db_message}")
        else:
            result.add_error(f"Database: {db_message}")
    else:
        logger.info("Database validation skipped")
        result.database_connected = True

    if result.success:
        logger.info("Startup validation PASSED")
    else:
        logger.error("Startup validation FAILED")
        for error in result.errors:
            logger.error(f"  - {error}")

    for warning in result.warnings:
        logger.warning(warning)

    return result


def shutdown_application() -> None:
    """Release database connections."""
    logger.info("Shutting down COVID-19 Russia Monitor...")

    from database.connection import close_engine
    close_engine()

    logger.info("Shutdown complete")


# =============================================================================
# CLI Entry Point
# =============================================================================

def main() -> int:
    """
    Check configuration without crawling:
        python -m startup

    Returns:
        0 on success, 1 on failure
    """
    result = initialize_application()

    if result.success:
        print("\nAll validations passed")
        return 0

    print("\nValidation failed:")
    for error in result.errors:
        print(f"  - {error}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
