"""
COVID-19 Russia Monitor - Configuration Package

Modules:
    settings: Settings loaded from the environment and .env
    logging: JSON/console log output, censoring and run context

Usage:
    from config import get_settings, setup_logging, LogContext

    setup_logging()
    with LogContext(run_id="abc123"):
        ...
"""

from config.settings import Settings, clear_settings_cache, get_settings
from config.logging import LogContext, get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "setup_logging",
    "get_logger",
    "LogContext",
]
