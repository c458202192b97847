"""
COVID-19 Russia Monitor - History Export Script

Prints the de-duplicated history (or the latest record) as JSON so the time
series can be inspected or handed to other tools. Read-only.

Usage:
    python -m scripts.export_history
    python -m scripts.export_history --latest
    python -m scripts.export_history --limit 10 --output history.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from sqlalchemy.orm import Session

from config.settings import Settings, get_settings
from config.logging import setup_logging, get_logger
from database.connection import get_session, init_database
from database.repository import open_dataset, open_key_value_store


logger = get_logger(__name__)


def load_history(
    session: Session,
    settings: Settings,
    limit: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Read history records in insertion order."""
    return open_dataset(session, settings.history_dataset_name).get_items(limit=limit)


def load_latest(session: Session, settings: Settings) -> Optional[dict[str, Any]]:
    """Read the latest record, if any run has stored one."""
    return open_key_value_store(session, settings.kv_store_name).get_value(
        settings.latest_key
    )


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        description="Export the COVID-19 Russia history as JSON"
    )
    parser.add_argument(
        "--latest",
        action="store_true",
        help="Export only the latest record",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Export at most this many history records",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Write to this file instead of stdout",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # Keep stdout clean for the JSON payload
    setup_logging(log_level="DEBUG" if args.verbose else "WARNING")

    if not init_database():
        logger.error("Database initialization failed")
        return 1

    settings = get_settings()
    with get_session() as session:
        if args.latest:
            payload = load_latest(session, settings)
        else:
            payload = load_history(session, settings, limit=args.limit)

    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote export to {args.output}")
    else:
        print(text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
