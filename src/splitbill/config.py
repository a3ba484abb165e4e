"""Environment-driven configuration for splitbill."""

import logging
import os
from pathlib import Path
from typing import Optional

DB_PATH_ENV = "SPLITBILL_DB_PATH"
DEFAULT_CURRENCY_ENV = "SPLITBILL_DEFAULT_CURRENCY"
LOG_LEVEL_ENV = "SPLITBILL_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_default_currency() -> str:
    """Return the currency code used when a bill does not name one."""
    return os.environ.get(DEFAULT_CURRENCY_ENV, "USD").strip().upper() or "USD"


def get_database_path(database_path: Optional[str] = None) -> str:
    """Resolve the SQLite database path.

    Args:
        database_path: Explicit path. If None, checks SPLITBILL_DB_PATH
            environment variable, then defaults to ~/.splitbill/splitbill.db

    Returns:
        Database file path
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        db_dir = Path.home() / ".splitbill"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "splitbill.db")

    return database_path


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging once for the CLI process."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT)
