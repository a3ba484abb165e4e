"""Construct the storage backend for bills and saved participants."""

from typing import Optional

from splitbill.config import get_database_path
from splitbill.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open the bill history stored in a SQLite file.

    Args:
        database_path: File to use. Falls back to $SPLITBILL_DB_PATH and then
            ~/.splitbill/splitbill.db

    Returns:
        SQLAlchemyDatabase bound to the file; tables are created on first use
    """
    return SQLAlchemyDatabase(f"sqlite:///{get_database_path(database_path)}")


def create_memory_database() -> SQLAlchemyDatabase:
    """Open a throwaway bill history that lives only as long as the process."""
    return SQLAlchemyDatabase("sqlite://")
