"""Persistence for bills and the saved participant address book."""

from splitbill.database.base import Database
from splitbill.database.factories import create_memory_database, create_sqlite_database
from splitbill.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = [
    "Database",
    "SQLAlchemyDatabase",
    "create_memory_database",
    "create_sqlite_database",
]
