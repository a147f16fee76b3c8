"""Database module for SQLAlchemy models and session management."""

from app.database.base import Base, engine, async_session_maker, get_async_session
from app.database.client import DatabaseClient, db_client, init_database, close_database
from app.database.models import (
    Application,
    BankStatementParse,
    Document,
    DocumentField,
    OCRResult,
)

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "get_async_session",
    "DatabaseClient",
    "db_client",
    "init_database",
    "close_database",
    "Application",
    "BankStatementParse",
    "Document",
    "DocumentField",
    "OCRResult",
]
