"""Repository layer modules."""

from app.repositories.base_repository import BaseRepository
from app.repositories.application_repository import ApplicationRepository
from app.repositories.bank_statement_repository import BankStatementRepository
from app.repositories.document_repository import DocumentRepository

__all__ = [
    "BaseRepository",
    "ApplicationRepository",
    "BankStatementRepository",
    "DocumentRepository",
]
