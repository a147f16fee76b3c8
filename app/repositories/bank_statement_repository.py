from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import BankStatementParse
from app.repositories.base_repository import BaseRepository
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BankStatementRepository(BaseRepository[BankStatementParse]):
    """Repository for parsed bank-statement headers."""

    def __init__(self, session: AsyncSession):
        """Initialize bank statement repository.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__(session, BankStatementParse)

    async def list_by_application(self, application_id: UUID) -> List[BankStatementParse]:
        """Fetch every parsed statement for an application, oldest first.

        Args:
            application_id: Application ID

        Returns:
            List of BankStatementParse records
        """
        try:
            query = (
                select(BankStatementParse)
                .where(BankStatementParse.application_id == application_id)
                .order_by(BankStatementParse.parsed_at, BankStatementParse.id)
            )
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            LOGGER.error(
                "Failed to fetch bank statement parses",
                exc_info=True,
                extra={"application_id": str(application_id), "error": str(e)}
            )
            raise
