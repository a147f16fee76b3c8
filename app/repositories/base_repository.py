"""Base repository with the read operations shared by every repository."""

from typing import Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.logging import get_logger

# Define a generic type for SQLAlchemy models
ModelType = TypeVar("ModelType")

LOGGER = get_logger(__name__)


class BaseRepository(Generic[ModelType]):
    """Base repository implementing common read operations.

    Repositories in this service never write: every sourced value is a
    historical observation owned by an upstream pipeline.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session
            model: The SQLAlchemy model class this repository manages
        """
        self.session = session
        self.model = model
        self.logger = LOGGER

    async def exists(self, id: UUID) -> bool:
        """Check whether a record with this ID exists."""
        try:
            query = select(self.model.id).where(self.model.id == id).limit(1)
            result = await self.session.execute(query)
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error checking {self.model.__name__} {id}: {str(e)}",
                exc_info=True
            )
            raise
