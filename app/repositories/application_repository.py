from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Application
from app.repositories.base_repository import BaseRepository
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ApplicationRepository(BaseRepository[Application]):
    """Repository for loan applications and their client form snapshots."""

    def __init__(self, session: AsyncSession):
        """Initialize application repository.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__(session, Application)

    async def get_form_snapshot(
        self,
        application_id: UUID
    ) -> Optional[Tuple[Dict[str, Any], Optional[datetime]]]:
        """Fetch the client's current form fields.

        Args:
            application_id: Application ID

        Returns:
            (form fields, last update time), or None if the application is missing
        """
        try:
            query = select(Application.form_data, Application.updated_at).where(
                Application.id == application_id
            )
            row = (await self.session.execute(query)).one_or_none()
        except SQLAlchemyError as e:
            LOGGER.error(
                "Failed to fetch application form snapshot",
                exc_info=True,
                extra={"application_id": str(application_id), "error": str(e)}
            )
            raise

        if row is None:
            return None
        return row.form_data or {}, row.updated_at
