"""Value collector.

Gathers every sourced value for an application from all registered field
sources. Sources are fetched concurrently, each under its own timeout; a
source that fails or times out contributes nothing and is reported in
``failed_sources``. Only the application-existence check can fail the whole
collection.
"""

import asyncio
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.core.exceptions import DatabaseError
from app.schemas.reconciliation import CollectionResult, SourcedValue
from app.services.reconciliation.contracts import ApplicationLookup, FieldSource
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ValueCollector:
    """Collects sourced values from independent read-only sources.

    Attributes:
        applications: Existence check for the application
        sources: Field sources, in the order their values are emitted
        timeout: Per-source fetch timeout in seconds
    """

    def __init__(
        self,
        applications: ApplicationLookup,
        sources: Sequence[FieldSource],
        timeout: Optional[float] = None,
    ):
        """Initialize collector.

        Args:
            applications: Existence check for the application
            sources: Field sources to read from
            timeout: Per-source timeout in seconds; defaults to settings
        """
        self.applications = applications
        self.sources = list(sources)
        self.timeout = settings.source_fetch_timeout_seconds if timeout is None else timeout

    async def _fetch_source(
        self,
        source: FieldSource,
        application_id: UUID,
    ) -> Optional[List[SourcedValue]]:
        """Fetch one source; None means the source failed."""
        try:
            return await asyncio.wait_for(source.fetch(application_id), timeout=self.timeout)
        except asyncio.TimeoutError:
            LOGGER.warning(
                "Field source timed out",
                extra={
                    "application_id": str(application_id),
                    "source_type": source.source_type.value,
                    "timeout_seconds": self.timeout,
                },
            )
        except Exception as e:
            LOGGER.warning(
                "Field source failed",
                exc_info=True,
                extra={
                    "application_id": str(application_id),
                    "source_type": source.source_type.value,
                    "error": str(e),
                },
            )
        return None

    async def collect_sourced_values(self, application_id: UUID) -> CollectionResult:
        """Collect every sourced value for an application.

        Args:
            application_id: Application to collect for

        Returns:
            CollectionResult: Values in source order, plus failed sources.
                ``application_found`` is False (with no values) when the
                application does not exist.

        Raises:
            DatabaseError: If the existence check itself fails
        """
        try:
            found = await self.applications.exists(application_id)
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseError(
                f"Failed to look up application {application_id}", original_error=e
            ) from e

        if not found:
            LOGGER.info(
                "Application not found, nothing to collect",
                extra={"application_id": str(application_id)},
            )
            return CollectionResult(application_found=False)

        results = await asyncio.gather(
            *(self._fetch_source(source, application_id) for source in self.sources)
        )

        values: List[SourcedValue] = []
        failed = []
        for source, source_values in zip(self.sources, results):
            if source_values is None:
                failed.append(source.source_type)
                continue
            values.extend(source_values)

        LOGGER.info(
            "Collected sourced values",
            extra={
                "application_id": str(application_id),
                "value_count": len(values),
                "failed_sources": [s.value for s in failed],
            },
        )
        return CollectionResult(values=values, failed_sources=failed)
