"""Contracts between the value collector and the stores it reads from."""

from typing import List, Protocol, runtime_checkable
from uuid import UUID

from app.schemas.reconciliation import SourcedValue, SourceType


@runtime_checkable
class FieldSource(Protocol):
    """Read-only store of sourced values for one provenance category.

    ``fetch`` must be side-effect free so the collector can fan out to every
    source concurrently.
    """

    source_type: SourceType

    async def fetch(self, application_id: UUID) -> List[SourcedValue]:
        ...


@runtime_checkable
class ApplicationLookup(Protocol):
    """Existence check for the application being reconciled."""

    async def exists(self, application_id: UUID) -> bool:
        ...
