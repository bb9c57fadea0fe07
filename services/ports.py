"""Collaborator interfaces the audience services depend on.

Production implementations live in db.gateway; tests substitute fakes.
"""
from typing import Optional, Protocol
from uuid import UUID


class QueryService(Protocol):
    """The audience stored-procedure surface."""

    async def search_audience(self, filters: dict, page: int, page_size: int) -> list[dict]: ...

    async def build_audience(
        self, filters: dict, save: bool, name: Optional[str] = None
    ) -> Optional[UUID]: ...

    async def preview_audience(self, filters: dict, limit: int, offset: int) -> list[dict]: ...

    async def get_audience_results(
        self, run_id: UUID, limit: Optional[int] = None
    ) -> list[dict]: ...

    async def get_contact_summary(self) -> dict: ...


class RunStore(Protocol):
    """Persistence for audience_runs rows (as plain dicts)."""

    async def get_run(self, run_id: UUID) -> Optional[dict]: ...

    async def list_runs(self) -> list[dict]: ...

    async def update_run_metadata(
        self, run_id: UUID, name: Optional[str], notes: Optional[str]
    ) -> Optional[dict]: ...

    async def delete_run(self, run_id: UUID) -> bool: ...


class MasterDataLookup(Protocol):
    """Bulk reads of contact/company master records keyed by id."""

    async def contacts_by_ids(self, contact_ids: set[int]) -> dict[int, dict]: ...

    async def companies_by_ids(self, company_ids: set[int]) -> dict[int, dict]: ...


class AllocationStore(Protocol):
    """Writes an allocation batch in a single transaction."""

    async def write_allocation(
        self,
        run_id: UUID,
        campaign_id: UUID,
        rows: list[dict],
        file_name: str,
        description: Optional[str] = None,
    ) -> UUID:
        """Persist file + rows + allocation record; return the campaign file id.

        Raises AllocationWriteFailed and commits nothing on any error.
        """
        ...
