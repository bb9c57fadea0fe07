"""Database-backed implementations of the service ports.

Each call opens its own session via get_db(), so every operation commits (or
rolls back) on its own.
"""
import logging
from typing import Optional
from uuid import UUID

from db.connection import get_db
from db.models import AudienceRun
from db.repositories import allocations, audience, audience_runs, companies, contacts
from schemas.allocation import COMPANY_ENRICHMENT_FIELDS, CONTACT_ENRICHMENT_FIELDS
from services.errors import AllocationWriteFailed

logger = logging.getLogger(__name__)

_RUN_FIELDS = ("id", "name", "notes", "filters", "status", "total_results", "created_at", "updated_at")


def _run_dict(run: Optional[AudienceRun]) -> Optional[dict]:
    if run is None:
        return None
    return {field: getattr(run, field) for field in _RUN_FIELDS}


class SqlQueryService:
    """Calls the audience stored procedures."""

    async def search_audience(self, filters: dict, page: int, page_size: int) -> list[dict]:
        async with get_db() as session:
            return await audience.search_audience(session, filters, page, page_size)

    async def preview_audience(self, filters: dict, limit: int, offset: int) -> list[dict]:
        async with get_db() as session:
            return await audience.preview_audience(session, filters, limit, offset)

    async def build_audience(
        self, filters: dict, save: bool, name: Optional[str] = None
    ) -> Optional[UUID]:
        async with get_db() as session:
            run_id = await audience.build_audience(session, filters, save)
            if run_id is not None and name:
                await audience_runs.update_metadata(session, run_id, name)
            return run_id

    async def get_audience_results(
        self, run_id: UUID, limit: Optional[int] = None
    ) -> list[dict]:
        async with get_db() as session:
            return await audience.get_audience_results(session, run_id, limit)

    async def get_contact_summary(self) -> dict:
        async with get_db() as session:
            return await audience.get_contact_summary(session)


class SqlRunStore:
    async def get_run(self, run_id: UUID) -> Optional[dict]:
        async with get_db() as session:
            return _run_dict(await audience_runs.get(session, run_id))

    async def list_runs(self) -> list[dict]:
        async with get_db() as session:
            return [_run_dict(r) for r in await audience_runs.list_runs(session)]

    async def update_run_metadata(
        self, run_id: UUID, name: Optional[str], notes: Optional[str]
    ) -> Optional[dict]:
        async with get_db() as session:
            return _run_dict(await audience_runs.update_metadata(session, run_id, name, notes))

    async def delete_run(self, run_id: UUID) -> bool:
        async with get_db() as session:
            return await audience_runs.delete_run(session, run_id)


class SqlMasterDataLookup:
    async def contacts_by_ids(self, contact_ids: set[int]) -> dict[int, dict]:
        async with get_db() as session:
            found = await contacts.get_many(session, contact_ids)
        return {
            cid: {f: getattr(c, f) for f in CONTACT_ENRICHMENT_FIELDS}
            for cid, c in found.items()
        }

    async def companies_by_ids(self, company_ids: set[int]) -> dict[int, dict]:
        async with get_db() as session:
            found = await companies.get_many(session, company_ids)
        return {
            cid: {f: getattr(c, f) for f in COMPANY_ENRICHMENT_FIELDS}
            for cid, c in found.items()
        }


class SqlAllocationStore:
    async def write_allocation(
        self,
        run_id: UUID,
        campaign_id: UUID,
        rows: list[dict],
        file_name: str,
        description: Optional[str] = None,
    ) -> UUID:
        """Campaign file, contact rows and allocation record in one transaction."""
        try:
            async with get_db() as session:
                campaign_file = await allocations.create_campaign_file(
                    session,
                    campaign_id,
                    file_name,
                    total_contacts=len(rows),
                    run_id=run_id,
                    description=description,
                )
                written = await allocations.add_file_contacts(session, campaign_file.id, rows)
                await allocations.record_allocation(session, run_id, campaign_id, written)
                return campaign_file.id
        except Exception as exc:
            raise AllocationWriteFailed(f"Allocation write failed: {exc}") from exc
