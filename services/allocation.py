"""Allocate a saved audience run into a campaign file.

The batch is written in one transaction: the campaign file, every contact row
and the allocation record land together or not at all.
"""
import logging
from typing import Optional
from uuid import UUID

from schemas.allocation import (
    COMPANY_ENRICHMENT_FIELDS,
    CONTACT_ENRICHMENT_FIELDS,
    AllocatedContact,
    AllocationRowError,
    AllocationSummary,
    EnrichmentLevel,
)
from schemas.audience import AudienceResultRow, AudienceRun
from services.audience_client import adapt_rows
from services.errors import (
    AllocationWriteFailed,
    EnrichmentLookupMiss,
    OverAllocation,
    QueryFailed,
)
from services.ports import AllocationStore, MasterDataLookup, QueryService

logger = logging.getLogger(__name__)


class AllocationReconciler:
    def __init__(
        self,
        query: QueryService,
        lookup: MasterDataLookup,
        store: AllocationStore,
    ):
        self.query = query
        self.lookup = lookup
        self.store = store

    async def allocate(
        self,
        run: AudienceRun,
        campaign_id: UUID,
        count: int,
        enrichment: EnrichmentLevel = EnrichmentLevel.BASIC,
        file_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> AllocationSummary:
        if count < 1:
            raise ValueError("Allocation count must be at least 1")
        if count > run.total_results:
            raise OverAllocation(count, run.total_results)

        try:
            raw = await self.query.get_audience_results(run.id, limit=count)
        except Exception as exc:
            logger.warning("Fetching rows for run %s failed: %s", run.id, exc, exc_info=True)
            raise QueryFailed(f"Failed to fetch audience results: {exc}") from exc
        rows = adapt_rows(raw)[:count]
        if not rows:
            logger.info("Run %s returned no rows; nothing allocated", run.id)
            return AllocationSummary()

        contacts = [_from_row(r) for r in rows]
        if EnrichmentLevel(enrichment) is EnrichmentLevel.FULL:
            await self._enrich(contacts)

        name = file_name or f"{run.display_name} allocation"
        try:
            file_id = await self.store.write_allocation(
                run.id,
                campaign_id,
                [c.model_dump() for c in contacts],
                name,
                description,
            )
        except AllocationWriteFailed as exc:
            logger.error("Allocation of run %s into campaign %s failed: %s", run.id, campaign_id, exc)
            return AllocationSummary(
                allocated=0,
                failed=len(contacts),
                errors=[AllocationRowError(row=None, message=str(exc))],
            )

        logger.info(
            "Allocated %d contacts from run %s to campaign %s (file %s)",
            len(contacts),
            run.id,
            campaign_id,
            file_id,
        )
        return AllocationSummary(allocated=len(contacts), campaign_file_id=file_id)

    async def _enrich(self, contacts: list[AllocatedContact]) -> None:
        """Left-join contact/company master fields onto the rows in place."""
        contact_ids = {c.contact_id for c in contacts}
        company_ids = {c.company_id for c in contacts if c.company_id is not None}

        by_contact = await self._lookup("contact", self.lookup.contacts_by_ids, contact_ids)
        by_company = await self._lookup("company", self.lookup.companies_by_ids, company_ids)

        for contact in contacts:
            record = by_contact.get(contact.contact_id) or {}
            for field in CONTACT_ENRICHMENT_FIELDS:
                setattr(contact, field, record.get(field))
            company = by_company.get(contact.company_id) or {}
            for field in COMPANY_ENRICHMENT_FIELDS:
                setattr(contact, field, company.get(field))

    async def _lookup(self, kind: str, fetch, ids: set[int]) -> dict[int, dict]:
        if not ids:
            return {}
        try:
            found = await fetch(ids)
        except Exception as exc:
            logger.warning("%s lookup failed, leaving fields empty: %s", kind, exc, exc_info=True)
            return {}
        missing = ids - set(found)
        if missing:
            miss = EnrichmentLookupMiss(kind, missing)
            logger.warning("%s (ids: %s)", miss, sorted(missing))
        return found


def _from_row(row: AudienceResultRow) -> AllocatedContact:
    return AllocatedContact(
        contact_id=row.contact_id,
        company_id=row.company_id,
        first_name=row.first_name,
        last_name=row.last_name,
        full_name=row.full_name,
        email=row.email,
        phone=row.phone,
        company_name=row.company_name,
        city=row.city,
        state=row.state,
        industry=row.industry,
        job_level=row.job_level,
        department=row.department,
    )
