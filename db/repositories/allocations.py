"""Allocation recording: campaign files, their contacts, run allocations."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import CampaignAudienceAllocation, CampaignFile, CampaignFileContact

logger = logging.getLogger(__name__)


async def create_campaign_file(
    session: AsyncSession,
    campaign_id: UUID,
    file_name: str,
    total_contacts: int,
    run_id: Optional[UUID] = None,
    description: Optional[str] = None,
) -> CampaignFile:
    campaign_file = CampaignFile(
        campaign_id=campaign_id,
        run_id=run_id,
        file_name=file_name,
        description=description,
        total_contacts=total_contacts,
    )
    session.add(campaign_file)
    await session.flush()
    return campaign_file


async def add_file_contacts(
    session: AsyncSession, campaign_file_id: UUID, rows: list[dict]
) -> int:
    """Bulk insert point-in-time contact copies into a campaign file.

    Returns the number of rows written.
    """
    if not rows:
        return 0
    await session.execute(
        insert(CampaignFileContact),
        [{**row, "campaign_file_id": campaign_file_id} for row in rows],
    )
    await session.execute(
        update(CampaignFile)
        .where(CampaignFile.id == campaign_file_id)
        .values(allocated_contacts=len(rows))
    )
    await session.flush()
    return len(rows)


async def record_allocation(
    session: AsyncSession, run_id: UUID, campaign_id: UUID, allocated_count: int
) -> CampaignAudienceAllocation:
    allocation = CampaignAudienceAllocation(
        run_id=run_id,
        campaign_id=campaign_id,
        allocated_count=allocated_count,
    )
    session.add(allocation)
    await session.flush()
    return allocation


async def get_for_run(session: AsyncSession, run_id: UUID) -> list[CampaignAudienceAllocation]:
    result = await session.execute(
        select(CampaignAudienceAllocation)
        .where(CampaignAudienceAllocation.run_id == run_id)
        .order_by(CampaignAudienceAllocation.created_at)
    )
    return list(result.scalars().all())
