"""Campaign repository."""
import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Campaign

logger = logging.getLogger(__name__)


async def list_campaigns(session: AsyncSession) -> list[Campaign]:
    """Return all campaigns, newest first."""
    result = await session.execute(select(Campaign).order_by(Campaign.created_at.desc()))
    return list(result.scalars().all())


async def get(session: AsyncSession, campaign_id: UUID) -> Optional[Campaign]:
    result = await session.execute(select(Campaign).where(Campaign.id == campaign_id))
    return result.scalar_one_or_none()


async def create(session: AsyncSession, data: dict) -> Campaign:
    """Insert a campaign.

    data dict keys: name, start_date, end_date, list_size, client_name,
    servicing_lead
    """
    campaign = Campaign(**data)
    session.add(campaign)
    await session.flush()
    return campaign


async def update_campaign(
    session: AsyncSession, campaign_id: UUID, data: dict
) -> Optional[Campaign]:
    result = await session.execute(
        update(Campaign)
        .where(Campaign.id == campaign_id)
        .values(**data, updated_at=func.now())
        .returning(Campaign)
    )
    await session.flush()
    return result.scalar_one_or_none()


async def delete_campaign(session: AsyncSession, campaign_id: UUID) -> bool:
    result = await session.execute(
        delete(Campaign).where(Campaign.id == campaign_id).returning(Campaign.id)
    )
    await session.flush()
    return result.scalar_one_or_none() is not None


async def count_active(session: AsyncSession, on: Optional[date] = None) -> int:
    """Count campaigns whose start/end dates bracket the given day (default today)."""
    on = on or date.today()
    result = await session.execute(
        select(func.count())
        .select_from(Campaign)
        .where(Campaign.start_date <= on)
        .where(Campaign.end_date >= on)
    )
    return result.scalar_one()
