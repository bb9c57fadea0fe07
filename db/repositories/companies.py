"""Company repository: bulk lookups and inserts for organisation_master."""
import logging
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Company

logger = logging.getLogger(__name__)


async def get_many(session: AsyncSession, company_ids: Iterable[int]) -> dict[int, Company]:
    """Return {company_id: Company} for the ids that exist."""
    ids = set(company_ids)
    if not ids:
        return {}
    result = await session.execute(select(Company).where(Company.company_id.in_(ids)))
    return {c.company_id: c for c in result.scalars().all()}


async def insert(session: AsyncSession, data: dict) -> Company:
    """Insert an organisation_master row."""
    company = Company(**data)
    session.add(company)
    await session.flush()
    return company


async def count(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(Company))
    return result.scalar_one()
