"""Audience run repository: listing, metadata patches and deletion.

Runs are created by the build_audience stored procedure, never inserted here.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import AudienceRun

logger = logging.getLogger(__name__)


async def get(session: AsyncSession, run_id: UUID) -> Optional[AudienceRun]:
    result = await session.execute(select(AudienceRun).where(AudienceRun.id == run_id))
    return result.scalar_one_or_none()


async def list_runs(session: AsyncSession) -> list[AudienceRun]:
    """Return all runs, newest first."""
    result = await session.execute(
        select(AudienceRun).order_by(AudienceRun.created_at.desc())
    )
    return list(result.scalars().all())


async def update_metadata(
    session: AsyncSession,
    run_id: UUID,
    name: Optional[str],
    notes: Optional[str] = None,
) -> Optional[AudienceRun]:
    """Patch name/notes of a run. Filters are never touched."""
    result = await session.execute(
        update(AudienceRun)
        .where(AudienceRun.id == run_id)
        .values(name=name, notes=notes, updated_at=func.now())
        .returning(AudienceRun)
    )
    await session.flush()
    return result.scalar_one_or_none()


async def delete_run(session: AsyncSession, run_id: UUID) -> bool:
    """Delete a run and (by cascade) its stored results. Returns True if a row went."""
    result = await session.execute(
        delete(AudienceRun).where(AudienceRun.id == run_id).returning(AudienceRun.id)
    )
    await session.flush()
    deleted = result.scalar_one_or_none() is not None
    if deleted:
        logger.info("Deleted audience run %s", run_id)
    return deleted
