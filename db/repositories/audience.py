"""Audience stored-procedure calls.

The procedures themselves live in the database; these helpers only call them
and hand back plain dicts:
  - search_audience(p_filters jsonb, p_page int, p_page_size int)
  - preview_audience(p_filters jsonb, p_limit int, p_offset int)
  - build_audience(p_filters jsonb, p_save boolean) -> uuid
  - get_audience_results(p_run_id uuid)
  - get_contact_summary()
"""
import json
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_SEARCH_SQL = text(
    "SELECT * FROM search_audience(CAST(:p_filters AS jsonb), :p_page, :p_page_size)"
)
_PREVIEW_SQL = text(
    "SELECT * FROM preview_audience(CAST(:p_filters AS jsonb), :p_limit, :p_offset)"
)
_BUILD_SQL = text("SELECT build_audience(CAST(:p_filters AS jsonb), :p_save)")
_RESULTS_SQL = text("SELECT * FROM get_audience_results(CAST(:p_run_id AS uuid))")
_RESULTS_LIMIT_SQL = text(
    "SELECT * FROM get_audience_results(CAST(:p_run_id AS uuid)) LIMIT :p_limit"
)
_SUMMARY_SQL = text("SELECT * FROM get_contact_summary()")


async def search_audience(
    session: AsyncSession, filters: dict, page: int, page_size: int
) -> list[dict]:
    result = await session.execute(
        _SEARCH_SQL,
        {"p_filters": json.dumps(filters), "p_page": page, "p_page_size": page_size},
    )
    return [dict(row) for row in result.mappings().all()]


async def preview_audience(
    session: AsyncSession, filters: dict, limit: int, offset: int
) -> list[dict]:
    result = await session.execute(
        _PREVIEW_SQL,
        {"p_filters": json.dumps(filters), "p_limit": limit, "p_offset": offset},
    )
    return [dict(row) for row in result.mappings().all()]


async def build_audience(session: AsyncSession, filters: dict, save: bool) -> Optional[UUID]:
    """Run the full build. Returns the run id (None when the build was not saved)."""
    result = await session.execute(
        _BUILD_SQL, {"p_filters": json.dumps(filters), "p_save": save}
    )
    run_id = result.scalar_one_or_none()
    if run_id is not None and not isinstance(run_id, UUID):
        run_id = UUID(str(run_id))
    return run_id


async def get_audience_results(
    session: AsyncSession, run_id: UUID, limit: Optional[int] = None
) -> list[dict]:
    params = {"p_run_id": str(run_id)}
    if limit is None:
        result = await session.execute(_RESULTS_SQL, params)
    else:
        result = await session.execute(_RESULTS_LIMIT_SQL, {**params, "p_limit": limit})
    return [dict(row) for row in result.mappings().all()]


async def get_contact_summary(session: AsyncSession) -> dict:
    """Return the first summary row, or {} when the procedure yields nothing."""
    result = await session.execute(_SUMMARY_SQL)
    row = result.mappings().first()
    return dict(row) if row else {}
