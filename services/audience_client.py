"""Audience query client: paginated previews and full builds.

Holds the current page of preview rows for one filter session. A failed call
leaves the previous page in place, and responses that arrive after a newer
request was issued are returned marked stale without touching that state.
"""
import logging
from typing import Any, Optional, Union
from uuid import UUID

from pydantic import ValidationError

from crm_config import PAGE_SIZE_MAX, PAGE_SIZE_MIN, default_page_size
from schemas.audience import AudiencePage, AudienceResultRow, FilterSet
from services.errors import BuildFailed, QueryFailed
from services.filters import filters_payload, normalize
from services.ports import QueryService

logger = logging.getLogger(__name__)

Filters = Union[FilterSet, dict, None]


def clamp_page(page: Optional[int]) -> int:
    return max(1, page or 1)


def clamp_page_size(page_size: Optional[int]) -> int:
    return max(PAGE_SIZE_MIN, min(PAGE_SIZE_MAX, page_size or default_page_size()))


def to_payload(filters: Filters) -> dict:
    if isinstance(filters, FilterSet):
        return filters_payload(filters)
    return normalize(filters or {}) or {}


def adapt_rows(raw_rows: list[Any]) -> list[AudienceResultRow]:
    """Validate service rows into the canonical row shape."""
    try:
        return [AudienceResultRow.model_validate(r) for r in raw_rows]
    except ValidationError as exc:
        raise QueryFailed(f"Query service returned malformed rows: {exc}") from exc


class AudienceQueryClient:
    def __init__(self, query: QueryService, page_size: Optional[int] = None):
        self.query = query
        self.page_size = clamp_page_size(page_size)
        self.page = 1
        self.rows: list[AudienceResultRow] = []
        self.total_count = 0
        self.filters: dict = {}
        self._generation = 0

    @property
    def current(self) -> AudiencePage:
        return AudiencePage(
            rows=list(self.rows),
            total_count=self.total_count,
            page=self.page,
            page_size=self.page_size,
        )

    def reset(self) -> None:
        """Forget the current results (and invalidate in-flight requests)."""
        self._generation += 1
        self.rows = []
        self.total_count = 0
        self.page = 1
        self.filters = {}

    async def preview(
        self, filters: Filters, page: int = 1, page_size: Optional[int] = None
    ) -> AudiencePage:
        """Fetch one page via preview_audience (limit/offset, windowed total)."""
        payload = to_payload(filters)
        page = clamp_page(page)
        size = clamp_page_size(page_size or self.page_size)
        generation = self._issue()
        try:
            raw = await self.query.preview_audience(
                payload, limit=size, offset=(page - 1) * size
            )
            head = None
            if not raw and page > 1:
                # Past the last page: the window count comes from page one.
                head = await self.query.preview_audience(payload, limit=size, offset=0)
        except Exception as exc:
            logger.warning("Audience preview failed (page=%d): %s", page, exc, exc_info=True)
            raise QueryFailed(f"Failed to preview audience: {exc}") from exc
        return self._apply(generation, payload, adapt_rows(raw), page, size, head)

    async def search(
        self, filters: Filters, page: int = 1, page_size: Optional[int] = None
    ) -> AudiencePage:
        """Fetch one page via search_audience (page/page size)."""
        payload = to_payload(filters)
        page = clamp_page(page)
        size = clamp_page_size(page_size or self.page_size)
        generation = self._issue()
        try:
            raw = await self.query.search_audience(payload, page=page, page_size=size)
            head = None
            if not raw and page > 1:
                head = await self.query.search_audience(payload, page=1, page_size=size)
        except Exception as exc:
            logger.warning("Audience search failed (page=%d): %s", page, exc, exc_info=True)
            raise QueryFailed(f"Failed to search audience: {exc}") from exc
        return self._apply(generation, payload, adapt_rows(raw), page, size, head)

    async def build(
        self, filters: Filters, save: bool = False, name: Optional[str] = None
    ) -> Optional[UUID]:
        """Build the full (unpaginated) match set server-side.

        With save=True the build is persisted as a run and its id returned.
        Unsaved builds may return None.
        """
        payload = to_payload(filters)
        try:
            run_id = await self.query.build_audience(payload, save=save, name=name)
        except Exception as exc:
            logger.warning("Audience build failed (save=%s): %s", save, exc, exc_info=True)
            raise BuildFailed(f"Failed to build audience: {exc}") from exc
        if save and run_id is None:
            raise BuildFailed("Audience build returned no run id")
        logger.info("Built audience run %s (save=%s)", run_id, save)
        return run_id

    # ------------------------------------------------------------------

    def _issue(self) -> int:
        self._generation += 1
        return self._generation

    def _apply(
        self,
        generation: int,
        payload: dict,
        rows: list[AudienceResultRow],
        page: int,
        size: int,
        head: Optional[list[Any]] = None,
    ) -> AudiencePage:
        if head:
            total = _total(adapt_rows(head), 1, size)
        else:
            total = _total(rows, page, size)
        result = AudiencePage(
            rows=rows,
            total_count=total,
            page=page,
            page_size=size,
        )
        if generation != self._generation:
            logger.debug(
                "Discarding stale audience response (generation %d, latest %d)",
                generation,
                self._generation,
            )
            result.stale = True
            return result
        self.rows = rows
        self.total_count = result.total_count
        self.page = page
        self.page_size = size
        self.filters = payload
        return result


def _total(rows: list[AudienceResultRow], page: int, size: int) -> int:
    for row in rows:
        if row.total_count is not None:
            return row.total_count
    # No windowed count column: only what we can see.
    return (page - 1) * size + len(rows) if rows else 0
