"""Audience run lifecycle: unsaved preview -> saved run.

A saved run's filters are frozen. Saving again with different filters builds
a new run; saving with the same filters only re-patches name/notes.
"""
import logging
from enum import Enum
from typing import Optional
from uuid import UUID

from schemas.audience import AudienceResultRow, AudienceRun
from services.audience_client import AudienceQueryClient, Filters, adapt_rows, to_payload
from services.errors import QueryFailed, SaveMetadataFailed
from services.ports import RunStore

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    UNSAVED = "unsaved"
    SAVED = "saved"


class AudienceRunLifecycle:
    def __init__(self, client: AudienceQueryClient, store: RunStore):
        self.client = client
        self.store = store
        self.run_id: Optional[UUID] = None
        self._frozen_filters: Optional[dict] = None

    @property
    def state(self) -> RunState:
        return RunState.SAVED if self.run_id is not None else RunState.UNSAVED

    def filters_changed(self) -> None:
        """The filter form was edited: the next save builds a new run."""
        self.run_id = None
        self._frozen_filters = None

    async def save(
        self, filters: Filters, name: str, notes: Optional[str] = None
    ) -> AudienceRun:
        """Build the run if needed, then write its name/notes.

        Raises BuildFailed if the build fails (no run exists), or
        SaveMetadataFailed if the run was built but could not be named.
        """
        if not name or not name.strip():
            raise ValueError("Audience name is required")
        payload = to_payload(filters)
        if self.run_id is None or payload != self._frozen_filters:
            self.filters_changed()
            self.run_id = await self.client.build(payload, save=True)
            self._frozen_filters = payload

        run = await self.rename(self.run_id, name, notes)
        logger.info("Saved audience run %s as %r (%d results)", run.id, run.name, run.total_results)
        return run

    async def rename(
        self, run_id: UUID, name: Optional[str], notes: Optional[str] = None
    ) -> AudienceRun:
        """Patch name/notes of an existing run."""
        name = name.strip() if name else name
        try:
            row = await self.store.update_run_metadata(run_id, name, notes)
        except Exception as exc:
            logger.warning("Saving name/notes for run %s failed: %s", run_id, exc, exc_info=True)
            raise SaveMetadataFailed(run_id, f"Failed to save audience {run_id}: {exc}") from exc
        if row is None:
            raise SaveMetadataFailed(run_id, f"Audience run {run_id} not found")
        return AudienceRun.model_validate(row)

    async def list_runs(self) -> list[AudienceRun]:
        """All saved runs, newest first."""
        try:
            rows = await self.store.list_runs()
        except Exception as exc:
            raise QueryFailed(f"Failed to fetch audience runs: {exc}") from exc
        runs = [AudienceRun.model_validate(r) for r in rows]
        runs.sort(key=lambda r: r.created_at.timestamp() if r.created_at else 0.0, reverse=True)
        return runs

    async def get(self, run_id: UUID) -> Optional[AudienceRun]:
        try:
            row = await self.store.get_run(run_id)
        except Exception as exc:
            raise QueryFailed(f"Failed to fetch audience run {run_id}: {exc}") from exc
        return AudienceRun.model_validate(row) if row else None

    async def fetch_results(
        self, run_id: UUID, limit: Optional[int] = None
    ) -> list[AudienceResultRow]:
        """The full row set of a saved run (or its first `limit` rows)."""
        try:
            raw = await self.client.query.get_audience_results(run_id, limit=limit)
        except Exception as exc:
            logger.warning("Fetching results for run %s failed: %s", run_id, exc, exc_info=True)
            raise QueryFailed(f"Failed to fetch audience results: {exc}") from exc
        rows = adapt_rows(raw)
        return rows[:limit] if limit is not None else rows

    async def delete(self, run_id: UUID) -> bool:
        try:
            deleted = await self.store.delete_run(run_id)
        except Exception as exc:
            raise QueryFailed(f"Failed to delete audience run {run_id}: {exc}") from exc
        if deleted and run_id == self.run_id:
            self.filters_changed()
        return deleted
