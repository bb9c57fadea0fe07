"""Audience pipeline error kinds.

Every failure the console reports to an operator derives from AudienceError.
"""
from typing import Optional
from uuid import UUID


class AudienceError(Exception):
    """Base class for audience pipeline failures."""


class NormalizationError(AudienceError):
    """Filter normalization failed. normalize() is total, so nothing raises this today."""


class QueryFailed(AudienceError):
    """A preview/search/results call to the query service failed."""


class BuildFailed(AudienceError):
    """The full build failed; no run id was produced."""


class SaveMetadataFailed(AudienceError):
    """The run was built but its name/notes could not be written.

    The run exists unnamed; retry the patch, do not rebuild.
    """

    def __init__(self, run_id: UUID, message: str = ""):
        self.run_id = run_id
        super().__init__(message or f"Run {run_id} was built but its name/notes were not saved")


class OverAllocation(AudienceError):
    """More contacts requested than the run holds."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot allocate {requested} contacts: run only has {available}"
        )


class EnrichmentLookupMiss(AudienceError):
    """A contact or company referenced by a row was not found during enrichment.

    Non-fatal: the reconciler logs it and leaves the joined fields empty.
    """

    def __init__(self, kind: str, ids: Optional[set] = None):
        self.kind = kind
        self.ids = ids or set()
        super().__init__(f"{len(self.ids)} {kind} id(s) not found during enrichment")


class AllocationWriteFailed(AudienceError):
    """The allocation batch insert failed; nothing was committed."""
