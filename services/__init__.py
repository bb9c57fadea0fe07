from .errors import (
    AudienceError,
    NormalizationError,
    QueryFailed,
    BuildFailed,
    SaveMetadataFailed,
    OverAllocation,
    EnrichmentLookupMiss,
    AllocationWriteFailed,
)
from .filters import normalize, filters_payload
from .audience_client import AudienceQueryClient
from .runs import AudienceRunLifecycle, RunState
from .allocation import AllocationReconciler

__all__ = [
    "AudienceError", "NormalizationError", "QueryFailed", "BuildFailed",
    "SaveMetadataFailed", "OverAllocation", "EnrichmentLookupMiss", "AllocationWriteFailed",
    "normalize", "filters_payload",
    "AudienceQueryClient", "AudienceRunLifecycle", "RunState", "AllocationReconciler",
]
