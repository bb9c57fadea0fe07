from .audience import (
    FilterSet,
    AudienceResultRow,
    AudiencePage,
    AudienceRun,
)
from .allocation import (
    EnrichmentLevel,
    AllocatedContact,
    AllocationRowError,
    AllocationSummary,
)
from .crm import (
    ContactSummary,
    DashboardStats,
    CampaignIn,
    CampaignOut,
    ContactUpload,
    CompanyUpload,
    UploadRowError,
    UploadSummary,
)

__all__ = [
    "FilterSet", "AudienceResultRow", "AudiencePage", "AudienceRun",
    "EnrichmentLevel", "AllocatedContact", "AllocationRowError", "AllocationSummary",
    "ContactSummary", "DashboardStats", "CampaignIn", "CampaignOut",
    "ContactUpload", "CompanyUpload", "UploadRowError", "UploadSummary",
]
