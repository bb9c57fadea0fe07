"""Campaign allocation schemas."""
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class EnrichmentLevel(str, Enum):
    BASIC = "basic"
    FULL = "full"


class AllocatedContact(BaseModel):
    """One row written to campaign_file_contacts."""

    contact_id: int
    company_id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    industry: Optional[str] = None
    job_level: Optional[str] = None
    department: Optional[str] = None
    # enrichment
    salute: Optional[str] = None
    designation: Optional[str] = None
    personal_email_id: Optional[str] = None
    direct_phone_number: Optional[str] = None
    website: Optional[str] = None
    headquarters: Optional[str] = None
    employees: Optional[int] = None
    turn_over_inr_cr: Optional[Decimal] = None
    postal_address_1: Optional[str] = None
    postal_address_2: Optional[str] = None
    postal_address_3: Optional[str] = None


CONTACT_ENRICHMENT_FIELDS = (
    "salute",
    "designation",
    "personal_email_id",
    "direct_phone_number",
)
COMPANY_ENRICHMENT_FIELDS = (
    "website",
    "headquarters",
    "employees",
    "turn_over_inr_cr",
    "postal_address_1",
    "postal_address_2",
    "postal_address_3",
)


class AllocationRowError(BaseModel):
    row: Optional[int] = None  # None when the error concerns the whole batch
    message: str


class AllocationSummary(BaseModel):
    allocated: int = 0
    failed: int = 0
    errors: List[AllocationRowError] = Field(default_factory=list)
    campaign_file_id: Optional[UUID] = None

    @property
    def ok(self) -> bool:
        return not self.errors
