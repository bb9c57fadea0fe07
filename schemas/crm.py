"""Contact, company, campaign and dashboard schemas."""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ContactSummary(BaseModel):
    total: int = 0
    with_email: int = 0
    with_mobile: int = 0
    new_30d: int = 0


class DashboardStats(BaseModel):
    total_contacts: int = 0
    total_companies: int = 0
    active_campaigns: int = 0
    response_rate: float = 0.0


class CampaignIn(BaseModel):
    name: str = Field(min_length=1)
    start_date: date
    end_date: date
    list_size: int = Field(default=0, ge=0)
    client_name: str = Field(min_length=1)
    servicing_lead: str = Field(min_length=1)

    @model_validator(mode="after")
    def _check_dates(self) -> "CampaignIn":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class CampaignOut(CampaignIn):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContactUpload(BaseModel):
    """One contact_master row from a spreadsheet."""

    model_config = ConfigDict(extra="ignore")

    salute: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    job_level: Optional[str] = None
    specialization: Optional[str] = None
    company_id: Optional[int] = None
    official_email_id: Optional[str] = None
    personal_email_id: Optional[str] = None
    mobile_number: Optional[str] = None
    direct_phone_number: Optional[str] = None
    gender: Optional[str] = None

    @field_validator("official_email_id", "personal_email_id")
    @classmethod
    def _normalize_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().lower()
        return value or None


class CompanyUpload(BaseModel):
    """One organisation_master row from a spreadsheet."""

    model_config = ConfigDict(extra="ignore")

    company_name: Optional[str] = None
    industry: Optional[str] = None
    headquarters: Optional[str] = None
    employees: Optional[int] = None
    annual_revenue: Optional[Decimal] = None
    address_type: Optional[str] = None
    postal_address_1: Optional[str] = None
    postal_address_2: Optional[str] = None
    postal_address_3: Optional[str] = None
    std: Optional[str] = None
    phone_1: Optional[str] = None
    phone_2: Optional[str] = None
    fax: Optional[str] = None
    company_mobile_number: Optional[str] = None
    common_email_id: Optional[str] = None
    website: Optional[str] = None
    no_of_employees_total: Optional[int] = None
    turn_over_inr_cr: Optional[Decimal] = None
    no_of_offices_total: Optional[int] = None
    no_of_branch_offices: Optional[int] = None


class UploadRowError(BaseModel):
    row: int
    message: str


class UploadSummary(BaseModel):
    inserted: int = 0
    updated: int = 0
    failed: int = 0
    errors: List[UploadRowError] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.inserted + self.updated + self.failed
