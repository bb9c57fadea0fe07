"""SQLAlchemy 2.0 ORM models for the lead console.

Covers the public schema tables used by the console:
  - master data: city_master, industry_master, department_master,
                 job_level_master, comp_turnover_master, emp_range_master
  - crm: organisation_master, contact_master, campaigns
  - audience: audience_runs, audience_results, campaign_audience_allocations,
              campaign_files, campaign_file_contacts
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    UUID,
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Identity,
    Integer,
    Numeric,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


AUDIENCE_RUN_STATUSES = ("draft", "completed")


# ===========================================================================
# Master data
# ===========================================================================


class City(Base):
    """city_master: city / state / region lookup."""

    __tablename__ = "city_master"

    city_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    region: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    pincode: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Industry(Base):
    """industry_master: industry verticals and sub-verticals."""

    __tablename__ = "industry_master"

    industry_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    industry_vertical: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sub_vertical: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Department(Base):
    __tablename__ = "department_master"

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    department_name: Mapped[str] = mapped_column(Text, nullable=False)


class JobLevel(Base):
    __tablename__ = "job_level_master"

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    job_level_name: Mapped[str] = mapped_column(Text, nullable=False)


class TurnoverRange(Base):
    __tablename__ = "comp_turnover_master"

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    turnover_range: Mapped[str] = mapped_column(Text, nullable=False)


class EmployeeRange(Base):
    __tablename__ = "emp_range_master"

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    employee_range: Mapped[str] = mapped_column(Text, nullable=False)


# ===========================================================================
# CRM entities
# ===========================================================================


class Company(Base):
    """organisation_master: target company record."""

    __tablename__ = "organisation_master"

    company_id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    company_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    headquarters: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("city_master.city_id"), nullable=True
    )
    employees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    annual_revenue: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2), nullable=True)
    address_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    postal_address_1: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    postal_address_2: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    postal_address_3: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    std: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone_1: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone_2: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    fax: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    company_mobile_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    common_email_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    no_of_employees_total: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    turn_over_inr_cr: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    no_of_offices_total: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    no_of_branch_offices: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    contacts: Mapped[list["Contact"]] = relationship(
        "Contact", back_populates="company"
    )


class Contact(Base):
    """contact_master: individual people at companies."""

    __tablename__ = "contact_master"

    contact_id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    company_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("organisation_master.company_id"),
        nullable=True,
    )
    salute: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    designation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    job_level: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    specialization: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    official_email_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True, index=True)
    personal_email_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mobile_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    direct_phone_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    company: Mapped[Optional["Company"]] = relationship(
        "Company", back_populates="contacts"
    )


class Campaign(Base):
    """campaigns: client campaigns that audiences are allocated into."""

    __tablename__ = "campaigns"
    __table_args__ = (
        CheckConstraint("list_size >= 0", name="ck_campaign_list_size"),
        CheckConstraint("end_date >= start_date", name="ck_campaign_dates"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    list_size: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    client_name: Mapped[str] = mapped_column(Text, nullable=False)
    servicing_lead: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    files: Mapped[list["CampaignFile"]] = relationship(
        "CampaignFile", back_populates="campaign", cascade="all, delete-orphan"
    )


# ===========================================================================
# Audience builder
# ===========================================================================


class AudienceRun(Base):
    """audience_runs: a persisted audience build (filters snapshot + count).

    Rows are created by the build_audience stored procedure; the console
    only patches name/notes and deletes.
    """

    __tablename__ = "audience_runs"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'completed')",
            name="ck_audience_run_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    filters: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(Text, nullable=False, server_default="draft")
    total_results: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    results: Mapped[list["AudienceResult"]] = relationship(
        "AudienceResult", back_populates="run", cascade="all, delete-orphan"
    )
    allocations: Mapped[list["CampaignAudienceAllocation"]] = relationship(
        "CampaignAudienceAllocation", back_populates="run", cascade="all, delete-orphan"
    )


class AudienceResult(Base):
    """audience_results: denormalized per-contact snapshot owned by a run."""

    __tablename__ = "audience_results"

    id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    run_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("audience_runs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    company_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    company_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    job_level: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationship
    run: Mapped["AudienceRun"] = relationship("AudienceRun", back_populates="results")


class CampaignAudienceAllocation(Base):
    """campaign_audience_allocations: which run fed which campaign, and how many."""

    __tablename__ = "campaign_audience_allocations"
    __table_args__ = (
        CheckConstraint("allocated_count >= 0", name="ck_allocation_count"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    run_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("audience_runs.id", ondelete="CASCADE"),
        nullable=False,
    )
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
    )
    allocated_count: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationship
    run: Mapped["AudienceRun"] = relationship("AudienceRun", back_populates="allocations")


class CampaignFile(Base):
    """campaign_files: a named batch of contacts allocated into a campaign."""

    __tablename__ = "campaign_files"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Loose UUID reference; the run may be deleted after allocation
    run_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    total_contacts: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    allocated_contacts: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="files")
    contacts: Mapped[list["CampaignFileContact"]] = relationship(
        "CampaignFileContact", back_populates="campaign_file", cascade="all, delete-orphan"
    )


class CampaignFileContact(Base):
    """campaign_file_contacts: point-in-time copy of an allocated contact.

    Not a live reference: contact/company fields are copied at allocation time.
    """

    __tablename__ = "campaign_file_contacts"

    id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    campaign_file_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("campaign_files.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Loose references, no FK enforced
    contact_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    company_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    # Audience projection
    first_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    full_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    company_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    job_level: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Enrichment (full allocations only)
    salute: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    designation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    personal_email_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    direct_phone_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    headquarters: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    employees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    turn_over_inr_cr: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    postal_address_1: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    postal_address_2: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    postal_address_3: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationship
    campaign_file: Mapped["CampaignFile"] = relationship(
        "CampaignFile", back_populates="contacts"
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "Base",
    "AUDIENCE_RUN_STATUSES",
    # master data
    "City",
    "Industry",
    "Department",
    "JobLevel",
    "TurnoverRange",
    "EmployeeRange",
    # crm
    "Company",
    "Contact",
    "Campaign",
    # audience
    "AudienceRun",
    "AudienceResult",
    "CampaignAudienceAllocation",
    "CampaignFile",
    "CampaignFileContact",
]
