"""Audience builder schemas: filter form, result rows, runs and pages."""
import math
from datetime import datetime
from typing import Any, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FilterSet(BaseModel):
    """The audience filter form.

    Closed: unknown keys are rejected. Numeric fields accept the raw strings
    a form produces; blank strings mean "not set".
    """

    model_config = ConfigDict(extra="forbid")

    industry: Optional[str] = None
    city_id: Optional[int] = None
    job_level: Optional[str] = None
    department: Optional[str] = None
    has_email: bool = False
    has_phone: bool = False
    employee_min: Optional[int] = None
    employee_max: Optional[int] = None
    text_search: Optional[str] = None

    @field_validator("city_id", "employee_min", "employee_max", mode="before")
    @classmethod
    def _parse_int(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            return int(value)
        return value

    @field_validator("industry", "job_level", "department", "text_search", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def _check_employee_range(self) -> "FilterSet":
        if (
            self.employee_min is not None
            and self.employee_max is not None
            and self.employee_min > self.employee_max
        ):
            raise ValueError("employee_min must not exceed employee_max")
        return self


class AudienceResultRow(BaseModel):
    """Canonical contact-level audience row.

    Accepts both result shapes the stored procedures produce:
    first_name/last_name/phone and full_name/mobile.
    """

    model_config = ConfigDict(extra="ignore")

    contact_id: int
    company_id: Optional[int] = None
    company_name: Optional[str] = None
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    industry: Optional[str] = None
    job_level: Optional[str] = None
    department: Optional[str] = None
    total_count: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _adapt_legacy_shapes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        row = dict(data)
        if not row.get("phone") and row.get("mobile"):
            row["phone"] = row["mobile"]
        row.pop("mobile", None)

        first, last = row.get("first_name"), row.get("last_name")
        full = row.get("full_name")
        if not full and (first or last):
            row["full_name"] = " ".join(p for p in (first, last) if p)
        elif full and not (first or last):
            parts = full.strip().split(" ", 1)
            row["first_name"] = parts[0] or None
            row["last_name"] = parts[1].strip() if len(parts) > 1 else None
        return row

    @property
    def location(self) -> str:
        return ", ".join(p for p in (self.city, self.state) if p)


class AudiencePage(BaseModel):
    """One page of preview results plus the windowed total."""

    rows: List[AudienceResultRow] = Field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 20
    stale: bool = False

    @property
    def total_pages(self) -> int:
        if not self.total_count:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def first_index(self) -> int:
        """1-based index of the first row on this page (0 when empty)."""
        if not self.rows:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        return min(self.page * self.page_size, self.total_count)


RunStatus = Literal["draft", "completed"]


class AudienceRun(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: Optional[str] = None
    notes: Optional[str] = None
    filters: dict = Field(default_factory=dict)
    status: RunStatus = "draft"
    total_results: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.name or "Untitled Run"
