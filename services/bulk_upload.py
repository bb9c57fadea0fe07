"""Spreadsheet import/export for contacts and companies.

Each data row is written in its own transaction, so one bad row never aborts
the rest of the sheet. Contacts whose official email already exists are
updated in place instead of duplicated.
"""
import logging
from pathlib import Path
from typing import Callable, Union

import pandas as pd
from pydantic import BaseModel, ValidationError

from crm_config import UPLOAD_ERROR_CAP
from db.connection import get_db
from db.repositories import companies, contacts
from schemas.crm import CompanyUpload, ContactUpload, UploadRowError, UploadSummary

logger = logging.getLogger(__name__)

CONTACT_COLUMNS = [
    "salute", "first_name", "last_name", "designation", "department",
    "job_level", "specialization", "company_id", "official_email_id",
    "personal_email_id", "mobile_number", "direct_phone_number", "gender",
]
COMPANY_COLUMNS = [
    "company_name", "industry", "headquarters", "employees", "annual_revenue",
    "address_type", "postal_address_1", "postal_address_2", "postal_address_3",
    "std", "phone_1", "phone_2", "fax", "company_mobile_number",
    "common_email_id", "website", "no_of_employees_total", "turn_over_inr_cr",
    "no_of_offices_total", "no_of_branch_offices",
]

TEMPLATE_ROWS = {
    "contacts": {
        "salute": "Mr.",
        "first_name": "John",
        "last_name": "Doe",
        "designation": "Software Engineer",
        "department": "Engineering",
        "job_level": "Senior",
        "specialization": "Frontend Development",
        "company_id": 1,
        "official_email_id": "john.doe@company.com",
        "personal_email_id": "john@email.com",
        "mobile_number": "+1234567890",
        "direct_phone_number": "+1234567891",
        "gender": "Male",
    },
    "companies": {
        "company_name": "Tech Corp Inc.",
        "industry": "Technology",
        "headquarters": "San Francisco, CA",
        "employees": 500,
        "annual_revenue": 50000000,
        "address_type": "Corporate",
        "postal_address_1": "123 Tech Street",
        "postal_address_2": "Suite 100",
        "postal_address_3": "Building A",
        "std": "022",
        "phone_1": "+1-555-0123",
        "phone_2": "+1-555-0124",
        "fax": "+1-555-0125",
        "company_mobile_number": "+1-555-0126",
        "common_email_id": "info@techcorp.com",
        "website": "https://techcorp.com",
        "no_of_employees_total": 500,
        "turn_over_inr_cr": 100.5,
        "no_of_offices_total": 5,
        "no_of_branch_offices": 4,
    },
}
TEMPLATE_COLUMNS = {"contacts": CONTACT_COLUMNS, "companies": COMPANY_COLUMNS}

PathLike = Union[str, Path]


def read_sheet(path: PathLike) -> list[dict]:
    """Read the first sheet of an .xlsx/.xls (or .csv) file as a list of row dicts.

    Cells come back as strings; blank cells as None.
    """
    path = Path(path)
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=str)
    else:
        df = pd.read_excel(path, sheet_name=0, dtype=str)
    df = df.fillna("")
    df.columns = [str(c).strip() for c in df.columns]
    return [
        {col: _clean_cell(value) for col, value in record.items()}
        for record in df.to_dict(orient="records")
    ]


def write_template(kind: str, path: PathLike) -> Path:
    """Write a one-row sample sheet with the upload columns for `kind`."""
    if kind not in TEMPLATE_ROWS:
        raise ValueError(f"Unknown template {kind!r}. Expected 'contacts' or 'companies'")
    path = Path(path)
    df = pd.DataFrame([TEMPLATE_ROWS[kind]], columns=TEMPLATE_COLUMNS[kind])
    df.to_excel(path, index=False, sheet_name=kind, engine="openpyxl")
    logger.info("Wrote %s template to %s", kind, path)
    return path


def _clean_cell(value):
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    # Excel stores whole numbers as floats: "500.0" -> "500"
    if text.endswith(".0") and text[:-2].lstrip("-").isdigit():
        return text[:-2]
    return text


async def upload_contacts(rows: list[dict], session_factory: Callable = get_db) -> UploadSummary:
    async def write(session, data: dict) -> bool:
        _, created = await contacts.upsert_by_email(session, data)
        return created

    return await _upload("contacts", rows, ContactUpload, write, session_factory)


async def upload_companies(rows: list[dict], session_factory: Callable = get_db) -> UploadSummary:
    async def write(session, data: dict) -> bool:
        await companies.insert(session, data)
        return True

    return await _upload("companies", rows, CompanyUpload, write, session_factory)


async def _upload(
    kind: str,
    rows: list[dict],
    schema: type[BaseModel],
    write,
    session_factory: Callable,
) -> UploadSummary:
    summary = UploadSummary()
    for number, raw in enumerate(rows, start=1):
        try:
            data = schema.model_validate(raw).model_dump(exclude_none=True)
            async with session_factory() as session:
                created = await write(session, data)
        except ValidationError as exc:
            _fail(summary, number, _validation_message(exc))
            continue
        except Exception as exc:
            logger.warning("Uploading %s row %d failed: %s", kind, number, exc)
            _fail(summary, number, str(exc))
            continue
        if created:
            summary.inserted += 1
        else:
            summary.updated += 1

    logger.info(
        "Uploaded %s: %d inserted, %d updated, %d failed",
        kind,
        summary.inserted,
        summary.updated,
        summary.failed,
    )
    return summary


def _fail(summary: UploadSummary, row: int, message: str) -> None:
    summary.failed += 1
    if len(summary.errors) < UPLOAD_ERROR_CAP:
        summary.errors.append(UploadRowError(row=row, message=message))


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
