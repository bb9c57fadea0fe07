"""Contact repository: email dedup and bulk lookups."""
import logging
from typing import Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Contact

logger = logging.getLogger(__name__)


async def get_by_email(session: AsyncSession, email: str) -> Optional[Contact]:
    """Return the Contact whose official email matches (case-insensitive), or None."""
    result = await session.execute(
        select(Contact)
        .where(func.lower(Contact.official_email_id) == email.lower().strip())
        .order_by(Contact.contact_id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_many(session: AsyncSession, contact_ids: Iterable[int]) -> dict[int, Contact]:
    """Return {contact_id: Contact} for the ids that exist."""
    ids = set(contact_ids)
    if not ids:
        return {}
    result = await session.execute(select(Contact).where(Contact.contact_id.in_(ids)))
    return {c.contact_id: c for c in result.scalars().all()}


async def insert(session: AsyncSession, data: dict) -> Contact:
    """Insert a contact_master row.

    data dict keys: salute, first_name, last_name, designation, department,
    job_level, specialization, company_id, official_email_id,
    personal_email_id, mobile_number, direct_phone_number, gender
    """
    contact = Contact(**data)
    session.add(contact)
    await session.flush()
    return contact


async def update_contact(session: AsyncSession, contact_id: int, data: dict) -> Optional[Contact]:
    result = await session.execute(
        update(Contact)
        .where(Contact.contact_id == contact_id)
        .values(**data)
        .returning(Contact)
    )
    await session.flush()
    return result.scalar_one_or_none()


async def upsert_by_email(session: AsyncSession, data: dict) -> tuple[Contact, bool]:
    """Update the contact with the same official email, or insert a new one.

    Returns (contact, created). Rows without an email are always inserted.
    """
    email = data.get("official_email_id")
    existing = await get_by_email(session, email) if email else None
    if existing is None:
        return await insert(session, data), True
    contact = await update_contact(session, existing.contact_id, data)
    logger.debug("Updated existing contact %s matched by email", existing.contact_id)
    return contact, False


async def count(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(Contact))
    return result.scalar_one()
