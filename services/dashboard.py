"""Headline numbers for the console summary."""
import logging
from datetime import date
from typing import Callable, Optional

from db.connection import get_db
from db.repositories import campaigns, companies, contacts
from schemas.crm import ContactSummary, DashboardStats
from services.errors import QueryFailed
from services.ports import QueryService

logger = logging.getLogger(__name__)


def _as_int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


async def contact_summary(query: QueryService) -> ContactSummary:
    """Contact tiles from get_contact_summary; missing values read as 0."""
    try:
        row = await query.get_contact_summary()
    except Exception as exc:
        raise QueryFailed(f"Failed to fetch contact summary: {exc}") from exc
    row = row or {}
    return ContactSummary(
        total=_as_int(row.get("total")),
        with_email=_as_int(row.get("with_email")),
        with_mobile=_as_int(row.get("with_mobile")),
        new_30d=_as_int(row.get("new_30d")),
    )


async def dashboard_stats(
    session_factory: Callable = get_db, on: Optional[date] = None
) -> DashboardStats:
    """Contact/company totals and campaigns running on `on` (default today).

    No reply tracking exists yet, so response_rate is always 0.
    """
    async with session_factory() as session:
        total_contacts = await contacts.count(session)
        total_companies = await companies.count(session)
        active = await campaigns.count_active(session, on)
    return DashboardStats(
        total_contacts=total_contacts,
        total_companies=total_companies,
        active_campaigns=active,
        response_rate=0.0,
    )
