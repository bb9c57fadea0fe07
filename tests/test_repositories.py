"""Integration tests for core repository methods.

These need a migrated database:
  export DATABASE_URL="postgresql+asyncpg://crm:<password>@localhost:5432/crm"
  alembic upgrade head
They are skipped when DATABASE_URL is not set.
"""
import os
import uuid
from datetime import date, timedelta

import pytest
import pytest_asyncio

from db import dispose_engine, get_db
from db.gateway import SqlAllocationStore, SqlRunStore
from db.models import AudienceRun
from db.repositories import allocations as allocations_repo
from db.repositories import campaigns as campaigns_repo
from db.repositories import contacts as contacts_repo
from db.repositories import master_data as master_repo
from services.errors import AllocationWriteFailed

requires_db = pytest.mark.skipif(
    not os.environ.get("DATABASE_URL"), reason="DATABASE_URL not set"
)


@pytest_asyncio.fixture(autouse=True)
async def _fresh_engine():
    # asyncpg connections are bound to the loop that opened them
    yield
    await dispose_engine()


async def _make_campaign(session, **overrides):
    data = {
        "name": f"Campaign {uuid.uuid4().hex[:6]}",
        "start_date": date.today() - timedelta(days=1),
        "end_date": date.today() + timedelta(days=30),
        "list_size": 100,
        "client_name": "Acme",
        "servicing_lead": "R. Mehta",
    }
    data.update(overrides)
    return await campaigns_repo.create(session, data)


async def _make_run(session, total=10):
    run = AudienceRun(filters={"industry": "Technology"}, status="completed", total_results=total)
    session.add(run)
    await session.flush()
    return run


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


@requires_db
@pytest.mark.asyncio
async def test_contact_upsert_matches_email_case_insensitively():
    """A second upload with the same email (different case) updates, not inserts."""
    email = f"dedup-{uuid.uuid4().hex[:8]}@example.com"
    async with get_db() as session:
        first, created = await contacts_repo.upsert_by_email(
            session, {"first_name": "Jane", "official_email_id": email}
        )
    async with get_db() as session:
        second, created_again = await contacts_repo.upsert_by_email(
            session, {"first_name": "Janet", "official_email_id": email.upper()}
        )
    assert created is True
    assert created_again is False
    assert first.contact_id == second.contact_id
    assert second.first_name == "Janet"


@requires_db
@pytest.mark.asyncio
async def test_count_active_campaigns():
    """count_active counts campaigns bracketing the day, not past ones."""
    async with get_db() as session:
        before = await campaigns_repo.count_active(session)
        await _make_campaign(session)
        await _make_campaign(
            session,
            start_date=date.today() - timedelta(days=60),
            end_date=date.today() - timedelta(days=30),
        )
    async with get_db() as session:
        after = await campaigns_repo.count_active(session)
    assert after == before + 1


@requires_db
@pytest.mark.asyncio
async def test_run_metadata_patch_keeps_filters():
    async with get_db() as session:
        run = await _make_run(session)
    store = SqlRunStore()
    patched = await store.update_run_metadata(run.id, "Tech Leads", "notes")
    assert patched["name"] == "Tech Leads"
    assert patched["filters"] == {"industry": "Technology"}
    assert await store.delete_run(run.id) is True
    assert await store.get_run(run.id) is None


@requires_db
@pytest.mark.asyncio
async def test_allocation_written_in_one_transaction():
    async with get_db() as session:
        campaign = await _make_campaign(session)
        run = await _make_run(session, total=2)

    rows = [
        {"contact_id": 1, "full_name": "Jane Doe", "email": "jane@example.com"},
        {"contact_id": 2, "full_name": "John Roe", "email": "john@example.com"},
    ]
    file_id = await SqlAllocationStore().write_allocation(
        run.id, campaign.id, rows, "Tech Leads allocation"
    )

    async with get_db() as session:
        recorded = await allocations_repo.get_for_run(session, run.id)
    assert file_id is not None
    assert [a.allocated_count for a in recorded] == [2]


@requires_db
@pytest.mark.asyncio
async def test_failed_allocation_commits_nothing():
    async with get_db() as session:
        campaign = await _make_campaign(session)
        run = await _make_run(session)

    bad_rows = [{"contact_id": 1}, {"contact_id": None}]
    with pytest.raises(AllocationWriteFailed):
        await SqlAllocationStore().write_allocation(run.id, campaign.id, bad_rows, "broken")

    async with get_db() as session:
        assert await allocations_repo.get_for_run(session, run.id) == []


@pytest.mark.asyncio
async def test_unknown_master_table_rejected():
    with pytest.raises(ValueError):
        await master_repo.list_entries(None, "regions")
