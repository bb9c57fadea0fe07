"""In-memory stand-ins for the query service and stores."""
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest


def make_rows(count: int, start: int = 1, total: int = None) -> list[dict]:
    rows = []
    for i in range(start, start + count):
        row = {
            "contact_id": i,
            "company_id": 100 + (i % 3),
            "first_name": f"First{i}",
            "last_name": f"Last{i}",
            "email": f"user{i}@acme.com",
            "phone": f"+91 98000 {i:05d}",
            "company_name": f"Company {100 + (i % 3)}",
            "city": "Pune",
            "state": "Maharashtra",
            "industry": "Technology",
            "job_level": "Senior",
            "department": "Engineering",
        }
        if total is not None:
            row["total_count"] = total
        rows.append(row)
    return rows


class FakeRunStore:
    def __init__(self):
        self.runs: dict = {}
        self.fail_update = None
        self.update_calls = []

    def add(self, run_id, filters, total, name=None, created_at=None):
        now = created_at or datetime.now(timezone.utc)
        self.runs[run_id] = {
            "id": run_id,
            "name": name,
            "notes": None,
            "filters": dict(filters),
            "status": "completed",
            "total_results": total,
            "created_at": now,
            "updated_at": now,
        }

    async def get_run(self, run_id):
        run = self.runs.get(run_id)
        return dict(run) if run else None

    async def list_runs(self):
        return [dict(r) for r in self.runs.values()]

    async def update_run_metadata(self, run_id, name, notes):
        self.update_calls.append((run_id, name, notes))
        if self.fail_update:
            raise self.fail_update
        run = self.runs.get(run_id)
        if run is None:
            return None
        run["name"] = name
        run["notes"] = notes
        return dict(run)

    async def delete_run(self, run_id):
        return self.runs.pop(run_id, None) is not None


class FakeQueryService:
    """Serves `total` matching contacts; saved builds are registered in a run store."""

    def __init__(self, total: int = 0, run_store: FakeRunStore = None):
        self.total = total
        self.run_store = run_store
        self.results: dict = {}
        self.summary: dict = {}
        self.fail = None
        self.calls = []

    def _page(self, limit, offset):
        count = max(0, min(limit, self.total - offset))
        return make_rows(count, start=offset + 1, total=self.total)

    async def preview_audience(self, filters, limit, offset):
        self.calls.append(("preview_audience", filters, limit, offset))
        if self.fail:
            raise self.fail
        return self._page(limit, offset)

    async def search_audience(self, filters, page, page_size):
        self.calls.append(("search_audience", filters, page, page_size))
        if self.fail:
            raise self.fail
        return self._page(page_size, (page - 1) * page_size)

    async def build_audience(self, filters, save, name=None):
        self.calls.append(("build_audience", filters, save, name))
        if self.fail:
            raise self.fail
        if not save:
            return None
        run_id = uuid.uuid4()
        self.results[run_id] = make_rows(self.total)
        if self.run_store is not None:
            self.run_store.add(run_id, filters, self.total, name)
        return run_id

    async def get_audience_results(self, run_id, limit=None):
        self.calls.append(("get_audience_results", run_id, limit))
        if self.fail:
            raise self.fail
        rows = self.results.get(run_id, [])
        return rows[:limit] if limit is not None else list(rows)

    async def get_contact_summary(self):
        if self.fail:
            raise self.fail
        return self.summary


class FakeLookup:
    def __init__(self, contacts: dict = None, companies: dict = None):
        self.contacts = contacts or {}
        self.companies = companies or {}
        self.fail = None
        self.calls = []

    async def contacts_by_ids(self, contact_ids):
        self.calls.append(("contacts", set(contact_ids)))
        if self.fail:
            raise self.fail
        return {i: self.contacts[i] for i in contact_ids if i in self.contacts}

    async def companies_by_ids(self, company_ids):
        self.calls.append(("companies", set(company_ids)))
        if self.fail:
            raise self.fail
        return {i: self.companies[i] for i in company_ids if i in self.companies}


class FakeAllocationStore:
    def __init__(self):
        self.writes = []
        self.fail = None

    async def write_allocation(self, run_id, campaign_id, rows, file_name, description=None):
        if self.fail:
            raise self.fail
        file_id = uuid.uuid4()
        self.writes.append({
            "file_id": file_id,
            "run_id": run_id,
            "campaign_id": campaign_id,
            "rows": rows,
            "file_name": file_name,
            "description": description,
        })
        return file_id


class FakeSessionFactory:
    """Replaces get_db(): yields a fresh MagicMock session per `async with`."""

    def __init__(self):
        self.sessions = []

    @asynccontextmanager
    async def __call__(self):
        session = MagicMock(name=f"session{len(self.sessions) + 1}")
        self.sessions.append(session)
        yield session


@pytest.fixture
def run_store():
    return FakeRunStore()


@pytest.fixture
def query(run_store):
    return FakeQueryService(total=120, run_store=run_store)


@pytest.fixture
def lookup():
    return FakeLookup()


@pytest.fixture
def allocation_store():
    return FakeAllocationStore()


@pytest.fixture
def session_factory():
    return FakeSessionFactory()
