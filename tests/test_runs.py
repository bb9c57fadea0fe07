"""Unit tests for the saved-run lifecycle."""
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from schemas.audience import FilterSet
from services.audience_client import AudienceQueryClient
from services.errors import BuildFailed, QueryFailed, SaveMetadataFailed
from services.runs import AudienceRunLifecycle, RunState


@pytest.fixture
def lifecycle(query, run_store):
    return AudienceRunLifecycle(AudienceQueryClient(query), run_store)


def _builds(query):
    return [c for c in query.calls if c[0] == "build_audience"]


class TestSave:
    @pytest.mark.asyncio
    async def test_builds_then_names_run(self, lifecycle, query):
        assert lifecycle.state is RunState.UNSAVED
        run = await lifecycle.save(FilterSet(industry="Technology"), "Tech Leads", "Q3 list")

        assert run.name == "Tech Leads"
        assert run.notes == "Q3 list"
        assert run.total_results == 120
        assert run.filters == {"industry": "Technology"}
        assert lifecycle.state is RunState.SAVED
        assert lifecycle.run_id == run.id
        assert _builds(query) == [("build_audience", {"industry": "Technology"}, True, None)]

    @pytest.mark.asyncio
    async def test_resave_same_filters_only_renames(self, lifecycle, query):
        filters = FilterSet(industry="Technology")
        first = await lifecycle.save(filters, "Tech Leads")
        second = await lifecycle.save(filters, "Tech Leads v2")

        assert second.id == first.id
        assert second.name == "Tech Leads v2"
        assert len(_builds(query)) == 1

    @pytest.mark.asyncio
    async def test_changed_filters_build_new_run(self, lifecycle, run_store):
        first = await lifecycle.save(FilterSet(industry="Technology"), "Tech")
        second = await lifecycle.save(FilterSet(industry="Finance"), "Finance")

        assert second.id != first.id
        assert run_store.runs[first.id]["filters"] == {"industry": "Technology"}
        assert run_store.runs[first.id]["name"] == "Tech"

    @pytest.mark.asyncio
    async def test_filters_changed_forces_rebuild(self, lifecycle, query):
        filters = FilterSet(job_level="Senior")
        first = await lifecycle.save(filters, "Seniors")
        lifecycle.filters_changed()
        assert lifecycle.state is RunState.UNSAVED

        second = await lifecycle.save(filters, "Seniors")
        assert second.id != first.id
        assert len(_builds(query)) == 2

    @pytest.mark.asyncio
    async def test_build_failure_leaves_run_unsaved(self, lifecycle, query, run_store):
        query.fail = RuntimeError("statement timeout")
        with pytest.raises(BuildFailed):
            await lifecycle.save(FilterSet(industry="Technology"), "Tech Leads")

        assert lifecycle.state is RunState.UNSAVED
        assert run_store.update_calls == []

    @pytest.mark.asyncio
    async def test_metadata_failure_carries_run_id_and_does_not_rebuild(
        self, lifecycle, query, run_store
    ):
        filters = FilterSet(industry="Technology")
        run_store.fail_update = RuntimeError("permission denied")
        with pytest.raises(SaveMetadataFailed) as excinfo:
            await lifecycle.save(filters, "Tech Leads")

        built_id = lifecycle.run_id
        assert excinfo.value.run_id == built_id
        assert built_id in run_store.runs

        run_store.fail_update = None
        run = await lifecycle.save(filters, "Tech Leads")
        assert run.id == built_id
        assert len(_builds(query)) == 1

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, lifecycle, query):
        with pytest.raises(ValueError):
            await lifecycle.save(FilterSet(industry="Technology"), "   ")
        assert query.calls == []


class TestSavedRuns:
    @pytest.mark.asyncio
    async def test_list_newest_first(self, lifecycle, run_store):
        now = datetime.now(timezone.utc)
        old, mid, new = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        run_store.add(mid, {}, 5, "mid", created_at=now - timedelta(days=1))
        run_store.add(new, {}, 5, "new", created_at=now)
        run_store.add(old, {}, 5, "old", created_at=now - timedelta(days=7))

        runs = await lifecycle.list_runs()
        assert [r.id for r in runs] == [new, mid, old]

    @pytest.mark.asyncio
    async def test_get_missing_run(self, lifecycle):
        assert await lifecycle.get(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_rename(self, lifecycle, run_store):
        run_id = uuid.uuid4()
        run_store.add(run_id, {"industry": "Tech"}, 10)
        run = await lifecycle.rename(run_id, "  Renamed  ", "notes")
        assert run.name == "Renamed"
        assert run.filters == {"industry": "Tech"}

    @pytest.mark.asyncio
    async def test_rename_missing_run(self, lifecycle):
        with pytest.raises(SaveMetadataFailed):
            await lifecycle.rename(uuid.uuid4(), "Nope")

    @pytest.mark.asyncio
    async def test_fetch_results_full_and_capped(self, lifecycle):
        run = await lifecycle.save(FilterSet(industry="Technology"), "Tech Leads")
        assert len(await lifecycle.fetch_results(run.id)) == 120
        capped = await lifecycle.fetch_results(run.id, limit=25)
        assert [r.contact_id for r in capped] == list(range(1, 26))

    @pytest.mark.asyncio
    async def test_fetch_results_failure(self, lifecycle, query):
        query.fail = RuntimeError("gone")
        with pytest.raises(QueryFailed):
            await lifecycle.fetch_results(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_delete_current_run_resets_state(self, lifecycle, run_store):
        run = await lifecycle.save(FilterSet(industry="Technology"), "Tech Leads")
        assert await lifecycle.delete(run.id) is True
        assert run.id not in run_store.runs
        assert lifecycle.state is RunState.UNSAVED
        assert await lifecycle.delete(run.id) is False


@pytest.mark.asyncio
async def test_named_build_is_completed_and_fetchable(query, run_store):
    client = AudienceQueryClient(query)
    lifecycle = AudienceRunLifecycle(client, run_store)

    run_id = await client.build(
        FilterSet(industry="Technology", has_email=True), save=True, name="Tech Leads"
    )
    run = await lifecycle.get(run_id)

    assert run.name == "Tech Leads"
    assert run.status == "completed"
    assert run.filters == {"industry": "Technology", "has_email": True}
    rows = await lifecycle.fetch_results(run.id)
    assert len(rows) == run.total_results
    assert all(r.email for r in rows)
