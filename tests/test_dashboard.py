"""Unit tests for the dashboard summaries."""
from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from conftest import FakeQueryService
from services.dashboard import contact_summary, dashboard_stats
from services.errors import QueryFailed


DASHBOARD_MODULE = "services.dashboard"


class TestContactSummary:
    @pytest.mark.asyncio
    async def test_coerces_values(self):
        query = FakeQueryService()
        query.summary = {"total": "1200", "with_email": 950, "with_mobile": None, "new_30d": 42}
        summary = await contact_summary(query)
        assert summary.total == 1200
        assert summary.with_email == 950
        assert summary.with_mobile == 0
        assert summary.new_30d == 42

    @pytest.mark.asyncio
    async def test_empty_result_is_all_zero(self):
        summary = await contact_summary(FakeQueryService())
        assert summary.model_dump() == {"total": 0, "with_email": 0, "with_mobile": 0, "new_30d": 0}

    @pytest.mark.asyncio
    async def test_failure(self):
        query = FakeQueryService()
        query.fail = RuntimeError("function get_contact_summary() does not exist")
        with pytest.raises(QueryFailed):
            await contact_summary(query)


@pytest.mark.asyncio
async def test_dashboard_stats(session_factory):
    today = date(2026, 10, 19)
    with patch(f"{DASHBOARD_MODULE}.contacts.count", AsyncMock(return_value=1200)), \
         patch(f"{DASHBOARD_MODULE}.companies.count", AsyncMock(return_value=85)), \
         patch(f"{DASHBOARD_MODULE}.campaigns.count_active", AsyncMock(return_value=3)) as active:
        stats = await dashboard_stats(session_factory, on=today)

    assert stats.total_contacts == 1200
    assert stats.total_companies == 85
    assert stats.active_campaigns == 3
    assert stats.response_rate == 0.0
    assert len(session_factory.sessions) == 1
    active.assert_awaited_once_with(session_factory.sessions[0], today)
