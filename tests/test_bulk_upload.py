"""Unit tests for spreadsheet upload: per-row transactions and error capping."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from services import bulk_upload
from services.bulk_upload import (
    CONTACT_COLUMNS,
    read_sheet,
    upload_companies,
    upload_contacts,
    write_template,
)


UPLOAD_MODULE = "services.bulk_upload"


def _contact_rows(n):
    return [
        {"first_name": f"Name{i}", "official_email_id": f"person{i}@acme.com", "company_id": "1"}
        for i in range(1, n + 1)
    ]


class TestUploadContacts:
    @pytest.mark.asyncio
    async def test_existing_email_is_updated(self, session_factory):
        existing = {"person2@acme.com"}

        async def fake_upsert(session, data):
            return MagicMock(), data["official_email_id"] not in existing

        with patch(f"{UPLOAD_MODULE}.contacts.upsert_by_email", side_effect=fake_upsert):
            summary = await upload_contacts(_contact_rows(3), session_factory=session_factory)

        assert summary.inserted == 2
        assert summary.updated == 1
        assert summary.failed == 0
        assert summary.processed == 3

    @pytest.mark.asyncio
    async def test_one_transaction_per_row(self, session_factory):
        upsert = AsyncMock(return_value=(MagicMock(), True))
        with patch(f"{UPLOAD_MODULE}.contacts.upsert_by_email", upsert):
            await upload_contacts(_contact_rows(4), session_factory=session_factory)

        assert len(session_factory.sessions) == 4
        sessions_used = [c.args[0] for c in upsert.await_args_list]
        assert sessions_used == session_factory.sessions

    @pytest.mark.asyncio
    async def test_rows_are_parsed_before_writing(self, session_factory):
        upsert = AsyncMock(return_value=(MagicMock(), True))
        rows = [{"first_name": "Jane", "official_email_id": " Jane@ACME.com ", "company_id": "12",
                 "gender": None, "unknown_column": "x"}]
        with patch(f"{UPLOAD_MODULE}.contacts.upsert_by_email", upsert):
            await upload_contacts(rows, session_factory=session_factory)

        data = upsert.await_args.args[1]
        assert data == {"first_name": "Jane", "official_email_id": "jane@acme.com", "company_id": 12}

    @pytest.mark.asyncio
    async def test_failing_row_does_not_abort_the_rest(self, session_factory):
        upsert = AsyncMock(side_effect=[
            (MagicMock(), True),
            RuntimeError("duplicate key value"),
            (MagicMock(), True),
        ])
        with patch(f"{UPLOAD_MODULE}.contacts.upsert_by_email", upsert):
            summary = await upload_contacts(_contact_rows(3), session_factory=session_factory)

        assert summary.inserted == 2
        assert summary.failed == 1
        assert summary.errors[0].row == 2
        assert "duplicate key" in summary.errors[0].message

    @pytest.mark.asyncio
    async def test_invalid_row_reported_without_write(self, session_factory):
        upsert = AsyncMock(return_value=(MagicMock(), True))
        rows = [{"first_name": "Bad", "company_id": "not-a-number"}, {"first_name": "Good"}]
        with patch(f"{UPLOAD_MODULE}.contacts.upsert_by_email", upsert):
            summary = await upload_contacts(rows, session_factory=session_factory)

        assert upsert.await_count == 1
        assert summary.failed == 1
        assert summary.inserted == 1
        assert "company_id" in summary.errors[0].message

    @pytest.mark.asyncio
    async def test_errors_capped_at_five(self, session_factory):
        upsert = AsyncMock(side_effect=RuntimeError("db unavailable"))
        with patch(f"{UPLOAD_MODULE}.contacts.upsert_by_email", upsert):
            summary = await upload_contacts(_contact_rows(8), session_factory=session_factory)

        assert summary.failed == 8
        assert [e.row for e in summary.errors] == [1, 2, 3, 4, 5]


class TestUploadCompanies:
    @pytest.mark.asyncio
    async def test_inserts_with_numeric_columns(self, session_factory):
        insert = AsyncMock(return_value=MagicMock())
        rows = [{"company_name": "Tech Corp", "employees": "500", "turn_over_inr_cr": "100.5"}]
        with patch(f"{UPLOAD_MODULE}.companies.insert", insert):
            summary = await upload_companies(rows, session_factory=session_factory)

        assert summary.inserted == 1
        data = insert.await_args.args[1]
        assert data["employees"] == 500
        assert str(data["turn_over_inr_cr"]) == "100.5"


class TestSheets:
    def test_template_round_trips_through_reader(self, tmp_path):
        path = write_template("contacts", tmp_path / "contacts_template.xlsx")
        rows = read_sheet(path)

        assert len(rows) == 1
        assert list(rows[0]) == CONTACT_COLUMNS
        assert rows[0]["first_name"] == "John"
        assert rows[0]["company_id"] == "1"

    def test_unknown_template_kind(self, tmp_path):
        with pytest.raises(ValueError):
            write_template("leads", tmp_path / "x.xlsx")

    def test_csv_blank_cells_become_none(self, tmp_path):
        path = tmp_path / "companies.csv"
        path.write_text("company_name,employees,website\nAcme,250,\n  ,,https://x.example\n")
        rows = read_sheet(path)
        assert rows[0] == {"company_name": "Acme", "employees": "250", "website": None}
        assert rows[1]["company_name"] is None

    @pytest.mark.parametrize(
        "cell,expected",
        [("500.0", "500"), ("-3.0", "-3"), ("100.5", "100.5"), ("   ", None), (None, None), ("abc", "abc")],
    )
    def test_clean_cell(self, cell, expected):
        assert bulk_upload._clean_cell(cell) == expected
