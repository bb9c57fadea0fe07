"""Unit tests for filter normalization."""
from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from schemas.audience import FilterSet
from services.filters import filters_payload, normalize


class TestNormalize:
    def test_drops_absent_values_keeps_zero_and_true(self):
        raw = {"a": "", "b": None, "c": [], "d": {}, "e": 0, "f": True, "g": False}
        assert normalize(raw) == {"e": 0, "f": True}

    def test_everything_absent_collapses_to_none(self):
        assert normalize({"x": {"y": "", "z": [None, ""]}}) is None
        assert normalize([]) is None
        assert normalize({}) is None

    def test_list_items_are_filtered(self):
        assert normalize(["a", "", None, 0, False]) == ["a", 0]

    def test_nested_structures(self):
        raw = {"industry": ["Tech", ""], "range": {"min": 0, "max": None}}
        assert normalize(raw) == {"industry": ["Tech"], "range": {"min": 0}}

    @pytest.mark.parametrize(
        "raw",
        [
            {"a": "", "b": [None, {"c": ""}], "d": 3},
            ["x", ["", None], {"y": False}],
            {"industry": "Tech", "city_id": 4, "has_email": True},
            None,
            0,
        ],
    )
    def test_idempotent(self, raw):
        once = normalize(raw)
        assert normalize(once) == once

    def test_other_scalars_pass_through(self):
        run = UUID(int=1)
        raw = {"since": date(2024, 1, 1), "min_turnover": Decimal("1.5"), "run": run}
        assert normalize(raw) == raw
        assert normalize(Decimal("0")) == Decimal("0")


class TestFiltersPayload:
    def test_empty_form_sends_empty_dict(self):
        assert filters_payload(FilterSet()) == {}
        assert filters_payload(None) == {}

    def test_unchecked_boxes_are_dropped(self):
        payload = filters_payload(FilterSet(industry="Technology", job_level="Senior"))
        assert payload == {"industry": "Technology", "job_level": "Senior"}

    def test_checked_boxes_and_numbers_are_kept(self):
        payload = filters_payload(FilterSet(has_email=True, employee_min="0", city_id="7"))
        assert payload == {"has_email": True, "employee_min": 0, "city_id": 7}
