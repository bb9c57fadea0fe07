"""Filter normalization for audience queries."""
from typing import Any, Optional

from schemas.audience import FilterSet


def normalize(raw: Any) -> Any:
    """Recursively strip absent values from a filter structure.

    "", None and False are absent; empty lists/dicts collapse to None.
    0 and True are kept, as is any other scalar. Returns None when nothing
    survives.
    """
    # Nested containers come back as None when empty, never as [] or {}.
    if isinstance(raw, (list, tuple)):
        items = [v for v in (normalize(v) for v in raw) if v is not None]
        return items or None
    if isinstance(raw, dict):
        entries = {k: normalize(v) for k, v in raw.items()}
        entries = {k: v for k, v in entries.items() if v is not None}
        return entries or None
    if raw is None or raw is False or (isinstance(raw, str) and raw == ""):
        return None
    return raw


def filters_payload(filters: Optional[FilterSet]) -> dict:
    """The normalized dict sent to the query service ({} when nothing is set)."""
    if filters is None:
        return {}
    return normalize(filters.model_dump()) or {}
