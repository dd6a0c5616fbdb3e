"""Turn the intent service's JSON payload into a QueryIntent."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

import pandas as pd

from jql_bridge.core.errors import IntentParsingError
from jql_bridge.core.models import DateRange, QueryFilters, QueryIntent, SortField


def _str_tuple(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise IntentParsingError(f"Expected a list of strings, got {type(value).__name__}")
    out = tuple(str(v) for v in value if v is not None and str(v).strip())
    return out or None


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_day(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if not isinstance(value, (str, date)):
        raise IntentParsingError(f"Invalid date value: {value!r}")
    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (ValueError, TypeError) as exc:
        raise IntentParsingError(f"Invalid date value: {value!r}") from exc
    if ts is None or pd.isna(ts):
        raise IntentParsingError(f"Invalid date value: {value!r}")
    return ts.date()


def _int_at_least(value: Any, what: str, minimum: int) -> int | None:
    if value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise IntentParsingError(f"Invalid {what}: {value!r}") from exc
    if number < minimum:
        raise IntentParsingError(f"Invalid {what}: {value!r}")
    return number


def parse_date_range(raw: Any) -> DateRange | None:
    """Accept ``{lastDays}``, ``{from, to}``, ``{after, before}`` or ``{between: {start, end}}``."""
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise IntentParsingError(f"Date range must be an object, got {type(raw).__name__}")
    last_days = _int_at_least(raw.get("lastDays"), "lastDays", 0)
    if last_days is not None:
        return DateRange(last_days=last_days)
    between = raw.get("between")
    if isinstance(between, Mapping):
        start, end = between.get("start"), between.get("end")
    else:
        start = raw.get("from", raw.get("after"))
        end = raw.get("to", raw.get("before"))
    window = DateRange(start=_parse_day(start), end=_parse_day(end))
    if window.start is None and window.end is None:
        return None
    return window


def _parse_sort(raw: Any) -> tuple[SortField, ...] | None:
    if not raw:
        return None
    if not isinstance(raw, list):
        raise IntentParsingError("sort must be a list")
    fields = []
    for item in raw:
        if not isinstance(item, Mapping) or not item.get("field"):
            raise IntentParsingError(f"Invalid sort entry: {item!r}")
        order = str(item.get("order") or item.get("direction") or "ASC").upper()
        if order not in ("ASC", "DESC"):
            raise IntentParsingError(f"Invalid sort order: {order}")
        fields.append(SortField(str(item["field"]), order))
    return tuple(fields)


def _parse_filters(raw: Any) -> QueryFilters | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise IntentParsingError("filters must be an object")
    return QueryFilters(
        project=_opt_str(raw.get("project")),
        assignee=_opt_str(raw.get("assignee")),
        status=_str_tuple(raw.get("status")),
        issue_types=_str_tuple(raw.get("issueTypes")),
        priorities=_str_tuple(raw.get("priorities", raw.get("priority"))),
        labels=_str_tuple(raw.get("labels")),
        components=_str_tuple(raw.get("components")),
        created=parse_date_range(raw.get("created")),
        updated=parse_date_range(raw.get("updated")),
    )


def intent_from_dict(data: Any) -> QueryIntent:
    """Build a QueryIntent from decoded JSON.

    Raises
    ------
    IntentParsingError
        If the payload is not an object or any field has the wrong shape.
    """
    if not isinstance(data, Mapping):
        raise IntentParsingError("Intent payload must be a JSON object")
    return QueryIntent(
        filters=_parse_filters(data.get("filters")),
        search=_opt_str(data.get("search")),
        sort=_parse_sort(data.get("sort")),
        limit=_int_at_least(data.get("limit"), "limit", 1),
    )
