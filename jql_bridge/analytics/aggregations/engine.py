"""Named summary aggregations over issues, flat or per group."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from types import MappingProxyType
from typing import Any

from jql_bridge.analytics.grouping import DataGroup
from jql_bridge.analytics.metrics.aging import days_open, utc_now
from jql_bridge.core.config import UNASSIGNED_LABEL
from jql_bridge.core.models import Issue

Aggregation = Callable[[Sequence[Issue], datetime], Any]


def _ages(records: Sequence[Issue], now: datetime) -> list[float]:
    return [days_open(r, now) for r in records]


def _avg_age(records, now):
    ages = _ages(records, now)
    return sum(ages) / len(ages) if ages else 0


def _max_age(records, now):
    return max(_ages(records, now), default=0)


def _min_age(records, now):
    return min(_ages(records, now), default=0)


def _assignee_counts(records, now):
    return dict(Counter(r.assignee.display_name if r.assignee else UNASSIGNED_LABEL for r in records))


DEFAULT_AGGREGATIONS: Mapping[str, Aggregation] = {
    "count": lambda records, now: len(records),
    "avg_age": _avg_age,
    "max_age": _max_age,
    "min_age": _min_age,
    "status_counts": lambda records, now: dict(Counter(r.status for r in records)),
    "priority_counts": lambda records, now: dict(Counter(r.priority for r in records)),
    "assignee_counts": _assignee_counts,
    "type_counts": lambda records, now: dict(Counter(r.issue_type for r in records)),
}


class AggregationEngine:
    def __init__(
        self,
        extra: Mapping[str, Aggregation] | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        registry = {name.casefold(): fn for name, fn in DEFAULT_AGGREGATIONS.items()}
        for name, fn in (extra or {}).items():
            registry[name.casefold()] = fn
        self._registry = MappingProxyType(registry)
        self._clock = clock

    def has(self, name: str) -> bool:
        return name.casefold() in self._registry

    def aggregate(self, records: Sequence[Issue], names: Sequence[str]) -> dict[str, Any]:
        return self._aggregate(records, names, self._clock())

    def _aggregate(self, records: Sequence[Issue], names: Sequence[str], now: datetime) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name in names:
            fn = self._registry.get(name.casefold())
            out[name] = fn(records, now) if fn else f"Unknown aggregation: {name}"
        return out

    def aggregate_groups(self, groups: Sequence[DataGroup], names: Sequence[str]) -> dict[str, dict[str, Any]]:
        """Per top-level group values, keyed ``{name: {str(group.value): value}}``."""
        now = self._clock()
        out: dict[str, dict[str, Any]] = {name: {} for name in names}
        for group in groups:
            values = self._aggregate(group.records, names, now)
            for name in names:
                out[name][str(group.value)] = values[name]
        return out

    def annotate_groups(self, groups: Sequence[DataGroup], names: Sequence[str]) -> list[DataGroup]:
        """Return copies of ``groups`` (every level) with ``aggregations`` filled in."""
        now = self._clock()

        def _annotate(group: DataGroup) -> DataGroup:
            return replace(
                group,
                subgroups=tuple(_annotate(s) for s in group.subgroups),
                aggregations=self._aggregate(group.records, names, now),
            )

        return [_annotate(g) for g in groups]
