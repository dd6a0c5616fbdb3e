"""Named calculations over a flat list of issues."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from types import MappingProxyType
from typing import Any

from jql_bridge.core.models import Issue

from .aging import days_open, days_since_update, time_to_resolution_days, utc_now

Calculation = Callable[[Sequence[Issue], datetime], Any]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0


def _age(records: Sequence[Issue], now: datetime) -> list[float]:
    return [days_open(r, now) for r in records]


def _days_since_update(records: Sequence[Issue], now: datetime) -> list[float]:
    return [days_since_update(r, now) for r in records]


def _velocity(records: Sequence[Issue], now: datetime) -> float:
    rates = []
    for days in _days_since_update(records, now):
        rates.append(1.0 if days <= 0 else 1.0 / days)
    return _mean(rates)


def _avg_resolution_days(records: Sequence[Issue], now: datetime) -> float:
    durations = [d for d in (time_to_resolution_days(r) for r in records) if d is not None]
    return _mean(durations)


def _status_distribution(records: Sequence[Issue], now: datetime) -> dict[str, int]:
    return dict(Counter(r.status for r in records))


DEFAULT_CALCULATIONS: Mapping[str, Calculation] = {
    "age": _age,
    "daysSinceUpdate": _days_since_update,
    "velocity": _velocity,
    "avgAge": lambda records, now: _mean(_age(records, now)),
    "avgDaysSinceUpdate": lambda records, now: _mean(_days_since_update(records, now)),
    "avgResolutionDays": _avg_resolution_days,
    "totalCount": lambda records, now: len(records),
    "statusDistribution": _status_distribution,
}


class CalculationEngine:
    """Name-keyed registry of calculations, fixed at construction.

    Parameters
    ----------
    extra:
        Additional calculations registered alongside the defaults; a name
        already present is replaced.
    clock:
        Returns the reference "now"; defaults to the current UTC time.
    """

    def __init__(
        self,
        extra: Mapping[str, Calculation] | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        registry = {name.casefold(): fn for name, fn in DEFAULT_CALCULATIONS.items()}
        for name, fn in (extra or {}).items():
            registry[name.casefold()] = fn
        self._registry = MappingProxyType(registry)
        self._clock = clock

    def has(self, name: str) -> bool:
        return name.casefold() in self._registry

    def calculate(self, records: Sequence[Issue], names: Sequence[str]) -> dict[str, Any]:
        now = self._clock()
        out: dict[str, Any] = {}
        for name in names:
            fn = self._registry.get(name.casefold())
            out[name] = fn(records, now) if fn else f"Unknown calculation: {name}"
        return out
