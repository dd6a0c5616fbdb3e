"""Filter handlers: one per intent dimension, each emitting a JQL fragment.

Every handler exposes ``name``, ``can_handle(intent)`` and ``handle(intent)``.
``handle`` is only called when ``can_handle`` returned True; it still returns
an empty fragment when the data turns out to carry nothing to emit.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from jql_bridge.core.models import DateRange, QueryFilters, QueryIntent

from .fragments import EMPTY, Fragment


class FilterHandler(Protocol):
    name: str

    def can_handle(self, intent: QueryIntent) -> bool: ...

    def handle(self, intent: QueryIntent) -> Fragment: ...


def _filters(intent: QueryIntent) -> QueryFilters:
    return intent.filters or QueryFilters()


def _quote(value: str) -> str:
    # Values are quoted verbatim; embedded quotes are the caller's problem.
    return f'"{value}"'


def list_clause(field: str, values: Sequence[str]) -> str | None:
    """``field = "v"`` for one value, ``field IN ("v1", "v2")`` for several."""
    if not values:
        return None
    if len(values) == 1:
        return f"{field} = {_quote(values[0])}"
    return f"{field} IN ({', '.join(_quote(v) for v in values)})"


def _day(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def date_range_clause(field: str, window: DateRange | None) -> str | None:
    if window is None:
        return None
    if window.last_days is not None:
        return f"{field} >= -{window.last_days}d"
    parts = []
    if window.start is not None:
        parts.append(f'{field} >= "{_day(window.start)}"')
    if window.end is not None:
        parts.append(f'{field} <= "{_day(window.end)}"')
    return " AND ".join(parts) or None


class AssigneeHandler:
    name = "assignee"

    def can_handle(self, intent: QueryIntent) -> bool:
        return bool(_filters(intent).assignee)

    def handle(self, intent: QueryIntent) -> Fragment:
        assignee = _filters(intent).assignee
        if not assignee:
            return EMPTY
        lowered = assignee.lower()
        if lowered == "currentuser":
            return Fragment("assignee = currentUser()")
        if lowered == "unassigned":
            return Fragment("assignee is EMPTY")
        return Fragment(f"assignee = {_quote(assignee)}")


class ProjectHandler:
    name = "project"

    def can_handle(self, intent: QueryIntent) -> bool:
        return bool(_filters(intent).project)

    def handle(self, intent: QueryIntent) -> Fragment:
        project = _filters(intent).project
        return Fragment(f"project = {_quote(project)}") if project else EMPTY


class ListFieldHandler:
    """Generic single-or-IN handler over one tuple-valued filter attribute."""

    def __init__(self, name: str, attribute: str, jql_field: str):
        self.name = name
        self.attribute = attribute
        self.jql_field = jql_field

    def _values(self, intent: QueryIntent) -> tuple[str, ...]:
        return tuple(getattr(_filters(intent), self.attribute) or ())

    def can_handle(self, intent: QueryIntent) -> bool:
        return bool(self._values(intent))

    def handle(self, intent: QueryIntent) -> Fragment:
        clause = list_clause(self.jql_field, self._values(intent))
        return Fragment(clause) if clause else EMPTY


class StatusHandler(ListFieldHandler):
    def __init__(self):
        super().__init__("status", "status", "status")


class IssueTypeHandler(ListFieldHandler):
    def __init__(self):
        super().__init__("issue_type", "issue_types", "type")


class PriorityHandler(ListFieldHandler):
    def __init__(self):
        super().__init__("priority", "priorities", "priority")


class LabelsHandler(ListFieldHandler):
    def __init__(self):
        super().__init__("labels", "labels", "labels")


class ComponentsHandler(ListFieldHandler):
    def __init__(self):
        super().__init__("components", "components", "component")


class DateRangeHandler:
    name = "date_range"

    def can_handle(self, intent: QueryIntent) -> bool:
        f = _filters(intent)
        return f.updated is not None or f.created is not None

    def handle(self, intent: QueryIntent) -> Fragment:
        f = _filters(intent)
        clauses = [
            c
            for c in (date_range_clause("updated", f.updated), date_range_clause("created", f.created))
            if c
        ]
        return Fragment(" AND ".join(clauses)) if clauses else EMPTY


class TextSearchHandler:
    name = "text_search"

    def can_handle(self, intent: QueryIntent) -> bool:
        return bool(intent.search and intent.search.strip())

    def handle(self, intent: QueryIntent) -> Fragment:
        if not intent.search or not intent.search.strip():
            return EMPTY
        return Fragment(f"text ~ {_quote(intent.search.strip())}")


class SortHandler:
    name = "sort"

    def can_handle(self, intent: QueryIntent) -> bool:
        return bool(intent.sort)

    def handle(self, intent: QueryIntent) -> Fragment:
        if not intent.sort:
            return EMPTY
        order_by = ", ".join(f"{s.field} {s.order.upper()}" for s in intent.sort)
        return Fragment(order_by_clause=order_by)


def default_handlers() -> tuple[FilterHandler, ...]:
    """Built-in handlers in registration order (fixes clause order)."""
    return (
        AssigneeHandler(),
        ProjectHandler(),
        StatusHandler(),
        IssueTypeHandler(),
        PriorityHandler(),
        DateRangeHandler(),
        LabelsHandler(),
        ComponentsHandler(),
        TextSearchHandler(),
        SortHandler(),
    )
