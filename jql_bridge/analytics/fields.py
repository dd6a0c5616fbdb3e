"""Closed table of named field paths over Issue records."""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from jql_bridge.core.models import Issue

_ACCESSORS: dict[str, Callable[[Issue], Any]] = {
    "key": lambda i: i.key,
    "summary": lambda i: i.summary,
    "status": lambda i: i.status,
    "priority": lambda i: i.priority,
    "type": lambda i: i.issue_type,
    "issuetype": lambda i: i.issue_type,
    "issue_type": lambda i: i.issue_type,
    "project": lambda i: i.project,
    "assignee": lambda i: i.assignee.display_name if i.assignee else None,
    "assignee.email": lambda i: i.assignee.email if i.assignee else None,
    "reporter": lambda i: i.reporter.display_name if i.reporter else None,
    "reporter.email": lambda i: i.reporter.email if i.reporter else None,
    "created": lambda i: i.created,
    "updated": lambda i: i.updated,
    "resolutiondate": lambda i: i.resolution_date,
    "resolution": lambda i: i.resolution,
    "labels": lambda i: i.labels,
    "components": lambda i: i.components,
    "fixversions": lambda i: i.fix_versions,
}


class FieldAccessor:
    """Resolve a field path against an Issue; unknown paths resolve to None."""

    accessors = MappingProxyType(_ACCESSORS)

    @staticmethod
    def _normalize(path: str) -> str:
        return path.strip().casefold()

    @classmethod
    def can_access(cls, path: str) -> bool:
        return cls._normalize(path) in cls.accessors

    @classmethod
    def get(cls, record: Issue, path: str) -> Any:
        accessor = cls.accessors.get(cls._normalize(path))
        return accessor(record) if accessor else None
