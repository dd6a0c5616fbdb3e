"""Domain data models for query intents, Jira issues, and search results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

SortOrder = Literal["ASC", "DESC"]


@dataclass(slots=True, frozen=True)
class DateRange:
    """Relative (``last_days``) or absolute (``start``/``end``) date window.

    ``last_days`` takes precedence when set; callers must not mix the two.
    """

    last_days: int | None = None
    start: date | None = None
    end: date | None = None


@dataclass(slots=True, frozen=True)
class SortField:
    field: str
    order: SortOrder = "ASC"


@dataclass(slots=True, frozen=True)
class QueryFilters:
    project: str | None = None
    assignee: str | None = None
    status: tuple[str, ...] | None = None
    issue_types: tuple[str, ...] | None = None
    priorities: tuple[str, ...] | None = None
    labels: tuple[str, ...] | None = None
    components: tuple[str, ...] | None = None
    created: DateRange | None = None
    updated: DateRange | None = None


@dataclass(slots=True, frozen=True)
class QueryIntent:
    filters: QueryFilters | None = None
    search: str | None = None
    sort: tuple[SortField, ...] | None = None
    limit: int | None = None


@dataclass(slots=True, frozen=True)
class User:
    account_id: str
    display_name: str
    email: str | None = None


@dataclass(slots=True, frozen=True)
class Issue:
    key: str
    summary: str
    status: str
    priority: str
    issue_type: str
    project: str
    created: datetime
    updated: datetime
    assignee: User | None = None
    reporter: User | None = None
    resolution_date: datetime | None = None
    resolution: str | None = None
    description: str | None = None
    id: str | None = None
    labels: tuple[str, ...] = field(default_factory=tuple)
    components: tuple[str, ...] = field(default_factory=tuple)
    fix_versions: tuple[str, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class QueryResult:
    issues: tuple[Issue, ...]
    generated_jql: str
    total: int
