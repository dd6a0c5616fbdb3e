"""In-memory Jira stand-in used when USE_MOCKS is enabled."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime, timedelta

import pytz

from .config import DEFAULT_MAX_RESULTS
from .jira_client import JiraAPI
from .models import Issue, QueryResult, User

CURRENT_USER_ID = "john.doe"

_EQ_RE = re.compile(r'\b(project|status|type|priority|labels|component)\s*=\s*"([^"]*)"', re.IGNORECASE)
_IN_RE = re.compile(r"\b(project|status|type|priority|labels|component)\s+IN\s*\(([^)]*)\)", re.IGNORECASE)
_ASSIGNEE_RE = re.compile(r'\bassignee\s*=\s*"([^"]*)"', re.IGNORECASE)
_RELATIVE_RE = re.compile(r"\b(updated|created)\s*>=\s*-(\d+)d", re.IGNORECASE)
_TEXT_RE = re.compile(r'\btext\s*~\s*"([^"]*)"', re.IGNORECASE)


def _field_values(issue: Issue, field: str) -> set[str]:
    field = field.lower()
    if field == "project":
        return {issue.project.lower()}
    if field == "status":
        return {issue.status.lower()}
    if field == "type":
        return {issue.issue_type.lower()}
    if field == "priority":
        return {issue.priority.lower()}
    if field == "labels":
        return {v.lower() for v in issue.labels}
    return {v.lower() for v in issue.components}


def sample_issues(now: datetime) -> list[Issue]:
    john = User("john.doe", "John Doe", "john.doe@example.com")
    jane = User("jane.smith", "Jane Smith", "jane.smith@example.com")
    alice = User("alice.jones", "Alice Jones", "alice.jones@example.com")
    bob = User("bob.wilson", "Bob Wilson", "bob.wilson@example.com")
    admin = User("admin", "System Admin", "admin@example.com")
    return [
        Issue(
            id="1",
            key="BANK-123",
            summary="Payment processing bug in checkout flow",
            description="Users unable to complete payment in checkout",
            status="Open",
            priority="High",
            issue_type="Bug",
            assignee=john,
            reporter=jane,
            project="BANK",
            created=now - timedelta(days=5),
            updated=now - timedelta(days=1),
            labels=("payment", "urgent"),
            components=("checkout",),
            fix_versions=("v2.1.0",),
        ),
        Issue(
            id="2",
            key="BANK-124",
            summary="Implement new user dashboard",
            description="Create a new dashboard for user analytics",
            status="In Progress",
            priority="Medium",
            issue_type="Story",
            assignee=alice,
            reporter=bob,
            project="BANK",
            created=now - timedelta(days=10),
            updated=now - timedelta(days=2),
            labels=("dashboard", "analytics"),
            components=("frontend",),
            fix_versions=("v2.2.0",),
        ),
        Issue(
            id="3",
            key="PROJ-456",
            summary="Database migration task",
            description="Migrate legacy data to new schema",
            status="Done",
            priority="Low",
            issue_type="Task",
            assignee=john,
            reporter=admin,
            project="PROJ",
            created=now - timedelta(days=30),
            updated=now - timedelta(days=7),
            resolution_date=now - timedelta(days=7),
            resolution="Fixed",
            labels=("migration", "database"),
            components=("backend",),
            fix_versions=("v1.5.0",),
        ),
        Issue(
            id="4",
            key="BANK-125",
            summary="Fix login timeout issue",
            description="Users getting logged out too quickly",
            status="Open",
            priority="Medium",
            issue_type="Bug",
            assignee=None,
            reporter=jane,
            project="BANK",
            created=now - timedelta(days=3),
            updated=now - timedelta(hours=6),
            labels=("security", "auth"),
            components=("authentication",),
            fix_versions=("v2.0.1",),
        ),
    ]


class MockJiraAPI(JiraAPI):
    """Answers searches from a fixed issue set using a naive JQL matcher."""

    def __init__(self, now: Callable[[], datetime] | None = None):
        self.server = "https://mock.atlassian.net"
        self._now = now or (lambda: datetime.now(pytz.UTC))
        self._issues = sample_issues(self._now())

    def search(self, query) -> QueryResult:
        matched = self._apply_filter(query.query_string)
        limit = query.max_results or DEFAULT_MAX_RESULTS
        return QueryResult(
            issues=tuple(matched[:limit]),
            generated_jql=query.query_string,
            total=len(matched),
        )

    def fetch_issue(self, issue_key: str) -> Issue | None:
        for issue in self._issues:
            if issue.key.lower() == issue_key.lower():
                return issue
        return None

    def get_projects(self) -> list[str]:
        return list(dict.fromkeys(i.project for i in self._issues))

    def _apply_filter(self, jql: str) -> list[Issue]:
        where = re.split(r"\bORDER BY\b", jql or "", flags=re.IGNORECASE)[0]
        issues = list(self._issues)
        if not where.strip():
            return issues
        lowered = where.lower()
        if "assignee = currentuser()" in lowered:
            issues = [i for i in issues if i.assignee and i.assignee.account_id == CURRENT_USER_ID]
        if "assignee is empty" in lowered:
            issues = [i for i in issues if i.assignee is None]
        for name in _ASSIGNEE_RE.findall(where):
            issues = [
                i
                for i in issues
                if i.assignee and name.lower() in {i.assignee.display_name.lower(), i.assignee.account_id}
            ]
        for field, value in _EQ_RE.findall(where):
            issues = [i for i in issues if value.lower() in _field_values(i, field)]
        for field, raw_values in _IN_RE.findall(where):
            wanted = {v.strip().strip('"').lower() for v in raw_values.split(",")}
            issues = [i for i in issues if wanted & _field_values(i, field)]
        now = self._now()
        for field, days in _RELATIVE_RE.findall(where):
            cutoff = now - timedelta(days=int(days))
            issues = [i for i in issues if (i.updated if field.lower() == "updated" else i.created) >= cutoff]
        for text in _TEXT_RE.findall(where):
            needle = text.lower()
            issues = [i for i in issues if needle in f"{i.summary} {i.description or ''}".lower()]
        return issues
