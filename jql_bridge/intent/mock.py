"""Deterministic keyword-based intent parser used when LLM_PROVIDER=mock."""

from __future__ import annotations

import logging
import re

from jql_bridge.core.models import DateRange, QueryFilters, QueryIntent, SortField

logger = logging.getLogger(__name__)

PRESET_INTENTS: dict[str, QueryIntent] = {
    "show bugs assigned to me updated last 7 days": QueryIntent(
        filters=QueryFilters(assignee="currentUser", issue_types=("Bug",), updated=DateRange(last_days=7))
    ),
    "bugs assigned to me": QueryIntent(filters=QueryFilters(assignee="currentUser", issue_types=("Bug",))),
    "high priority stories in bank project": QueryIntent(
        filters=QueryFilters(project="BANK", priorities=("High",), issue_types=("Story",))
    ),
    "closed issues last month": QueryIntent(
        filters=QueryFilters(status=("Closed", "Done"), updated=DateRange(last_days=30))
    ),
    "open issues": QueryIntent(filters=QueryFilters(status=("Open", "To Do"))),
}

_ASSIGNED_TO_RE = re.compile(r"assigned to (\w+)")
_PROJECT_RE = re.compile(r"project (\w+)|in (\w+) project")
_LAST_DAYS_RE = re.compile(r"last (\d+) days?")
_LIMIT_RE = re.compile(r"(?:show|limit|top) (\d+)")
_SEARCH_RE = re.compile(r'(?:about|containing|mentioning) "?([\w ]+?)"?(?:$| in | with )')


def _keywords(prompt: str, table: list[tuple[tuple[str, ...], tuple[str, ...]]]) -> tuple[str, ...] | None:
    found: list[str] = []
    for needles, values in table:
        if any(n in prompt for n in needles):
            found.extend(v for v in values if v not in found)
    return tuple(found) or None


_ISSUE_TYPES = [(("bug",), ("Bug",)), (("story", "stories"), ("Story",)), (("task",), ("Task",)), (("epic",), ("Epic",))]
_STATUSES = [(("open",), ("Open",)), (("closed", "done"), ("Closed", "Done")), (("in progress",), ("In Progress",))]
_PRIORITIES = [(("high priority",), ("High",)), (("low priority",), ("Low",)), (("medium priority",), ("Medium",))]


def parse_with_patterns(prompt: str) -> QueryIntent:
    assignee = None
    if "assigned to me" in prompt or "my " in prompt:
        assignee = "currentUser"
    elif "unassigned" in prompt:
        assignee = "unassigned"
    elif m := _ASSIGNED_TO_RE.search(prompt):
        assignee = m.group(1)

    project = None
    if m := _PROJECT_RE.search(prompt):
        project = (m.group(1) or m.group(2)).upper()

    updated = None
    if "last week" in prompt or "past week" in prompt:
        updated = DateRange(last_days=7)
    elif "last month" in prompt or "past month" in prompt:
        updated = DateRange(last_days=30)
    elif m := _LAST_DAYS_RE.search(prompt):
        updated = DateRange(last_days=int(m.group(1)))

    limit = int(m.group(1)) if (m := _LIMIT_RE.search(prompt)) else None
    search = m.group(1).strip() if (m := _SEARCH_RE.search(prompt)) else None
    sort = None
    if "sorted by updated" in prompt or "recent" in prompt:
        sort = (SortField("updated", "DESC"),)

    return QueryIntent(
        filters=QueryFilters(
            project=project,
            assignee=assignee,
            status=_keywords(prompt, _STATUSES),
            issue_types=_keywords(prompt, _ISSUE_TYPES),
            priorities=_keywords(prompt, _PRIORITIES),
            updated=updated,
        ),
        search=search,
        sort=sort,
        limit=limit,
    )


class MockIntentParser:
    """Preset phrases first (substring match), then keyword patterns."""

    def parse_intent(self, text: str) -> QueryIntent:
        prompt = text.lower().strip()
        for phrase, intent in PRESET_INTENTS.items():
            if phrase in prompt:
                logger.debug("Mock intent preset matched: %r", phrase)
                return intent
        logger.debug("Mock intent using pattern fallback for %r", prompt)
        return parse_with_patterns(prompt)
