"""Text renderers for query results, registered by format name."""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Callable, Mapping
from typing import Any

import pandas as pd

from jql_bridge.analytics.grouping import DataGroup
from jql_bridge.analytics.metrics.aging import add_aging_metrics, days_open, days_since_update, utc_now
from jql_bridge.analytics.pipeline import ProcessingResult
from jql_bridge.core.column_config import get_columns
from jql_bridge.core.config import (
    DEFAULT_OUTPUT_FORMAT,
    GROUP_PREVIEW_LIMIT,
    SUMMARY_TOP_ASSIGNEES,
    TABLE_ROW_LIMIT,
    UNASSIGNED_LABEL,
)
from jql_bridge.core.mappers import issues_to_dataframe
from jql_bridge.core.models import Issue, QueryResult, User

Formatter = Callable[[QueryResult, ProcessingResult | None], str]

FORMATTERS: dict[str, Formatter] = {}


def register_formatter(name):
    def decorator(func):
        FORMATTERS[name.casefold()] = func
        return func

    return decorator


def get_formatter(name: str | None) -> Formatter:
    """Case-insensitive lookup; unknown names fall back to ``table``."""
    key = (name or DEFAULT_OUTPUT_FORMAT).casefold()
    return FORMATTERS.get(key, FORMATTERS[DEFAULT_OUTPUT_FORMAT])


def format_result(
    result: QueryResult,
    processed: ProcessingResult | None = None,
    format_name: str | None = DEFAULT_OUTPUT_FORMAT,
) -> str:
    return get_formatter(format_name)(result, processed)


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _fmt_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_fmt_value(v) for v in value) + "]"
    if isinstance(value, Mapping):
        return "{" + ", ".join(f"{k}: {_fmt_value(v)}" for k, v in value.items()) + "}"
    return str(value)


def _section(title: str, values: Mapping[str, Any]) -> list[str]:
    return ["", title] + [f"  {name}: {_fmt_value(v)}" for name, v in values.items()]


# ================= table =================


def _group_lines(groups, indent: int = 0) -> list[str]:
    pad = "  " * indent
    lines: list[str] = []
    for group in groups:
        lines.append(f"{pad}{group.key}: {group.value} ({len(group.records)} issues)")
        for name, value in (group.aggregations or {}).items():
            lines.append(f"{pad}  {name}: {_fmt_value(value)}")
        if group.subgroups:
            lines.extend(_group_lines(group.subgroups, indent + 1))
        else:
            for issue in group.records[:GROUP_PREVIEW_LIMIT]:
                lines.append(f"{pad}  - {issue.key}: {_truncate(issue.summary, 40)}")
            if len(group.records) > GROUP_PREVIEW_LIMIT:
                lines.append(f"{pad}  ... and {len(group.records) - GROUP_PREVIEW_LIMIT} more")
        lines.append("")
    return lines


def _issues_table(issues: tuple[Issue, ...], total: int, column_set: str = "table") -> list[str]:
    df = add_aging_metrics(issues_to_dataframe(issues[:TABLE_ROW_LIMIT]), now=utc_now())
    columns = [c for c in get_columns(column_set) if c in df.columns] or list(df.columns)
    view = df[columns].copy()
    for col in ("created", "updated", "resolution_date"):
        if col in view.columns:
            view[col] = pd.to_datetime(view[col], utc=True).dt.strftime("%Y-%m-%d")
    if "summary" in view.columns:
        view["summary"] = view["summary"].map(lambda s: _truncate(s, 44))
    lines = view.to_string(index=False).splitlines()
    if len(issues) > TABLE_ROW_LIMIT or total > len(issues):
        lines += ["", f"Showing first {min(len(issues), TABLE_ROW_LIMIT)} of {total} results"]
    return lines


def _render_table(result: QueryResult, processed: ProcessingResult | None, column_set: str) -> str:
    lines = [f"Generated JQL: {result.generated_jql}", ""]
    if processed is not None and processed.groups:
        lines.extend(_group_lines(processed.groups))
    elif result.issues:
        lines.extend(_issues_table(result.issues, result.total, column_set))
    else:
        lines.append("No issues found matching your query.")
    if processed is not None and processed.calculations:
        lines.extend(_section("Calculations:", processed.calculations))
    if processed is not None and processed.aggregations:
        lines.extend(_section("Aggregations:", processed.aggregations))
    return "\n".join(lines)


@register_formatter("table")
def format_table(result: QueryResult, processed: ProcessingResult | None = None) -> str:
    return _render_table(result, processed, "table")


@register_formatter("detail")
def format_detail(result: QueryResult, processed: ProcessingResult | None = None) -> str:
    """Table layout with the wider ``detail`` column set, aging columns included."""
    return _render_table(result, processed, "detail")


# ================= json =================


def _user_json(user: User | None) -> dict[str, Any] | None:
    if user is None:
        return None
    return {"accountId": user.account_id, "displayName": user.display_name, "emailAddress": user.email}


def _issue_json(issue: Issue) -> dict[str, Any]:
    return {
        "key": issue.key,
        "summary": issue.summary,
        "status": issue.status,
        "priority": issue.priority,
        "issueType": issue.issue_type,
        "project": issue.project,
        "assignee": _user_json(issue.assignee),
        "reporter": _user_json(issue.reporter),
        "created": issue.created.isoformat(),
        "updated": issue.updated.isoformat(),
        "resolutionDate": issue.resolution_date.isoformat() if issue.resolution_date else None,
        "labels": list(issue.labels),
        "components": list(issue.components),
        "fixVersions": list(issue.fix_versions),
    }


def _group_json(group: DataGroup) -> dict[str, Any]:
    return {
        "key": group.key,
        "value": group.value if isinstance(group.value, (str, int, float)) else str(group.value),
        "issueCount": len(group.records),
        "issues": [_issue_json(i) for i in group.records],
        "subGroups": [_group_json(g) for g in group.subgroups] or None,
        "aggregations": group.aggregations,
    }


@register_formatter("json")
def format_json(result: QueryResult, processed: ProcessingResult | None = None) -> str:
    payload = {
        "generatedJql": result.generated_jql,
        "total": result.total,
        "issues": [_issue_json(i) for i in result.issues],
        "groups": [_group_json(g) for g in processed.groups] if processed is not None else None,
        "calculations": processed.calculations if processed is not None else None,
        "aggregations": processed.aggregations if processed is not None else None,
        "metadata": processed.metadata if processed is not None else None,
    }
    return json.dumps(payload, indent=2, default=str)


# ================= summary =================


@register_formatter("summary")
def format_summary(result: QueryResult, processed: ProcessingResult | None = None) -> str:
    lines = [f"Query Summary: {result.total} issues found", f"JQL: {result.generated_jql}", ""]
    if processed is not None and processed.groups:
        lines.append("Grouping Summary:")
        for group in processed.groups:
            lines.append(f"  {group.key} '{group.value}': {len(group.records)} issues")
            for name, value in (group.aggregations or {}).items():
                lines.append(f"    {name}: {_fmt_value(value)}")
        lines.append("")
    issues = result.issues
    if issues:
        n = len(issues)
        lines.append("Status Distribution:")
        for status, count in Counter(i.status for i in issues).most_common():
            lines.append(f"  {status}: {count} ({count * 100.0 / n:.1f}%)")
        lines += ["", "Top Assignees:"]
        assignees = Counter(i.assignee.display_name if i.assignee else UNASSIGNED_LABEL for i in issues)
        for name, count in assignees.most_common(SUMMARY_TOP_ASSIGNEES):
            lines.append(f"  {name}: {count} issues")
        now = utc_now()
        avg_age = sum(days_open(i, now) for i in issues) / n
        avg_update = sum(days_since_update(i, now) for i in issues) / n
        lines += [
            "",
            "Time Metrics:",
            f"  Average age: {avg_age:.1f} days",
            f"  Average days since update: {avg_update:.1f} days",
        ]
    if processed is not None and processed.calculations:
        lines.extend(_section("Custom Calculations:", processed.calculations))
    if processed is not None and processed.aggregations:
        lines.extend(_section("Custom Aggregations:", processed.aggregations))
    return "\n".join(lines)
