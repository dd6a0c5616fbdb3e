"""Mapping raw Jira issue JSON into Issue models and tabular views."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

import pandas as pd

from .config import UNASSIGNED_LABEL
from .models import Issue, User


def parse_dt(val: Any) -> datetime | None:
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _extract_text_from_adf(body: Any) -> str:
    """Flatten Atlassian Document Format content into plain text.

    Jira Cloud v3 returns descriptions as ADF dictionaries; older payloads and
    the mock client use plain strings.
    """
    if body is None:
        return ""
    if isinstance(body, str):
        return body.strip()
    if isinstance(body, dict):
        texts: list[str] = []
        if body.get("type") == "text" and "text" in body:
            texts.append(str(body["text"]))
        content = body.get("content")
        if isinstance(content, list):
            for item in content:
                extracted = _extract_text_from_adf(item)
                if extracted:
                    texts.append(extracted)
        return " ".join(texts)
    if isinstance(body, list):
        return " ".join(t for t in (_extract_text_from_adf(item) for item in body) if t)
    return str(body)


def _map_user(raw: dict[str, Any] | None) -> User | None:
    if not raw:
        return None
    return User(
        account_id=raw.get("accountId") or raw.get("name") or "",
        display_name=raw.get("displayName") or "",
        email=raw.get("emailAddress"),
    )


def _names(values: Any) -> tuple[str, ...]:
    out: list[str] = []
    for v in values or []:
        if isinstance(v, dict):
            nm = v.get("name")
            if nm:
                out.append(str(nm))
        elif v:
            out.append(str(v))
    return tuple(out)


def map_issue(raw: dict[str, Any]) -> Issue:
    """Map one issue from the Jira search/issue endpoints.

    Raises
    ------
    ValueError
        If the payload lacks a key or its created/updated timestamps.
    """
    fields = raw.get("fields") or {}
    key = raw.get("key")
    created = parse_dt(fields.get("created"))
    updated = parse_dt(fields.get("updated"))
    if not key or created is None or updated is None:
        raise ValueError(f"Incomplete issue payload: {key or '<no key>'}")

    return Issue(
        id=raw.get("id"),
        key=key,
        summary=fields.get("summary") or "",
        description=_extract_text_from_adf(fields.get("description")) or None,
        status=(fields.get("status") or {}).get("name") or "Unknown",
        priority=(fields.get("priority") or {}).get("name") or "None",
        issue_type=(fields.get("issuetype") or {}).get("name") or "Unknown",
        assignee=_map_user(fields.get("assignee")),
        reporter=_map_user(fields.get("reporter")),
        project=(fields.get("project") or {}).get("key") or "",
        created=created,
        updated=updated,
        resolution_date=parse_dt(fields.get("resolutiondate")),
        resolution=(fields.get("resolution") or {}).get("name") if fields.get("resolution") else None,
        labels=tuple(fields.get("labels", []) or []),
        components=_names(fields.get("components")),
        fix_versions=_names(fields.get("fixVersions")),
    )


def issues_to_dataframe(issues: Iterable[Issue]) -> pd.DataFrame:
    rows = []
    for i in issues:
        rows.append(
            {
                "key": i.key,
                "summary": i.summary,
                "status": i.status,
                "priority": i.priority,
                "issue_type": i.issue_type,
                "project": i.project,
                "assignee": i.assignee.display_name if i.assignee else UNASSIGNED_LABEL,
                "reporter": i.reporter.display_name if i.reporter else "Unknown",
                "created": i.created,
                "updated": i.updated,
                "resolution": i.resolution or "Unresolved",
                "resolution_date": i.resolution_date,
                "labels": list(i.labels),
                "components": list(i.components),
            }
        )
    df = pd.DataFrame(rows)
    # Normalize labels list to a stable, comma-separated string for display
    for col in ("labels", "components"):
        if col in df.columns:
            df[col] = df[col].apply(
                lambda val: ", ".join(sorted({v for v in val if v}, key=str.lower)) if val else ""
            )
    return df
