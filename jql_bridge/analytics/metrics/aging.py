"""Aging metrics computation (pure functions)."""

from __future__ import annotations

from datetime import datetime

import pandas as pd
import pytz

from jql_bridge.core.config import TIMEZONE
from jql_bridge.core.models import Issue

SECONDS_PER_DAY = 86400.0


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def days_between(start: datetime, end: datetime) -> float:
    return (as_utc(end) - as_utc(start)).total_seconds() / SECONDS_PER_DAY


def days_open(issue: Issue, now: datetime) -> float:
    return days_between(issue.created, now)


def days_since_update(issue: Issue, now: datetime) -> float:
    return days_between(issue.updated, now)


def time_to_resolution_days(issue: Issue) -> float | None:
    if issue.resolution_date is None:
        return None
    return days_between(issue.created, issue.resolution_date)


def add_aging_metrics(df: pd.DataFrame, now: datetime | None = None) -> pd.DataFrame:
    if df.empty:
        return df
    out = df.copy()
    tz = pytz.timezone(TIMEZONE)
    now = as_utc(now).astimezone(tz) if now is not None else datetime.now(tz=tz)
    created = pd.to_datetime(out["created"], utc=True, errors="coerce").dt.tz_convert(tz)
    updated = pd.to_datetime(out["updated"], utc=True, errors="coerce").dt.tz_convert(tz)
    out["days_open"] = ((now - created).dt.total_seconds() / SECONDS_PER_DAY).round(1)
    out["days_since_update"] = ((now - updated).dt.total_seconds() / SECONDS_PER_DAY).round(1)
    if "resolution_date" in out.columns:
        resolved = pd.to_datetime(out["resolution_date"], utc=True, errors="coerce").dt.tz_convert(tz)
        out["time_to_resolution_days"] = ((resolved - created).dt.total_seconds() / SECONDS_PER_DAY).round(1)
    return out
