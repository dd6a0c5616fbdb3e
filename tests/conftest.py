"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import jql_bridge` works.
"""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytz

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jql_bridge.core.models import Issue, User  # noqa: E402

NOW = pytz.UTC.localize(datetime(2024, 10, 1, 12, 0, 0))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_issue():
    def _make(key="OBS-1", *, status="Open", assignee="Alice", age_days=10, updated_days=2, **kwargs):
        user = User(assignee.lower(), assignee) if assignee else None
        defaults = dict(
            key=key,
            summary=f"Summary for {key}",
            status=status,
            priority="Medium",
            issue_type="Bug",
            project="OBS",
            created=NOW - timedelta(days=age_days),
            updated=NOW - timedelta(days=updated_days),
            assignee=user,
        )
        defaults.update(kwargs)
        return Issue(**defaults)

    return _make
