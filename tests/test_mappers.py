import pytest

from jql_bridge.core.mappers import issues_to_dataframe, map_issue


def test_map_issue_defaults_and_adf_description():
    raw = {
        "key": "OBS-2",
        "fields": {
            "created": "2024-09-01T10:00:00.000+0000",
            "updated": "2024-09-02T10:00:00.000+0000",
            "description": {
                "type": "doc",
                "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Broken login"}]}],
            },
            "resolution": {"name": "Fixed"},
            "resolutiondate": "2024-09-03T10:00:00.000+0000",
            "fixVersions": [{"name": "v1"}],
        },
    }
    issue = map_issue(raw)
    assert issue.status == "Unknown"
    assert issue.priority == "None"
    assert issue.description == "Broken login"
    assert issue.resolution == "Fixed"
    assert issue.resolution_date.day == 3
    assert issue.fix_versions == ("v1",)
    assert issue.assignee is None
    assert issue.created.tzinfo is not None


def test_map_issue_requires_timestamps():
    with pytest.raises(ValueError):
        map_issue({"key": "OBS-3", "fields": {"created": "2024-09-01T10:00:00.000+0000"}})


def test_issues_to_dataframe(make_issue):
    df = issues_to_dataframe([make_issue("A-1", labels=("b", "a")), make_issue("A-2", assignee=None)])
    assert list(df["key"]) == ["A-1", "A-2"]
    assert df.loc[0, "labels"] == "a, b"
    assert df.loc[1, "assignee"] == "Unassigned"
    assert df.loc[1, "resolution"] == "Unresolved"
