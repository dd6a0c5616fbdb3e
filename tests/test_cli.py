import pytest

from jql_bridge import app


@pytest.fixture(autouse=True)
def _mock_env(monkeypatch):
    for name in ("USE_MOCKS", "LLM_PROVIDER", "LLM_API_KEY", "JIRA_BASE_URL", "JIRA_EMAIL", "JIRA_API_TOKEN"):
        monkeypatch.delenv(name, raising=False)


def test_no_query_prints_usage(capsys):
    assert app.main([]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "usage:" in captured.err


def test_success_with_mocks(capsys):
    code = app.main(["bugs", "assigned", "to", "me", "--calculate", "totalCount", "--format", "summary"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Query Summary: 1 issues found" in captured.out
    assert "totalCount: 1" in captured.out


def test_group_by_repeatable(capsys):
    code = app.main(["open issues", "--group-by", "status", "--group-by", "assignee", "--aggregate", "count", "--per-group"])
    out = capsys.readouterr().out
    assert code == 0
    assert "status: Open (2 issues)" in out
    assert "  assignee: John Doe (1 issues)" in out


def test_configuration_error_is_one_line(capsys, monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    assert app.main(["open issues"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    lines = captured.err.strip().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("Error: openai configuration is missing")


@pytest.mark.parametrize(
    "argv",
    [
        ["open issues", "--group-by"],
        ["open issues", "--no-such-flag"],
    ],
)
def test_usage_errors_are_one_line(argv, capsys):
    assert app.main(argv) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    lines = captured.err.strip().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("Error: ")
