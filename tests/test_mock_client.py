from jql_bridge.core.mock_client import MockJiraAPI
from jql_bridge.core.models import QueryFilters, QueryIntent
from jql_bridge.query.compiler import CompiledQuery, compile_query


def _api(now):
    return MockJiraAPI(now=lambda: now)


def _keys(result):
    return [i.key for i in result.issues]


def test_empty_query_returns_everything(now):
    result = _api(now).search(CompiledQuery(""))
    assert result.total == 4
    assert _keys(result) == ["BANK-123", "BANK-124", "PROJ-456", "BANK-125"]


def test_bugs_assigned_to_me(now):
    intent = QueryIntent(filters=QueryFilters(assignee="currentUser", issue_types=("Bug",)))
    assert _keys(_api(now).search(compile_query(intent))) == ["BANK-123"]


def test_unassigned_and_status_in(now):
    api = _api(now)
    assert _keys(api.search(CompiledQuery("assignee is EMPTY"))) == ["BANK-125"]
    result = api.search(CompiledQuery('status IN ("Done", "In Progress")'))
    assert _keys(result) == ["BANK-124", "PROJ-456"]


def test_relative_dates_and_text(now):
    api = _api(now)
    assert _keys(api.search(CompiledQuery("updated >= -1d ORDER BY updated DESC"))) == ["BANK-123", "BANK-125"]
    assert _keys(api.search(CompiledQuery('text ~ "payment"'))) == ["BANK-123"]


def test_max_results_limits_page_not_total(now):
    result = _api(now).search(CompiledQuery('project = "BANK"', max_results=2))
    assert len(result.issues) == 2
    assert result.total == 3


def test_fetch_issue_and_projects(now):
    api = _api(now)
    assert api.fetch_issue("proj-456").project == "PROJ"
    assert api.fetch_issue("NOPE-1") is None
    assert api.get_projects() == ["BANK", "PROJ"]
