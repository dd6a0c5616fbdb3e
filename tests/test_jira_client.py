import pytest
import requests
from jira import JIRAError

from jql_bridge.core.errors import JiraTransportError
from jql_bridge.core.jira_client import JiraAPI
from jql_bridge.query.compiler import CompiledQuery


def _raw_issue(key="OBS-1"):
    return {
        "id": "10001",
        "key": key,
        "fields": {
            "summary": "Test",
            "created": "2024-09-01T10:00:00.000+0000",
            "updated": "2024-09-02T10:00:00.000+0000",
            "assignee": {"accountId": "a1", "displayName": "Alice"},
            "reporter": {"displayName": "Bob"},
            "priority": {"name": "High"},
            "status": {"name": "In Progress"},
            "issuetype": {"name": "Task"},
            "project": {"key": "OBS"},
            "labels": ["x"],
            "components": [{"name": "api"}],
        },
    }


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, params=None):
        self.calls.append((url, params))
        if self.exc is not None:
            raise self.exc
        return self.response


class FakeClient:
    def __init__(self, session=None, issue_exc=None):
        self._session = session
        self.issue_exc = issue_exc

    def issue(self, key):
        raise self.issue_exc


class DummyAPI(JiraAPI):
    def __init__(self, client):
        self.server = "https://example.atlassian.net"
        self.client = client


def test_search_maps_issues_and_params():
    session = FakeSession(FakeResponse(payload={"issues": [_raw_issue()], "total": 7}))
    result = DummyAPI(FakeClient(session)).search(CompiledQuery('project = "OBS"', 10))
    assert result.total == 7
    assert result.generated_jql == 'project = "OBS"'
    issue = result.issues[0]
    assert issue.key == "OBS-1"
    assert issue.assignee.display_name == "Alice"
    assert issue.components == ("api",)
    url, params = session.calls[0]
    assert url == "https://example.atlassian.net/rest/api/3/search/jql"
    assert params["maxResults"] == 10
    assert params["jql"] == 'project = "OBS"'


def test_search_defaults_page_size_and_total():
    session = FakeSession(FakeResponse(payload={"issues": [_raw_issue()]}))
    result = DummyAPI(FakeClient(session)).search(CompiledQuery(""))
    assert session.calls[0][1]["maxResults"] == 50
    assert result.total == 1


def test_search_error_status():
    session = FakeSession(FakeResponse(status_code=400, text="bad jql"))
    with pytest.raises(JiraTransportError) as info:
        DummyAPI(FakeClient(session)).search(CompiledQuery("x"))
    assert info.value.status_code == 400


def test_search_unparseable_payload():
    session = FakeSession(FakeResponse(payload=None))
    with pytest.raises(JiraTransportError):
        DummyAPI(FakeClient(session)).search(CompiledQuery("x"))


def test_search_incomplete_issue_is_transport_error():
    session = FakeSession(FakeResponse(payload={"issues": [{"key": "OBS-1", "fields": {}}]}))
    with pytest.raises(JiraTransportError):
        DummyAPI(FakeClient(session)).search(CompiledQuery("x"))


def test_search_network_error():
    session = FakeSession(exc=requests.ConnectionError("down"))
    with pytest.raises(JiraTransportError):
        DummyAPI(FakeClient(session)).search(CompiledQuery("x"))


def test_fetch_issue_not_found_returns_none():
    client = FakeClient(issue_exc=JIRAError(status_code=404, text="Issue does not exist"))
    assert DummyAPI(client).fetch_issue("OBS-404") is None


def test_fetch_issue_other_error_raises():
    client = FakeClient(issue_exc=JIRAError(status_code=500, text="boom"))
    with pytest.raises(JiraTransportError) as info:
        DummyAPI(client).fetch_issue("OBS-1")
    assert info.value.status_code == 500
