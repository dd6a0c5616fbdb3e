"""Jira API client wrapper (REST v3 enhanced search, single bounded page)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests
from jira import JIRA, JIRAError

from .config import DEFAULT_MAX_RESULTS, JIRA_SEARCH_FIELDS, JIRA_SEARCH_PATH
from .errors import JiraTransportError
from .mappers import map_issue
from .models import Issue, QueryResult

if TYPE_CHECKING:
    from jql_bridge.query.compiler import CompiledQuery

logger = logging.getLogger(__name__)


class JiraAPI:
    def __init__(self, server: str, email: str, token: str):
        self.server = server.rstrip("/")
        self.client = JIRA(
            basic_auth=(email, token),
            options={"server": self.server, "rest_api_version": "3"},
            get_server_info=False,
        )

    def search(self, query: CompiledQuery) -> QueryResult:
        """Run one page of a JQL search and map the returned issues.

        Raises
        ------
        JiraTransportError
            On a non-success status, a network failure, or a payload that
            cannot be parsed into issues.
        """
        session = getattr(self.client, "_session", None)
        if session is None:
            raise JiraTransportError("JIRA session unavailable")
        url = f"{self.server}{JIRA_SEARCH_PATH}"
        params = {
            "jql": query.query_string,
            "maxResults": query.max_results or DEFAULT_MAX_RESULTS,
            "fields": ",".join(JIRA_SEARCH_FIELDS),
        }
        logger.debug("Sending JQL search request: %s", query.query_string)
        try:
            resp = session.get(url, params=params)
        except JIRAError as exc:
            raise JiraTransportError(
                f"Search failed {exc.status_code}: {exc.text}", status_code=exc.status_code
            ) from exc
        except requests.RequestException as exc:
            raise JiraTransportError(f"Failed to search Jira issues due to network error: {exc}") from exc
        if resp.status_code >= 400:
            raise JiraTransportError(
                f"Search failed {resp.status_code}: {resp.text[:200]}", status_code=resp.status_code
            )
        try:
            data = resp.json()
            raw_issues: list[dict[str, Any]] = data.get("issues", []) or []
            issues = tuple(map_issue(r) for r in raw_issues)
        except (ValueError, AttributeError, TypeError) as exc:
            raise JiraTransportError(f"Failed to parse Jira API response: {exc}") from exc
        total = data.get("total")
        return QueryResult(
            issues=issues,
            generated_jql=query.query_string,
            total=total if isinstance(total, int) else len(issues),
        )

    def fetch_issue(self, issue_key: str) -> Issue | None:
        """Fetch a single issue; ``None`` when Jira answers 404."""
        logger.debug("Fetching issue: %s", issue_key)
        try:
            issue = self.client.issue(issue_key)
        except JIRAError as exc:
            if exc.status_code == 404:
                return None
            raise JiraTransportError(
                f"Failed to fetch issue {issue_key}: {exc.text}", status_code=exc.status_code
            ) from exc
        raw = issue.raw if hasattr(issue, "raw") else issue
        if not isinstance(raw, dict):
            raise JiraTransportError(f"Unexpected issue payload type for {issue_key}: {type(raw)!r}")
        try:
            return map_issue(raw)
        except ValueError as exc:
            raise JiraTransportError(f"Failed to parse issue {issue_key}: {exc}") from exc

    def get_projects(self) -> list[str]:
        try:
            return [p.key for p in self.client.projects()]
        except JIRAError as exc:
            raise JiraTransportError(
                f"Failed to fetch projects: {exc.text}", status_code=exc.status_code
            ) from exc
