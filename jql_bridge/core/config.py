"""Central configuration, constants, and runtime settings loaded from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .errors import ConfigurationError

# =============================================================================
# Jira Search Settings
# =============================================================================
DEFAULT_MAX_RESULTS: int = 50
JIRA_SEARCH_PATH = "/rest/api/3/search/jql"
TIMEZONE = "UTC"

# Canonical field list for Jira searches
JIRA_SEARCH_FIELDS: Sequence[str] = (
    "summary",
    "description",
    "status",
    "priority",
    "issuetype",
    "assignee",
    "reporter",
    "project",
    "created",
    "updated",
    "resolutiondate",
    "resolution",
    "labels",
    "components",
    "fixVersions",
)

# =============================================================================
# Post-processing Labels
# =============================================================================
# Display value used when a grouping field resolves to nothing
UNASSIGNED_LABEL = "Unassigned"

# Relative run order of pipeline processors (lower runs first)
GROUPING_PRIORITY: int = 10
CALCULATION_PRIORITY: int = 20
AGGREGATION_PRIORITY: int = 30

# =============================================================================
# Output Settings
# =============================================================================
DEFAULT_OUTPUT_FORMAT = "table"
TABLE_ROW_LIMIT: int = 20  # Issues shown before the "Showing first N" footer
GROUP_PREVIEW_LIMIT: int = 5  # Issues listed under each leaf group
SUMMARY_TOP_ASSIGNEES: int = 5

TABLE_COLUMNS: Sequence[str] = (
    "key",
    "summary",
    "status",
    "assignee",
    "updated",
)

DETAIL_COLUMNS: Sequence[str] = (
    "key",
    "summary",
    "status",
    "priority",
    "issue_type",
    "assignee",
    "reporter",
    "days_open",
    "days_since_update",
    "updated",
)

# =============================================================================
# Intent Parsing (LLM) Settings
# =============================================================================
LLM_PROVIDERS: frozenset[str] = frozenset({"mock", "openai"})
DEFAULT_OPENAI_MODEL = "gpt-4o"
DEFAULT_LLM_TEMPERATURE: float = 0.1
DEFAULT_LLM_MAX_TOKENS: int = 1000

# Retry tuning for transient intent-service failures
RETRY_MAX_ATTEMPTS: int = 3
RETRY_BASE_DELAY_SECONDS: float = 1.0
RETRY_BACKOFF_MULTIPLIER: float = 2.0
RETRY_MAX_DELAY_SECONDS: float = 60.0
RETRY_JITTER_RATIO: float = 0.1


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(value: str | None, default: float) -> float:
    try:
        return float(value) if value else default
    except ValueError:
        return default


def _env_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value else default
    except ValueError:
        return default


@dataclass(slots=True)
class AppSettings:
    use_mocks: bool = True
    jira_server: str | None = None
    jira_email: str | None = None
    jira_token: str | None = None
    llm_provider: str = "mock"
    llm_api_key: str | None = None
    llm_model: str = DEFAULT_OPENAI_MODEL
    llm_temperature: float = DEFAULT_LLM_TEMPERATURE
    llm_max_tokens: int = DEFAULT_LLM_MAX_TOKENS
    llm_max_attempts: int = RETRY_MAX_ATTEMPTS

    def validate(self) -> None:
        """Fail fast when a real provider is selected without its credentials.

        Raises
        ------
        ConfigurationError
            If Jira credentials are missing while mocks are disabled, or the
            LLM provider is unknown or lacks an API key.
        """
        if self.llm_provider not in LLM_PROVIDERS:
            raise ConfigurationError(f"Unknown LLM provider: {self.llm_provider}")
        if self.llm_provider != "mock" and not self.llm_api_key:
            raise ConfigurationError(
                f"{self.llm_provider} configuration is missing. Set LLM_API_KEY environment variable."
            )
        if self.use_mocks:
            return
        missing = [
            name
            for name, value in (
                ("JIRA_BASE_URL", self.jira_server),
                ("JIRA_EMAIL", self.jira_email),
                ("JIRA_API_TOKEN", self.jira_token),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing Jira configuration: {', '.join(missing)}")


def load_settings(env: Mapping[str, str] | None = None) -> AppSettings:
    """Build settings from environment variables (``os.environ`` by default)."""
    env = os.environ if env is None else env
    return AppSettings(
        use_mocks=_env_bool(env.get("USE_MOCKS"), True),
        jira_server=env.get("JIRA_BASE_URL") or env.get("JIRA_SERVER"),
        jira_email=env.get("JIRA_EMAIL"),
        jira_token=env.get("JIRA_API_TOKEN") or env.get("JIRA_TOKEN"),
        llm_provider=(env.get("LLM_PROVIDER") or "mock").strip().lower(),
        llm_api_key=env.get("LLM_API_KEY"),
        llm_model=env.get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        llm_temperature=_env_float(env.get("OPENAI_TEMPERATURE"), DEFAULT_LLM_TEMPERATURE),
        llm_max_tokens=_env_int(env.get("OPENAI_MAX_TOKENS"), DEFAULT_LLM_MAX_TOKENS),
        llm_max_attempts=_env_int(env.get("LLM_MAX_ATTEMPTS"), RETRY_MAX_ATTEMPTS),
    )
