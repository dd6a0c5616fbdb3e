"""Error types raised across the query, transport and configuration layers."""

from __future__ import annotations


class JqlBridgeError(Exception):
    """Base class for all errors raised by this package."""


class UpstreamServiceError(JqlBridgeError):
    """A call to an external service (intent parser, Jira) failed."""


class IntentParsingError(UpstreamServiceError):
    """The intent service answered, but its output could not be turned into an intent."""


class IntentServiceError(UpstreamServiceError):
    def __init__(self, message: str, *, transient: bool = False):
        super().__init__(message)
        self.transient = transient


class JiraTransportError(UpstreamServiceError):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(JqlBridgeError):
    """Required settings are missing or invalid; fatal at startup."""
