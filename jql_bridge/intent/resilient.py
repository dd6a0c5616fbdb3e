"""Retry decorator for intent parsers (transient failures only)."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import Protocol

from jql_bridge.core.config import (
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_BASE_DELAY_SECONDS,
    RETRY_JITTER_RATIO,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_DELAY_SECONDS,
)
from jql_bridge.core.errors import IntentServiceError
from jql_bridge.core.models import QueryIntent

logger = logging.getLogger(__name__)


class IntentParser(Protocol):
    def parse_intent(self, text: str) -> QueryIntent: ...


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, IntentServiceError):
        return exc.transient
    return isinstance(exc, (ConnectionError, TimeoutError))


class ResilientIntentParser:
    """Wrap another parser with exponential backoff and jitter.

    Malformed-output failures (``IntentParsingError``) and non-transient
    service errors propagate on the first attempt.
    """

    def __init__(
        self,
        inner: IntentParser,
        *,
        max_attempts: int = RETRY_MAX_ATTEMPTS,
        base_delay: float = RETRY_BASE_DELAY_SECONDS,
        backoff: float = RETRY_BACKOFF_MULTIPLIER,
        max_delay: float = RETRY_MAX_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        rng: Callable[[], float] = random.random,
    ):
        self.inner = inner
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self.backoff = backoff
        self.max_delay = max_delay
        self._sleep = sleep
        self._rng = rng

    def delay_for(self, attempt: int) -> float:
        """Delay after failed ``attempt`` (1-based), jittered and capped."""
        delay = self.base_delay * (self.backoff ** (attempt - 1))
        delay *= 1 + self._rng() * RETRY_JITTER_RATIO
        return min(delay, self.max_delay)

    def parse_intent(self, text: str) -> QueryIntent:
        attempt = 1
        while True:
            try:
                return self.inner.parse_intent(text)
            except Exception as exc:
                if attempt >= self.max_attempts or not is_transient(exc):
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    "Intent request failed on attempt %d/%d (%s); retrying in %.2fs",
                    attempt,
                    self.max_attempts,
                    exc,
                    delay,
                )
                self._sleep(delay)
                attempt += 1
