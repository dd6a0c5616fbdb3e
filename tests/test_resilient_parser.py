import logging

import pytest

from jql_bridge.core.errors import IntentParsingError, IntentServiceError
from jql_bridge.core.models import QueryIntent
from jql_bridge.intent import ResilientIntentParser


class FlakyParser:
    def __init__(self, failures):
        self.failures = list(failures)
        self.calls = 0

    def parse_intent(self, text):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return QueryIntent(search=text)


def _resilient(inner, **kwargs):
    delays = []
    parser = ResilientIntentParser(inner, sleep=delays.append, rng=lambda: 0.0, **kwargs)
    return parser, delays


def test_retries_transient_then_succeeds(caplog):
    inner = FlakyParser([IntentServiceError("rate limited", transient=True), ConnectionError("reset")])
    parser, delays = _resilient(inner)
    with caplog.at_level(logging.WARNING):
        intent = parser.parse_intent("hello")
    assert intent.search == "hello"
    assert inner.calls == 3
    assert delays == [1.0, 2.0]
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 2


def test_gives_up_after_max_attempts():
    inner = FlakyParser([TimeoutError("slow")] * 5)
    parser, delays = _resilient(inner, max_attempts=3)
    with pytest.raises(TimeoutError):
        parser.parse_intent("hello")
    assert inner.calls == 3
    assert len(delays) == 2


def test_parsing_error_never_retried():
    inner = FlakyParser([IntentParsingError("bad json")])
    parser, delays = _resilient(inner)
    with pytest.raises(IntentParsingError):
        parser.parse_intent("hello")
    assert inner.calls == 1
    assert delays == []


def test_non_transient_service_error_not_retried():
    inner = FlakyParser([IntentServiceError("401 unauthorized", transient=False)])
    parser, _ = _resilient(inner)
    with pytest.raises(IntentServiceError):
        parser.parse_intent("hello")
    assert inner.calls == 1


def test_delay_jitter_and_cap():
    parser = ResilientIntentParser(FlakyParser([]), rng=lambda: 1.0, max_delay=5.0)
    assert parser.delay_for(1) == pytest.approx(1.1)
    assert parser.delay_for(2) == pytest.approx(2.2)
    assert parser.delay_for(4) == 5.0
