"""Natural-language intent parsing: mock and OpenAI parsers plus retry wrapper."""

from jql_bridge.intent.mock import MockIntentParser
from jql_bridge.intent.openai_parser import OpenAIIntentParser
from jql_bridge.intent.parsing import intent_from_dict, parse_date_range
from jql_bridge.intent.resilient import IntentParser, ResilientIntentParser, is_transient

__all__ = [
    "IntentParser",
    "MockIntentParser",
    "OpenAIIntentParser",
    "ResilientIntentParser",
    "intent_from_dict",
    "is_transient",
    "parse_date_range",
]
