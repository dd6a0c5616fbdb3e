"""Intent parser backed by the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
from typing import Any

import openai

from jql_bridge.core.config import DEFAULT_LLM_MAX_TOKENS, DEFAULT_LLM_TEMPERATURE, DEFAULT_OPENAI_MODEL
from jql_bridge.core.errors import IntentParsingError, IntentServiceError
from jql_bridge.core.models import QueryIntent

from .parsing import intent_from_dict
from .prompts import JQL_INTENT_PROMPT

logger = logging.getLogger(__name__)


class OpenAIIntentParser:
    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_OPENAI_MODEL,
        temperature: float = DEFAULT_LLM_TEMPERATURE,
        max_tokens: int = DEFAULT_LLM_MAX_TOKENS,
        client: Any = None,
    ):
        self.client = client if client is not None else openai.OpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _complete(self, text: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": JQL_INTENT_PROMPT},
                    {"role": "user", "content": text},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except (openai.APIConnectionError, openai.RateLimitError) as exc:
            # APITimeoutError subclasses APIConnectionError
            raise IntentServiceError(f"OpenAI request failed: {exc}", transient=True) from exc
        except openai.APIStatusError as exc:
            raise IntentServiceError(
                f"OpenAI API error {exc.status_code}: {exc.message}", transient=exc.status_code >= 500
            ) from exc
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise IntentParsingError("Empty response from OpenAI")
        return content

    def parse_intent(self, text: str) -> QueryIntent:
        logger.debug("Parsing natural language query: %s", text)
        content = self._complete(text)
        logger.debug("Received LLM response: %s", content)
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            raise IntentParsingError(f"Invalid response format from LLM: {exc}") from exc
        return intent_from_dict(payload)
