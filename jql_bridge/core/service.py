"""QueryService: orchestrates parse, compile, search and post-processing."""

from __future__ import annotations

import logging
from dataclasses import replace

from jql_bridge.analytics.aggregations.engine import AggregationEngine
from jql_bridge.analytics.pipeline import (
    ProcessingContext,
    ProcessingOptions,
    ProcessingPipeline,
    ProcessingResult,
)
from jql_bridge.intent import MockIntentParser, OpenAIIntentParser
from jql_bridge.intent.resilient import IntentParser, ResilientIntentParser
from jql_bridge.query.compiler import QueryCompiler

from .config import AppSettings
from .jira_client import JiraAPI
from .mock_client import MockJiraAPI
from .models import QueryResult

logger = logging.getLogger(__name__)


class QueryService:
    def __init__(
        self,
        parser: IntentParser,
        api: JiraAPI,
        *,
        compiler: QueryCompiler | None = None,
        pipeline: ProcessingPipeline | None = None,
        aggregations: AggregationEngine | None = None,
    ):
        self.parser = parser
        self.api = api
        self.compiler = compiler or QueryCompiler()
        self.pipeline = pipeline or ProcessingPipeline()
        self.aggregations = aggregations or AggregationEngine()

    def run(
        self,
        text: str,
        options: ProcessingOptions | None = None,
        *,
        per_group: bool = False,
    ) -> tuple[QueryResult, ProcessingResult]:
        """Answer a natural-language query end to end.

        Parameters
        ----------
        text:
            Free-text query handed to the intent parser.
        options:
            Grouping/calculation/aggregation selections for the pipeline.
        per_group:
            When True and both grouping and aggregations were requested, the
            returned groups carry per-group aggregation values.
        """
        options = options or ProcessingOptions()
        intent = self.parser.parse_intent(text)
        compiled = self.compiler.compile(intent)
        logger.info("Generated JQL: %s", compiled.query_string or "<empty>")
        result = self.api.search(compiled)
        logger.info("Jira returned %d of %d issues", len(result.issues), result.total)
        processed = self.pipeline.process(
            ProcessingContext(records=result.issues, original_intent=intent, options=options)
        )
        if per_group and processed.groups and options.aggregate:
            annotated = self.aggregations.annotate_groups(processed.groups, options.aggregate)
            processed = replace(processed, groups=tuple(annotated))
        return result, processed


def build_service(settings: AppSettings) -> QueryService:
    """Wire parser and transport from settings (mocks or real services)."""
    if settings.llm_provider == "openai":
        parser: IntentParser = ResilientIntentParser(
            OpenAIIntentParser(
                settings.llm_api_key,
                model=settings.llm_model,
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
            ),
            max_attempts=settings.llm_max_attempts,
        )
    else:
        parser = MockIntentParser()
    if settings.use_mocks:
        api: JiraAPI = MockJiraAPI()
    else:
        api = JiraAPI(settings.jira_server, settings.jira_email, settings.jira_token)
    logger.debug("Using parser %s and Jira client %s", type(parser).__name__, type(api).__name__)
    return QueryService(parser, api)
