"""Compile a QueryIntent into a JQL string and a row limit."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from jql_bridge.core.models import QueryIntent

from .fragments import combine_all
from .handlers import FilterHandler, default_handlers

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CompiledQuery:
    query_string: str
    max_results: int | None = None


class QueryCompiler:
    def __init__(self, handlers: Sequence[FilterHandler] | None = None):
        self._handlers = tuple(handlers) if handlers is not None else default_handlers()

    def compile(self, intent: QueryIntent) -> CompiledQuery:
        applicable = [h for h in self._handlers if h.can_handle(intent)]
        fragment = combine_all(h.handle(intent) for h in applicable)
        parts = []
        if fragment.where_clause:
            parts.append(fragment.where_clause)
        if fragment.order_by_clause:
            parts.append(f"ORDER BY {fragment.order_by_clause}")
        query = " ".join(parts)
        logger.debug("Compiled JQL via %s: %s", [h.name for h in applicable], query or "<empty>")
        return CompiledQuery(query_string=query, max_results=intent.limit)


_DEFAULT_COMPILER = QueryCompiler()


def compile_query(intent: QueryIntent) -> CompiledQuery:
    return _DEFAULT_COMPILER.compile(intent)
