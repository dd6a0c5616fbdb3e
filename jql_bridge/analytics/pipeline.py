"""Post-processing pipeline: grouping, calculation and aggregation stages.

Each processor returns a partial ``ProcessingResult``; partials are merged in
priority order with ``merge_results``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from jql_bridge.core.config import AGGREGATION_PRIORITY, CALCULATION_PRIORITY, GROUPING_PRIORITY
from jql_bridge.core.models import Issue, QueryIntent

from .aggregations.engine import AggregationEngine
from .grouping import DataGroup, GroupingEngine
from .metrics.calculations import CalculationEngine

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ProcessingOptions:
    group_by: tuple[str, ...] = ()
    calculate: tuple[str, ...] = ()
    aggregate: tuple[str, ...] = ()
    output_format: str | None = None


@dataclass(slots=True, frozen=True)
class ProcessingContext:
    records: tuple[Issue, ...]
    original_intent: QueryIntent | None = None
    options: ProcessingOptions = field(default_factory=ProcessingOptions)


@dataclass(slots=True, frozen=True)
class ProcessingResult:
    records: tuple[Issue, ...] = ()
    groups: tuple[DataGroup, ...] = ()
    calculations: dict[str, Any] = field(default_factory=dict)
    aggregations: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)


# ================= Merge rules =================


def merge_maps(current: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Last write wins per key."""
    merged = dict(current)
    merged.update(incoming)
    return merged


def merge_lists(current: tuple, incoming: tuple) -> tuple:
    """A non-empty incoming list replaces; an empty one never erases."""
    return tuple(incoming) if incoming else tuple(current)


def merge_results(current: ProcessingResult, incoming: ProcessingResult) -> ProcessingResult:
    return ProcessingResult(
        records=merge_lists(current.records, incoming.records),
        groups=merge_lists(current.groups, incoming.groups),
        calculations=merge_maps(current.calculations, incoming.calculations),
        aggregations=merge_maps(current.aggregations, incoming.aggregations),
        metadata=merge_maps(current.metadata, incoming.metadata),
    )


# ================= Processors =================


class Processor(Protocol):
    name: str
    priority: int

    def can_apply(self, context: ProcessingContext) -> bool: ...

    def apply(self, context: ProcessingContext) -> ProcessingResult: ...


class GroupingProcessor:
    name = "grouping"
    priority = GROUPING_PRIORITY

    def __init__(self, engine: GroupingEngine | None = None):
        self.engine = engine or GroupingEngine()

    def can_apply(self, context: ProcessingContext) -> bool:
        return bool(context.options.group_by)

    def apply(self, context: ProcessingContext) -> ProcessingResult:
        fields = list(context.options.group_by)
        groups = self.engine.group_by(context.records, fields)
        return ProcessingResult(
            groups=tuple(groups),
            metadata={"grouped_by": fields, "group_count": len(groups)},
        )


class CalculationProcessor:
    name = "calculation"
    priority = CALCULATION_PRIORITY

    def __init__(self, engine: CalculationEngine | None = None):
        self.engine = engine or CalculationEngine()

    def can_apply(self, context: ProcessingContext) -> bool:
        return bool(context.options.calculate)

    def apply(self, context: ProcessingContext) -> ProcessingResult:
        calculations = self.engine.calculate(context.records, context.options.calculate)
        return ProcessingResult(calculations=calculations, metadata={"calculation_count": len(calculations)})


class AggregationProcessor:
    name = "aggregation"
    priority = AGGREGATION_PRIORITY

    def __init__(self, engine: AggregationEngine | None = None):
        self.engine = engine or AggregationEngine()

    def can_apply(self, context: ProcessingContext) -> bool:
        return bool(context.options.aggregate)

    def apply(self, context: ProcessingContext) -> ProcessingResult:
        aggregations = self.engine.aggregate(context.records, context.options.aggregate)
        return ProcessingResult(aggregations=aggregations, metadata={"aggregation_count": len(aggregations)})


def default_processors() -> list[Processor]:
    return [GroupingProcessor(), CalculationProcessor(), AggregationProcessor()]


class ProcessingPipeline:
    def __init__(self, processors: Sequence[Processor] | None = None):
        chosen = list(processors) if processors is not None else default_processors()
        # sorted() is stable: equal priorities keep registration order
        self._processors = tuple(sorted(chosen, key=lambda p: p.priority))

    @property
    def processors(self) -> tuple[Processor, ...]:
        return self._processors

    def process(self, context: ProcessingContext) -> ProcessingResult:
        result = ProcessingResult(records=tuple(context.records))
        ran: list[str] = []
        for processor in self._processors:
            if not processor.can_apply(context):
                continue
            logger.debug("Running processor %s (priority %s)", processor.name, processor.priority)
            result = merge_results(result, processor.apply(context))
            ran.append(processor.name)
        return merge_results(result, ProcessingResult(metadata={"processors": ran}))
