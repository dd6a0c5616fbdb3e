from jql_bridge.analytics.aggregations.engine import AggregationEngine
from jql_bridge.analytics.grouping import DataGroup
from jql_bridge.analytics.metrics.calculations import CalculationEngine
from jql_bridge.analytics.pipeline import (
    AggregationProcessor,
    CalculationProcessor,
    GroupingProcessor,
    ProcessingContext,
    ProcessingOptions,
    ProcessingPipeline,
    ProcessingResult,
    merge_lists,
    merge_maps,
    merge_results,
)


def test_merge_maps_last_write_wins():
    assert merge_maps({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}


def test_merge_lists_non_empty_wins():
    assert merge_lists((1, 2), ()) == (1, 2)
    assert merge_lists((1, 2), (3,)) == (3,)
    assert merge_lists((), ()) == ()


def test_merge_results_keeps_prior_groups():
    group = DataGroup(key="status", value="Open")
    first = ProcessingResult(groups=(group,), metadata={"stage": "grouping"})
    second = ProcessingResult(calculations={"totalCount": 1}, metadata={"stage": "calculation"})
    merged = merge_results(first, second)
    assert merged.groups == (group,)
    assert merged.calculations == {"totalCount": 1}
    assert merged.metadata == {"stage": "calculation"}


def _pipeline(now):
    return ProcessingPipeline(
        [
            AggregationProcessor(AggregationEngine(clock=lambda: now)),
            CalculationProcessor(CalculationEngine(clock=lambda: now)),
            GroupingProcessor(),
        ]
    )


def test_processors_sorted_by_priority(now):
    assert [p.name for p in _pipeline(now).processors] == ["grouping", "calculation", "aggregation"]


def test_no_options_returns_records_only(now, make_issue):
    records = (make_issue("A-1"), make_issue("A-2"))
    result = _pipeline(now).process(ProcessingContext(records=records))
    assert result.records == records
    assert result.groups == ()
    assert result.calculations == {}
    assert result.aggregations == {}
    assert result.metadata["processors"] == []


def test_full_run_merges_all_stages(now, make_issue):
    records = (make_issue("A-1", status="Open"), make_issue("A-2", status="Done"), make_issue("A-3"))
    options = ProcessingOptions(group_by=("status",), calculate=("totalCount",), aggregate=("count", "bogus"))
    result = _pipeline(now).process(ProcessingContext(records=records, options=options))
    assert [g.value for g in result.groups] == ["Open", "Done"]
    assert result.calculations == {"totalCount": 3}
    assert result.aggregations == {"count": 3, "bogus": "Unknown aggregation: bogus"}
    assert result.metadata["processors"] == ["grouping", "calculation", "aggregation"]
    assert result.metadata["grouped_by"] == ["status"]
    assert result.metadata["group_count"] == 2
    # aggregation runs over the flat list, not over groups
    assert all(g.aggregations is None for g in result.groups)


def test_process_is_stateless(now, make_issue):
    pipeline = _pipeline(now)
    options = ProcessingOptions(calculate=("totalCount",))
    first = pipeline.process(ProcessingContext(records=(make_issue("A-1"),), options=options))
    second = pipeline.process(ProcessingContext(records=(), options=options))
    assert first.calculations == {"totalCount": 1}
    assert second.calculations == {"totalCount": 0}
