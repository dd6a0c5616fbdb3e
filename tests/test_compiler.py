from jql_bridge.core.models import DateRange, QueryFilters, QueryIntent, SortField
from jql_bridge.query.compiler import QueryCompiler, compile_query
from jql_bridge.query.fragments import Fragment, combine, combine_all


def test_combine_parenthesizes_both_where_clauses():
    out = combine(Fragment("a = 1"), Fragment("b = 2"))
    assert out.where_clause == "(a = 1) AND (b = 2)"


def test_combine_keeps_where_and_order_by():
    out = combine(Fragment("a = 1"), Fragment(order_by_clause="updated DESC"))
    assert out.where_clause == "a = 1"
    assert out.order_by_clause == "updated DESC"


def test_combine_two_empty_is_null():
    out = combine(Fragment(), Fragment())
    assert out.where_clause is None
    assert out.order_by_clause is None


def test_first_order_by_wins():
    out = combine_all([Fragment(order_by_clause="a ASC"), Fragment(order_by_clause="b DESC")])
    assert out.order_by_clause == "a ASC"


def test_empty_intent_compiles_to_empty_string():
    compiled = compile_query(QueryIntent())
    assert compiled.query_string == ""
    assert compiled.max_results is None
    assert compile_query(QueryIntent(filters=QueryFilters())).query_string == ""


def test_bugs_assigned_to_me():
    intent = QueryIntent(filters=QueryFilters(assignee="currentUser", issue_types=("Bug",)))
    assert compile_query(intent).query_string == '(assignee = currentUser()) AND (type = "Bug")'


def test_where_and_order_by():
    intent = QueryIntent(
        filters=QueryFilters(project="BANK"),
        sort=(SortField("updated", "DESC"),),
    )
    assert compile_query(intent).query_string == 'project = "BANK" ORDER BY updated DESC'


def test_order_by_only():
    intent = QueryIntent(sort=(SortField("created", "ASC"),))
    assert compile_query(intent).query_string == "ORDER BY created ASC"


def test_limit_carried_not_rendered():
    intent = QueryIntent(filters=QueryFilters(status=("Open",)), limit=10)
    compiled = compile_query(intent)
    assert compiled.max_results == 10
    assert "10" not in compiled.query_string


def test_clause_order_follows_registration():
    intent = QueryIntent(
        filters=QueryFilters(
            updated=DateRange(last_days=7),
            issue_types=("Bug",),
            project="BANK",
            assignee="currentUser",
        ),
        search="payment",
    )
    q = compile_query(intent).query_string
    assert q.index("assignee") < q.index("project") < q.index("type") < q.index("updated") < q.index("text ~")


def test_custom_handler_list():
    class Always:
        name = "always"

        def can_handle(self, intent):
            return True

        def handle(self, intent):
            return Fragment("resolution is EMPTY")

    compiled = QueryCompiler([Always()]).compile(QueryIntent(filters=QueryFilters(project="X")))
    assert compiled.query_string == "resolution is EMPTY"


def test_skipped_handler_is_never_invoked():
    calls = []

    class Never:
        name = "never"

        def can_handle(self, intent):
            return False

        def handle(self, intent):
            calls.append(intent)
            return Fragment("x = 1")

    QueryCompiler([Never()]).compile(QueryIntent())
    assert calls == []
