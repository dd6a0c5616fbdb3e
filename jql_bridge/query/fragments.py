"""Partial JQL contributions and the rule for folding them together."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Fragment:
    where_clause: str | None = None
    order_by_clause: str | None = None


EMPTY = Fragment()


def combine(left: Fragment, right: Fragment) -> Fragment:
    """Combine two fragments.

    Where clauses are ANDed with both sides parenthesized; a missing side
    leaves the other untouched. The first non-null order-by wins.
    """
    if left.where_clause is not None and right.where_clause is not None:
        where = f"({left.where_clause}) AND ({right.where_clause})"
    else:
        where = left.where_clause if left.where_clause is not None else right.where_clause
    order_by = left.order_by_clause if left.order_by_clause is not None else right.order_by_clause
    return Fragment(where, order_by)


def combine_all(fragments: Iterable[Fragment]) -> Fragment:
    result = EMPTY
    for fragment in fragments:
        result = combine(result, fragment)
    return result
