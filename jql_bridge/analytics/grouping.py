"""Recursive partitioning of issues into a tree of DataGroups."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from jql_bridge.core.config import UNASSIGNED_LABEL
from jql_bridge.core.models import Issue

from .fields import FieldAccessor


@dataclass(slots=True, frozen=True)
class DataGroup:
    """One node of the grouping tree.

    Leaf groups hold their records. Internal groups also keep their partition
    in ``records`` but ``subgroups`` is authoritative when non-empty.
    """

    key: str
    value: Any
    records: tuple[Issue, ...] = ()
    subgroups: tuple[DataGroup, ...] = ()
    aggregations: dict[str, Any] | None = field(default=None, hash=False)

    @property
    def is_leaf(self) -> bool:
        return not self.subgroups

    def leaves(self) -> list[DataGroup]:
        if self.is_leaf:
            return [self]
        out: list[DataGroup] = []
        for sub in self.subgroups:
            out.extend(sub.leaves())
        return out


def _partition(records: Sequence[Issue], path: str) -> dict[Any, list[Issue]]:
    parts: dict[Any, list[Issue]] = {}
    for record in records:
        value = FieldAccessor.get(record, path)
        if value is None:
            value = UNASSIGNED_LABEL
        parts.setdefault(value, []).append(record)
    return parts


class GroupingEngine:
    def group_by(self, records: Sequence[Issue], fields: Sequence[str]) -> list[DataGroup]:
        if not fields:
            return []
        head, rest = fields[0], fields[1:]
        groups = []
        for value, members in _partition(records, head).items():
            subgroups = tuple(self.group_by(members, rest)) if rest else ()
            groups.append(DataGroup(key=head, value=value, records=tuple(members), subgroups=subgroups))
        return groups
