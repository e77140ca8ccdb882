"""Group and node-graph definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True, slots=True)
class GroupTagDef:
    """Tag applied to a group, with the selected key for keyvalue tags."""

    tag_name: str
    selected_key: str | None = None
    value: str | None = None


@dataclass(frozen=True, slots=True)
class PointDef:
    """One authored adjacency entry: a source node and its destinations."""

    source: int
    destinations: Tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class NodeGraphDef:
    """Connectivity among the nodes of a group.

    ``points`` keeps every entry in authored order, duplicate sources
    included, so the validator can report them.
    """

    start_node: int | None = None
    end_node: int | None = None
    points: Tuple[PointDef, ...] = ()

    def destinations(self, source: int) -> Tuple[int, ...]:
        """Return the destinations listed for ``source`` (all entries, in order)."""
        found: list[int] = []
        for point in self.points:
            if point.source == source:
                found.extend(point.destinations)
        return tuple(found)

    def adjacency(self) -> Dict[int, Tuple[int, ...]]:
        """Return the points as a source -> destinations mapping."""
        mapping: Dict[int, Tuple[int, ...]] = {}
        for point in self.points:
            mapping[point.source] = mapping.get(point.source, ()) + point.destinations
        return mapping


@dataclass(frozen=True, slots=True)
class GroupDef:
    """A cluster of nodes sharing a chapter and a connectivity graph."""

    id: int
    chapter_id: int | None
    name: str | None
    content: str | None
    tags: Tuple[GroupTagDef, ...] = ()
    graph: NodeGraphDef = NodeGraphDef()
    parent_group_id: int | None = None
    linked_lists: Tuple[str, ...] = ()
