"""Structured event payloads carried by event actions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from storydoc.core.types import ScalarValue


@dataclass(frozen=True, slots=True)
class NextNodeEvent:
    pass


@dataclass(frozen=True, slots=True)
class ExitCurrentNodeEvent:
    pass


@dataclass(frozen=True, slots=True)
class ExitCurrentGroupEvent:
    pass


@dataclass(frozen=True, slots=True)
class AdjustVariableEvent:
    """Mutation of a global variable.

    ``increment``, ``value`` and ``toggle`` are independent facets; the
    runtime applies whichever are set.
    """

    name: str
    increment: float | None = None
    value: ScalarValue | None = None
    toggle: bool = False

    @property
    def has_increment(self) -> bool:
        return self.increment is not None

    @property
    def has_value(self) -> bool:
        return self.value is not None


@dataclass(frozen=True, slots=True)
class AddStateEvent:
    name: str
    character: str | None = None


@dataclass(frozen=True, slots=True)
class RemoveStateEvent:
    name: str
    character: str | None = None


@dataclass(frozen=True, slots=True)
class ProgressStoryEvent:
    """Moves the story to a chapter, group and/or node. ``None`` means unset."""

    chapter_id: int | None = None
    group_id: int | None = None
    node_id: int | None = None

    @property
    def has_target(self) -> bool:
        return any(
            target is not None for target in (self.chapter_id, self.group_id, self.node_id)
        )


@dataclass(frozen=True, slots=True)
class LinkedListModificationDef:
    """Change applied to one field of a linked list.

    Each operation is optional and independent, like the facets of
    ``AdjustVariableEvent``.
    """

    field: str
    amount: float | None = None
    set_value: ScalarValue | None = None
    append: ScalarValue | None = None
    replace: ScalarValue | None = None
    toggle: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.toggle and all(
            operand is None
            for operand in (self.amount, self.set_value, self.append, self.replace)
        )


@dataclass(frozen=True, slots=True)
class LinkedListEvent:
    reference: str
    values: Tuple[LinkedListModificationDef, ...] = ()


@dataclass(frozen=True, slots=True)
class UnknownEvent:
    """Event whose type the parser does not recognize (``None`` when untyped)."""

    event_type: str | None = None


EventDef = Union[
    NextNodeEvent,
    ExitCurrentNodeEvent,
    ExitCurrentGroupEvent,
    AdjustVariableEvent,
    AddStateEvent,
    RemoveStateEvent,
    ProgressStoryEvent,
    LinkedListEvent,
    UnknownEvent,
]

EVENT_TYPE_NAMES: dict[type, str] = {
    NextNodeEvent: "next-node",
    ExitCurrentNodeEvent: "exit-current-node",
    ExitCurrentGroupEvent: "exit-current-group",
    AdjustVariableEvent: "adjust-variable",
    AddStateEvent: "add-state",
    RemoveStateEvent: "remove-state",
    ProgressStoryEvent: "progress-story",
    LinkedListEvent: "linked-list",
}
