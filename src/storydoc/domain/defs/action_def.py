"""Timeline item definitions: dialogue and the action variants."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .event_def import EventDef


@dataclass(frozen=True, slots=True)
class DialogueLineDef:
    character: str
    text: str


@dataclass(frozen=True, slots=True)
class DialogueDef:
    """Consecutive character lines spoken as one timeline item."""

    number: int
    lines: Tuple[DialogueLineDef, ...] = ()

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass(frozen=True, slots=True)
class CodeAction:
    """Opaque code the runtime interprets itself."""

    number: int
    code: str = ""


@dataclass(frozen=True, slots=True)
class GotoAction:
    number: int
    target_node: int


@dataclass(frozen=True, slots=True)
class ExitAction:
    number: int
    target: str


@dataclass(frozen=True, slots=True)
class EnterAction:
    number: int
    target_group: int


@dataclass(frozen=True, slots=True)
class ChoiceOptionDef:
    """Selectable option owning its own nested timeline of actions."""

    text: str
    actions: Tuple["ActionDef", ...] = ()


@dataclass(frozen=True, slots=True)
class ChoiceAction:
    number: int
    options: Tuple[ChoiceOptionDef, ...] = ()


@dataclass(frozen=True, slots=True)
class EventAction:
    number: int
    event: EventDef


ActionDef = Union[CodeAction, GotoAction, ExitAction, EnterAction, ChoiceAction, EventAction]
TimelineItemDef = Union[DialogueDef, ActionDef]

_ACTION_CLASSES: tuple[type, ...] = (
    CodeAction,
    GotoAction,
    ExitAction,
    EnterAction,
    ChoiceAction,
    EventAction,
)


def is_action(item: object) -> bool:
    """Return True when ``item`` is one of the action variants."""
    return isinstance(item, _ACTION_CLASSES)
