"""Story node definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .action_def import TimelineItemDef


@dataclass(frozen=True, slots=True)
class NodeDef:
    """Atomic narrative unit with an ordered timeline."""

    id: int
    title: str | None = None
    content: str | None = None
    timeline: Tuple[TimelineItemDef, ...] = ()
