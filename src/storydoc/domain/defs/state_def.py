"""Character state marker definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StateDef:
    """A named character-state marker such as ``Poisoned``."""

    name: str
