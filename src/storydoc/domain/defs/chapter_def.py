"""Chapter definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ChapterDef:
    """Grouping label referenced by story progression events."""

    id: int
    name: str | None = None
