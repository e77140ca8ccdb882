"""Tag definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from storydoc.core.types import TagType


@dataclass(frozen=True, slots=True)
class TagDefinitionDef:
    """Declares a tag that groups may carry.

    ``single`` tags only mark presence; ``keyvalue`` tags select one of
    ``keys``. ``keys`` is empty for single tags.
    """

    name: str
    type: TagType
    color: str | None = None
    keys: Tuple[str, ...] = ()

    @property
    def is_keyvalue(self) -> bool:
        return self.type == "keyvalue"
