"""Character definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .linked_list_def import LinkedListDataDef


@dataclass(frozen=True, slots=True)
class CharacterDef:
    name: str
    biography: str = ""
    description: str = ""
    linked_list_data: Tuple[LinkedListDataDef, ...] = ()

    def get_linked_list_data(self, list_name: str) -> LinkedListDataDef:
        for data in self.linked_list_data:
            if data.list_name == list_name:
                return data
        raise KeyError(list_name)
