"""Root container for a parsed story document."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple, TypeVar

from .chapter_def import ChapterDef
from .character_def import CharacterDef
from .global_var_def import GlobalVariableDef
from .group_def import GroupDef
from .linked_list_def import LinkedListDef
from .node_def import NodeDef
from .state_def import StateDef
from .tag_def import TagDefinitionDef

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class StoryData:
    """Fully parsed story graph.

    Every child structure is owned by this object; cross-entity links are ids
    or names resolved through the ``get_*`` lookups, which raise ``KeyError``
    when the entity does not exist.
    """

    states: Tuple[StateDef, ...] = ()
    global_vars: Tuple[GlobalVariableDef, ...] = ()
    characters: Tuple[CharacterDef, ...] = ()
    linked_lists: Tuple[LinkedListDef, ...] = ()
    tags: Tuple[TagDefinitionDef, ...] = ()
    chapters: Tuple[ChapterDef, ...] = ()
    groups: Tuple[GroupDef, ...] = ()
    nodes: Tuple[NodeDef, ...] = ()

    def get_chapter(self, chapter_id: int) -> ChapterDef:
        return _find(self.chapters, "id", chapter_id)

    def get_group(self, group_id: int) -> GroupDef:
        return _find(self.groups, "id", group_id)

    def get_node(self, node_id: int) -> NodeDef:
        return _find(self.nodes, "id", node_id)

    def get_tag_definition(self, name: str) -> TagDefinitionDef:
        return _find(self.tags, "name", name)

    def get_global_variable(self, name: str) -> GlobalVariableDef:
        return _find(self.global_vars, "name", name)

    def get_state(self, name: str) -> StateDef:
        return _find(self.states, "name", name)

    def get_character(self, name: str) -> CharacterDef:
        return _find(self.characters, "name", name)

    def get_linked_list(self, name: str) -> LinkedListDef:
        return _find(self.linked_lists, "name", name)

    def has_chapter(self, chapter_id: int) -> bool:
        return _contains(self.chapters, "id", chapter_id)

    def has_group(self, group_id: int) -> bool:
        return _contains(self.groups, "id", group_id)

    def has_node(self, node_id: int) -> bool:
        return _contains(self.nodes, "id", node_id)

    def has_tag_definition(self, name: str) -> bool:
        return _contains(self.tags, "name", name)

    def has_global_variable(self, name: str) -> bool:
        return _contains(self.global_vars, "name", name)

    def has_state(self, name: str) -> bool:
        return _contains(self.states, "name", name)

    def has_character(self, name: str) -> bool:
        return _contains(self.characters, "name", name)

    def has_linked_list(self, name: str) -> bool:
        return _contains(self.linked_lists, "name", name)


def _find(entries: Iterable[T], attribute: str, key: object) -> T:
    for entry in entries:
        if getattr(entry, attribute) == key:
            return entry
    raise KeyError(key)


def _contains(entries: Iterable[object], attribute: str, key: object) -> bool:
    return any(getattr(entry, attribute) == key for entry in entries)
