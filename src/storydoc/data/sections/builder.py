"""Accumulates parsed entities and enforces per-kind uniqueness."""
from __future__ import annotations

from typing import Dict, Generic, List, TypeVar

from storydoc.data.errors import DuplicateIdError
from storydoc.data.lexer import Token
from storydoc.domain.defs import (
    ChapterDef,
    CharacterDef,
    GlobalVariableDef,
    GroupDef,
    LinkedListDef,
    NodeDef,
    StateDef,
    StoryData,
    TagDefinitionDef,
)

T = TypeVar("T")


class _EntityTable(Generic[T]):
    """Ordered entries plus the key each one was registered under."""

    def __init__(self, section: str, key_label: str) -> None:
        self._section = section
        self._key_label = key_label
        self._entries: List[T] = []
        self._seen: Dict[object, Token] = {}

    def add(self, key: object, entry: T, token: Token) -> None:
        first = self._seen.get(key)
        if first is not None:
            raise DuplicateIdError(
                self._section,
                str(key),
                f"duplicate {self._key_label} (first declared at line {first.line})",
                token.line,
                token.column,
            )
        self._seen[key] = token
        self._entries.append(entry)

    def freeze(self) -> tuple[T, ...]:
        return tuple(self._entries)


class StoryBuilder:
    """Collects entities from every section, in source order."""

    def __init__(self) -> None:
        self.states: _EntityTable[StateDef] = _EntityTable("states", "state name")
        self.global_vars: _EntityTable[GlobalVariableDef] = _EntityTable(
            "global-vars", "variable name"
        )
        self.characters: _EntityTable[CharacterDef] = _EntityTable(
            "characters", "character name"
        )
        self.linked_lists: _EntityTable[LinkedListDef] = _EntityTable(
            "linked-lists", "linked list name"
        )
        self.tags: _EntityTable[TagDefinitionDef] = _EntityTable("tags", "tag name")
        self.chapters: _EntityTable[ChapterDef] = _EntityTable("chapter", "chapter id")
        self.groups: _EntityTable[GroupDef] = _EntityTable("group", "group id")
        self.nodes: _EntityTable[NodeDef] = _EntityTable("node", "node id")

    def add_state(self, state: StateDef, token: Token) -> None:
        self.states.add(state.name, state, token)

    def add_global_var(self, variable: GlobalVariableDef, token: Token) -> None:
        self.global_vars.add(variable.name, variable, token)

    def add_character(self, character: CharacterDef, token: Token) -> None:
        self.characters.add(character.name, character, token)

    def add_linked_list(self, linked_list: LinkedListDef, token: Token) -> None:
        self.linked_lists.add(linked_list.name, linked_list, token)

    def add_tag(self, tag: TagDefinitionDef, token: Token) -> None:
        self.tags.add(tag.name, tag, token)

    def add_chapter(self, chapter: ChapterDef, token: Token) -> None:
        self.chapters.add(chapter.id, chapter, token)

    def add_group(self, group: GroupDef, token: Token) -> None:
        self.groups.add(group.id, group, token)

    def add_node(self, node: NodeDef, token: Token) -> None:
        self.nodes.add(node.id, node, token)

    def build(self) -> StoryData:
        return StoryData(
            states=self.states.freeze(),
            global_vars=self.global_vars.freeze(),
            characters=self.characters.freeze(),
            linked_lists=self.linked_lists.freeze(),
            tags=self.tags.freeze(),
            chapters=self.chapters.freeze(),
            groups=self.groups.freeze(),
            nodes=self.nodes.freeze(),
        )
