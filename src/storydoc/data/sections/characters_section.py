"""Parser for the ``characters`` section."""
from __future__ import annotations

from typing import List, Tuple

from storydoc.core.types import ScalarValue
from storydoc.data.lexer import TokenKind
from storydoc.data.sections.base import SectionParserBase
from storydoc.data.values import is_literal, parse_inferred_value
from storydoc.domain.defs import CharacterDef, LinkedListDataDef, LinkedListRecordDef

_CHARACTER_FIELDS = "'biography', 'description' or 'linked-list-data'"


class CharactersSection(SectionParserBase):
    """``characters [ "Saniyah": { biography: "..." linked-list-data: { Stats: { Health: 125 } } } ]``

    A linked list's data is either one ``{ field: value }`` record or a
    ``[ "label": { ... } ]`` sequence of records.
    """

    section = "characters"

    def parse(self) -> None:
        cursor = self._cursor
        cursor.advance()
        cursor.expect(TokenKind.LBRACKET, "'[' after 'characters'")
        while not cursor.check(TokenKind.RBRACKET):
            name, token = self._require_name("a character name")
            texts = {"biography": "", "description": ""}
            linked_list_data: Tuple[LinkedListDataDef, ...] = ()
            if cursor.match(TokenKind.COLON):
                cursor.expect(TokenKind.LBRACE, "'{' to open character")
                while not cursor.check(TokenKind.RBRACE):
                    field_token = cursor.peek()
                    field = cursor.expect_field(_CHARACTER_FIELDS)
                    if field in texts:
                        texts[field] = self._require_string(f"{field} text")
                    elif field == "linked-list-data":
                        linked_list_data = self._parse_linked_list_data(name)
                    else:
                        raise cursor.error(_CHARACTER_FIELDS, field_token)
                    cursor.skip_commas()
                cursor.expect(TokenKind.RBRACE, "'}' to close character")
            self._builder.add_character(
                CharacterDef(
                    name=name,
                    biography=texts["biography"],
                    description=texts["description"],
                    linked_list_data=linked_list_data,
                ),
                token,
            )
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACKET, "']' to close characters")

    def _parse_linked_list_data(self, character: str) -> Tuple[LinkedListDataDef, ...]:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open linked-list-data")
        entries: List[LinkedListDataDef] = []
        seen: set[str] = set()
        while not cursor.check(TokenKind.RBRACE):
            list_name, token = self._require_name("a linked list name")
            if list_name in seen:
                raise self._error(character, f"linked list {list_name!r} given twice", token)
            seen.add(list_name)
            cursor.expect(TokenKind.COLON, "':' after linked list name")
            if cursor.check(TokenKind.LBRACKET):
                cursor.advance()
                records: List[LinkedListRecordDef] = []
                while not cursor.check(TokenKind.RBRACKET):
                    label, _ = self._require_name("a record label")
                    cursor.expect(TokenKind.COLON, "':' after record label")
                    records.append(
                        LinkedListRecordDef(values=self._parse_record(character), label=label)
                    )
                    cursor.skip_commas()
                cursor.expect(TokenKind.RBRACKET, "']' to close linked list records")
                entries.append(
                    LinkedListDataDef(list_name=list_name, records=tuple(records), is_sequence=True)
                )
            else:
                record = LinkedListRecordDef(values=self._parse_record(character))
                entries.append(LinkedListDataDef(list_name=list_name, records=(record,)))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close linked-list-data")
        return tuple(entries)

    def _parse_record(self, character: str) -> Tuple[Tuple[str, ScalarValue], ...]:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open a linked list record")
        values: List[Tuple[str, ScalarValue]] = []
        while not cursor.check(TokenKind.RBRACE):
            key, token = self._require_name("a record field name")
            if any(existing == key for existing, _ in values):
                raise self._error(character, f"record field {key!r} given twice", token)
            cursor.expect(TokenKind.COLON, "':' after record field name")
            if not is_literal(cursor.peek()):
                raise cursor.error("a literal value")
            values.append((key, parse_inferred_value(cursor.advance())))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close linked list record")
        return tuple(values)
