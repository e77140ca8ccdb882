"""Parser for the ``linked-lists`` section."""
from __future__ import annotations

from typing import List

from storydoc.data.lexer import Token, TokenKind
from storydoc.data.sections.base import SectionParserBase
from storydoc.domain.defs import LinkedListDef, LinkedListFieldDef


class LinkedListsSection(SectionParserBase):
    """``linked-lists [ "Stats": { scope: "character" structure: { Health: { type: "integer" } } } ]``

    Field types are kept as written; linked-list values are not checked
    against them.
    """

    section = "linked-lists"

    def parse(self) -> None:
        cursor = self._cursor
        cursor.advance()
        cursor.expect(TokenKind.LBRACKET, "'[' after 'linked-lists'")
        while not cursor.check(TokenKind.RBRACKET):
            name, token = self._require_name("a linked list name")
            cursor.expect(TokenKind.COLON, "':' after linked list name")
            self._builder.add_linked_list(self._parse_linked_list(name), token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACKET, "']' to close linked-lists")

    def _parse_linked_list(self, name: str) -> LinkedListDef:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open linked list")
        scope: str | None = None
        fields: List[LinkedListFieldDef] = []
        while not cursor.check(TokenKind.RBRACE):
            field_token = cursor.peek()
            field = cursor.expect_field("'scope' or 'structure'")
            if field == "scope":
                scope, _ = self._require_name("a linked list scope")
            elif field == "structure":
                fields = self._parse_structure(name)
            else:
                raise cursor.error("'scope' or 'structure'", field_token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close linked list")
        return LinkedListDef(name=name, scope=scope, fields=tuple(fields))

    def _parse_structure(self, list_name: str) -> List[LinkedListFieldDef]:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open structure")
        fields: List[LinkedListFieldDef] = []
        seen: dict[str, Token] = {}
        while not cursor.check(TokenKind.RBRACE):
            field_name, token = self._require_name("a structure field name")
            if field_name in seen:
                raise self._error(
                    list_name,
                    f"duplicate structure field {field_name!r} "
                    f"(first declared at line {seen[field_name].line})",
                    token,
                )
            seen[field_name] = token
            cursor.expect(TokenKind.COLON, "':' after structure field name")
            cursor.expect(TokenKind.LBRACE, "'{' to open structure field")
            field_type: str | None = None
            while not cursor.check(TokenKind.RBRACE):
                key_token = cursor.peek()
                if cursor.expect_field("'type'") != "type":
                    raise cursor.error("'type'", key_token)
                field_type, _ = self._require_name("a field type")
                cursor.skip_commas()
            cursor.expect(TokenKind.RBRACE, "'}' to close structure field")
            fields.append(LinkedListFieldDef(name=field_name, type=field_type))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close structure")
        return fields
