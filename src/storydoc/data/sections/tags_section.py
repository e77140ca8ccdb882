"""Parser for the ``tags`` section."""
from __future__ import annotations

from storydoc.core.types import TagType
from storydoc.data.lexer import Token, TokenKind
from storydoc.data.sections.base import SectionParserBase
from storydoc.domain.defs import TagDefinitionDef

_TAG_TYPES: dict[str, TagType] = {
    "single": "single",
    "key-value": "keyvalue",
    "keyvalue": "keyvalue",
}


class TagsSection(SectionParserBase):
    """``tags [ "Location": { type: "key-value" color: "#0f6" keys: [ ... ] } ]``"""

    section = "tags"

    def parse(self) -> None:
        cursor = self._cursor
        cursor.advance()
        cursor.expect(TokenKind.LBRACKET, "'[' after 'tags'")
        while not cursor.check(TokenKind.RBRACKET):
            name, token = self._require_name("a tag name")
            cursor.expect(TokenKind.COLON, "':' after tag name")
            self._builder.add_tag(self._parse_tag(name, token), token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACKET, "']' to close tags")

    def _parse_tag(self, name: str, name_token: Token) -> TagDefinitionDef:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open tag")
        tag_type: TagType = "single"
        color: str | None = None
        keys: list[str] = []
        while not cursor.check(TokenKind.RBRACE):
            field_token = cursor.peek()
            field = cursor.expect_field("'type', 'color' or 'keys'")
            if field == "type":
                type_token = cursor.peek()
                raw_type, _ = self._require_name("a tag type")
                if raw_type not in _TAG_TYPES:
                    raise self._error(
                        name, f"unknown tag type {raw_type!r} (use single or key-value)", type_token
                    )
                tag_type = _TAG_TYPES[raw_type]
            elif field == "color":
                color = self._require_string("a color")
            elif field == "keys":
                for key, key_token in self._parse_string_list("a tag key"):
                    if key in keys:
                        raise self._error(name, f"duplicate key {key!r}", key_token)
                    keys.append(key)
            else:
                raise cursor.error("'type', 'color' or 'keys'", field_token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close tag")

        if tag_type == "keyvalue" and not keys:
            raise self._error(name, "key-value tags must declare at least one key", name_token)
        if tag_type == "single" and keys:
            raise self._error(name, "single tags must not declare keys", name_token)
        return TagDefinitionDef(name=name, type=tag_type, color=color, keys=tuple(keys))
