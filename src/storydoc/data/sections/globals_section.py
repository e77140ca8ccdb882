"""Parser for the ``global-vars`` section."""
from __future__ import annotations

from storydoc.core.types import GlobalVarType
from storydoc.data.lexer import Token, TokenKind
from storydoc.data.sections.base import SectionParserBase
from storydoc.data.values import is_literal, parse_typed_value, parse_var_type, zero_value
from storydoc.domain.defs import GlobalVariableDef


class GlobalsSection(SectionParserBase):
    """``global-vars [ "Money": { type: "float" default: 30.0 } ]``

    The default may appear before the type, so it is checked once the whole
    variable body has been read. A missing default becomes the type's zero
    value.
    """

    section = "global-vars"

    def parse(self) -> None:
        cursor = self._cursor
        keyword = cursor.advance()
        cursor.expect(TokenKind.LBRACKET, f"'[' after '{keyword.text}'")
        while not cursor.check(TokenKind.RBRACKET):
            name, token = self._require_name("a variable name")
            cursor.expect(TokenKind.COLON, "':' after variable name")
            self._builder.add_global_var(self._parse_variable(name, token), token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACKET, f"']' to close {keyword.text}")

    def _parse_variable(self, name: str, name_token: Token) -> GlobalVariableDef:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open variable")
        var_type: GlobalVarType | None = None
        default_token: Token | None = None
        while not cursor.check(TokenKind.RBRACE):
            field_token = cursor.peek()
            field = cursor.expect_field("'type' or 'default'")
            if field == "type":
                var_type = parse_var_type(cursor.advance())
            elif field == "default":
                if not is_literal(cursor.peek()):
                    raise cursor.error("a default value")
                default_token = cursor.advance()
            else:
                raise cursor.error("'type' or 'default'", field_token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close variable")

        if var_type is None:
            raise self._error(name, "variable must declare a type", name_token)
        if default_token is None:
            default = zero_value(var_type)
        else:
            default = parse_typed_value(
                default_token,
                var_type,
                section=self.section,
                entity=name,
                allow_int_for_float=self._config.allow_int_for_float,
            )
        return GlobalVariableDef(name=name, type=var_type, default=default)
