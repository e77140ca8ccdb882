"""Base section parser shared by every top-level story section."""
from __future__ import annotations

from storydoc.core.config import DEFAULT_CONFIG, ParserConfig
from storydoc.data.errors import SectionError
from storydoc.data.lexer import Token, TokenKind
from storydoc.data.sections.builder import StoryBuilder
from storydoc.data.token_stream import TokenCursor


class SectionParserBase:
    """Common token helpers for section parsers.

    Subclasses set ``section`` and implement ``parse``, which consumes one
    section starting at its keyword and registers entities on the builder.
    """

    section = "section"

    def __init__(
        self,
        cursor: TokenCursor,
        builder: StoryBuilder,
        config: ParserConfig = DEFAULT_CONFIG,
    ) -> None:
        self._cursor = cursor
        self._builder = builder
        self._config = config

    def parse(self) -> None:
        raise NotImplementedError

    def _error(self, entity: object, message: str, token: Token | None = None) -> SectionError:
        where = token or self._cursor.peek()
        label = None if entity is None else str(entity)
        return SectionError(self.section, label, message, where.line, where.column)

    def _require_string(self, expected: str) -> str:
        return str(self._cursor.expect(TokenKind.STRING, expected).value)

    def _require_name(self, expected: str) -> tuple[str, Token]:
        """Return an entity name written as a string or a bare word."""
        cursor = self._cursor
        token = cursor.peek()
        if token.kind is TokenKind.STRING or cursor.check_word():
            cursor.advance()
            return str(token.value), token
        raise cursor.error(expected)

    def _require_id(self, expected: str) -> tuple[int, Token]:
        token = self._cursor.expect(TokenKind.INT, expected)
        value = int(token.value)  # type: ignore[arg-type]
        if value < 0:
            raise self._error(value, "ids must not be negative", token)
        return value, token

    def _require_id_or_reference(self, kind: str, expected: str) -> int:
        """Return an id written either as a bare integer or as ``@kind(id)``."""
        cursor = self._cursor
        token = cursor.peek()
        if token.kind is TokenKind.REFERENCE and token.value.kind == kind:  # type: ignore[union-attr]
            cursor.advance()
            return token.value.id  # type: ignore[union-attr]
        if token.kind is TokenKind.INT:
            return self._require_id(expected)[0]
        raise cursor.error(expected)

    def _parse_string_list(self, expected: str) -> list[tuple[str, Token]]:
        """Parse ``[ "a", "b" ]`` keeping each entry's token for error positions."""
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACKET, "'['")
        entries: list[tuple[str, Token]] = []
        while not cursor.check(TokenKind.RBRACKET):
            entries.append(self._require_name(expected))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACKET, "']'")
        return entries
