"""Cursor over a token list with the expect/match helpers parsers share."""
from __future__ import annotations

from typing import Sequence

from storydoc.data.errors import StorySyntaxError
from storydoc.data.lexer import Token, TokenKind

_WORD_KINDS = (TokenKind.WORD, TokenKind.KEYWORD)


class TokenCursor:
    """Forward-only position over a lexed token sequence."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            raise ValueError("token sequence must end with EOF")
        self._tokens = tokens
        self._index = 0

    def peek(self, offset: int = 0) -> Token:
        index = min(self._index + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def advance(self) -> Token:
        token = self._tokens[self._index]
        if token.kind is not TokenKind.EOF:
            self._index += 1
        return token

    def at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF

    def check(self, kind: TokenKind) -> bool:
        return self.peek().kind is kind

    def check_word(self, text: str | None = None) -> bool:
        token = self.peek()
        if token.kind not in _WORD_KINDS:
            return False
        return text is None or token.text == text

    def match(self, kind: TokenKind) -> bool:
        if self.check(kind):
            self.advance()
            return True
        return False

    def skip_commas(self) -> None:
        while self.match(TokenKind.COMMA):
            pass

    def expect(self, kind: TokenKind, expected: str | None = None) -> Token:
        if self.check(kind):
            return self.advance()
        raise self.error(expected or kind.value)

    def expect_word(self, expected: str = "a name") -> Token:
        if self.check_word():
            return self.advance()
        raise self.error(expected)

    def expect_field(self, expected: str = "a field name") -> str:
        """Consume ``name :`` and return the field name."""
        name = self.expect_word(expected).text
        self.expect(TokenKind.COLON, f"':' after '{name}'")
        return name

    def error(self, expected: str, token: Token | None = None) -> StorySyntaxError:
        found = token or self.peek()
        return StorySyntaxError(expected, found.describe(), found.line, found.column)
