"""Tokenizer for story document source text."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storydoc.core.types import REFERENCE_KINDS, ReferenceKind
from storydoc.data.errors import LexError


class TokenKind(str, Enum):
    WORD = "word"
    KEYWORD = "keyword"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    CODE = "code"
    REFERENCE = "reference"
    LBRACE = "'{'"
    RBRACE = "'}'"
    LBRACKET = "'['"
    RBRACKET = "']'"
    COLON = "':'"
    COMMA = "','"
    EOF = "end of input"


SECTION_KEYWORDS = frozenset(
    {
        "states",
        "global-vars",
        "global_vars",
        "globals",
        "characters",
        "linked-lists",
        "tags",
        "chapter",
        "group",
        "node",
    }
)

_PUNCTUATION = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
}

_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r"}


@dataclass(frozen=True, slots=True)
class Reference:
    """Symbolic ``@kind(id)`` pointer as written in the source."""

    kind: ReferenceKind
    id: int


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    value: object
    line: int
    column: int

    def describe(self) -> str:
        """Human-readable form used in syntax errors."""
        if self.kind is TokenKind.EOF:
            return "end of input"
        if self.kind is TokenKind.CODE:
            return "code block"
        return f"{self.kind.name.lower()} {self.text!r}"


def _is_word_start(char: str) -> bool:
    return char.isalpha() or char == "_"


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char in "_-"


class Lexer:
    """Turns source text into a list of tokens ending with ``EOF``."""

    def __init__(self, source: str) -> None:
        self._source = source.replace("\r\n", "\n").replace("\r", "\n")
        self._pos = 0
        self._line = 1
        self._line_start = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            self._skip_trivia()
            if self._at_end():
                tokens.append(Token(TokenKind.EOF, "", None, self._line, self._column()))
                return tokens
            tokens.append(self._next_token())

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _peek(self, offset: int = 0) -> str:
        index = self._pos + offset
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _column(self) -> int:
        return self._pos - self._line_start + 1

    def _advance(self) -> str:
        char = self._source[self._pos]
        self._pos += 1
        if char == "\n":
            self._line += 1
            self._line_start = self._pos
        return char

    def _skip_trivia(self) -> None:
        while not self._at_end():
            char = self._peek()
            if char in " \t\n\f\v":
                self._advance()
            elif char == "#":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
            else:
                return

    def _next_token(self) -> Token:
        line, column, start = self._line, self._column(), self._pos
        char = self._peek()
        if char in _PUNCTUATION:
            self._advance()
            return Token(_PUNCTUATION[char], char, None, line, column)
        if char == '"':
            return self._scan_string(line, column)
        if char == "<" and self._peek(1) == "!":
            return self._scan_code_block(line, column)
        if char == "@":
            return self._scan_reference(line, column)
        if char.isdigit() or (char == "-" and self._peek(1).isdigit()):
            return self._scan_number(line, column)
        if _is_word_start(char):
            return self._scan_word(line, column)
        raise LexError("unexpected character", line, column, self._source[start : start + 1])

    def _scan_string(self, line: int, column: int) -> Token:
        start = self._pos
        self._advance()
        chars: list[str] = []
        while True:
            if self._at_end():
                raise LexError("unterminated string", line, column, self._source[start:start + 20])
            char = self._advance()
            if char == '"':
                break
            if char == "\\":
                if self._at_end():
                    raise LexError("unterminated string", line, column, self._source[start:start + 20])
                escape_line, escape_column = self._line, self._column()
                escaped = self._advance()
                if escaped not in _ESCAPES:
                    raise LexError(
                        "unknown escape sequence", escape_line, escape_column - 1, "\\" + escaped
                    )
                chars.append(_ESCAPES[escaped])
                continue
            chars.append(char)
        return Token(TokenKind.STRING, self._source[start : self._pos], "".join(chars), line, column)

    def _scan_code_block(self, line: int, column: int) -> Token:
        start = self._pos
        self._advance()
        self._advance()
        body_start = self._pos
        while not (self._peek() == "!" and self._peek(1) == ">"):
            if self._at_end():
                raise LexError("unterminated code block", line, column, "<!")
            self._advance()
        code = self._source[body_start : self._pos]
        self._advance()
        self._advance()
        return Token(TokenKind.CODE, self._source[start : self._pos], code, line, column)

    def _scan_reference(self, line: int, column: int) -> Token:
        start = self._pos
        self._advance()
        kind_start = self._pos
        while _is_word_char(self._peek()):
            self._advance()
        kind = self._source[kind_start : self._pos]
        if kind not in REFERENCE_KINDS:
            raise LexError(
                f"unknown reference kind (expected one of {', '.join(REFERENCE_KINDS)})",
                line,
                column,
                self._source[start : self._pos] or "@",
            )
        opener = self._peek()
        if opener not in "(:":
            raise LexError("malformed reference", line, column, self._source[start : self._pos + 1])
        self._advance()
        digits_start = self._pos
        while self._peek().isdigit():
            self._advance()
        digits = self._source[digits_start : self._pos]
        if not digits:
            raise LexError("reference id must be an integer", line, column, self._source[start : self._pos + 1])
        if opener == "(":
            if self._peek() != ")":
                raise LexError("expected ')' to close reference", line, column, self._source[start : self._pos + 1])
            self._advance()
        elif _is_word_char(self._peek()):
            raise LexError("reference id must be an integer", line, column, self._source[start : self._pos + 1])
        text = self._source[start : self._pos]
        reference = Reference(kind, int(digits))  # type: ignore[arg-type]
        return Token(TokenKind.REFERENCE, text, reference, line, column)

    def _scan_number(self, line: int, column: int) -> Token:
        start = self._pos
        if self._peek() == "-":
            self._advance()
        while self._peek().isdigit():
            self._advance()
        is_float = False
        if self._peek() == "." and self._peek(1).isdigit():
            is_float = True
            self._advance()
            while self._peek().isdigit():
                self._advance()
        if self._peek() in "eE" and (
            self._peek(1).isdigit() or (self._peek(1) in "+-" and self._peek(2).isdigit())
        ):
            is_float = True
            self._advance()
            if self._peek() in "+-":
                self._advance()
            while self._peek().isdigit():
                self._advance()
        if _is_word_char(self._peek()) or self._peek() == ".":
            while _is_word_char(self._peek()) or self._peek() == ".":
                self._advance()
            raise LexError("malformed number", line, column, self._source[start : self._pos])
        text = self._source[start : self._pos]
        if is_float:
            return Token(TokenKind.FLOAT, text, float(text), line, column)
        return Token(TokenKind.INT, text, int(text), line, column)

    def _scan_word(self, line: int, column: int) -> Token:
        start = self._pos
        while _is_word_char(self._peek()):
            self._advance()
        text = self._source[start : self._pos]
        if text in ("true", "false"):
            return Token(TokenKind.BOOL, text, text == "true", line, column)
        kind = TokenKind.KEYWORD if text in SECTION_KEYWORDS else TokenKind.WORD
        return Token(kind, text, text, line, column)


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source``; each call starts from the beginning."""
    return Lexer(source).tokenize()
