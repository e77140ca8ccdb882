"""Custom exceptions for loading, parsing and validating story documents."""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from storydoc.services.reference_validator import ReferenceViolation


class StoryDocError(Exception):
    """Base exception for the story document layer."""


class StoryLoadError(StoryDocError):
    """Raised when a story file cannot be read from disk."""


class ParseError(StoryDocError):
    """Raised when source text is not a well-formed story document."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self._render())

    def _render(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}, column {self.column}: {self.message}"


class LexError(ParseError):
    """Raised on a character sequence the lexer does not recognize."""

    def __init__(self, message: str, line: int, column: int, text: str) -> None:
        self.text = text
        super().__init__(f"{message} (got {text!r})", line, column)


class StorySyntaxError(ParseError):
    """Raised when a token is present but not valid in its position."""

    def __init__(
        self,
        expected: str,
        found: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"expected {expected}, found {found}", line, column)


class SectionError(ParseError):
    """Raised when a section's own entity invariants are violated."""

    def __init__(
        self,
        section: str,
        entity: str | None,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.section = section
        self.entity = entity
        where = f"{section} '{entity}'" if entity is not None else section
        super().__init__(f"{where}: {message}", line, column)


class TypeMismatchError(SectionError):
    """Raised when a literal does not match the declared variable type."""


class DuplicateIdError(SectionError):
    """Raised when two entities of the same kind share an id or name."""


class UnknownSectionError(SectionError):
    """Raised for a top-level section name the parser does not know."""


class StoryReferenceError(StoryDocError):
    """Raised by ``ensure_valid`` when references fail to resolve."""

    def __init__(self, violations: Sequence["ReferenceViolation"]) -> None:
        self.violations = tuple(violations)
        super().__init__(f"{len(self.violations)} unresolved reference(s) in story document.")
