"""Data layer: lexing and parsing story documents."""

from .errors import (
    DuplicateIdError,
    LexError,
    ParseError,
    SectionError,
    StoryDocError,
    StoryLoadError,
    StoryReferenceError,
    StorySyntaxError,
    TypeMismatchError,
    UnknownSectionError,
)
from .loader import parse, parse_file, read_story_text

__all__ = [
    "DuplicateIdError",
    "LexError",
    "ParseError",
    "SectionError",
    "StoryDocError",
    "StoryLoadError",
    "StoryReferenceError",
    "StorySyntaxError",
    "TypeMismatchError",
    "UnknownSectionError",
    "parse",
    "parse_file",
    "read_story_text",
]
