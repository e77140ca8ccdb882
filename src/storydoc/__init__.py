"""Parser and reference validator for story documents (``.sdc``)."""
from __future__ import annotations

from storydoc.core.config import ParserConfig, load_config
from storydoc.data import (
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
    parse,
    parse_file,
)
from storydoc.domain.defs import StoryData
from storydoc.services import (
    ReferenceViolation,
    ensure_valid,
    format_violation,
    is_valid,
    validate_references,
)

__version__ = "0.3.0"

__all__ = [
    "DuplicateIdError",
    "LexError",
    "ParseError",
    "ParserConfig",
    "ReferenceViolation",
    "SectionError",
    "StoryData",
    "StoryDocError",
    "StoryLoadError",
    "StoryReferenceError",
    "StorySyntaxError",
    "TypeMismatchError",
    "UnknownSectionError",
    "ensure_valid",
    "format_violation",
    "is_valid",
    "load_config",
    "parse",
    "parse_file",
    "validate_references",
]
