"""Top-level story document parser: dispatches sections and assembles StoryData."""
from __future__ import annotations

import logging
from typing import Dict, Type

from storydoc.core.config import DEFAULT_CONFIG, ParserConfig
from storydoc.data.errors import UnknownSectionError
from storydoc.data.lexer import TokenKind, tokenize
from storydoc.data.sections import (
    ChapterSection,
    CharactersSection,
    GlobalsSection,
    GroupSection,
    LinkedListsSection,
    NodeSection,
    StatesSection,
    StoryBuilder,
    TagsSection,
)
from storydoc.data.sections.base import SectionParserBase
from storydoc.data.token_stream import TokenCursor
from storydoc.domain.defs import StoryData

logger = logging.getLogger(__name__)

SECTION_PARSERS: Dict[str, Type[SectionParserBase]] = {
    "states": StatesSection,
    "global-vars": GlobalsSection,
    "global_vars": GlobalsSection,
    "globals": GlobalsSection,
    "characters": CharactersSection,
    "linked-lists": LinkedListsSection,
    "tags": TagsSection,
    "chapter": ChapterSection,
    "group": GroupSection,
    "node": NodeSection,
}


class StoryDocumentParser:
    """Parses one source document; sections may appear in any order.

    Each instance owns its own cursor and builder, so separate documents can
    be parsed concurrently.
    """

    def __init__(self, source: str, config: ParserConfig = DEFAULT_CONFIG) -> None:
        self._cursor = TokenCursor(tokenize(source))
        self._config = config
        self._builder = StoryBuilder()

    def parse(self) -> StoryData:
        cursor = self._cursor
        while not cursor.at_end():
            token = cursor.peek()
            if token.kind is TokenKind.WORD:
                raise UnknownSectionError(
                    token.text, None, "unknown top-level section", token.line, token.column
                )
            if token.kind is not TokenKind.KEYWORD:
                raise cursor.error("a section keyword")
            logger.debug("Parsing %s section at line %d", token.text, token.line)
            parser_cls = SECTION_PARSERS[token.text]
            parser_cls(cursor, self._builder, self._config).parse()
        data = self._builder.build()
        logger.debug(
            "Parsed story document: %d chapters, %d groups, %d nodes",
            len(data.chapters),
            len(data.groups),
            len(data.nodes),
        )
        return data
