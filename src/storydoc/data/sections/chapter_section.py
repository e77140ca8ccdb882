"""Parser for ``chapter`` blocks."""
from __future__ import annotations

from storydoc.data.lexer import TokenKind
from storydoc.data.sections.base import SectionParserBase
from storydoc.domain.defs import ChapterDef


class ChapterSection(SectionParserBase):
    """``chapter 1 { name: "Introduction" }``"""

    section = "chapter"

    def parse(self) -> None:
        cursor = self._cursor
        cursor.advance()
        chapter_id, token = self._require_id("chapter number")
        cursor.expect(TokenKind.LBRACE, "'{' after chapter number")
        name: str | None = None
        while not cursor.check(TokenKind.RBRACE):
            field_token = cursor.peek()
            field = cursor.expect_field("'name'")
            if field != "name":
                raise cursor.error("'name'", field_token)
            name = self._require_string("chapter name")
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close chapter")
        self._builder.add_chapter(ChapterDef(id=chapter_id, name=name), token)
