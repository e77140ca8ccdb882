"""Parser for ``node`` blocks."""
from __future__ import annotations

from typing import Tuple

from storydoc.data.lexer import TokenKind
from storydoc.data.sections.base import SectionParserBase
from storydoc.data.timeline_parser import TimelineParser
from storydoc.domain.defs import NodeDef, TimelineItemDef


class NodeSection(SectionParserBase):
    """``node 1 { title: "..." content: "..." timeline: { ... } }``"""

    section = "node"

    def parse(self) -> None:
        cursor = self._cursor
        cursor.advance()
        node_id, token = self._require_id("node number")
        cursor.expect(TokenKind.LBRACE, "'{' after node number")
        title: str | None = None
        content: str | None = None
        timeline: Tuple[TimelineItemDef, ...] = ()
        while not cursor.check(TokenKind.RBRACE):
            field_token = cursor.peek()
            field = cursor.expect_field("'title', 'content' or 'timeline'")
            if field == "title":
                title = self._require_string("node title")
            elif field == "content":
                content = self._require_string("node content")
            elif field == "timeline":
                timeline = TimelineParser(cursor, self._config).parse_timeline()
            else:
                raise cursor.error("'title', 'content' or 'timeline'", field_token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close node")
        self._builder.add_node(
            NodeDef(id=node_id, title=title, content=content, timeline=timeline), token
        )
