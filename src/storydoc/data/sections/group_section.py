"""Parser for ``group`` blocks, including their tags and node graph."""
from __future__ import annotations

from typing import List, Tuple

from storydoc.data.lexer import TokenKind
from storydoc.data.sections.base import SectionParserBase
from storydoc.domain.defs import GroupDef, GroupTagDef, NodeGraphDef, PointDef

_GROUP_FIELDS = (
    "'chapter', 'name', 'content', 'parent-group', 'tags', 'nodes' or 'linked-lists'"
)


class GroupSection(SectionParserBase):
    """``group 1 { chapter: 1 name: "..." tags: [...] nodes: { start: 1 end: 3 points: {...} } }``

    Tag names and node ids are kept as written; whether they resolve is the
    reference validator's concern.
    """

    section = "group"

    def parse(self) -> None:
        cursor = self._cursor
        cursor.advance()
        group_id, token = self._require_id("group number")
        cursor.expect(TokenKind.LBRACE, "'{' after group number")
        chapter_id: int | None = None
        parent_group_id: int | None = None
        name: str | None = None
        content: str | None = None
        tags: Tuple[GroupTagDef, ...] = ()
        graph = NodeGraphDef()
        linked_lists: Tuple[str, ...] = ()
        while not cursor.check(TokenKind.RBRACE):
            field_token = cursor.peek()
            field = cursor.expect_field(_GROUP_FIELDS)
            if field == "chapter":
                chapter_id = self._require_id_or_reference("chapter", "a chapter id")
            elif field == "parent-group":
                parent_group_id = self._require_id_or_reference("group", "a group id")
            elif field == "name":
                name = self._require_string("group name")
            elif field == "content":
                content = self._require_string("group content")
            elif field == "tags":
                tags = self._parse_group_tags(group_id)
            elif field == "nodes":
                graph = self._parse_node_graph()
            elif field == "linked-lists":
                linked_lists = tuple(
                    list_name for list_name, _ in self._parse_string_list("a linked list name")
                )
            else:
                raise cursor.error(_GROUP_FIELDS, field_token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close group")
        self._builder.add_group(
            GroupDef(
                id=group_id,
                chapter_id=chapter_id,
                name=name,
                content=content,
                tags=tags,
                graph=graph,
                parent_group_id=parent_group_id,
                linked_lists=linked_lists,
            ),
            token,
        )

    def _parse_group_tags(self, group_id: int) -> Tuple[GroupTagDef, ...]:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACKET, "'[' to open group tags")
        tags: List[GroupTagDef] = []
        while not cursor.check(TokenKind.RBRACKET):
            tag_name, _ = self._require_name("a tag name")
            selected_key: str | None = None
            value: str | None = None
            if cursor.match(TokenKind.COLON):
                cursor.expect(TokenKind.LBRACE, "'{' to select a tag key")
                while not cursor.check(TokenKind.RBRACE):
                    key_token = cursor.peek()
                    key, _ = self._require_name("a tag key")
                    if selected_key is not None:
                        raise self._error(
                            group_id, f"tag {tag_name!r} selects more than one key", key_token
                        )
                    selected_key = key
                    if cursor.match(TokenKind.COLON):
                        value = self._require_string("a tag value")
                    cursor.skip_commas()
                cursor.expect(TokenKind.RBRACE, "'}' to close tag key")
            tags.append(GroupTagDef(tag_name=tag_name, selected_key=selected_key, value=value))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACKET, "']' to close group tags")
        return tuple(tags)

    def _parse_node_graph(self) -> NodeGraphDef:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open node graph")
        start_node: int | None = None
        end_node: int | None = None
        points: Tuple[PointDef, ...] = ()
        while not cursor.check(TokenKind.RBRACE):
            field_token = cursor.peek()
            field = cursor.expect_field("'start', 'end' or 'points'")
            if field == "start":
                start_node = self._require_id_or_reference("node", "a start node id")
            elif field == "end":
                end_node = self._require_id_or_reference("node", "an end node id")
            elif field == "points":
                points = self._parse_points()
            else:
                raise cursor.error("'start', 'end' or 'points'", field_token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close node graph")
        return NodeGraphDef(start_node=start_node, end_node=end_node, points=points)

    def _parse_points(self) -> Tuple[PointDef, ...]:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open points")
        points: List[PointDef] = []
        while not cursor.check(TokenKind.RBRACE):
            source = self._require_id_or_reference("node", "a source node id")
            cursor.expect(TokenKind.COLON, "':' after point source")
            cursor.expect(TokenKind.LBRACKET, "'[' to open point destinations")
            destinations: List[int] = []
            while not cursor.check(TokenKind.RBRACKET):
                destinations.append(
                    self._require_id_or_reference("node", "a destination node id")
                )
                cursor.skip_commas()
            cursor.expect(TokenKind.RBRACKET, "']' to close point destinations")
            points.append(PointDef(source=source, destinations=tuple(destinations)))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close points")
        return tuple(points)
