"""Parser for node timelines, choice bodies and event payloads."""
from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from storydoc.core.config import DEFAULT_CONFIG, ParserConfig
from storydoc.core.types import ScalarValue
from storydoc.data.errors import StorySyntaxError
from storydoc.data.lexer import Reference, Token, TokenKind
from storydoc.data.token_stream import TokenCursor
from storydoc.data.values import parse_inferred_value
from storydoc.domain.defs import (
    ActionDef,
    AddStateEvent,
    AdjustVariableEvent,
    ChoiceAction,
    ChoiceOptionDef,
    CodeAction,
    DialogueDef,
    DialogueLineDef,
    EnterAction,
    EventAction,
    EventDef,
    ExitAction,
    ExitCurrentGroupEvent,
    ExitCurrentNodeEvent,
    GotoAction,
    LinkedListEvent,
    LinkedListModificationDef,
    NextNodeEvent,
    ProgressStoryEvent,
    RemoveStateEvent,
    TimelineItemDef,
    UnknownEvent,
)

logger = logging.getLogger(__name__)

ACTION_TYPES = ("code", "goto", "exit", "enter", "choice", "event")

# Fields each event type accepts besides ``type``.
_EVENT_FIELDS: Dict[str, frozenset[str]] = {
    "next-node": frozenset(),
    "exit-current-node": frozenset(),
    "exit-current-group": frozenset(),
    "adjust-variable": frozenset({"name", "increment", "value", "toggle"}),
    "add-state": frozenset({"name", "character"}),
    "remove-state": frozenset({"name", "character"}),
    "progress-story": frozenset({"chapter", "group", "node"}),
    "linked-list": frozenset({"reference", "values"}),
}
_ALL_EVENT_FIELDS = frozenset().union(*_EVENT_FIELDS.values())

# Field without which an event of that type is malformed.
_REQUIRED_EVENT_FIELDS: Dict[str, str] = {
    "adjust-variable": "name",
    "add-state": "name",
    "remove-state": "name",
    "linked-list": "reference",
}

_MODIFICATION_FIELDS = "'amount', 'set', 'append', 'replace' or 'toggle'"


class TimelineParser:
    """Parses ``timeline: { ... }`` bodies into ordered timeline items.

    Choice options are parsed by the same parser one level deeper; nesting
    beyond ``config.max_choice_depth`` is rejected so deeply nested documents
    cannot exhaust the interpreter stack.
    """

    def __init__(self, cursor: TokenCursor, config: ParserConfig = DEFAULT_CONFIG) -> None:
        self._cursor = cursor
        self._config = config

    def parse_timeline(self) -> Tuple[TimelineItemDef, ...]:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACE, "'{' to open timeline")
        items: List[TimelineItemDef] = []
        while not cursor.check(TokenKind.RBRACE):
            if cursor.check_word("dialogue"):
                items.append(self._parse_dialogue())
            elif cursor.check_word("action"):
                items.append(self._parse_action(depth=0))
            else:
                raise cursor.error("'dialogue' or 'action'")
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close timeline")
        return tuple(items)

    def _parse_actions(self, depth: int) -> Tuple[ActionDef, ...]:
        cursor = self._cursor
        open_token = cursor.expect(TokenKind.LBRACE, "'{' to open choice body")
        if depth > self._config.max_choice_depth:
            raise StorySyntaxError(
                f"choice nesting of at most {self._config.max_choice_depth} levels",
                f"nesting depth {depth}",
                open_token.line,
                open_token.column,
            )
        actions: List[ActionDef] = []
        while not cursor.check(TokenKind.RBRACE):
            if not cursor.check_word("action"):
                raise cursor.error("'action' inside choice body")
            actions.append(self._parse_action(depth))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close choice body")
        return tuple(actions)

    def _parse_number(self, item_kind: str) -> int:
        token = self._cursor.expect(TokenKind.INT, f"{item_kind} number")
        return int(token.value)  # type: ignore[arg-type]

    def _parse_dialogue(self) -> DialogueDef:
        cursor = self._cursor
        cursor.advance()
        number = self._parse_number("dialogue")
        cursor.expect(TokenKind.LBRACE, "'{' after dialogue number")
        lines: List[DialogueLineDef] = []
        while not cursor.check(TokenKind.RBRACE):
            if cursor.check_word() or cursor.check(TokenKind.STRING):
                character = cursor.advance()
            else:
                raise cursor.error("a character name")
            cursor.expect(TokenKind.COLON, "':' after character name")
            text = cursor.expect(TokenKind.STRING, "dialogue text")
            lines.append(DialogueLineDef(character=str(character.value), text=str(text.value)))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close dialogue")
        return DialogueDef(number=number, lines=tuple(lines))

    def _parse_action(self, depth: int) -> ActionDef:
        cursor = self._cursor
        action_token = cursor.advance()
        number = self._parse_number("action")
        cursor.expect(TokenKind.LBRACE, "'{' after action number")

        declared: str | None = None
        payloads: Dict[str, object] = {}
        while not cursor.check(TokenKind.RBRACE):
            if cursor.check(TokenKind.CODE):
                payloads["code"] = cursor.advance().value
                cursor.skip_commas()
                continue
            field_token = cursor.peek()
            field = cursor.expect_field("an action field")
            if field == "type":
                declared = self._parse_action_type()
            elif field == "code":
                payloads["code"] = cursor.expect(TokenKind.CODE, "a code block").value
            elif field == "goto":
                payloads["goto"] = self._parse_reference("node").id
            elif field == "enter":
                payloads["enter"] = self._parse_reference("group").id
            elif field == "exit":
                payloads["exit"] = self._parse_text("an exit target")
            elif field == "choices":
                payloads["choice"] = self._parse_choices(depth + 1)
            elif field == "data":
                payloads["event"] = self._parse_event_data()
            else:
                raise cursor.error("an action field", field_token)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close action")
        return self._build_action(number, declared, payloads, action_token)

    def _parse_action_type(self) -> str:
        token = self._cursor.advance()
        if token.kind in (TokenKind.STRING, TokenKind.WORD) and token.value in ACTION_TYPES:
            return str(token.value)
        raise self._cursor.error("an action type (" + ", ".join(ACTION_TYPES) + ")", token)

    def _build_action(
        self, number: int, declared: str | None, payloads: Dict[str, object], token: Token
    ) -> ActionDef:
        if len(payloads) > 1:
            raise StorySyntaxError(
                "a single action payload",
                ", ".join(sorted(payloads)),
                token.line,
                token.column,
            )
        kind = next(iter(payloads), None)
        if kind is not None and declared is not None and declared != kind:
            # ``type: "event"`` with a goto/enter/exit field is the authored
            # form for navigation events.
            if not (declared == "event" and kind in ("goto", "enter", "exit")):
                raise StorySyntaxError(
                    f"a payload for a {declared!r} action", f"{kind!r} payload", token.line, token.column
                )
        kind = kind or declared
        if kind is None:
            raise StorySyntaxError("an action type", "an empty action", token.line, token.column)
        if kind == "code":
            return CodeAction(number=number, code=str(payloads.get("code", "")))
        if kind == "choice":
            options = payloads.get("choice", ())
            return ChoiceAction(number=number, options=options)  # type: ignore[arg-type]
        if kind == "event":
            event = payloads.get("event", UnknownEvent())
            return EventAction(number=number, event=event)  # type: ignore[arg-type]
        if kind not in payloads:
            raise StorySyntaxError(f"a '{kind}' target", "none", token.line, token.column)
        if kind == "goto":
            return GotoAction(number=number, target_node=payloads["goto"])  # type: ignore[arg-type]
        if kind == "enter":
            return EnterAction(number=number, target_group=payloads["enter"])  # type: ignore[arg-type]
        return ExitAction(number=number, target=str(payloads["exit"]))

    def _parse_choices(self, depth: int) -> Tuple[ChoiceOptionDef, ...]:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACKET, "'[' to open choices")
        options: List[ChoiceOptionDef] = []
        while not cursor.check(TokenKind.RBRACKET):
            option_token = cursor.expect(TokenKind.LBRACE, "'{' to open a choice option")
            text: str | None = None
            actions: Tuple[ActionDef, ...] = ()
            while not cursor.check(TokenKind.RBRACE):
                field_token = cursor.peek()
                field = cursor.expect_field("'text' or 'choice'")
                if field == "text":
                    text = str(cursor.expect(TokenKind.STRING, "choice text").value)
                elif field == "choice":
                    actions = self._parse_actions(depth)
                else:
                    raise cursor.error("'text' or 'choice'", field_token)
                cursor.skip_commas()
            cursor.expect(TokenKind.RBRACE, "'}' to close choice option")
            if text is None:
                raise StorySyntaxError(
                    "choice option text", "an option without text", option_token.line, option_token.column
                )
            options.append(ChoiceOptionDef(text=text, actions=actions))
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACKET, "']' to close choices")
        return tuple(options)

    def _parse_event_data(self) -> EventDef:
        cursor = self._cursor
        open_token = cursor.expect(TokenKind.LBRACE, "'{' to open event data")
        event_type: str | None = None
        fields: Dict[str, object] = {}
        field_tokens: Dict[str, Token] = {}
        while not cursor.check(TokenKind.RBRACE):
            field_token = cursor.peek()
            field = cursor.expect_field("an event field")
            if field == "type":
                event_type = self._parse_text("an event type")
            elif field in ("name", "character", "reference"):
                fields[field] = self._parse_text(f"a {field}")
            elif field == "increment":
                fields[field] = self._parse_increment()
            elif field == "value":
                fields[field] = parse_inferred_value(cursor.advance())
            elif field == "toggle":
                fields[field] = self._parse_toggle()
            elif field in ("chapter", "group", "node"):
                fields[field] = self._parse_progress_target(field)
            elif field == "values":
                fields[field] = self._parse_modifications()
            else:
                raise cursor.error("an event field", field_token)
            field_tokens[field] = field_token
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACE, "'}' to close event data")

        allowed = _EVENT_FIELDS.get(event_type or "", _ALL_EVENT_FIELDS)
        for field, token in field_tokens.items():
            if field not in allowed:
                raise StorySyntaxError(
                    f"a field valid for a {event_type or 'untyped'} event",
                    f"'{field}'",
                    token.line,
                    token.column,
                )
        required = _REQUIRED_EVENT_FIELDS.get(event_type or "")
        if required is not None and required not in fields:
            raise StorySyntaxError(
                f"a '{required}' field",
                f"a {event_type} event without one",
                open_token.line,
                open_token.column,
            )
        event = _build_event(event_type, fields)
        if isinstance(event, UnknownEvent):
            logger.debug(
                "Unrecognized event type %r at line %d", event_type, open_token.line
            )
        return event

    def _parse_modifications(self) -> Tuple[LinkedListModificationDef, ...]:
        cursor = self._cursor
        cursor.expect(TokenKind.LBRACKET, "'[' to open linked list values")
        modifications: List[LinkedListModificationDef] = []
        while not cursor.check(TokenKind.RBRACKET):
            field_token = cursor.peek()
            field = self._parse_text("a linked list field name")
            cursor.expect(TokenKind.COLON, "':' after linked list field name")
            cursor.expect(TokenKind.LBRACE, "'{' to open a linked list modification")
            operations: Dict[str, object] = {}
            while not cursor.check(TokenKind.RBRACE):
                key_token = cursor.peek()
                key = cursor.expect_field(_MODIFICATION_FIELDS)
                if key == "amount":
                    operations[key] = self._parse_increment()
                elif key in ("set", "append", "replace"):
                    operations[key] = parse_inferred_value(cursor.advance())
                elif key == "toggle":
                    operations[key] = self._parse_toggle()
                else:
                    raise cursor.error(_MODIFICATION_FIELDS, key_token)
                cursor.skip_commas()
            cursor.expect(TokenKind.RBRACE, "'}' to close a linked list modification")
            modification = LinkedListModificationDef(
                field=field,
                amount=operations.get("amount"),  # type: ignore[arg-type]
                set_value=operations.get("set"),  # type: ignore[arg-type]
                append=operations.get("append"),  # type: ignore[arg-type]
                replace=operations.get("replace"),  # type: ignore[arg-type]
                toggle=bool(operations.get("toggle", False)),
            )
            if modification.is_empty:
                raise StorySyntaxError(
                    _MODIFICATION_FIELDS,
                    f"an empty modification of {field!r}",
                    field_token.line,
                    field_token.column,
                )
            modifications.append(modification)
            cursor.skip_commas()
        cursor.expect(TokenKind.RBRACKET, "']' to close linked list values")
        return tuple(modifications)

    def _parse_text(self, expected: str) -> str:
        cursor = self._cursor
        if cursor.check(TokenKind.STRING) or cursor.check_word():
            return str(cursor.advance().value)
        raise cursor.error(expected)

    def _parse_reference(self, kind: str) -> Reference:
        cursor = self._cursor
        token = cursor.peek()
        if token.kind is TokenKind.REFERENCE and token.value.kind == kind:  # type: ignore[union-attr]
            cursor.advance()
            return token.value  # type: ignore[return-value]
        raise cursor.error(f"a @{kind} reference")

    def _parse_increment(self) -> float:
        cursor = self._cursor
        if cursor.check(TokenKind.INT) or cursor.check(TokenKind.FLOAT):
            return float(cursor.advance().value)  # type: ignore[arg-type]
        raise cursor.error("a numeric increment")

    def _parse_toggle(self) -> bool:
        cursor = self._cursor
        token = cursor.peek()
        if token.kind is TokenKind.BOOL:
            cursor.advance()
            return bool(token.value)
        if token.kind is TokenKind.STRING and token.value == "toggle":
            cursor.advance()
            return True
        raise cursor.error("true, false or \"toggle\"")

    def _parse_progress_target(self, kind: str) -> int | None:
        cursor = self._cursor
        token = cursor.peek()
        if token.kind is TokenKind.INT:
            cursor.advance()
            value = int(token.value)  # type: ignore[arg-type]
            # -1 is the legacy spelling of "not set".
            return None if value == -1 else value
        return self._parse_reference(kind).id


def _build_event(event_type: str | None, fields: Dict[str, object]) -> EventDef:
    if event_type == "next-node":
        return NextNodeEvent()
    if event_type == "exit-current-node":
        return ExitCurrentNodeEvent()
    if event_type == "exit-current-group":
        return ExitCurrentGroupEvent()
    if event_type == "adjust-variable":
        value: ScalarValue | None = fields.get("value")  # type: ignore[assignment]
        return AdjustVariableEvent(
            name=fields["name"],  # type: ignore[arg-type]
            increment=fields.get("increment"),  # type: ignore[arg-type]
            value=value,
            toggle=bool(fields.get("toggle", False)),
        )
    if event_type == "add-state":
        return AddStateEvent(name=fields["name"], character=fields.get("character"))  # type: ignore[arg-type]
    if event_type == "remove-state":
        return RemoveStateEvent(name=fields["name"], character=fields.get("character"))  # type: ignore[arg-type]
    if event_type == "progress-story":
        return ProgressStoryEvent(
            chapter_id=fields.get("chapter"),  # type: ignore[arg-type]
            group_id=fields.get("group"),  # type: ignore[arg-type]
            node_id=fields.get("node"),  # type: ignore[arg-type]
        )
    if event_type == "linked-list":
        return LinkedListEvent(
            reference=fields["reference"],  # type: ignore[arg-type]
            values=fields.get("values", ()),  # type: ignore[arg-type]
        )
    return UnknownEvent(event_type=event_type)
