"""Shared CLI rendering helpers for printing a parsed story."""
from __future__ import annotations

import os
import textwrap
from typing import Iterable, List

from storydoc.domain.defs import (
    ActionDef,
    AddStateEvent,
    AdjustVariableEvent,
    ChoiceAction,
    CodeAction,
    DialogueDef,
    EnterAction,
    EventAction,
    ExitAction,
    GlobalVariableDef,
    GotoAction,
    GroupDef,
    LinkedListDef,
    LinkedListEvent,
    LinkedListModificationDef,
    NodeDef,
    ProgressStoryEvent,
    RemoveStateEvent,
    StoryData,
    TagDefinitionDef,
    UnknownEvent,
)
from storydoc.domain.defs.event_def import EVENT_TYPE_NAMES
from storydoc.services import ReferenceViolation, format_violation

_INDENT = "  "


def debug_enabled() -> bool:
    """Return True only when STORYDOC_DEBUG is explicitly set to '1'."""
    return os.getenv("STORYDOC_DEBUG") == "1"


def wrap_text_for_box(text: str, width: int, *, indent_continuation: bool = True) -> list[str]:
    """
    Wrap text to fit within a fixed width, breaking on word boundaries.

    Args:
        text: The text to wrap
        width: Maximum width per line
        indent_continuation: If True, indent continuation lines with 2 spaces

    Returns:
        List of wrapped lines, each <= width characters
    """
    if not text or width <= 0:
        return [text] if text else [""]
    subsequent_indent = _INDENT if indent_continuation else ""
    wrapped = textwrap.fill(
        text,
        width=width,
        initial_indent="",
        subsequent_indent=subsequent_indent,
        break_long_words=False,
        break_on_hyphens=False,
    )
    return wrapped.split("\n")


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def format_default(variable: GlobalVariableDef) -> str:
    if variable.type == "string":
        return f'"{variable.default}"'
    if variable.type == "bool":
        return "true" if variable.default else "false"
    if variable.type == "float":
        return f"{variable.default:.2f}"
    return str(variable.default)


def format_tag_definition(tag: TagDefinitionDef) -> list[str]:
    lines = [
        f"Tag: {tag.name}",
        f"{_INDENT}Type: {'key-value' if tag.is_keyvalue else 'single'}",
        f"{_INDENT}Color: {tag.color or 'none'}",
    ]
    if tag.is_keyvalue:
        lines.append(f"{_INDENT}Keys: {', '.join(tag.keys)}")
    return lines


def format_group(group: GroupDef, width: int = 78) -> list[str]:
    chapter = "none" if group.chapter_id is None else str(group.chapter_id)
    lines = [f"Group {group.id}: {group.name or ''}", f"{_INDENT}Chapter: {chapter}"]
    if group.parent_group_id is not None:
        lines.append(f"{_INDENT}Parent group: {group.parent_group_id}")
    for content_line in wrap_text_for_box(f"Content: {group.content or ''}", width - len(_INDENT)):
        lines.append(f"{_INDENT}{content_line}")
    tag_labels = []
    for tag in group.tags:
        if tag.selected_key is None:
            tag_labels.append(tag.tag_name)
        elif tag.value is None:
            tag_labels.append(f"{tag.tag_name}({tag.selected_key})")
        else:
            tag_labels.append(f"{tag.tag_name}({tag.selected_key}: {tag.value})")
    lines.append(f"{_INDENT}Tags: {', '.join(tag_labels)}")
    if group.linked_lists:
        lines.append(f"{_INDENT}Linked lists: {', '.join(group.linked_lists)}")
    graph = group.graph
    lines.append(
        f"{_INDENT}Nodes: start={_or_dash(graph.start_node)}, end={_or_dash(graph.end_node)}, "
        f"points={len(graph.points)}"
    )
    for point in graph.points:
        destinations = ", ".join(str(dest) for dest in point.destinations)
        lines.append(f"{_INDENT * 2}{point.source} -> [{destinations}]")
    return lines


def _or_dash(value: int | None) -> str:
    return "-" if value is None else str(value)


def format_linked_list(linked_list: LinkedListDef) -> list[str]:
    lines = [f"Linked list: {linked_list.name}", f"{_INDENT}Scope: {linked_list.scope or 'none'}"]
    for field in linked_list.fields:
        lines.append(f"{_INDENT * 2}{field.name}: {field.type or 'untyped'}")
    return lines


def _describe_modification(modification: LinkedListModificationDef) -> str:
    facets = []
    if modification.amount is not None:
        facets.append(f"amount={modification.amount:+g}")
    for facet, operand in (
        ("set", modification.set_value),
        ("append", modification.append),
        ("replace", modification.replace),
    ):
        if operand is not None:
            facets.append(f"{facet}={operand!r}")
    if modification.toggle:
        facets.append("toggle")
    return f"{modification.field} {' '.join(facets)}"


def describe_event(action: EventAction) -> str:
    event = action.event
    if isinstance(event, UnknownEvent):
        return f"EVENT unknown ({event.event_type or 'untyped'})"
    label = f"EVENT {EVENT_TYPE_NAMES[type(event)]}"
    if isinstance(event, AdjustVariableEvent):
        facets = []
        if event.has_increment:
            facets.append(f"increment={event.increment:+g}")
        if event.has_value:
            facets.append(f"value={event.value!r}")
        if event.toggle:
            facets.append("toggle")
        return f"{label} {event.name} {' '.join(facets)}".rstrip()
    if isinstance(event, (AddStateEvent, RemoveStateEvent)):
        return f"{label} {event.name} -> {event.character}"
    if isinstance(event, LinkedListEvent):
        changes = "; ".join(_describe_modification(change) for change in event.values)
        return f"{label} {event.reference} {changes}".rstrip()
    if isinstance(event, ProgressStoryEvent):
        return (
            f"{label} chapter={_or_dash(event.chapter_id)} "
            f"group={_or_dash(event.group_id)} node={_or_dash(event.node_id)}"
        )
    return label


def format_action(action: ActionDef, depth: int = 0) -> list[str]:
    """Describe an action; choice options are listed beneath it, indented."""
    prefix = _INDENT * (depth + 2)
    if isinstance(action, CodeAction):
        summary = f"CODE (length={len(action.code)})"
    elif isinstance(action, GotoAction):
        summary = f"GOTO node {action.target_node}"
    elif isinstance(action, ExitAction):
        summary = f"EXIT {action.target}"
    elif isinstance(action, EnterAction):
        summary = f"ENTER group {action.target_group}"
    elif isinstance(action, ChoiceAction):
        summary = f"CHOICE ({len(action.options)} options)"
    else:
        summary = describe_event(action)
    lines = [f"{prefix}Action {action.number}: {summary}"]
    if isinstance(action, ChoiceAction):
        for option in action.options:
            lines.append(f"{prefix}{_INDENT}> \"{option.text}\"")
            for nested in option.actions:
                lines.extend(format_action(nested, depth + 2))
    return lines


def format_node(node: NodeDef) -> list[str]:
    lines = [
        f"Node {node.id}: {node.title or ''}",
        f"{_INDENT}Content: {node.content or ''}",
        f"{_INDENT}Timeline items: {len(node.timeline)}",
    ]
    for item in node.timeline:
        if isinstance(item, DialogueDef):
            lines.append(f"{_INDENT * 2}Dialogue {item.number}:")
            for line in item.lines:
                lines.append(f'{_INDENT * 3}{line.character}: "{line.text}"')
        else:
            lines.extend(format_action(item))
    return lines


def format_story(data: StoryData, width: int = 78) -> list[str]:
    """Return the full pretty-printed listing of a story, section by section."""
    lines: List[str] = ["=== STATES ==="]
    lines.extend(f"- {state.name}" for state in data.states)
    lines.append("")
    lines.append("=== GLOBAL VARIABLES ===")
    for variable in data.global_vars:
        lines.append(f"Variable: {variable.name}")
        lines.append(f"{_INDENT}Type: {variable.type}")
        lines.append(f"{_INDENT}Default: {format_default(variable)}")
    if data.characters:
        lines.append("")
        lines.append("=== CHARACTERS ===")
        for character in data.characters:
            lines.append(f"Character: {character.name}")
            if character.description:
                lines.append(f"{_INDENT}Description: {character.description}")
            for entry in character.linked_list_data:
                lines.append(
                    f"{_INDENT}Linked list {entry.list_name}: {len(entry.records)} record(s)"
                )
    if data.linked_lists:
        lines.append("")
        lines.append("=== LINKED LISTS ===")
        for linked_list in data.linked_lists:
            lines.extend(format_linked_list(linked_list))
    lines.append("")
    lines.append("=== TAG DEFINITIONS ===")
    for tag in data.tags:
        lines.extend(format_tag_definition(tag))
    lines.append("")
    lines.append("=== CHAPTERS ===")
    lines.extend(f"Chapter {chapter.id}: {chapter.name or ''}" for chapter in data.chapters)
    lines.append("")
    lines.append("=== GROUPS ===")
    for group in data.groups:
        lines.extend(format_group(group, width))
    lines.append("")
    lines.append("=== NODES ===")
    for node in data.nodes:
        lines.extend(format_node(node))
    return lines


def render_story_data(data: StoryData, width: int = 78) -> None:
    """Print the parsed structure."""
    for line in format_story(data, width):
        print(line)


def render_violations(violations: Iterable[ReferenceViolation]) -> None:
    """Print validator findings, one per line."""
    violations = list(violations)
    render_heading("Reference validation")
    if not violations:
        print("All references resolve.")
        return
    render_bullet_lines(format_violation(violation) for violation in violations)
