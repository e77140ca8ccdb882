"""Static reference validation for parsed story documents."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from storydoc.core.types import Severity
from storydoc.data.errors import StoryReferenceError
from storydoc.data.values import literal_type
from storydoc.domain.defs import (
    ActionDef,
    AddStateEvent,
    AdjustVariableEvent,
    ChoiceAction,
    DialogueDef,
    EnterAction,
    EventAction,
    GotoAction,
    CharacterDef,
    GroupDef,
    LinkedListEvent,
    ProgressStoryEvent,
    RemoveStateEvent,
    StoryData,
    TimelineItemDef,
    UnknownEvent,
    is_action,
)

logger = logging.getLogger(__name__)

_NUMERIC_TYPES = {"int", "float"}


@dataclass(frozen=True, slots=True)
class ReferenceViolation:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


@dataclass(frozen=True, slots=True)
class _Lookup:
    node_ids: frozenset[int]
    group_ids: frozenset[int]
    chapter_ids: frozenset[int]
    state_names: frozenset[str]
    character_names: frozenset[str]
    has_characters: bool
    linked_list_names: frozenset[str]


def format_violation(violation: ReferenceViolation) -> str:
    context = " ".join(f"{key}={value}" for key, value in violation.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{violation.severity}] {violation.code}: {violation.message}{suffix}"


def is_valid(violations: Sequence[ReferenceViolation], *, strict: bool = False) -> bool:
    """Return True when no ERROR (or, when ``strict``, no violation at all) is present."""
    if strict:
        return not violations
    return not any(violation.severity == "ERROR" for violation in violations)


def ensure_valid(data: StoryData, *, strict: bool = False) -> None:
    """Raise StoryReferenceError carrying every violation when validation fails."""
    violations = validate_references(data)
    if not is_valid(violations, strict=strict):
        raise StoryReferenceError(violations)


def validate_references(data: StoryData) -> List[ReferenceViolation]:
    """Resolve every symbolic reference in ``data`` and collect all failures.

    The walk is read-only and never stops early. Unset progression targets
    are skipped rather than resolved.
    """
    issues: List[ReferenceViolation] = []
    lookup = _Lookup(
        node_ids=frozenset(node.id for node in data.nodes),
        group_ids=frozenset(group.id for group in data.groups),
        chapter_ids=frozenset(chapter.id for chapter in data.chapters),
        state_names=frozenset(state.name for state in data.states),
        character_names=frozenset(character.name for character in data.characters),
        has_characters=bool(data.characters),
        linked_list_names=frozenset(linked_list.name for linked_list in data.linked_lists),
    )
    for character in data.characters:
        _validate_character(character, data, lookup, issues)
    for group in data.groups:
        _validate_group(group, data, lookup, issues)
    for node in data.nodes:
        for path, item in _walk_timeline(node.timeline):
            entity = f"node {node.id}"
            if is_action(item):
                _validate_action(entity, path, item, data, lookup, issues)  # type: ignore[arg-type]
            else:
                _validate_dialogue(entity, path, item, lookup, issues)  # type: ignore[arg-type]
    logger.debug(
        "Reference validation finished: %d errors, %d warnings",
        sum(1 for issue in issues if issue.severity == "ERROR"),
        sum(1 for issue in issues if issue.severity == "WARN"),
    )
    return issues


def _walk_timeline(
    timeline: Sequence[TimelineItemDef],
) -> Iterator[Tuple[str, TimelineItemDef]]:
    """Yield every item with its field path in document order, options included."""
    stack: List[Tuple[str, Iterator[Tuple[int, TimelineItemDef]]]] = [
        ("timeline", iter(enumerate(timeline)))
    ]
    while stack:
        prefix, entries = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            continue
        index, item = entry
        path = f"{prefix}[{index}]"
        yield path, item
        if isinstance(item, ChoiceAction):
            for option_index in reversed(range(len(item.options))):
                stack.append(
                    (
                        f"{path}.options[{option_index}].actions",
                        iter(enumerate(item.options[option_index].actions)),
                    )
                )


def _missing(
    issues: List[ReferenceViolation],
    code: str,
    message: str,
    entity: str,
    field_path: str,
    referenced: object,
) -> None:
    issues.append(
        ReferenceViolation(
            severity="ERROR",
            code=code,
            message=message,
            context={
                "entity": entity,
                "field_path": field_path,
                "referenced_id": str(referenced),
            },
        )
    )


def _unset(
    issues: List[ReferenceViolation], code: str, message: str, entity: str, field_path: str
) -> None:
    issues.append(
        ReferenceViolation(
            severity="ERROR",
            code=code,
            message=message,
            context={"entity": entity, "field_path": field_path},
        )
    )


def _validate_character(
    character: CharacterDef, data: StoryData, lookup: _Lookup, issues: List[ReferenceViolation]
) -> None:
    entity = f"character {character.name}"
    for index, entry in enumerate(character.linked_list_data):
        path = f"linked_list_data[{index}]"
        if entry.list_name not in lookup.linked_list_names:
            _missing(
                issues, "MISSING_LINKED_LIST_REF", "Character data names an undeclared linked list.",
                entity, f"{path}.list_name", entry.list_name,
            )
            continue
        definition = data.get_linked_list(entry.list_name)
        for record_index, record in enumerate(entry.records):
            for field, _ in record.values:
                if not definition.has_field(field):
                    _missing(
                        issues, "MISSING_LINKED_LIST_FIELD",
                        "Character data sets a field the linked list does not declare.",
                        entity, f"{path}.records[{record_index}].{field}", field,
                    )

def _validate_group(
    group: GroupDef, data: StoryData, lookup: _Lookup, issues: List[ReferenceViolation]
) -> None:
    entity = f"group {group.id}"
    if group.chapter_id is None:
        _unset(issues, "MISSING_CHAPTER_REF", "Group declares no chapter.", entity, "chapter")
    elif group.chapter_id not in lookup.chapter_ids:
        _missing(
            issues, "MISSING_CHAPTER_REF", "Group references missing chapter.",
            entity, "chapter", group.chapter_id,
        )
    if group.parent_group_id is not None:
        if group.parent_group_id == group.id:
            issues.append(
                ReferenceViolation(
                    severity="ERROR",
                    code="SELF_PARENT_GROUP",
                    message="Group names itself as its parent.",
                    context={"entity": entity, "field_path": "parent-group"},
                )
            )
        elif group.parent_group_id not in lookup.group_ids:
            _missing(
                issues, "MISSING_GROUP_REF", "Group references missing parent group.",
                entity, "parent-group", group.parent_group_id,
            )

    for index, list_name in enumerate(group.linked_lists):
        if list_name not in lookup.linked_list_names:
            _missing(
                issues, "MISSING_LINKED_LIST_REF", "Group names an undeclared linked list.",
                entity, f"linked_lists[{index}]", list_name,
            )

    for index, tag in enumerate(group.tags):
        path = f"tags[{index}]"
        if not data.has_tag_definition(tag.tag_name):
            _missing(
                issues, "MISSING_TAG_DEF", "Group tag names an undeclared tag.",
                entity, f"{path}.tag_name", tag.tag_name,
            )
            continue
        definition = data.get_tag_definition(tag.tag_name)
        if not definition.is_keyvalue:
            if tag.selected_key is not None:
                issues.append(
                    ReferenceViolation(
                        severity="ERROR",
                        code="INVALID_TAG_KEY",
                        message="Single tag must not select a key.",
                        context={
                            "entity": entity,
                            "field_path": f"{path}.selected_key",
                            "referenced_id": tag.selected_key,
                        },
                    )
                )
            continue
        if tag.selected_key is None:
            issues.append(
                ReferenceViolation(
                    severity="ERROR",
                    code="MISSING_SELECTED_KEY",
                    message="Key-value tag must select one of its keys.",
                    context={"entity": entity, "field_path": f"{path}.selected_key"},
                )
            )
        elif tag.selected_key not in definition.keys:
            _missing(
                issues, "MISSING_TAG_KEY", "Group tag selects a key its definition does not declare.",
                entity, f"{path}.selected_key", tag.selected_key,
            )

    graph = group.graph
    for kind, node_id in (("start", graph.start_node), ("end", graph.end_node)):
        field_path = f"nodes.{kind}"
        if node_id is None:
            _unset(
                issues, "MISSING_NODE_REF", f"Node graph declares no {kind} node.",
                entity, field_path,
            )
        elif node_id not in lookup.node_ids:
            _missing(
                issues, "MISSING_NODE_REF", "Node graph references missing node.",
                entity, field_path, node_id,
            )
    seen_sources: set[int] = set()
    for index, point in enumerate(graph.points):
        path = f"nodes.points[{index}]"
        if point.source in seen_sources:
            issues.append(
                ReferenceViolation(
                    severity="ERROR",
                    code="DUPLICATE_POINT_SOURCE",
                    message="Node graph lists the same source node more than once.",
                    context={"entity": entity, "field_path": path, "referenced_id": str(point.source)},
                )
            )
        seen_sources.add(point.source)
        if point.source not in lookup.node_ids:
            _missing(
                issues, "MISSING_NODE_REF", "Node graph point starts at missing node.",
                entity, f"{path}.source", point.source,
            )
        for dest_index, destination in enumerate(point.destinations):
            if destination not in lookup.node_ids:
                _missing(
                    issues, "MISSING_NODE_REF", "Node graph point leads to missing node.",
                    entity, f"{path}.destinations[{dest_index}]", destination,
                )


def _validate_dialogue(
    entity: str,
    path: str,
    dialogue: DialogueDef,
    lookup: _Lookup,
    issues: List[ReferenceViolation],
) -> None:
    if not lookup.has_characters:
        return
    for index, line in enumerate(dialogue.lines):
        if line.character not in lookup.character_names:
            issues.append(
                ReferenceViolation(
                    severity="WARN",
                    code="UNKNOWN_CHARACTER",
                    message="Dialogue speaker is not a declared character.",
                    context={
                        "entity": entity,
                        "field_path": f"{path}.lines[{index}].character",
                        "referenced_id": line.character,
                    },
                )
            )


def _validate_action(
    entity: str,
    path: str,
    action: ActionDef,
    data: StoryData,
    lookup: _Lookup,
    issues: List[ReferenceViolation],
) -> None:
    if isinstance(action, GotoAction):
        if action.target_node not in lookup.node_ids:
            _missing(
                issues, "MISSING_NODE_REF", "Goto references missing node.",
                entity, f"{path}.target_node", action.target_node,
            )
    elif isinstance(action, EnterAction):
        if action.target_group not in lookup.group_ids:
            _missing(
                issues, "MISSING_GROUP_REF", "Enter references missing group.",
                entity, f"{path}.target_group", action.target_group,
            )
    elif isinstance(action, EventAction):
        _validate_event(entity, f"{path}.event", action, data, lookup, issues)


def _validate_event(
    entity: str,
    path: str,
    action: EventAction,
    data: StoryData,
    lookup: _Lookup,
    issues: List[ReferenceViolation],
) -> None:
    event = action.event
    if isinstance(event, ProgressStoryEvent):
        if not event.has_target:
            issues.append(
                ReferenceViolation(
                    severity="WARN",
                    code="EMPTY_PROGRESS_STORY",
                    message="Progress-story event sets no chapter, group or node.",
                    context={"entity": entity, "field_path": path},
                )
            )
        if event.chapter_id is not None and event.chapter_id not in lookup.chapter_ids:
            _missing(
                issues, "MISSING_CHAPTER_REF", "Progress-story references missing chapter.",
                entity, f"{path}.chapter_id", event.chapter_id,
            )
        if event.group_id is not None and event.group_id not in lookup.group_ids:
            _missing(
                issues, "MISSING_GROUP_REF", "Progress-story references missing group.",
                entity, f"{path}.group_id", event.group_id,
            )
        if event.node_id is not None and event.node_id not in lookup.node_ids:
            _missing(
                issues, "MISSING_NODE_REF", "Progress-story references missing node.",
                entity, f"{path}.node_id", event.node_id,
            )
    elif isinstance(event, (AddStateEvent, RemoveStateEvent)):
        if event.name not in lookup.state_names:
            _missing(
                issues, "MISSING_STATE_REF", "State event references undeclared state.",
                entity, f"{path}.name", event.name,
            )
        if lookup.has_characters and event.character not in lookup.character_names:
            issues.append(
                ReferenceViolation(
                    severity="WARN",
                    code="UNKNOWN_CHARACTER",
                    message="State event targets an undeclared character.",
                    context={
                        "entity": entity,
                        "field_path": f"{path}.character",
                        "referenced_id": str(event.character),
                    },
                )
            )
    elif isinstance(event, AdjustVariableEvent):
        _validate_adjustment(entity, path, event, data, issues)
    elif isinstance(event, LinkedListEvent):
        _validate_linked_list_event(entity, path, event, data, lookup, issues)
    elif isinstance(event, UnknownEvent):
        issues.append(
            ReferenceViolation(
                severity="WARN",
                code="UNKNOWN_EVENT_TYPE",
                message="Event type is not recognized by runtime and will be ignored.",
                context={
                    "entity": entity,
                    "field_path": path,
                    "event_type": str(event.event_type),
                },
            )
        )


def _validate_adjustment(
    entity: str,
    path: str,
    event: AdjustVariableEvent,
    data: StoryData,
    issues: List[ReferenceViolation],
) -> None:
    if not data.has_global_variable(event.name):
        _missing(
            issues, "MISSING_VARIABLE_REF", "Adjust-variable references undeclared variable.",
            entity, f"{path}.name", event.name,
        )
        return
    variable = data.get_global_variable(event.name)
    problems: List[str] = []
    if event.has_increment and variable.type not in _NUMERIC_TYPES:
        problems.append(f"increment applied to {variable.type} variable")
    if event.toggle and variable.type != "bool":
        problems.append(f"toggle applied to {variable.type} variable")
    if event.has_value:
        value_type = literal_type(event.value)  # type: ignore[arg-type]
        compatible = value_type == variable.type or (
            variable.type == "float" and value_type == "int"
        )
        if not compatible:
            problems.append(f"{value_type} value assigned to {variable.type} variable")
    for problem in problems:
        issues.append(
            ReferenceViolation(
                severity="WARN",
                code="INCOMPATIBLE_ADJUSTMENT",
                message=f"Adjust-variable facet does not fit the variable: {problem}.",
                context={"entity": entity, "field_path": path, "referenced_id": event.name},
            )
        )


def _validate_linked_list_event(
    entity: str,
    path: str,
    event: LinkedListEvent,
    data: StoryData,
    lookup: _Lookup,
    issues: List[ReferenceViolation],
) -> None:
    if event.reference not in lookup.linked_list_names:
        _missing(
            issues, "MISSING_LINKED_LIST_REF", "Linked-list event references undeclared list.",
            entity, f"{path}.reference", event.reference,
        )
        return
    definition = data.get_linked_list(event.reference)
    for index, modification in enumerate(event.values):
        if not definition.has_field(modification.field):
            _missing(
                issues, "MISSING_LINKED_LIST_FIELD",
                "Linked-list event modifies a field the list does not declare.",
                entity, f"{path}.values[{index}].field", modification.field,
            )
