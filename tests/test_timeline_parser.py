import pytest

from storydoc.core.config import ParserConfig
from storydoc.data import StorySyntaxError, parse
from storydoc.domain.defs import (
    AddStateEvent,
    AdjustVariableEvent,
    ChoiceAction,
    CodeAction,
    DialogueDef,
    DialogueLineDef,
    EnterAction,
    EventAction,
    ExitAction,
    ExitCurrentNodeEvent,
    GotoAction,
    LinkedListEvent,
    LinkedListModificationDef,
    NextNodeEvent,
    ProgressStoryEvent,
    RemoveStateEvent,
    UnknownEvent,
)
from tests.helpers.story_sources import node_with_timeline


def _timeline(body: str, config: ParserConfig | None = None):
    return parse(node_with_timeline(body), config=config).nodes[0].timeline


def test_dialogue_action_dialogue_order_preserved() -> None:
    timeline = _timeline(
        """
        dialogue 1 { Caroline: "Hi" }
        action 4 { type: "goto" goto: @node(2) }
        dialogue 9 { Saniyah: "Bye" }
        """
    )
    assert len(timeline) == 3
    assert isinstance(timeline[0], DialogueDef)
    assert isinstance(timeline[1], GotoAction)
    assert isinstance(timeline[2], DialogueDef)
    assert [item.number for item in timeline] == [1, 4, 9]


def test_dialogue_lines_are_paired_records() -> None:
    (dialogue,) = _timeline(
        """
        dialogue 3 {
            Caroline : "Ahh!!"
            Saniyah : "Ahh!!"
        }
        """
    )
    assert dialogue.lines == (
        DialogueLineDef(character="Caroline", text="Ahh!!"),
        DialogueLineDef(character="Saniyah", text="Ahh!!"),
    )
    assert dialogue.line_count == 2


def test_code_action_keeps_code_opaque() -> None:
    (action,) = _timeline('action 1 { type: "code" <! enterCharacter("J", [12, 6]); !> }')
    assert action == CodeAction(number=1, code=' enterCharacter("J", [12, 6]); ')


def test_navigation_actions() -> None:
    timeline = _timeline(
        """
        action 1 { type: "goto" goto: @node(5) }
        action 2 { type: "enter" enter: @group:3 }
        action 3 { type: "exit" exit: "group" }
        action 4 { type: "event" goto: @node(6) }
        """
    )
    assert timeline == (
        GotoAction(number=1, target_node=5),
        EnterAction(number=2, target_group=3),
        ExitAction(number=3, target="group"),
        GotoAction(number=4, target_node=6),
    )


def test_nested_choice_builds_owned_tree_with_independent_numbers() -> None:
    (choice,) = _timeline(
        """
        action 10 {
            type: "choice"
            choices: [
                {
                    text: "Outer"
                    choice: {
                        action 1 {
                            type: "choice"
                            choices: [
                                { text: "Inner" choice: { action 1 { goto: @node(2) } } }
                            ]
                        }
                        action 2 { exit: "node" }
                    }
                },
                { text: "Empty" }
            ]
        }
        """
    )
    assert isinstance(choice, ChoiceAction)
    assert choice.number == 10
    assert [option.text for option in choice.options] == ["Outer", "Empty"]
    assert choice.options[1].actions == ()
    inner = choice.options[0].actions[0]
    assert isinstance(inner, ChoiceAction)
    assert inner.number == 1
    assert inner.options[0].actions == (GotoAction(number=1, target_node=2),)
    assert choice.options[0].actions[1] == ExitAction(number=2, target="node")


def test_choice_depth_limit_is_enforced() -> None:
    body = 'action 1 { type: "choice" choices: [ { text: "a" choice: { ' \
        'action 2 { type: "choice" choices: [ { text: "b" choice: { ' \
        'action 3 { goto: @node(1) } } } ] } } } ] }'
    config = ParserConfig(max_choice_depth=1)
    with pytest.raises(StorySyntaxError) as excinfo:
        _timeline(body, config)
    assert "nesting" in str(excinfo.value)
    assert len(_timeline(body, ParserConfig(max_choice_depth=2))) == 1


def test_dialogue_not_allowed_inside_choice_body() -> None:
    with pytest.raises(StorySyntaxError):
        _timeline(
            'action 1 { type: "choice" choices: [ { text: "a" choice: { dialogue 1 { A: "x" } } } ] }'
        )


def test_event_payloads() -> None:
    timeline = _timeline(
        """
        action 1 { type: "event" data: { type: "next-node" } }
        action 2 { type: "event" data: { type: "exit-current-node" } }
        action 3 { type: "event" data: { type: "adjust-variable" name: "Money" increment: 5 value: 2.5 toggle: "toggle" } }
        action 4 { type: "event" data: { type: "add-state" name: "Poisoned", character: "Saniyah" } }
        action 5 { type: "event" data: { type: "remove-state" name: "Poisoned", character: "Saniyah" } }
        action 6 { type: "event" data: { type: "progress-story" chapter: @chapter(2) node: @node(6) } }
        action 7 { type: "event" data: { type: "teleport" } }
        action 8 { type: "event" }
        """
    )
    events = [item.event for item in timeline]
    assert all(isinstance(item, EventAction) for item in timeline)
    assert events[0] == NextNodeEvent()
    assert events[1] == ExitCurrentNodeEvent()
    assert events[2] == AdjustVariableEvent(name="Money", increment=5.0, value=2.5, toggle=True)
    assert events[2].has_increment and events[2].has_value
    assert events[3] == AddStateEvent(name="Poisoned", character="Saniyah")
    assert events[4] == RemoveStateEvent(name="Poisoned", character="Saniyah")
    assert events[5] == ProgressStoryEvent(chapter_id=2, group_id=None, node_id=6)
    assert events[6] == UnknownEvent(event_type="teleport")
    assert events[7] == UnknownEvent()


def test_adjust_variable_facets_are_independent() -> None:
    (action,) = _timeline(
        'action 1 { data: { type: "adjust-variable" name: "PlayerName" value: "New Player" } }'
    )
    event = action.event
    assert event.value == "New Player"
    assert not event.has_increment
    assert event.toggle is False


def test_progress_story_legacy_sentinel_is_unset() -> None:
    (action,) = _timeline(
        'action 1 { data: { type: "progress-story" chapter: -1 group: -1 node: -1 } }'
    )
    assert action.event == ProgressStoryEvent()
    assert not action.event.has_target


def test_event_field_not_valid_for_type() -> None:
    with pytest.raises(StorySyntaxError) as excinfo:
        _timeline('action 1 { data: { type: "next-node" name: "Money" } }')
    assert "'name'" in str(excinfo.value)


def test_reference_kind_must_match_field() -> None:
    with pytest.raises(StorySyntaxError) as excinfo:
        _timeline('action 1 { goto: @group(2) }')
    assert "@node reference" in str(excinfo.value)


def test_linked_list_event_collects_modifications() -> None:
    (action,) = _timeline(
        """
        action 1 {
            type: "event"
            data: {
                type: "linked-list"
                reference: "Profession"
                values: [
                    "Value": { amount: 4 },
                    "Title": { set: "Smith", append: " of Ashford" },
                    "Active": { toggle: "toggle" }
                ]
            }
        }
        """
    )
    assert action.event == LinkedListEvent(
        reference="Profession",
        values=(
            LinkedListModificationDef(field="Value", amount=4.0),
            LinkedListModificationDef(field="Title", set_value="Smith", append=" of Ashford"),
            LinkedListModificationDef(field="Active", toggle=True),
        ),
    )


def test_linked_list_modification_needs_an_operation() -> None:
    with pytest.raises(StorySyntaxError) as excinfo:
        _timeline(
            'action 1 { data: { type: "linked-list" reference: "Stats" values: [ "Health": { } ] } }'
        )
    assert "empty modification of 'Health'" in str(excinfo.value)


def test_linked_list_modification_rejects_unknown_operation() -> None:
    with pytest.raises(StorySyntaxError):
        _timeline(
            'action 1 { data: { type: "linked-list" reference: "Stats" '
            'values: [ "Health": { multiply: 2 } ] } }'
        )


@pytest.mark.parametrize(
    ("event_type", "field"),
    [
        ("adjust-variable", "name"),
        ("add-state", "name"),
        ("remove-state", "name"),
        ("linked-list", "reference"),
    ],
)
def test_event_without_its_subject_is_rejected(event_type: str, field: str) -> None:
    with pytest.raises(StorySyntaxError) as excinfo:
        _timeline(f'action 1 {{ type: "event" data: {{ type: "{event_type}" }} }}')
    message = str(excinfo.value)
    assert f"expected a '{field}' field" in message
    assert f"a {event_type} event without one" in message
    assert message.startswith("line 3, column")


@pytest.mark.parametrize(
    "body",
    [
        "action 1 { }",
        'action 1 { type: "goto" }',
        'action 1 { type: "teleport" }',
        'action 1 { goto: @node(1) enter: @group(1) }',
        'action 1 { type: "code" goto: @node(1) }',
        'action 1 { colour: "red" }',
        "action { }",
        'scene 1 { }',
    ],
)
def test_malformed_actions_fail_fast(body: str) -> None:
    with pytest.raises(StorySyntaxError):
        _timeline(body)


def test_choice_option_requires_text() -> None:
    with pytest.raises(StorySyntaxError):
        _timeline('action 1 { type: "choice" choices: [ { choice: { } } ] }')


def test_syntax_error_reports_expected_and_found() -> None:
    with pytest.raises(StorySyntaxError) as excinfo:
        _timeline('dialogue 1 { Caroline: 12 }')
    error = excinfo.value
    assert error.expected == "dialogue text"
    assert error.found == "int '12'"
    assert error.line == 3
