import pytest

from storydoc.core.config import ParserConfig
from storydoc.data import (
    DuplicateIdError,
    SectionError,
    StorySyntaxError,
    TypeMismatchError,
    UnknownSectionError,
    parse,
)
from storydoc.domain.defs import (
    CharacterDef,
    GlobalVariableDef,
    GroupTagDef,
    LinkedListDataDef,
    LinkedListDef,
    LinkedListFieldDef,
    LinkedListRecordDef,
    PointDef,
    StateDef,
    TagDefinitionDef,
)
from tests.helpers.story_sources import FULL_STORY


def test_full_story_parses_every_section() -> None:
    data = parse(FULL_STORY)
    assert [state.name for state in data.states] == ["Idle", "Poisoned", "SleepDeprived"]
    assert data.global_vars == (
        GlobalVariableDef(name="PlayerName", type="string", default=""),
        GlobalVariableDef(name="Items", type="int", default=0),
        GlobalVariableDef(name="IsPlaying", type="bool", default=False),
        GlobalVariableDef(name="Money", type="float", default=30.0),
    )
    assert data.characters == (
        CharacterDef(name="Caroline", description="The protagonist."),
        CharacterDef(name="Saniyah", biography="Grew up by the lake."),
    )
    assert data.tags[0] == TagDefinitionDef(
        name="Location",
        type="keyvalue",
        color="#0f6319ff",
        keys=("Village", "Village Outskirts", "The Lake"),
    )
    assert data.tags[1] == TagDefinitionDef(name="Discovery", type="single", color="#713")
    assert [chapter.name for chapter in data.chapters] == ["Introduction", "Into the Past"]
    group = data.groups[0]
    assert group.chapter_id == 1
    assert group.tags == (
        GroupTagDef(tag_name="Location", selected_key="Village", value="Bedroom, 32, 55"),
        GroupTagDef(tag_name="Discovery"),
    )
    assert group.graph.start_node == 1
    assert group.graph.end_node == 2
    assert group.graph.points == (PointDef(source=1, destinations=(2,)),)
    assert [node.title for node in data.nodes] == ["Start", "End"]
    assert len(data.nodes[0].timeline) == 6


def test_sections_may_appear_in_any_order() -> None:
    data = parse(
        """
        node 3 { title: "Late" }
        chapter 1 { name: "First" }
        states [ "Idle" ]
        """
    )
    assert data.nodes[0].id == 3
    assert data.chapters[0].id == 1
    assert data.states == (StateDef(name="Idle"),)


def test_empty_document_yields_empty_story() -> None:
    data = parse("# nothing but a comment\n")
    assert data.states == ()
    assert data.nodes == ()


@pytest.mark.parametrize("keyword", ["global-vars", "global_vars", "globals"])
def test_global_section_aliases(keyword: str) -> None:
    data = parse(f'{keyword} [ "Lives": {{ type: int default: 3 }} ]')
    assert data.global_vars == (GlobalVariableDef(name="Lives", type="int", default=3),)


def test_global_default_may_precede_type() -> None:
    data = parse('global-vars [ "Ready": { default: true, type: "bool" } ]')
    assert data.global_vars[0].default is True


def test_missing_global_default_becomes_zero_value() -> None:
    data = parse('global-vars [ "Name": { type: "string" }, "Gold": { type: "float" } ]')
    assert data.global_vars[0].default == ""
    assert data.global_vars[1].default == 0.0


def test_missing_global_type_is_section_error() -> None:
    with pytest.raises(SectionError) as excinfo:
        parse('global-vars [ "Gold": { default: 1 } ]')
    assert excinfo.value.section == "global-vars"
    assert excinfo.value.entity == "Gold"


def test_global_default_type_mismatch() -> None:
    with pytest.raises(TypeMismatchError) as excinfo:
        parse('global-vars [ "Items": { type: "int" default: "many" } ]')
    assert excinfo.value.entity == "Items"
    assert excinfo.value.line == 1


def test_int_default_for_float_is_widened_unless_disabled() -> None:
    source = 'global-vars [ "Money": { type: "float" default: 30 } ]'
    assert parse(source).global_vars[0].default == 30.0
    assert isinstance(parse(source).global_vars[0].default, float)
    with pytest.raises(TypeMismatchError):
        parse(source, config=ParserConfig(allow_int_for_float=False))


def test_unknown_variable_type_is_syntax_error() -> None:
    with pytest.raises(StorySyntaxError):
        parse('global-vars [ "Items": { type: "list" } ]')


def test_duplicate_state_reports_first_declaration() -> None:
    with pytest.raises(DuplicateIdError) as excinfo:
        parse('states [\n  "Idle",\n  "Idle"\n]')
    error = excinfo.value
    assert error.section == "states"
    assert error.entity == "Idle"
    assert error.line == 3
    assert "first declared at line 2" in str(error)


def test_empty_state_name_is_rejected() -> None:
    with pytest.raises(SectionError):
        parse('states [ "  " ]')


@pytest.mark.parametrize(
    "source",
    [
        'chapter 1 { name: "A" }\nchapter 1 { name: "B" }',
        'group 4 { }\ngroup 4 { }',
        'node 2 { }\nnode 2 { }',
        'tags [ "T": { type: "single" }, "T": { type: "single" } ]',
        'global-vars [ "x": { type: int }, "x": { type: bool } ]',
        'characters [ "Ann", "Ann" ]',
    ],
)
def test_duplicate_entities_are_rejected(source: str) -> None:
    with pytest.raises(DuplicateIdError):
        parse(source)


def test_same_id_in_different_kinds_is_allowed() -> None:
    data = parse('chapter 1 { }\ngroup 1 { }\nnode 1 { }')
    assert (data.chapters[0].id, data.groups[0].id, data.nodes[0].id) == (1, 1, 1)


def test_negative_id_is_rejected() -> None:
    with pytest.raises(SectionError) as excinfo:
        parse("chapter -1 { }")
    assert "negative" in str(excinfo.value)


def test_characters_without_bodies() -> None:
    data = parse('characters [ Caroline, "Saniyah": { description: "Friend" } ]')
    assert data.characters == (
        CharacterDef(name="Caroline"),
        CharacterDef(name="Saniyah", description="Friend"),
    )


def test_keyvalue_tag_accepts_both_spellings() -> None:
    data = parse(
        'tags [ "A": { type: "keyvalue" keys: [ "x" ] }, "B": { type: "key-value" keys: [ "y" ] } ]'
    )
    assert all(tag.is_keyvalue for tag in data.tags)


@pytest.mark.parametrize(
    ("source", "message"),
    [
        ('tags [ "A": { type: "key-value" } ]', "at least one key"),
        ('tags [ "A": { type: "single" keys: [ "x" ] } ]', "must not declare keys"),
        ('tags [ "A": { type: "key-value" keys: [ "x", "x" ] } ]', "duplicate key"),
        ('tags [ "A": { type: "multi" } ]', "unknown tag type"),
    ],
)
def test_tag_definition_rules(source: str, message: str) -> None:
    with pytest.raises(SectionError) as excinfo:
        parse(source)
    assert message in str(excinfo.value)
    assert excinfo.value.entity == "A"


def test_tag_type_defaults_to_single() -> None:
    data = parse('tags [ "Plain": { color: "#fff" } ]')
    assert data.tags[0].type == "single"
    assert data.tags[0].keys == ()


def test_group_fields_accept_references_and_parent_group() -> None:
    data = parse(
        """
        group 5 {
            chapter: @chapter(2)
            parent-group: @group:1
            nodes: { start: @node(1), end: 3, points: { 1: [ 2, @node(3) ], 1: [ 4 ] } }
        }
        """
    )
    group = data.groups[0]
    assert group.chapter_id == 2
    assert group.parent_group_id == 1
    assert group.graph.points == (
        PointDef(source=1, destinations=(2, 3)),
        PointDef(source=1, destinations=(4,)),
    )
    assert group.graph.destinations(1) == (2, 3, 4)
    assert group.graph.adjacency() == {1: (2, 3, 4)}


def test_group_without_chapter_or_graph() -> None:
    group = parse('group 1 { name: "Loose" }').groups[0]
    assert group.chapter_id is None
    assert group.graph.start_node is None
    assert group.graph.points == ()


LINKED_LISTS = '''
linked-lists [
    "Stats": {
        scope: "character"
        structure: {
            Health: { type: "integer" },
            Mood: { type: "string" }
        }
    },
    "Profession": { scope: "both" }
]
'''


def test_linked_lists_section() -> None:
    data = parse(LINKED_LISTS)
    assert data.linked_lists == (
        LinkedListDef(
            name="Stats",
            scope="character",
            fields=(
                LinkedListFieldDef(name="Health", type="integer"),
                LinkedListFieldDef(name="Mood", type="string"),
            ),
        ),
        LinkedListDef(name="Profession", scope="both"),
    )
    assert data.get_linked_list("Stats").field_names == ("Health", "Mood")


def test_duplicate_linked_list_is_rejected() -> None:
    with pytest.raises(DuplicateIdError):
        parse('linked-lists [ "Stats": { } ]\nlinked-lists [ "Stats": { } ]')


def test_duplicate_structure_field_reports_first_declaration() -> None:
    source = 'linked-lists [ "Stats": { structure: {\n Health: { }\n Health: { type: "integer" } } } ]'
    with pytest.raises(SectionError) as excinfo:
        parse(source)
    assert "duplicate structure field 'Health' (first declared at line 2)" in str(excinfo.value)
    assert excinfo.value.line == 3


def test_linked_list_structure_rejects_unknown_keys() -> None:
    with pytest.raises(StorySyntaxError):
        parse('linked-lists [ "Stats": { structure: { Health: { size: 4 } } } ]')


def test_character_linked_list_data_record_and_sequence() -> None:
    source = '''
    characters [
        "Saniyah": {
            linked-list-data: {
                Stats: { Health: 125, Mood: "calm" },
                Profession: [
                    "Smith": { Value: 3 },
                    "Fisher": { Value: 1.5 }
                ]
            }
        }
    ]
    '''
    character = parse(source).characters[0]
    assert character.linked_list_data == (
        LinkedListDataDef(
            list_name="Stats",
            records=(LinkedListRecordDef(values=(("Health", 125), ("Mood", "calm"))),),
        ),
        LinkedListDataDef(
            list_name="Profession",
            records=(
                LinkedListRecordDef(values=(("Value", 3),), label="Smith"),
                LinkedListRecordDef(values=(("Value", 1.5),), label="Fisher"),
            ),
            is_sequence=True,
        ),
    )
    assert character.get_linked_list_data("Stats").records[0].get("Mood") == "calm"


@pytest.mark.parametrize(
    ("source", "message"),
    [
        (
            'characters [ "A": { linked-list-data: { Stats: { }, Stats: { } } } ]',
            "linked list 'Stats' given twice",
        ),
        (
            'characters [ "A": { linked-list-data: { Stats: { Health: 1, Health: 2 } } } ]',
            "record field 'Health' given twice",
        ),
    ],
)
def test_character_linked_list_data_rules(source: str, message: str) -> None:
    with pytest.raises(SectionError) as excinfo:
        parse(source)
    assert message in str(excinfo.value)


def test_character_linked_list_values_must_be_literals() -> None:
    with pytest.raises(StorySyntaxError):
        parse('characters [ "A": { linked-list-data: { Stats: { Home: @node(1) } } } ]')


def test_group_linked_lists() -> None:
    group = parse('group 1 { linked-lists: [ "Stats", "Profession" ] }').groups[0]
    assert group.linked_lists == ("Stats", "Profession")


def test_group_tag_may_select_only_one_key() -> None:
    with pytest.raises(SectionError) as excinfo:
        parse('group 1 { tags: [ "Location": { "Village", "Lake" } ] }')
    assert "more than one key" in str(excinfo.value)


def test_group_tag_key_without_value() -> None:
    group = parse('group 1 { tags: [ "Location": { "Village" } ] }').groups[0]
    assert group.tags == (GroupTagDef(tag_name="Location", selected_key="Village"),)


def test_reference_of_wrong_kind_in_group_field() -> None:
    with pytest.raises(StorySyntaxError):
        parse("group 1 { chapter: @node(1) }")


def test_unknown_top_level_section() -> None:
    with pytest.raises(UnknownSectionError) as excinfo:
        parse('chapter 1 { }\nscene 1 { name: "x" }')
    assert excinfo.value.section == "scene"
    assert excinfo.value.line == 2


def test_non_word_at_top_level_is_syntax_error() -> None:
    with pytest.raises(StorySyntaxError):
        parse('"states" [ ]')


@pytest.mark.parametrize(
    "source",
    [
        'chapter 1 { title: "Wrong" }',
        'node 1 { name: "Wrong" }',
        'group 1 { nodes: { begin: 1 } }',
        "node 1 { title: 5 }",
        "chapter 1 { name: \"Open\"",
    ],
)
def test_malformed_sections(source: str) -> None:
    with pytest.raises(StorySyntaxError):
        parse(source)


def test_repeated_list_sections_accumulate() -> None:
    data = parse('states [ "Idle" ]\nchapter 1 { }\nstates [ "Poisoned" ]')
    assert [state.name for state in data.states] == ["Idle", "Poisoned"]
