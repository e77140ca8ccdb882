"""Domain definition exports."""

from .action_def import (
    ActionDef,
    ChoiceAction,
    ChoiceOptionDef,
    CodeAction,
    DialogueDef,
    DialogueLineDef,
    EnterAction,
    EventAction,
    ExitAction,
    GotoAction,
    TimelineItemDef,
    is_action,
)
from .chapter_def import ChapterDef
from .character_def import CharacterDef
from .event_def import (
    AddStateEvent,
    AdjustVariableEvent,
    EventDef,
    ExitCurrentGroupEvent,
    ExitCurrentNodeEvent,
    LinkedListEvent,
    LinkedListModificationDef,
    NextNodeEvent,
    ProgressStoryEvent,
    RemoveStateEvent,
    UnknownEvent,
)
from .global_var_def import GlobalVariableDef
from .group_def import GroupDef, GroupTagDef, NodeGraphDef, PointDef
from .linked_list_def import (
    LinkedListDataDef,
    LinkedListDef,
    LinkedListFieldDef,
    LinkedListRecordDef,
)
from .node_def import NodeDef
from .state_def import StateDef
from .story_def import StoryData
from .tag_def import TagDefinitionDef

__all__ = [
    "ActionDef",
    "AddStateEvent",
    "AdjustVariableEvent",
    "ChapterDef",
    "CharacterDef",
    "ChoiceAction",
    "ChoiceOptionDef",
    "CodeAction",
    "DialogueDef",
    "DialogueLineDef",
    "EnterAction",
    "EventAction",
    "EventDef",
    "ExitAction",
    "ExitCurrentGroupEvent",
    "ExitCurrentNodeEvent",
    "GlobalVariableDef",
    "GotoAction",
    "GroupDef",
    "GroupTagDef",
    "LinkedListDataDef",
    "LinkedListDef",
    "LinkedListEvent",
    "LinkedListFieldDef",
    "LinkedListModificationDef",
    "LinkedListRecordDef",
    "NextNodeEvent",
    "NodeDef",
    "NodeGraphDef",
    "PointDef",
    "ProgressStoryEvent",
    "RemoveStateEvent",
    "StateDef",
    "StoryData",
    "TagDefinitionDef",
    "TimelineItemDef",
    "UnknownEvent",
    "is_action",
]
