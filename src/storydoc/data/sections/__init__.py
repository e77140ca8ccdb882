"""Section parser exports."""

from .builder import StoryBuilder
from .chapter_section import ChapterSection
from .characters_section import CharactersSection
from .globals_section import GlobalsSection
from .group_section import GroupSection
from .linked_lists_section import LinkedListsSection
from .node_section import NodeSection
from .states_section import StatesSection
from .tags_section import TagsSection

__all__ = [
    "ChapterSection",
    "CharactersSection",
    "GlobalsSection",
    "GroupSection",
    "LinkedListsSection",
    "NodeSection",
    "StatesSection",
    "StoryBuilder",
    "TagsSection",
]
