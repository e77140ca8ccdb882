"""Parser for the ``states`` section."""
from __future__ import annotations

from storydoc.data.sections.base import SectionParserBase
from storydoc.domain.defs import StateDef


class StatesSection(SectionParserBase):
    """``states [ "Idle", "Poisoned" ]``"""

    section = "states"

    def parse(self) -> None:
        self._cursor.advance()
        for name, token in self._parse_string_list("a state name"):
            if not name.strip():
                raise self._error(name, "state name must not be empty", token)
            self._builder.add_state(StateDef(name=name), token)
