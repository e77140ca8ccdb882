"""Linked-list definitions and the per-character data stored against them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from storydoc.core.types import ScalarValue


@dataclass(frozen=True, slots=True)
class LinkedListFieldDef:
    name: str
    type: str | None = None


@dataclass(frozen=True, slots=True)
class LinkedListDef:
    """Named record structure that characters and groups can carry.

    ``scope`` is kept as written (``character``, ``group`` or ``both`` in
    practice); the runtime decides what it means.
    """

    name: str
    scope: str | None = None
    fields: Tuple[LinkedListFieldDef, ...] = ()

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.fields)

    def has_field(self, name: str) -> bool:
        return name in self.field_names


@dataclass(frozen=True, slots=True)
class LinkedListRecordDef:
    """One record of values; ``label`` is the entry key inside a ``[...]`` list."""

    values: Tuple[Tuple[str, ScalarValue], ...] = ()
    label: str | None = None

    def get(self, field: str) -> ScalarValue:
        for name, value in self.values:
            if name == field:
                return value
        raise KeyError(field)


@dataclass(frozen=True, slots=True)
class LinkedListDataDef:
    """Values a character holds for one linked list.

    A ``{...}`` block holds a single record; a ``[...]`` block holds a
    sequence of labelled records.
    """

    list_name: str
    records: Tuple[LinkedListRecordDef, ...] = ()
    is_sequence: bool = False
