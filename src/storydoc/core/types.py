"""Shared type aliases for the core and domain layers."""
from typing import Literal, Union

GlobalVarType = Literal["string", "int", "bool", "float"]
TagType = Literal["single", "keyvalue"]
ReferenceKind = Literal["node", "group", "chapter"]
Severity = Literal["ERROR", "WARN"]

ScalarValue = Union[str, int, bool, float]

GLOBAL_VAR_TYPES: tuple[GlobalVarType, ...] = ("string", "int", "bool", "float")
REFERENCE_KINDS: tuple[ReferenceKind, ...] = ("node", "group", "chapter")

__all__ = [
    "GLOBAL_VAR_TYPES",
    "GlobalVarType",
    "REFERENCE_KINDS",
    "ReferenceKind",
    "ScalarValue",
    "Severity",
    "TagType",
]
