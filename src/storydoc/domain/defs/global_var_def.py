"""Global variable definitions."""
from __future__ import annotations

from dataclasses import dataclass

from storydoc.core.types import GlobalVarType, ScalarValue


@dataclass(frozen=True, slots=True)
class GlobalVariableDef:
    """Typed global variable with a default of the declared type."""

    name: str
    type: GlobalVarType
    default: ScalarValue
