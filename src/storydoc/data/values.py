"""Literal value parsing for global defaults and event arguments."""
from __future__ import annotations

from storydoc.core.types import GLOBAL_VAR_TYPES, GlobalVarType, ScalarValue
from storydoc.data.errors import StorySyntaxError, TypeMismatchError
from storydoc.data.lexer import Token, TokenKind

_LITERAL_TYPES: dict[TokenKind, GlobalVarType] = {
    TokenKind.STRING: "string",
    TokenKind.INT: "int",
    TokenKind.BOOL: "bool",
    TokenKind.FLOAT: "float",
}

_ZERO_VALUES: dict[str, ScalarValue] = {"string": "", "int": 0, "bool": False, "float": 0.0}


def is_literal(token: Token) -> bool:
    return token.kind in _LITERAL_TYPES


def parse_var_type(token: Token) -> GlobalVarType:
    """Return the declared variable type named by a string or bare word."""
    if token.kind in (TokenKind.STRING, TokenKind.WORD) and token.value in GLOBAL_VAR_TYPES:
        return token.value  # type: ignore[return-value]
    raise StorySyntaxError(
        "a variable type (" + ", ".join(GLOBAL_VAR_TYPES) + ")",
        token.describe(),
        token.line,
        token.column,
    )


def parse_inferred_value(token: Token) -> ScalarValue:
    """Return the literal's value, typed by its own lexical form."""
    if not is_literal(token):
        raise StorySyntaxError("a literal value", token.describe(), token.line, token.column)
    return token.value  # type: ignore[return-value]


def parse_typed_value(
    token: Token,
    expected: GlobalVarType,
    *,
    section: str = "value",
    entity: str | None = None,
    allow_int_for_float: bool = True,
) -> ScalarValue:
    """Return the literal's value, enforcing the declared ``expected`` type."""
    value = parse_inferred_value(token)
    found = _LITERAL_TYPES[token.kind]
    if found == expected:
        return value
    if expected == "float" and found == "int" and allow_int_for_float:
        return float(value)
    raise TypeMismatchError(
        section,
        entity,
        f"default {token.text} is {found}, declared type is {expected}",
        token.line,
        token.column,
    )


def literal_type(value: ScalarValue) -> GlobalVarType:
    """Return the variable type a parsed literal value belongs to."""
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    return "string"


def zero_value(var_type: GlobalVarType) -> ScalarValue:
    """Return the default used when a variable declares no default."""
    return _ZERO_VALUES[var_type]
