"""SET GLOBAL statement text for applying reconciled values."""

from __future__ import annotations

import re

from .catalog import VariableDefinition, VariableType

# Values of these types are emitted bare when they look like plain literals.
UNQUOTED_TYPES = frozenset({VariableType.BOOLEAN, VariableType.INTEGER, VariableType.NUMERIC})

_BARE_LITERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:E[+-]?[0-9]+)?|ON|OFF")


def escape_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def quote_literal(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "''") + "'"


def render_set_statement(definition: VariableDefinition, value: str) -> str:
    if definition.type not in UNQUOTED_TYPES or not _BARE_LITERAL.fullmatch(value):
        value = quote_literal(value)
    return f"SET GLOBAL {escape_identifier(definition.name)} = {value};"
