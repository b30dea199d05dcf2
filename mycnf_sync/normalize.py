"""
Core normalization and reconciliation logic.

Responsibilities:
- canonical form of a value for each variable type
- desired vs observed equivalence
- option key/value normalization for option-file sections
- batch reconciliation + skip reporting
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Mapping, Optional

from . import rules
from .catalog import Catalog, VariableDefinition, VariableType
from .statements import render_set_statement

logger = logging.getLogger(__name__)

_INTEGER_NUMERAL = re.compile(r"[+-]?[0-9]+")


def _identity(value: str) -> str:
    return value


def _normalize_boolean(value: str) -> str:
    # Closed two-valued domain: anything not recognized as true is OFF.
    return rules.BOOLEAN_ON if value in rules.BOOLEAN_TRUE_VALUES else rules.BOOLEAN_OFF


def _normalize_integer(value: str) -> str:
    if not value:
        return value

    suffix = value[-1]
    if suffix not in rules.SIZE_SUFFIXES:
        return value

    numeral = value[:-1]
    if not _INTEGER_NUMERAL.fullmatch(numeral):
        return value

    power = rules.SIZE_SUFFIXES.index(suffix) + 1
    return str(int(numeral) * rules.SIZE_BASE ** power)


def _normalize_set(value: str) -> str:
    members = {m.strip() for m in value.split(rules.SET_SEPARATOR)}
    members.discard("")
    return rules.SET_SEPARATOR.join(sorted(members))


# Types compared case-insensitively (values are uppercased before the transform).
CASE_FOLDED_TYPES = frozenset({
    VariableType.BOOLEAN,
    VariableType.INTEGER,
    VariableType.NUMERIC,
    VariableType.ENUM,
    VariableType.SET,
    VariableType.BITMAP,
})

TRANSFORMS: Dict[VariableType, Callable[[str], str]] = {
    VariableType.BOOLEAN: _normalize_boolean,
    VariableType.STRING: _identity,
    VariableType.INTEGER: _normalize_integer,
    VariableType.NUMERIC: _identity,
    VariableType.FILE: _identity,
    VariableType.DIRECTORY: _identity,
    VariableType.ENUM: _identity,
    VariableType.SET: _normalize_set,
    VariableType.BITMAP: _identity,
}


def normalize_value(vartype: VariableType, value: str) -> str:
    """
    Canonical form of `value` under the rules of `vartype`.

    Idempotent for every type: normalize_value(t, normalize_value(t, v)) equals
    normalize_value(t, v).
    """
    if vartype in CASE_FOLDED_TYPES:
        value = value.upper()
    return TRANSFORMS[vartype](value)


def same(definition: VariableDefinition, a: str, b: str) -> bool:
    return normalize_value(definition.type, a) == normalize_value(definition.type, b)


def reconcile(definition: VariableDefinition, desired: str, observed: str) -> Optional[str]:
    """
    Return None when desired and observed are equivalent, otherwise the
    canonical desired value to apply.
    """
    canonical = normalize_value(definition.type, desired)
    if canonical == normalize_value(definition.type, observed):
        return None
    return canonical


def normalize_option_key(key: str) -> str:
    return key.strip().lower().replace("-", "_")


def _unquote(value: str) -> str:
    if len(value) > 1 and value[0] in ("'", '"') and value[-1] == value[0]:
        return value[1:-1]
    return value


def normalize_options(section: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """
    Flatten an option-file section into variable name -> value.

    Rules:
    - `key-name` and `KEY_NAME` both become `key_name`.
    - A bare key (no value) means ON.
    - Matching single or double quotes around a value are removed.
    - `skip_<name>` becomes `<name>` = OFF.
    - On key collisions after normalization the later entry wins.
    """
    options: Dict[str, str] = {}

    for key, value in section.items():
        name = normalize_option_key(key)
        value = rules.BOOLEAN_ON if value is None else _unquote(value.strip())

        if name.startswith(rules.SKIP_PREFIX):
            name = name[len(rules.SKIP_PREFIX):]
            value = rules.BOOLEAN_OFF

        options[name] = value

    return options


def reconcile_variables(
    catalog: Catalog,
    desired: Mapping[str, str],
    observed: Mapping[str, str],
) -> Dict[str, Any]:
    """
    Compare every desired variable against the live value.
    Returns a dict matching the API's reconciliation envelope.
    """
    changes: list[dict] = []
    statements: list[str] = []
    skipped: list[dict] = []
    unchanged = 0

    for definition in catalog:
        name = definition.name
        if name not in desired or name not in observed:
            continue

        value = reconcile(definition, desired[name], observed[name])
        if value is None:
            unchanged += 1
            continue

        logger.debug("%s: %r -> %r", name, observed[name], value)
        changes.append({
            "name": name,
            "type": definition.type.value,
            "desired": desired[name],
            "observed": observed[name],
            "value": value,
        })
        statements.append(render_set_statement(definition, value))

    for name in sorted(desired):
        if name not in catalog:
            issue = "unknown_variable"
        elif name not in observed:
            issue = "not_observed"
        else:
            continue
        skipped.append({
            "name": name,
            "issue": issue,
            "value": desired[name],
            "action": "skipped",
        })

    logger.info(
        "Reconciled %d variables: %d changed, %d skipped",
        len(changes) + unchanged, len(changes), len(skipped),
    )

    return {
        "changes": changes,
        "statements": statements,
        "report": {
            "summary": {
                "examined": len(changes) + unchanged,
                "changed": len(changes),
                "unchanged": unchanged,
                "skipped": len(skipped),
            },
            "skipped": skipped,
        },
    }
