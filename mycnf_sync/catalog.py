"""
Static catalog of MySQL system variables.

The catalog maps a variable name to its semantic type. It is built once from a
sorted data asset and only read afterwards; lookups are binary searches over
an immutable tuple.
"""

from __future__ import annotations

import bisect
import csv
import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple, Union

from . import rules

logger = logging.getLogger(__name__)


class VariableType(str, Enum):
    BOOLEAN = "Boolean"
    STRING = "String"
    INTEGER = "Integer"
    NUMERIC = "Numeric"
    FILE = "File"
    DIRECTORY = "Directory"
    ENUM = "Enum"
    SET = "Set"
    BITMAP = "Bitmap"

    @classmethod
    def parse(cls, label: str) -> "VariableType":
        """Accept either the member value or the label used by the reference manual."""
        label = label.strip()
        if label in _DOC_LABELS:
            return _DOC_LABELS[label]
        try:
            return cls(label)
        except ValueError:
            raise ValueError(f"Unrecognized variable type: {label!r}") from None


_DOC_LABELS = {
    "File name": VariableType.FILE,
    "Directory name": VariableType.DIRECTORY,
    "Enumeration": VariableType.ENUM,
}


@dataclass(frozen=True)
class VariableDefinition:
    name: str
    type: VariableType


class CatalogConflictError(ValueError):
    """The same variable name was declared with two different types."""

    def __init__(self, name: str, first: VariableType, second: VariableType):
        super().__init__(f"{name!r} declared as both {first.value} and {second.value}")
        self.name = name
        self.first = first
        self.second = second


class Catalog:
    """Immutable, name-sorted table of variable definitions."""

    __slots__ = ("_definitions", "_names")

    def __init__(self, definitions: Tuple[VariableDefinition, ...]):
        names = tuple(d.name for d in definitions)
        if any(a >= b for a, b in zip(names, names[1:])):
            raise ValueError("catalog definitions must be sorted by name and unique")
        self._definitions = definitions
        self._names = names

    def lookup(self, name: str) -> Optional[VariableDefinition]:
        i = bisect.bisect_left(self._names, name)
        if i < len(self._names) and self._names[i] == name:
            return self._definitions[i]
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __iter__(self) -> Iterator[VariableDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"Catalog({len(self)} variables)"


def build_catalog(entries: Iterable[Tuple[str, Union[VariableType, str]]]) -> Catalog:
    """
    Build a catalog from (name, type) pairs given in any order.

    Rules:
    - An exact duplicate (same name, same type) collapses to one definition.
    - The same name with a different type raises CatalogConflictError.
    - Type strings go through VariableType.parse, so manual labels are accepted.
    """
    by_name: dict[str, VariableType] = {}

    for name, vartype in entries:
        if not isinstance(vartype, VariableType):
            vartype = VariableType.parse(vartype)

        known = by_name.get(name)
        if known is None:
            by_name[name] = vartype
        elif known is not vartype:
            raise CatalogConflictError(name, known, vartype)

    return Catalog(tuple(VariableDefinition(n, by_name[n]) for n in sorted(by_name)))


def load_catalog(path: Path) -> Catalog:
    """Read a `name,type` CSV asset into a catalog."""
    with open(path, newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        catalog = build_catalog((row["name"].strip(), row["type"]) for row in reader)

    logger.info("Loaded %d variable definitions from %s", len(catalog), path)
    return catalog


@lru_cache(maxsize=None)
def default_catalog() -> Catalog:
    return load_catalog(rules.CATALOG_PATH)
