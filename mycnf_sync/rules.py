"""
Deterministic reconciliation rules.

Fixed constants shared by the catalog, the engine and the HTTP layer.
"""

import os
from pathlib import Path

# Magnitude suffixes accepted on Integer values, position n means 1024 ** (n + 1).
SIZE_SUFFIXES = ("K", "M", "G", "T", "P", "E")
SIZE_BASE = 1024

BOOLEAN_ON = "ON"
BOOLEAN_OFF = "OFF"
BOOLEAN_TRUE_VALUES = frozenset({"ON", "YES", "TRUE", "1"})

SET_SEPARATOR = ","

# Option file handling
SERVER_SECTION = "mysqld"
SKIP_PREFIX = "skip_"
OPTION_FILE_SUFFIXES = (".cnf", ".ini")

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "mysql_system_variables.csv"
CATALOG_PATH = Path(os.environ.get("MYCNF_SYNC_CATALOG", DEFAULT_CATALOG_PATH))

LOG_LEVEL = os.environ.get("MYCNF_SYNC_LOG_LEVEL", "INFO").upper()
