import importlib

import pytest

from mycnf_sync import rules
from mycnf_sync.catalog import (
    Catalog,
    CatalogConflictError,
    VariableDefinition,
    VariableType,
    build_catalog,
    default_catalog,
    load_catalog,
)


def test_lookup_is_exact_and_case_sensitive():
    catalog = build_catalog([
        ("sql_mode", VariableType.SET),
        ("autocommit", VariableType.BOOLEAN),
        ("max_connections", VariableType.INTEGER),
    ])
    assert catalog.lookup("sql_mode") == VariableDefinition("sql_mode", VariableType.SET)
    assert catalog.lookup("SQL_MODE") is None
    assert catalog.lookup("sql_mod") is None
    assert catalog.lookup("zzz") is None
    assert catalog.lookup("") is None
    assert [d.name for d in catalog] == ["autocommit", "max_connections", "sql_mode"]


def test_exact_duplicates_collapse():
    catalog = build_catalog([
        ("read_only", VariableType.BOOLEAN),
        ("read_only", "Boolean"),
    ])
    assert len(catalog) == 1


def test_conflicting_types_are_rejected():
    with pytest.raises(CatalogConflictError) as excinfo:
        build_catalog([
            ("sync_binlog", VariableType.INTEGER),
            ("sync_binlog", VariableType.STRING),
        ])
    assert excinfo.value.name == "sync_binlog"
    assert excinfo.value.first is VariableType.INTEGER
    assert excinfo.value.second is VariableType.STRING


def test_manual_type_labels():
    assert VariableType.parse("File name") is VariableType.FILE
    assert VariableType.parse("Directory name") is VariableType.DIRECTORY
    assert VariableType.parse("Enumeration") is VariableType.ENUM
    assert VariableType.parse("Bitmap") is VariableType.BITMAP
    with pytest.raises(ValueError):
        VariableType.parse("Float")


def test_catalog_requires_sorted_unique_definitions():
    with pytest.raises(ValueError):
        Catalog((
            VariableDefinition("b", VariableType.STRING),
            VariableDefinition("a", VariableType.STRING),
        ))


def test_load_catalog(tmp_path):
    path = tmp_path / "vars.csv"
    path.write_text("name,type\nssl_ca,File name\nlog_output,Set\n", encoding="utf-8")

    catalog = load_catalog(path)
    assert catalog.lookup("ssl_ca").type is VariableType.FILE
    assert "log_output" in catalog


def test_shipped_catalog():
    catalog = default_catalog()
    assert catalog is default_catalog()
    assert len(catalog) > 100

    names = [d.name for d in catalog]
    assert names == sorted(set(names))

    with open(rules.DEFAULT_CATALOG_PATH, encoding="utf-8") as fh:
        rows = fh.read().splitlines()[1:]
    assert [row.split(",")[0] for row in rows] == names

    assert catalog.lookup("tmp_table_size").type is VariableType.INTEGER
    assert catalog.lookup("sql_mode").type is VariableType.SET
    assert catalog.lookup("autocommit").type is VariableType.BOOLEAN
    assert catalog.lookup("ssl_capath").type is VariableType.DIRECTORY


def test_catalog_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.csv"
    path.write_text("name,type\nmy_custom_var,Integer\n", encoding="utf-8")

    monkeypatch.setenv("MYCNF_SYNC_CATALOG", str(path))
    importlib.reload(rules)
    default_catalog.cache_clear()
    try:
        assert rules.CATALOG_PATH == path
        catalog = default_catalog()
        assert len(catalog) == 1
        assert catalog.lookup("my_custom_var").type is VariableType.INTEGER
        assert catalog.lookup("tmp_table_size") is None
    finally:
        monkeypatch.delenv("MYCNF_SYNC_CATALOG")
        importlib.reload(rules)
        default_catalog.cache_clear()

    assert rules.CATALOG_PATH == rules.DEFAULT_CATALOG_PATH
    assert default_catalog().lookup("tmp_table_size") is not None
