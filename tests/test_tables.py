from pathlib import Path

import pytest

from schemagate.common import SchemaExtractionError
from schemagate.tables import (
    CircularDependencyError,
    TableDefinition,
    TableDeployResult,
    compute_checksum,
    find_table_files,
    order_by_dependencies,
)


def _table(name, depends_on=()):
    return TableDefinition(
        name=name,
        file_path=Path(f"{name}.pssql"),
        sql=f"CREATE TABLE {name}...",
        checksum="abc",
        depends_on=list(depends_on),
    )


def test_find_table_files(tmp_path):
    (tmp_path / "users.pssql").write_text("CREATE TABLE users (id SERIAL PRIMARY KEY);")
    (tmp_path / "posts.sql").write_text("CREATE TABLE posts (id SERIAL PRIMARY KEY);")
    (tmp_path / "readme.md").write_text("docs")

    files = find_table_files(tmp_path)
    assert len(files) == 2
    assert [f.name for f in files] == ["posts.sql", "users.pssql"]


def test_find_table_files_missing_directory(tmp_path):
    assert find_table_files(tmp_path / "absent") == []


def test_order_by_dependencies():
    tables = [
        _table("posts", ["users"]),
        _table("users"),
        _table("comments", ["users", "posts"]),
    ]
    ordered = order_by_dependencies(tables)
    names = [t.name for t in ordered]

    assert names.index("users") < names.index("posts")
    assert names.index("users") < names.index("comments")
    assert names.index("posts") < names.index("comments")
    assert len(ordered) == 3


def test_order_independent_tables_is_deterministic():
    ordered = order_by_dependencies([_table("a"), _table("b"), _table("c")])
    assert [t.name for t in ordered] == ["c", "b", "a"]


def test_external_and_self_dependencies_ignored():
    ordered = order_by_dependencies([_table("a", ["a", "external"]), _table("b", ["a"])])
    assert [t.name for t in ordered] == ["a", "b"]


def test_order_empty():
    assert order_by_dependencies([]) == []


def test_circular_dependency_detection():
    tables = [_table("a", ["b"]), _table("b", ["a"])]
    with pytest.raises(CircularDependencyError, match="Circular dependency") as excinfo:
        order_by_dependencies(tables)
    assert excinfo.value.tables == ["a", "b"]
    assert isinstance(excinfo.value, SchemaExtractionError)


def test_circular_dependency_lists_only_cycle_members():
    tables = [_table("root"), _table("x", ["y", "root"]), _table("y", ["x"])]
    with pytest.raises(CircularDependencyError) as excinfo:
        order_by_dependencies(tables)
    assert excinfo.value.tables == ["x", "y"]
    assert str(excinfo.value) == "Circular dependency detected in table definitions: x, y"


def test_checksum_normalization():
    sql1 = "CREATE TABLE users (id INT);"
    sql2 = "CREATE   TABLE   users   (id   INT);"
    sql3 = "create table users (id int);"

    assert compute_checksum(sql1) == compute_checksum(sql2)
    assert compute_checksum(sql1) == compute_checksum(sql3)


def test_checksum_ignores_comments():
    plain = "CREATE TABLE users (id INT);"
    commented = "-- users\nCREATE TABLE users /* key */ (id INT);"
    assert compute_checksum(plain) == compute_checksum(commented)


def test_checksum_differs_for_different_content():
    first = compute_checksum("CREATE TABLE users (id INT);")
    second = compute_checksum("CREATE TABLE users (id BIGINT);")
    assert first != second
    assert len(first) == 64


def test_deploy_result_defaults():
    result = TableDeployResult()
    assert (result.tables_created, result.tables_skipped, result.creation_order) == (0, 0, [])