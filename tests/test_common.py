from pathlib import Path

import pytest

from schemagate.common import (
    SchemaExtractionError,
    find_sql_files,
    normalize_sql,
    remove_comments,
    sha256_hex,
)

EXTENSIONS = ("pssql", "pgsql", "sql")


def test_remove_line_comment():
    cleaned = remove_comments("-- This is a comment\nSELECT 1;")
    assert "comment" not in cleaned
    assert "SELECT 1;" in cleaned


def test_remove_block_comment_across_lines():
    cleaned = remove_comments("SELECT /* Multi-line\n comment */ 1;")
    assert cleaned == "SELECT  1;"


def test_remove_comments_is_non_greedy():
    cleaned = remove_comments("a /* x */ b /* y */ c")
    assert cleaned == "a  b  c"


def test_remove_comments_leaves_plain_sql_untouched():
    sql = "CREATE TABLE users (id INT);"
    assert remove_comments(sql) == sql


def test_normalize_collapses_whitespace_and_lowercases():
    assert normalize_sql("  CREATE\n\tTABLE   Users  ") == "create table users"


def test_normalize_is_idempotent():
    once = normalize_sql("SELECT   *\nFROM  T")
    assert normalize_sql(once) == once


def test_sha256_known_value():
    assert sha256_hex("abc") == (
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


def test_sha256_shape_and_determinism():
    first = sha256_hex("CREATE TABLE test (id INT);")
    assert len(first) == 64
    assert set(first) <= set("0123456789abcdef")
    assert first == sha256_hex("CREATE TABLE test (id INT);")
    assert first != sha256_hex("CREATE TABLE other (id INT);")


def test_find_sql_files_missing_directory(tmp_path: Path):
    assert find_sql_files(tmp_path / "absent", EXTENSIONS) == []


def test_find_sql_files_filters_and_sorts(tmp_path: Path):
    (tmp_path / "b.sql").write_text("x")
    (tmp_path / "a.pssql").write_text("x")
    (tmp_path / "c.pgsql").write_text("x")
    (tmp_path / "readme.md").write_text("docs")
    (tmp_path / "nested.sql").mkdir()

    files = find_sql_files(tmp_path, EXTENSIONS)
    assert [p.name for p in files] == ["a.pssql", "b.sql", "c.pgsql"]


def test_find_sql_files_respects_extension_list(tmp_path: Path):
    (tmp_path / "one.sql").write_text("x")
    (tmp_path / "two.pssql").write_text("x")
    files = find_sql_files(tmp_path, ["pssql"])
    assert [p.name for p in files] == ["two.pssql"]


def test_find_sql_files_on_plain_file_raises(tmp_path: Path):
    target = tmp_path / "file.sql"
    target.write_text("x")
    with pytest.raises(SchemaExtractionError) as info:
        find_sql_files(target, EXTENSIONS)
    assert "Failed to read directory" in info.value.cause