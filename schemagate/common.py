"""Helpers shared by the schema loaders: comment stripping, checksums, file discovery."""

from __future__ import annotations

import hashlib
import os
import re
from collections.abc import Iterable
from pathlib import Path

_LINE_COMMENT = re.compile(r"--[^\n]*")
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_WHITESPACE = re.compile(r"\s+")


class SchemaExtractionError(Exception):
    """Raised when schema files cannot be read or interpreted."""

    def __init__(self, cause: str) -> None:
        super().__init__(cause)
        self.cause = cause


def remove_comments(sql: str) -> str:
    """Strip ``--`` line comments and ``/* */`` block comments from SQL."""
    without_lines = _LINE_COMMENT.sub("", sql)
    return _BLOCK_COMMENT.sub("", without_lines)


def normalize_sql(sql: str) -> str:
    """Collapse whitespace runs to one space, trim and lowercase."""
    return _WHITESPACE.sub(" ", sql).strip().lower()


def sha256_hex(text: str) -> str:
    """Return the hex SHA-256 digest of the UTF-8 encoding of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def find_sql_files(
    directory: str | os.PathLike[str], extensions: Iterable[str]
) -> list[Path]:
    """List regular files in ``directory`` whose extension is one of ``extensions``.

    A missing directory yields an empty list. The result is sorted by path.
    """
    directory = Path(directory)
    if not directory.exists():
        return []

    wanted = {ext.lstrip(".") for ext in extensions}
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise SchemaExtractionError(f"Failed to read directory {directory}: {exc}") from exc

    return sorted(
        path for path in entries if path.is_file() and path.suffix[1:] in wanted and path.suffix
    )