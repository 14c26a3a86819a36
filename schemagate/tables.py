"""Declarative table definitions: file discovery, checksums and creation order."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .common import (
    SchemaExtractionError,
    find_sql_files,
    normalize_sql,
    remove_comments,
    sha256_hex,
)

logger = logging.getLogger(__name__)

TABLE_EXTENSIONS = ("pssql", "pgsql", "sql")


class CircularDependencyError(SchemaExtractionError):
    """Raised when table definitions reference each other in a cycle."""

    def __init__(self, tables: list[str]) -> None:
        super().__init__(
            f"Circular dependency detected in table definitions: {', '.join(tables)}"
        )
        self.tables = tables


@dataclass
class TableDefinition:
    """A table declared in a definition file, with the tables it references."""

    name: str
    file_path: Path
    sql: str
    checksum: str
    depends_on: list[str] = field(default_factory=list)


@dataclass
class TableDeployResult:
    """Summary of a table deployment."""

    tables_created: int = 0
    tables_skipped: int = 0
    creation_order: list[str] = field(default_factory=list)


def compute_checksum(content: str) -> str:
    """SHA-256 of the SQL with comments removed, whitespace collapsed and lowercased."""
    return sha256_hex(normalize_sql(remove_comments(content)))


def find_table_files(tables_dir: str | os.PathLike[str]) -> list[Path]:
    """List table definition files in ``tables_dir``, sorted by path.

    Files ending in ``.pssql``, ``.pgsql`` or ``.sql`` are included. A missing
    directory yields an empty list.
    """
    return find_sql_files(tables_dir, TABLE_EXTENSIONS)


def order_by_dependencies(tables: Iterable[TableDefinition]) -> list[TableDefinition]:
    """Order tables so every table follows the tables it references.

    References to tables not in ``tables`` are ignored, as are self-references.
    Among tables that are ready at the same time, the one with the greatest
    name is taken first. Raises :class:`CircularDependencyError` on a cycle.
    """
    tables = list(tables)
    if not tables:
        return tables

    name_to_idx = {table.name: idx for idx, table in enumerate(tables)}
    in_degree = [0] * len(tables)
    dependents: list[list[int]] = [[] for _ in tables]

    for idx, table in enumerate(tables):
        for dep_name in table.depends_on:
            dep_idx = name_to_idx.get(dep_name)
            if dep_idx is not None and dep_idx != idx:
                dependents[dep_idx].append(idx)
                in_degree[idx] += 1

    def by_name(i: int) -> str:
        return tables[i].name

    ready = sorted((i for i, deg in enumerate(in_degree) if deg == 0), key=by_name)
    ordered_indices: list[int] = []

    while ready:
        idx = ready.pop()
        ordered_indices.append(idx)
        for dependent in dependents[idx]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                ready.append(dependent)
                ready.sort(key=by_name)

    if len(ordered_indices) != len(tables):
        placed = set(ordered_indices)
        remaining = [t.name for i, t in enumerate(tables) if i not in placed]
        raise CircularDependencyError(remaining)

    ordered = [tables[i] for i in ordered_indices]

    logger.info("Table creation order (based on dependencies):")
    for position, table in enumerate(ordered, start=1):
        logger.info("  %d. %s", position, table.name)

    return ordered