"""Seeder files: INSERT statements whose records are loaded into empty tables."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from .common import SchemaExtractionError, find_sql_files, remove_comments

logger = logging.getLogger(__name__)

SEEDER_EXTENSIONS = ("pssql", "pgsql", "sql")

_INSERT_RE = re.compile(
    r"INSERT\s+INTO\s+(\w+)\s*\(\s*([^)]+)\s*\)\s*VALUES\s+"
    r"(.*?)(?:ON\s+(?:CONFLICT|DUPLICATE\s+KEY)|;|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_TUPLE_RE = re.compile(r"\(([^)]+)\)")
_QUOTES = ("'", '"')


@dataclass(frozen=True)
class SeederRecord:
    """One row of a seeder: column names with their SQL literal values."""

    columns: tuple[str, ...]
    values: tuple[str, ...]


@dataclass(frozen=True)
class SeederFile:
    """A parsed seeder file: target table, rows and the columns used as key."""

    name: str
    table_name: str
    records: tuple[SeederRecord, ...] = ()
    primary_key_columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class SeederResult:
    """Outcome of running one seeder."""

    table: str
    inserted: int
    skipped: int
    total_expected: int


@dataclass(frozen=True)
class SeederValidation:
    """Outcome of checking that a seeder's records exist, with missing key values."""

    table: str
    expected: int
    found: int
    missing: list[str] = field(default_factory=list)


def parse_value_tuple(tuple_str: str) -> list[str]:
    """Split the inside of a VALUES tuple on commas outside quoted strings."""
    values: list[str] = []
    current: list[str] = []
    in_string = False
    quote = " "

    for ch in tuple_str:
        if ch in _QUOTES and not in_string:
            in_string = True
            quote = ch
        elif in_string and ch == quote:
            in_string = False
        elif ch == "," and not in_string:
            values.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    tail = "".join(current).strip()
    if tail:
        values.append(tail)
    return values


def _parse_values(
    values_str: str, columns: tuple[str, ...], file_name: str, table_name: str
) -> list[SeederRecord]:
    records = []
    for match in _TUPLE_RE.finditer(values_str):
        inner = match.group(1)
        values = parse_value_tuple(inner)
        if len(values) == len(columns):
            records.append(SeederRecord(columns=columns, values=tuple(values)))
        else:
            logger.warning(
                "Seeder file '%s' for table '%s': Value count mismatch in tuple '%s': "
                "expected %d columns %s, got %d values %s",
                file_name,
                table_name,
                inner,
                len(columns),
                list(columns),
                len(values),
                values,
            )
    return records


def parse_seeder(path: str | os.PathLike[str], content: str) -> SeederFile | None:
    """Parse the first INSERT statement in ``content``; None if there is none.

    The first listed column is taken as the primary key.
    """
    name = Path(path).name
    match = _INSERT_RE.search(remove_comments(content))
    if match is None:
        logger.debug("No INSERT statement found in seeder: %s", name)
        return None

    table_name = match.group(1).lower()
    columns = tuple(col.strip().lower() for col in match.group(2).split(","))
    records = _parse_values(match.group(3), columns, name, table_name)

    return SeederFile(
        name=name,
        table_name=table_name,
        records=tuple(records),
        primary_key_columns=columns[:1],
    )


def find_seeder_files(seeders_dir: str | os.PathLike[str]) -> list[SeederFile]:
    """Parse every seeder file in ``seeders_dir``, sorted by file name.

    Files without an INSERT statement are skipped; a missing directory
    yields an empty list.
    """
    seeders = []
    for path in find_sql_files(seeders_dir, SEEDER_EXTENSIONS):
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaExtractionError(
                f"Failed to read seeder file {path}: {exc}"
            ) from exc
        seeder = parse_seeder(path, content)
        if seeder is not None:
            seeders.append(seeder)

    seeders.sort(key=lambda s: s.name)
    return seeders