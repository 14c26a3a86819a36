"""Migration files: discovery, checksums and dependency validation results."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .common import SchemaExtractionError, find_sql_files, sha256_hex

logger = logging.getLogger(__name__)

MIGRATION_EXTENSIONS = ("pssql",)


@dataclass(frozen=True)
class MigrationFile:
    """A migration file with the checksum of its exact contents."""

    name: str
    path: Path
    checksum: str


@dataclass(frozen=True)
class DependencyIssue:
    """A table that references a table defined by a later migration."""

    migration: str
    table: str
    depends_on: str
    depends_on_defined_in: str | None
    message: str


@dataclass
class DependencyValidation:
    """Whether migrations are in dependency order, with any issues found."""

    is_valid: bool = True
    issues: list[DependencyIssue] = field(default_factory=list)
    suggested_order: list[str] = field(default_factory=list)


def compute_checksum(content: str) -> str:
    """Hex SHA-256 of the migration text exactly as written."""
    return sha256_hex(content)


def _read_migration(path: Path) -> str:
    try:
        # Decode bytes directly so line endings are kept as written.
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaExtractionError(
            f"Failed to read migration file {path}: {exc}"
        ) from exc


def find_migration_files(migrations_dir: str | os.PathLike[str]) -> list[MigrationFile]:
    """List ``.pssql`` migrations in ``migrations_dir`` sorted by file name.

    A missing directory yields an empty list.
    """
    directory = Path(migrations_dir)
    if not directory.exists():
        logger.debug(
            "Migrations directory %s does not exist, returning empty list", directory
        )
        return []

    migrations = [
        MigrationFile(
            name=path.name,
            path=path,
            checksum=compute_checksum(_read_migration(path)),
        )
        for path in find_sql_files(directory, MIGRATION_EXTENSIONS)
    ]
    migrations.sort(key=lambda m: m.name)
    return migrations