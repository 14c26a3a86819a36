"""Results of verifying a database schema against its declarative definition."""

from __future__ import annotations

from dataclasses import dataclass, field

_RULE = "═══════════════════════════════════════════════════════════════\n"


@dataclass
class ExtensionVerification:
    """Expected, installed and missing extensions."""

    expected: list[str] = field(default_factory=list)
    found: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


@dataclass
class TypeVerification:
    """Expected, installed and missing custom types."""

    expected: list[str] = field(default_factory=list)
    found: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


@dataclass
class TableMismatch:
    """A table whose live definition differs from the declared one."""

    table: str
    issue: str


@dataclass
class TableVerification:
    """Expected, found and missing tables, plus definition mismatches."""

    expected: list[str] = field(default_factory=list)
    found: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    mismatches: list[TableMismatch] = field(default_factory=list)


@dataclass
class MissingSeeder:
    """Seeder records absent from a table, with their key values or error details."""

    table: str
    count: int
    keys: list[str] = field(default_factory=list)


@dataclass
class SeederVerification:
    """Seeders whose records are not all present."""

    missing: list[MissingSeeder] = field(default_factory=list)


@dataclass
class VerificationResult:
    """Outcome of a full schema verification."""

    passed: bool = True
    extensions: ExtensionVerification = field(default_factory=ExtensionVerification)
    types: TypeVerification = field(default_factory=TypeVerification)
    tables: TableVerification = field(default_factory=TableVerification)
    seeders: SeederVerification = field(default_factory=SeederVerification)

    def error_log(self) -> str:
        """Render a human-readable report of everything that failed verification."""
        parts = [
            _RULE,
            "              SCHEMA VERIFICATION FAILED\n",
            _RULE,
            "\n",
        ]

        def section(title: str, lines: list[str]) -> None:
            if lines:
                parts.append(f"{title}:\n")
                parts.extend(lines)
                parts.append("\n")

        section("MISSING EXTENSIONS", [f"  - {ext}\n" for ext in self.extensions.missing])
        section("MISSING TYPES", [f"  - {name}\n" for name in self.types.missing])
        section(
            "TABLE SCHEMA MISMATCHES",
            [f"  - {m.table}: {m.issue}\n" for m in self.tables.mismatches],
        )
        section("MISSING TABLES", [f"  - {name}\n" for name in self.tables.missing])

        seeder_lines: list[str] = []
        for seeder in self.seeders.missing:
            seeder_lines.append(f"  - {seeder.table} ({seeder.count} missing records)\n")
            seeder_lines.extend(f"    {key}\n" for key in seeder.keys)
        section("MISSING SEEDER RECORDS", seeder_lines)

        parts.append(_RULE)
        parts.append("ACTION REQUIRED: Add migration(s) to fix schema drift\n")
        parts.append(_RULE)
        return "".join(parts)