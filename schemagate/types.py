"""PostgreSQL column type compatibility matrix.

Classifies a column type change as identical, safe (no data loss),
data loss (may truncate or lose precision) or incompatible (unknown or
not castable).
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

_LENGTH_RE = re.compile(r"\((\d+)\)")
_PRECISION_SCALE_RE = re.compile(r"\((\d+)(?:,\s*(\d+))?\)")

_STRING_TYPES = frozenset({"VARCHAR", "CHAR", "CHARACTER"})
_NUMERIC_TYPES = frozenset({"NUMERIC", "DECIMAL"})

# Applied in order; each replacement affects every occurrence.
_NORMALIZATIONS = (
    ("CHARACTER VARYING", "VARCHAR"),
    ("INT4", "INTEGER"),
    ("INT8", "BIGINT"),
    ("INT2", "SMALLINT"),
    ("FLOAT4", "REAL"),
    ("FLOAT8", "DOUBLE PRECISION"),
    ("BOOL", "BOOLEAN"),
    ("TIMESTAMP WITHOUT TIME ZONE", "TIMESTAMP"),
    ("TIMESTAMP WITH TIME ZONE", "TIMESTAMPTZ"),
)

_SMALLINT_TARGETS = (
    "SMALLSERIAL", "INTEGER", "INT", "INT4", "BIGINT", "INT8", "NUMERIC",
    "DECIMAL", "REAL", "FLOAT4", "DOUBLE PRECISION", "FLOAT8",
)
_INTEGER_TARGETS = (
    "SERIAL", "BIGINT", "INT8", "NUMERIC", "DECIMAL", "DOUBLE PRECISION", "FLOAT8",
)
_BIGINT_TARGETS = ("BIGSERIAL", "NUMERIC", "DECIMAL")
_CHAR_TARGETS = ("VARCHAR", "CHARACTER VARYING", "TEXT")
_REAL_TARGETS = ("DOUBLE PRECISION", "FLOAT8", "NUMERIC", "DECIMAL")
_TIME_TARGETS = ("TIME WITH TIME ZONE", "TIMETZ")
_BOOLEAN_TARGETS = ("INTEGER", "INT", "SMALLINT", "BIGINT")

_SAFE_WIDENINGS: dict[str, tuple[str, ...]] = {
    # Integers
    "SMALLINT": _SMALLINT_TARGETS,
    "INT2": _SMALLINT_TARGETS,
    "INTEGER": _INTEGER_TARGETS,
    "INT": _INTEGER_TARGETS,
    "INT4": _INTEGER_TARGETS,
    "BIGINT": _BIGINT_TARGETS,
    "INT8": _BIGINT_TARGETS,
    # Strings
    "CHAR": _CHAR_TARGETS,
    "CHARACTER": _CHAR_TARGETS,
    "VARCHAR": ("TEXT",),
    "CHARACTER VARYING": ("TEXT",),
    # Floating point
    "REAL": _REAL_TARGETS,
    "FLOAT4": _REAL_TARGETS,
    "DOUBLE PRECISION": ("NUMERIC", "DECIMAL"),
    "FLOAT8": ("NUMERIC", "DECIMAL"),
    # Date and time
    "DATE": (
        "TIMESTAMP", "TIMESTAMP WITHOUT TIME ZONE", "TIMESTAMPTZ", "TIMESTAMP WITH TIME ZONE",
    ),
    "TIMESTAMP": ("TIMESTAMPTZ", "TIMESTAMP WITH TIME ZONE"),
    "TIMESTAMP WITHOUT TIME ZONE": ("TIMESTAMP WITH TIME ZONE", "TIMESTAMPTZ"),
    "TIME": _TIME_TARGETS,
    "TIME WITHOUT TIME ZONE": _TIME_TARGETS,
    # Boolean
    "BOOLEAN": _BOOLEAN_TARGETS,
    "BOOL": _BOOLEAN_TARGETS,
    # UUID
    "UUID": ("TEXT", "VARCHAR", "CHARACTER VARYING"),
    # JSON
    "JSON": ("JSONB", "TEXT"),
    "JSONB": ("JSON", "TEXT"),
    # Serial types
    "SERIAL": ("BIGSERIAL", "INTEGER", "BIGINT"),
    "SMALLSERIAL": ("SERIAL", "BIGSERIAL", "SMALLINT", "INTEGER", "BIGINT"),
    "BIGSERIAL": ("BIGINT", "NUMERIC"),
}

_BIGINT_TO_INT = "May overflow: BIGINT max 9.2e18, INTEGER max 2.1e9"
_INT_TO_SMALLINT = "May overflow: INTEGER max 2.1e9, SMALLINT max 32767"
_DOUBLE_TO_REAL = "May lose precision: DOUBLE has 15 digits, REAL has 6"
_INT_TO_BOOL = "Only 0 and 1 map to FALSE/TRUE, other values become TRUE"
_TEXT_TO_JSON = "May fail: TEXT must contain valid JSON"

_DATALOSS_NARROWINGS: dict[tuple[str, str], str] = {
    ("BIGINT", "INTEGER"): _BIGINT_TO_INT,
    ("BIGINT", "INT"): _BIGINT_TO_INT,
    ("BIGINT", "SMALLINT"): "May overflow: BIGINT max 9.2e18, SMALLINT max 32767",
    ("INTEGER", "SMALLINT"): _INT_TO_SMALLINT,
    ("INT", "SMALLINT"): _INT_TO_SMALLINT,
    ("INT4", "INT2"): _INT_TO_SMALLINT,
    ("TEXT", "VARCHAR"): "May truncate: TEXT has no limit, VARCHAR has limit",
    ("TEXT", "CHAR"): "May truncate: TEXT has no limit, CHAR is fixed length",
    ("DOUBLE PRECISION", "REAL"): _DOUBLE_TO_REAL,
    ("FLOAT8", "FLOAT4"): _DOUBLE_TO_REAL,
    ("NUMERIC", "REAL"): "May lose precision: NUMERIC is exact, REAL is approximate",
    ("NUMERIC", "DOUBLE PRECISION"): "May lose precision: NUMERIC is exact, DOUBLE is approximate",
    ("TIMESTAMP", "DATE"): "Loses time component",
    ("TIMESTAMPTZ", "DATE"): "Loses time and timezone",
    ("TIMESTAMP WITH TIME ZONE", "DATE"): "Loses time and timezone",
    ("INTEGER", "BOOLEAN"): _INT_TO_BOOL,
    ("INT", "BOOLEAN"): _INT_TO_BOOL,
    ("TEXT", "UUID"): "May fail: TEXT must contain valid UUID format",
    ("VARCHAR", "UUID"): "May fail: VARCHAR must contain valid UUID format",
    ("TEXT", "JSON"): _TEXT_TO_JSON,
    ("TEXT", "JSONB"): _TEXT_TO_JSON,
}

_RULE = "═══════════════════════════════════════════════════════════════\n"
_THIN_RULE = "───────────────────────────────────────────────────────────────\n"


class CompatibilityKind(enum.Enum):
    """How a type change affects existing data."""

    IDENTICAL = "identical"
    SAFE = "safe"
    DATA_LOSS = "data_loss"
    INCOMPATIBLE = "incompatible"


@dataclass(frozen=True)
class TypeCompatibility:
    """Outcome of a type compatibility check, with a reason for lossy or unknown changes."""

    kind: CompatibilityKind
    reason: str | None = None

    @classmethod
    def identical(cls) -> TypeCompatibility:
        return cls(CompatibilityKind.IDENTICAL)

    @classmethod
    def safe(cls) -> TypeCompatibility:
        return cls(CompatibilityKind.SAFE)

    @classmethod
    def data_loss(cls, reason: str) -> TypeCompatibility:
        return cls(CompatibilityKind.DATA_LOSS, reason)

    @classmethod
    def incompatible(cls, reason: str) -> TypeCompatibility:
        return cls(CompatibilityKind.INCOMPATIBLE, reason)

    def is_safe(self) -> bool:
        """True for identical and safe changes."""
        return self.kind in (CompatibilityKind.IDENTICAL, CompatibilityKind.SAFE)


def _normalize_type(type_name: str) -> str:
    result = type_name.strip().upper()
    for old, new in _NORMALIZATIONS:
        result = result.replace(old, new)
    return result


def _base_type(type_name: str) -> str:
    head, paren, _ = type_name.partition("(")
    return head.strip() if paren else type_name


def _length(type_name: str) -> int | None:
    match = _LENGTH_RE.search(type_name)
    return int(match.group(1)) if match else None


def _precision_scale(type_name: str) -> tuple[int, int] | None:
    match = _PRECISION_SCALE_RE.search(type_name)
    if match is None:
        return None
    scale = match.group(2)
    return int(match.group(1)), int(scale) if scale is not None else 0


class TypeChecker:
    """Checks whether a PostgreSQL column type change is safe."""

    def __init__(self) -> None:
        self.safe_widenings: dict[str, tuple[str, ...]] = dict(_SAFE_WIDENINGS)
        self.dataloss_narrowings: dict[tuple[str, str], str] = dict(_DATALOSS_NARROWINGS)

    def check_compatibility(self, from_type: str, to_type: str) -> TypeCompatibility:
        """Classify changing a column from ``from_type`` to ``to_type``."""
        from_norm = _normalize_type(from_type)
        to_norm = _normalize_type(to_type)

        if from_norm == to_norm:
            return TypeCompatibility.identical()

        result = self._check_varchar_change(from_norm, to_norm)
        if result is not None:
            return result

        result = self._check_numeric_change(from_norm, to_norm)
        if result is not None:
            return result

        from_base = _base_type(from_norm)
        to_base = _base_type(to_norm)

        if to_base in self.safe_widenings.get(from_base, ()):
            return TypeCompatibility.safe()

        reason = self.dataloss_narrowings.get((from_base, to_base))
        if reason is not None:
            return TypeCompatibility.data_loss(reason)

        if from_base in self.safe_widenings.get(to_base, ()):
            return TypeCompatibility.data_loss(
                f"Narrowing from {from_type} to {to_type} may lose data"
            )

        return TypeCompatibility.incompatible(
            f"Unknown type change: {from_type} -> {to_type}. "
            "Add to compatibility matrix if this should be allowed."
        )

    @staticmethod
    def _check_varchar_change(from_norm: str, to_norm: str) -> TypeCompatibility | None:
        to_base = _base_type(to_norm)
        if _base_type(from_norm) not in _STRING_TYPES or to_base not in _STRING_TYPES:
            return None

        from_len = _length(from_norm)
        to_len = _length(to_norm)

        if from_len is not None and to_len is not None:
            if to_len >= from_len:
                return TypeCompatibility.safe()
            return TypeCompatibility.data_loss(
                f"May truncate: reducing from {from_len} to {to_len} characters"
            )
        if from_len is not None:
            return TypeCompatibility.safe() if to_base == "VARCHAR" else None
        if to_len is not None:
            return TypeCompatibility.data_loss("May truncate: adding length limit")
        return TypeCompatibility.safe()

    @staticmethod
    def _check_numeric_change(from_norm: str, to_norm: str) -> TypeCompatibility | None:
        if _base_type(from_norm) not in _NUMERIC_TYPES:
            return None
        if _base_type(to_norm) not in _NUMERIC_TYPES:
            return None

        from_ps = _precision_scale(from_norm)
        to_ps = _precision_scale(to_norm)

        if from_ps is not None and to_ps is not None:
            (from_p, from_s), (to_p, to_s) = from_ps, to_ps
            if to_p >= from_p and to_s >= from_s:
                return TypeCompatibility.safe()
            return TypeCompatibility.data_loss(
                f"May lose precision: NUMERIC({from_p},{from_s}) to NUMERIC({to_p},{to_s})"
            )
        if from_ps is not None:
            return TypeCompatibility.safe()
        if to_ps is not None:
            return TypeCompatibility.data_loss("May lose precision: adding precision limit")
        return TypeCompatibility.identical()

    def format_matrix(self) -> str:
        """Render the compatibility matrix as readable text."""
        lines = [
            _RULE,
            "              POSTGRESQL TYPE COMPATIBILITY MATRIX\n",
            _RULE,
            "\n",
            "SAFE WIDENINGS (no data loss):\n",
            _THIN_RULE,
        ]
        lines.extend(
            f"  {source} → {', '.join(targets)}\n"
            for source, targets in sorted(self.safe_widenings.items())
        )
        lines.append("\nDATALOSS NARROWINGS (may lose data):\n")
        lines.append(_THIN_RULE)
        lines.extend(
            f"  {source} → {target}\n    Reason: {reason}\n"
            for (source, target), reason in sorted(self.dataloss_narrowings.items())
        )
        lines.append("\n")
        lines.append(_RULE)
        return "".join(lines)