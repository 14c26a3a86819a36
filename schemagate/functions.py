"""Discovery of function definition files for deployment."""

from __future__ import annotations

import os
from pathlib import Path

from .common import find_sql_files

FUNCTION_EXTENSIONS = ("pssql", "pgsql", "sql")


def find_function_files(functions_dir: str | os.PathLike[str]) -> list[Path]:
    """List function definition files in ``functions_dir``, sorted by path.

    Files ending in ``.pssql``, ``.pgsql`` or ``.sql`` are included. A missing
    directory yields an empty list.
    """
    return find_sql_files(functions_dir, FUNCTION_EXTENSIONS)