"""PostgreSQL schema file tooling: function signatures, type compatibility, seeders, table ordering, migration checksums, verification reports and WSGI IP filtering."""

__version__ = "1.2.0"