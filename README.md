# schemagate

Tooling for PostgreSQL schemas kept as plain SQL files. It reads function,
table, seeder and migration files, computes checksums, classifies column type
changes and orders tables by their foreign-key references. It also has a small
WSGI middleware that admits clients by IP network.

It is a library only. It needs nothing beyond the standard library.

## Modules

### `schemagate.signature`

- `parse_signature(sql)` finds the first `CREATE [OR REPLACE] FUNCTION` in `sql`.
  It returns a `FunctionSignature`, or `None` when there is no such statement.
  The signature holds `name` (lowercased), `parameters`, `return_type` (uppercased)
  and `body_checksum`. The checksum is the SHA-256 of the whole statement after
  comments are removed, whitespace is collapsed and the text is lowercased.
- `FunctionSignature.drop_signature()` returns the name plus the parameter types,
  for example `get_user(INT, BOOLEAN)`. A function with no parameters gives just
  its name. `tracking_key()` is the same text in lowercase.
- `FunctionParameter` has `name` (or `None`), `data_type` and `has_default`. An
  `IN`, `OUT` or `INOUT` mode word is dropped.
- `split_params(params_str)` splits on commas that are outside parentheses.
  `parse_parameters(params_str)` parses a parameter list.

### `schemagate.types`

`TypeChecker().check_compatibility(from_type, to_type)` returns a
`TypeCompatibility`. Its `kind` is a `CompatibilityKind`: `IDENTICAL`, `SAFE`,
`DATA_LOSS` or `INCOMPATIBLE`. Data loss and incompatible results also carry a
`reason`. `is_safe()` is true for identical and safe changes.

Type names are normalised before they are compared. For example, `INT4` becomes
`INTEGER` and `CHARACTER VARYING` becomes `VARCHAR`. Length changes on
`VARCHAR`/`CHAR` and precision or scale changes on `NUMERIC`/`DECIMAL` are judged
from the numbers given. Any pair of types that is not in the matrix is
incompatible. `format_matrix()` renders every safe widening and every data-loss
narrowing as text.

### `schemagate.seeder`

- `find_seeder_files(seeders_dir)` parses every `.pssql`, `.pgsql` and `.sql` file
  in the directory and returns a `SeederFile` list sorted by file name. Files
  without an `INSERT` are skipped. A missing directory gives an empty list.
- `parse_seeder(path, content)` reads the first `INSERT INTO table (cols) VALUES ...`
  statement. Value tuples whose length does not match the column list are logged
  and left out. The first column is taken as the primary key.
- `parse_value_tuple(tuple_str)` splits on commas that are outside quoted strings.
- `SeederRecord`, `SeederResult` and `SeederValidation` are plain result records.

### `schemagate.tables`

- `find_table_files(tables_dir)` lists `.pssql`, `.pgsql` and `.sql` files, sorted.
- `compute_checksum(content)` returns the SHA-256 of the SQL after comments are
  removed, whitespace is collapsed and the text is lowercased.
- `order_by_dependencies(tables)` orders `TableDefinition`s so that each table
  comes after the tables named in its `depends_on`. References to unknown tables
  and to the table itself are ignored. A cycle raises `CircularDependencyError`,
  which lists the tables that could not be placed.
- `TableDeployResult` is a summary record.

### `schemagate.migration`

- `find_migration_files(migrations_dir)` lists `.pssql` files as `MigrationFile`s,
  sorted by name. Each carries the SHA-256 of the file exactly as written.
- `compute_checksum(content)` is that raw SHA-256.
- `DependencyIssue` and `DependencyValidation` are result records.

### `schemagate.functions`

`find_function_files(functions_dir)` lists `.pssql`, `.pgsql` and `.sql` files, sorted.

### `schemagate.verifier`

`VerificationResult` gathers `ExtensionVerification`, `TypeVerification`,
`TableVerification` (with `TableMismatch` entries) and `SeederVerification` (with
`MissingSeeder` entries). `error_log()` renders the failures as a report that ends
with an action line.

### `schemagate.ip_filter`

- `is_allowed(allowed_networks, ip)` is true for loopback addresses and for
  addresses inside any of the given networks.
- `IpFilter(app, allowed_networks)` wraps a WSGI app. The client address is the
  first `X-Forwarded-For` entry when that entry is a valid IP. Otherwise it is
  `REMOTE_ADDR`. Clients that are not allowed, and requests with no usable
  address, get `403` with a JSON body `{"error":"unauthorized","message":...}`.

### `schemagate.common`

Shared helpers: `remove_comments`, `normalize_sql`, `sha256_hex`, `find_sql_files`
and the exception `SchemaExtractionError`. A directory that cannot be read raises
`SchemaExtractionError`, and so does an unreadable seeder or migration file.

## Example

```python
from schemagate.signature import parse_signature
from schemagate.types import TypeChecker

sig = parse_signature("""
    CREATE OR REPLACE FUNCTION get_user(p_id INT, p_deleted BOOLEAN DEFAULT FALSE)
    RETURNS TABLE (id INT) AS $$ BEGIN END; $$ LANGUAGE plpgsql;
""")
print(sig.drop_signature())          # get_user(INT, BOOLEAN)

checker = TypeChecker()
print(checker.check_compatibility("VARCHAR(50)", "TEXT").is_safe())    # True
print(checker.check_compatibility("BIGINT", "INTEGER").is_safe())      # False
```

```python
from schemagate.ip_filter import IpFilter

app = IpFilter(app, ["192.168.1.0/24"])
```

## What it does not do

Nothing here connects to a database. The package does not create tables, deploy
functions, apply migrations, insert or check seeder rows, or run a schema
verification. It parses files and builds the results and reports that such steps
would use. It provides no command-line tool and no HTTP server. `IpFilter` is only
middleware for an application you serve yourself.

## Tests

```
pip install -e .[test]
pytest
```