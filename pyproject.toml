[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "schemagate"
version = "1.2.0"
description = "Schema file tooling for PostgreSQL: function signatures, type compatibility, seeders, table ordering, migration checksums and WSGI IP filtering"
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "schema", "migrations", "seeders", "type-compatibility", "wsgi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["schemagate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
