from schemagate.verifier import (
    MissingSeeder,
    TableMismatch,
    VerificationResult,
)


def test_verification_result_error_log():
    result = VerificationResult()
    result.passed = False
    result.extensions.missing = ["pgvector"]
    result.tables.mismatches.append(
        TableMismatch(
            table="users",
            issue="Column 'email' type mismatch: VARCHAR(100) -> VARCHAR(255)",
        )
    )

    log = result.error_log()

    assert "pgvector" in log
    assert "users" in log
    assert "email" in log
    assert "ACTION REQUIRED" in log


def test_verification_result_empty_is_passed():
    result = VerificationResult()
    assert result.passed is True
    assert result.extensions.missing == []
    assert result.types.missing == []
    assert result.tables.missing == []
    assert result.seeders.missing == []


def test_defaults_are_not_shared():
    first = VerificationResult()
    second = VerificationResult()
    first.extensions.missing.append("pgvector")
    assert second.extensions.missing == []


def test_empty_result_log_has_no_sections():
    log = VerificationResult().error_log()
    assert "SCHEMA VERIFICATION FAILED" in log
    assert "MISSING EXTENSIONS" not in log
    assert "MISSING TYPES" not in log
    assert "TABLE SCHEMA MISMATCHES" not in log
    assert "MISSING TABLES" not in log
    assert "MISSING SEEDER RECORDS" not in log
    assert log.endswith("\n")


def test_missing_types_and_tables_listed():
    result = VerificationResult(passed=False)
    result.types.missing = ["order_status"]
    result.tables.missing = ["orders"]

    log = result.error_log()
    assert "MISSING TYPES:\n  - order_status\n" in log
    assert "MISSING TABLES:\n  - orders\n" in log


def test_mismatches_precede_missing_tables():
    result = VerificationResult(passed=False)
    result.tables.missing = ["orders"]
    result.tables.mismatches = [TableMismatch(table="users", issue="changed")]

    log = result.error_log()
    assert log.index("TABLE SCHEMA MISMATCHES") < log.index("MISSING TABLES")
    assert "  - users: changed\n" in log


def test_seeder_keys_are_indented_under_table():
    result = VerificationResult(passed=False)
    result.seeders.missing.append(
        MissingSeeder(table="currencies", count=2, keys=["'USD'", "'EUR'"])
    )

    log = result.error_log()
    assert "  - currencies (2 missing records)\n    'USD'\n    'EUR'\n" in log


def test_seeder_without_keys_has_only_summary_line():
    result = VerificationResult(passed=False)
    result.seeders.missing.append(MissingSeeder(table="roles", count=1))

    log = result.error_log()
    section = log.split("MISSING SEEDER RECORDS:\n", 1)[1]
    assert section.startswith("  - roles (1 missing records)\n\n")