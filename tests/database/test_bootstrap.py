from __future__ import annotations

from pathlib import Path

from src.acquittal_system.acquittal_system.database.bootstrap import split_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_schema_file_splits_into_create_table_statements():
    statements = split_statements(SCHEMA.read_text(encoding="utf-8"))

    assert len(statements) == 7
    assert all(s.upper().startswith("CREATE TABLE IF NOT EXISTS") for s in statements)


def test_semicolons_inside_quotes_and_database_lines():
    sql = """
    CREATE DATABASE other;
    USE other;
    -- a comment; with a semicolon
    INSERT INTO t VALUES ('a;b', "c;d");
    SELECT 1
    """
    assert split_statements(sql) == ["INSERT INTO t VALUES ('a;b', \"c;d\")", "SELECT 1"]
