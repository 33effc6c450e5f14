"""Create the configured database and apply `database/schema.sql` to it."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# A statement ends at ';' outside quotes; quoted runs may contain escaped chars.
_TOKEN_RE = re.compile(r"""'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|`[^`]*`|;|[^'"`;]+""", re.S)
_SKIP_RE = re.compile(r"(?im)^\s*(?:--.*|CREATE\s+DATABASE\b.*?;|USE\b.*?;)\s*$")


def split_statements(sql: str) -> list[str]:
    """Split a schema script into statements.

    Comment lines and any CREATE DATABASE / USE lines are dropped: the
    configured database always wins over whatever the script names.
    """

    statements: list[str] = []
    current: list[str] = []
    for token in _TOKEN_RE.findall(_SKIP_RE.sub("", sql)):
        if token == ";":
            stmt = "".join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
        else:
            current.append(token)
    tail = "".join(current).strip()
    if tail:
        statements.append(tail)
    return statements


@contextmanager
def _server(target: DBConfig, *, database: bool = True) -> Iterator:
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
    }
    if database:
        params["database"] = target.database
    conn = mysql.connector.connect(**params)
    try:
        yield conn
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _server(target, database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Idempotent: every table in the schema uses CREATE TABLE IF NOT EXISTS."""

    ensure_database_exists(db_config)
    schema_path = Path(schema_path)
    statements = split_statements(schema_path.read_text(encoding="utf-8"))

    with _server(DBConfig.from_dict(db_config)) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    logger.info("Applied %s schema statements from %s", len(statements), schema_path.name)


def list_tables(db_config: dict) -> list[str]:
    with _server(DBConfig.from_dict(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
