from __future__ import annotations

from typing import Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateEmail, EmailTaken
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "id, email, name, password, created_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        email=row["email"],
        name=row["name"],
        password_hash=row["password"],
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, name: str, email: str, password_hash: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users(name, email, password) VALUES(%s,%s,%s)",
                    (name, email, password_hash),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateEmail("User with this email already exists") from e
            raise

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> bool:
        updates: list[str] = []
        values: list = []
        if name is not None:
            updates.append("name=%s")
            values.append(name)
        if email is not None:
            updates.append("email=%s")
            values.append(email)
        if password_hash is not None:
            updates.append("password=%s")
            values.append(password_hash)
        if not updates:
            return False

        values.append(user_id)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE users SET {', '.join(updates)} WHERE id=%s", tuple(values))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise EmailTaken("Email is already taken") from e
            raise
