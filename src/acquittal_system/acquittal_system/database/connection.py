from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling

from ..core.constants import DEFAULT_POOL_SIZE

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = DEFAULT_POOL_SIZE

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config.get("password", "")),
            database=str(db_config["database"]),
            pool_size=int(db_config.get("pool_size", DEFAULT_POOL_SIZE)),
        )


class DatabaseConnection:
    """Bounded connection pool shared by all repositories.

    The pool is created lazily on the first `connect()` so building the app
    does not require a reachable database. Closing a pooled connection hands
    it back to the pool.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        with self._lock:
            if self._pool is None:
                logger.info(
                    "Creating MySQL pool size=%s target=%s@%s:%s/%s",
                    self._config.pool_size,
                    self._config.user,
                    self._config.host,
                    self._config.port,
                    self._config.database,
                )
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="chs_acquittals",
                    pool_size=int(self._config.pool_size),
                    host=self._config.host,
                    port=int(self._config.port),
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                )
            return self._pool

    def connect(self):
        return self._get_pool().get_connection()

    def ping(self) -> bool:
        try:
            conn = self.connect()
        except mysql.connector.Error as e:
            logger.warning("Database ping failed: %s", e)
            return False
        try:
            conn.ping(reconnect=False)
            return True
        except mysql.connector.Error as e:
            logger.warning("Database ping failed: %s", e)
            return False
        finally:
            conn.close()
