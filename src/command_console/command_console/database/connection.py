from __future__ import annotations

import logging
from dataclasses import dataclass

import mysql.connector
from mysql.connector import pooling

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict, *, pool_size: int = 5) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
            pool_size=int(db_config.get("pool_size", pool_size)),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Connection factory owned by the application container.

    Built once per process by ``build_container`` and handed to every
    repository. Connections are borrowed from a pool per operation and
    returned when the cursor scope closes.
    """

    def __init__(self, config: DBConfig, *, pool_name: str = "command_console"):
        self._config = config
        self._pool_name = pool_name
        self._pool: pooling.MySQLConnectionPool | None = None

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=self._pool_name,
                pool_size=int(self._config.pool_size),
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )
        return self._pool

    def connect(self):
        try:
            return self._get_pool().get_connection()
        except mysql.connector.errors.PoolError:
            logger.warning(
                "Connection pool %s exhausted, opening an unpooled connection to %s",
                self._pool_name,
                self._config.describe(),
            )
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )

    def close(self) -> None:
        """Drop the pool; pooled connections are closed as they are returned."""
        self._pool = None
