from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from sqlalchemy.engine import URL, make_url

DRIVERNAME = "mysql+aiomysql"


@dataclass(frozen=True)
class DbConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "mcp101"
    password: str = "123qwe"
    database: str = "mcpdb"
    pool_size: int = 10
    pool_timeout: float = 30.0
    # Full SQLAlchemy URL; overrides the fields above when set.
    url_override: Optional[str] = None
    log_level: str = "INFO"
    # Label used in database error messages, e.g. "MySQL error: ...".
    error_label: str = "MySQL"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.pool_size <= 0:
            raise ValueError("pool_size must be > 0")
        if self.pool_timeout <= 0:
            raise ValueError("pool_timeout must be > 0")

    @property
    def url(self) -> URL:
        if self.url_override:
            return make_url(self.url_override)
        return URL.create(
            DRIVERNAME,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DbConfig":
        """
        Build a config from MYSQL_* / QUERYGATE_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a numeric variable cannot be parsed or is out of range
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get("MYSQL_HOST", defaults.host),
            port=_parse_int(env, "MYSQL_PORT", defaults.port),
            user=env.get("MYSQL_USER", defaults.user),
            password=env.get("MYSQL_PASSWORD", defaults.password),
            database=env.get("MYSQL_DATABASE", defaults.database),
            pool_size=_parse_int(env, "MYSQL_POOL_SIZE", defaults.pool_size),
            pool_timeout=_parse_float(env, "MYSQL_POOL_TIMEOUT", defaults.pool_timeout),
            url_override=env.get("QUERYGATE_DB_URL") or None,
            log_level=env.get("QUERYGATE_LOG_LEVEL", defaults.log_level),
        )


def _parse_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


def _parse_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc
