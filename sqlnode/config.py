from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from sqlalchemy.engine import URL, make_url


class SqlMode(str, Enum):
    PARAMETERIZED = "parameterized"
    LEGACY = "legacy"


class ClientMode(str, Enum):
    THIN = "thin"
    DEFAULT = "default"
    CUSTOM = "custom"


_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    if isinstance(value, int):
        return value != 0
    raise TypeError(f"{name} must be a boolean, got {type(value).__name__}")


@dataclass
class ConnectionConfig:
    """
    Connection parameters for the database behind the node.

    ``connect_timeout`` and ``request_timeout`` are in milliseconds, matching
    the credential form. ``url`` overrides everything else when set.
    """
    host: str = "192.168.0.2"
    port: int = 1521
    sid: Optional[str] = "WINT"
    database: Optional[str] = None
    user: str = "system"
    password: str = ""
    connect_timeout: int = 15_000
    request_timeout: int = 15_000
    ssl: bool = False
    dialect: str = "oracle+oracledb"
    url: Optional[str] = None
    client_mode: ClientMode = ClientMode.THIN
    client_lib_dir: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        self.client_mode = ClientMode(self.client_mode)
        if self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be > 0 milliseconds")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0 milliseconds")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.client_mode == ClientMode.CUSTOM and not self.client_lib_dir:
            raise ValueError("client_lib_dir is required when client_mode is 'custom'")

    @classmethod
    def from_credentials(cls, credentials: Mapping[str, Any]) -> "ConnectionConfig":
        """
        Build a config from the host's decrypted credential mapping.

        Keys follow the credential form (``connectTimeout``, ``requestTimeout``, ...);
        missing keys keep their defaults.
        """
        mapping = {
            "host": "host",
            "port": "port",
            "sid": "sid",
            "database": "database",
            "user": "user",
            "password": "password",
            "connectTimeout": "connect_timeout",
            "requestTimeout": "request_timeout",
            "ssl": "ssl",
            "dialect": "dialect",
            "url": "url",
            "clientMode": "client_mode",
            "clientLibDir": "client_lib_dir",
        }
        kwargs = {
            field: credentials[key]
            for key, field in mapping.items()
            if credentials.get(key) is not None
        }
        for field in ("port", "connect_timeout", "request_timeout"):
            if field in kwargs:
                kwargs[field] = int(kwargs[field])
        if "ssl" in kwargs:
            kwargs["ssl"] = _parse_bool(kwargs["ssl"], "ssl")
        return cls(**kwargs)

    @property
    def is_oracle(self) -> bool:
        return self.sqlalchemy_url().get_backend_name() == "oracle"

    def sqlalchemy_url(self) -> URL:
        if self.url:
            return make_url(self.url)

        query: dict[str, str] = {}
        if self.database and not self.sid:
            query["service_name"] = self.database
        if self.ssl and self.dialect.startswith("oracle"):
            query["protocol"] = "tcps"

        return URL.create(
            self.dialect,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.sid or None,
            query=query,
        )


@dataclass
class ExecutionConfig:
    chunk_size: int = 1000
    max_workers: int = 4
    sql_mode: SqlMode = SqlMode.PARAMETERIZED

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        self.sql_mode = SqlMode(self.sql_mode)
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        if self.max_workers <= 0:
            raise ValueError("max_workers must be > 0")
