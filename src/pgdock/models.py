"""Shared domain models for pgdock."""

from dataclasses import dataclass
from typing import Optional

from pgdock.errors import ConfigurationError
from pgdock.errors_catalog import actionable_error

DEFAULT_PORT = 5432


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection and container parameters passed by value into every operation."""

    image: str = ""
    network: str = ""
    host: str = ""
    port: Optional[int] = None
    user: str = ""
    password: str = ""
    database: str = ""
    debug: bool = False

    def __post_init__(self):
        if not self.port:
            object.__setattr__(self, "port", DEFAULT_PORT)

    def validate(self, db_name: str):
        required = (
            (db_name, "db name", "the DB_NAME argument", "database"),
            (self.host, "db host", "`--host`", "host"),
            (self.user, "db user", "`--user`", "user"),
            (self.password, "db password", "`--password`", "password"),
            (self.image, "docker base image (ex: postgres:11.7-alpine)", "`--image`", "image"),
        )
        for value, label, flag, key in required:
            if not value:
                raise ConfigurationError(
                    actionable_error("missing_option", label=label, flag=flag, key=key)
                )


@dataclass(frozen=True)
class Mount:
    """Host directory bound into the disposable container."""

    source: str
    target: str

    def render(self) -> str:
        return f"{self.source}:{self.target}"
