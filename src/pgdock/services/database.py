"""Database lifecycle services for pgdock: create, exists, terminate, drop, import."""

import logging
import os
import posixpath
from typing import Callable, Dict, List, Optional

from pgdock.errors import ConfigurationError, DatabaseNotFoundError, OutputParseError
from pgdock.errors_catalog import actionable_error
from pgdock.models import ConnectionConfig, Mount
from pgdock.services.commands import psql, psql_file

# Database every server has before any other exists. Used to query and create
# users and databases when the target database may not exist yet.
BOOTSTRAP_DATABASE = "postgres"

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}

_PRIVILEGE_GRANTS = (
    "GRANT ALL PRIVILEGES ON ALL TABLES IN SCHEMA public TO {user}",
    "GRANT ALL PRIVILEGES ON ALL SEQUENCES IN SCHEMA public TO {user}",
    "ALTER DEFAULT PRIVILEGES IN SCHEMA public GRANT ALL PRIVILEGES ON TABLES TO {user}",
    "ALTER DEFAULT PRIVILEGES IN SCHEMA public GRANT ALL PRIVILEGES ON SEQUENCES TO {user}",
)


def parse_bool(value: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise OutputParseError(f"Could not parse boolean from command output: {value!r}")


def build_import_mount(sql_file: str, cwd: Optional[str] = None) -> Mount:
    """Binds the directory of ``sql_file`` at the same path under the container root.

    The file is always treated as relative to the working directory, so
    ``data/s.sql``, ``./data/s.sql`` and ``/data/s.sql`` all mount ``./data``
    at ``/data``.
    """
    relative = sql_file[1:] if sql_file.startswith(".") else sql_file
    relative = relative[1:] if relative.startswith("/") else relative
    directory = posixpath.dirname(relative)

    source = os.path.abspath(os.path.join(cwd or os.getcwd(), directory))
    return Mount(source=source, target=f"/{directory}")


class ImportSequence:
    """Replaces a database with the contents of a SQL file.

    Steps run in order and the first failure stops the sequence. Completed
    steps are not rolled back; drop and create are each safe to re-run.
    """

    STEPS = ("drop", "create", "mount", "restore")

    def __init__(
        self, service: "DatabaseService", db_name: str, sql_file: str, config: ConnectionConfig
    ):
        self.service = service
        self.db_name = db_name
        self.sql_file = sql_file
        self.config = config
        self.mount: Optional[Mount] = None
        self.output = ""
        self.completed_steps: List[str] = []
        self.failed_step: Optional[str] = None

    def _handlers(self) -> Dict[str, Callable[[], None]]:
        return {
            "drop": self.drop,
            "create": self.create,
            "mount": self.build_mount,
            "restore": self.restore,
        }

    def drop(self):
        self.service.drop(self.db_name, self.config)

    def create(self):
        self.service.create(self.db_name, self.config)

    def build_mount(self):
        self.mount = build_import_mount(self.sql_file)

    def restore(self):
        command = psql_file(self.db_name, self.sql_file, self.config, mount=self.mount)
        self.output = self.service.executor.run(command)

    def run(self):
        handlers = self._handlers()
        for name in self.STEPS:
            try:
                handlers[name]()
            except Exception:
                self.failed_step = name
                self.service.logger.error(
                    "Import into %s stopped at step '%s' after: %s",
                    self.db_name,
                    name,
                    ", ".join(self.completed_steps) or "<none>",
                )
                raise
            self.completed_steps.append(name)


class DatabaseService:
    """Idempotent lifecycle operations composed from client commands."""

    def __init__(self, executor, logger):
        self.executor = executor
        self.logger = logger

    def _trace(self, config: ConnectionConfig, message: str, *args):
        level = logging.INFO if config.debug else logging.DEBUG
        self.logger.log(level, message, *args)

    def _query(self, db_name: str, query: str, config: ConnectionConfig) -> str:
        return self.executor.run(psql(db_name, query, config))

    def _user_exists(self, config: ConnectionConfig) -> bool:
        query = (
            "SELECT EXISTS ( SELECT usename FROM pg_catalog.pg_user "
            f"WHERE usename = '{config.user}');"
        )
        return parse_bool(self._query(BOOTSTRAP_DATABASE, query, config))

    def create(self, db_name: str, config: ConnectionConfig):
        config.validate(db_name)

        if not self._user_exists(config):
            query = f"CREATE USER {config.user} WITH PASSWORD '{config.password}';"
            out = self._query(BOOTSTRAP_DATABASE, query, config)
            self._trace(config, "[%s]: successfully created user:%s", out, config.user)

        try:
            self.exists(db_name, config)
        except DatabaseNotFoundError:
            pass
        else:
            self._trace(config, "skipping creating existing database:%s", db_name)
            return

        query = (
            f"CREATE DATABASE {db_name} ENCODING 'UTF-8' LC_COLLATE='en_US.UTF-8' "
            f"LC_CTYPE='en_US.UTF-8' TEMPLATE template0 OWNER {config.user};"
        )
        out = self._query(BOOTSTRAP_DATABASE, query, config)
        self._trace(config, "[%s]: successfully created database:%s", out, db_name)

        grants = "; ".join(grant.format(user=config.user) for grant in _PRIVILEGE_GRANTS)
        self._query(db_name, grants, config)
        self._trace(
            config, "successfully applied PRIVILEGES to user:%s on db:%s", config.user, db_name
        )

    def exists(self, db_name: str, config: ConnectionConfig):
        config.validate(db_name)

        query = f"SELECT EXISTS ( SELECT datname FROM pg_database WHERE datname = '{db_name}')"
        if not parse_bool(self._query(BOOTSTRAP_DATABASE, query, config)):
            raise DatabaseNotFoundError(db_name)

        self._trace(config, "db:%s exists", db_name)

    def terminate(self, db_name: str, config: ConnectionConfig):
        config.validate(db_name)

        query = (
            "SELECT pg_terminate_backend(pid) FROM pg_stat_activity "
            f"WHERE datname = '{db_name}';"
        )
        out = self._query(BOOTSTRAP_DATABASE, query, config)
        self._trace(config, "[%s]: terminate db:%s", out, db_name)

    def drop(self, db_name: str, config: ConnectionConfig):
        self.terminate(db_name, config)

        out = self._query(BOOTSTRAP_DATABASE, f"DROP DATABASE IF EXISTS {db_name};", config)
        self._trace(config, "[%s]: drop db:%s", out, db_name)

    def import_sql(self, db_name: str, sql_file: str, config: ConnectionConfig) -> ImportSequence:
        if not sql_file:
            raise ConfigurationError(actionable_error("missing_sql_file"))
        config.validate(db_name)
        if self.executor.isolated and build_import_mount(sql_file).target == "/":
            raise ConfigurationError(actionable_error("bare_sql_file", path=sql_file))

        sequence = ImportSequence(self, db_name, sql_file, config)
        sequence.run()
        self._trace(
            config,
            "[%s]: successfully imported into db:%s from file:%s",
            sequence.output,
            db_name,
            sql_file,
        )
        return sequence
