"""Command builders for the PostgreSQL client tools."""

import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pgdock.models import ConnectionConfig, Mount


class CommandKind(Enum):
    INLINE_STATEMENT = "inline-statement"
    FILE_STATEMENT = "file-statement"
    SCHEMA_DUMP = "schema-dump"


@dataclass(frozen=True)
class Command:
    """A client tool invocation and the config snapshot it was built from.

    ``render`` is the only place where identifiers and credentials are
    interpolated into a shell line. Values coming from the config and file
    paths are inserted verbatim; the statement text is wrapped as a single
    shell word and otherwise left untouched.
    """

    kind: CommandKind
    database: str
    payload: str
    config: ConnectionConfig
    mount: Optional[Mount] = None

    def render(self) -> str:
        cfg = self.config
        if self.kind is CommandKind.INLINE_STATEMENT:
            return (
                f"PGPASSWORD={cfg.password} psql -h {cfg.host} -d {self.database} "
                f"-U {cfg.user} -p {cfg.port} -v ON_ERROR_STOP=1 -t -c {shlex.quote(self.payload)}"
            )

        if self.kind is CommandKind.FILE_STATEMENT:
            return (
                f"PGPASSWORD={cfg.password} psql -h {cfg.host} -d {self.database} "
                f"-U {cfg.user} -p {cfg.port} -v ON_ERROR_STOP=1 --file={self.payload}"
            )

        return (
            f"PGPASSWORD={cfg.password} pg_dump -h {cfg.host} -p {cfg.port} "
            f"-U {cfg.user} {self.database} --schema-only"
        )


def psql(db_name: str, query: str, config: ConnectionConfig) -> Command:
    return Command(CommandKind.INLINE_STATEMENT, db_name, query, config)


def psql_file(
    db_name: str, file_name: str, config: ConnectionConfig, mount: Optional[Mount] = None
) -> Command:
    return Command(CommandKind.FILE_STATEMENT, db_name, file_name, config, mount=mount)


def pg_dump_schema(db_name: str, config: ConnectionConfig) -> Command:
    return Command(CommandKind.SCHEMA_DUMP, db_name, "", config)
