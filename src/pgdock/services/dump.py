"""Schema dump extraction and cleanup for pgdock."""

import re
from typing import Iterable, List

from pgdock.errors import PgDockError
from pgdock.errors_catalog import actionable_error
from pgdock.models import ConnectionConfig
from pgdock.services.commands import pg_dump_schema

REJECTED_SUBSTRINGS = ("ALTER DEFAULT PRIVILEGES", "OWNER TO")
REJECTED_PREFIXES = re.compile(r"^(--|REVOKE|COMMENT ON|SET|GRANT)")


def _is_rejected(line: str) -> bool:
    if any(token in line for token in REJECTED_SUBSTRINGS):
        return True
    return REJECTED_PREFIXES.match(line) is not None


def squeeze_blank_lines(lines: Iterable[str]) -> List[str]:
    squeezed: List[str] = []
    previous_blank = False
    for line in lines:
        blank = line == ""
        if blank and previous_blank:
            continue
        squeezed.append(line)
        previous_blank = blank
    return squeezed


def filter_schema_dump(raw: str) -> str:
    """Strips ownership, privilege, session and comment noise from a ``pg_dump`` schema."""
    if not raw:
        return ""

    kept = [line for line in raw.split("\n") if not _is_rejected(line)]
    return "".join(f"{line}\n" for line in squeeze_blank_lines(kept))


class DumpService:
    """Runs a schema-only dump and returns the cleaned text."""

    def __init__(self, executor, logger):
        self.executor = executor
        self.logger = logger

    def schema_dump(self, db_name: str, output_file: str, config: ConnectionConfig) -> str:
        config.validate(db_name)

        raw = self.executor.run(pg_dump_schema(db_name, config))
        dump = filter_schema_dump(raw)

        if output_file:
            try:
                with open(output_file, "w", encoding="utf-8") as file_obj:
                    file_obj.write(dump)
            except OSError as exc:
                raise PgDockError(
                    actionable_error("dump_write_failed", path=output_file, reason=str(exc))
                ) from exc
            self.logger.info("Schema dump of %s written to %s", db_name, output_file)

        return dump
