"""Domain errors for pgdock."""

from typing import Optional


class PgDockError(RuntimeError):
    """Raised when a database operation cannot continue safely."""


class ConfigurationError(PgDockError):
    """Raised before any I/O when the connection configuration is incomplete."""


class ExecutionError(PgDockError):
    """Raised when an external command exits non-zero or its output cannot be read."""

    def __init__(self, output: str, returncode: Optional[int] = None):
        super().__init__(f"raw error: {output}")
        self.output = output
        self.returncode = returncode


class ImagePullError(ExecutionError):
    """Raised when the container image cannot be pulled."""


class OutputParseError(PgDockError):
    """Raised when command output does not have the expected shape."""


class DatabaseNotFoundError(PgDockError):
    """Raised by the existence check when the database is absent."""

    def __init__(self, db_name: str):
        super().__init__(f"{db_name}: db does not exist")
        self.db_name = db_name
