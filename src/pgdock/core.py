import logging
import subprocess
from typing import Callable, Optional

from .models import ConnectionConfig
from .services.command_runner import CommandRunner
from .services.database import DatabaseService, ImportSequence
from .services.docker_runtime import Executor, select_executor
from .services.dump import DumpService
from .services.environment import in_container

logger = logging.getLogger("pgdock")


class PgDock:
    """Entry point wiring the executor chosen for this process to the lifecycle services.

    The executor is picked once, at construction, from the container marker.
    Every operation takes the database name and a ``ConnectionConfig``; no
    state is shared between calls.
    """

    def __init__(
        self,
        executor: Optional[Executor] = None,
        detector: Callable[[], bool] = in_container,
        subprocess_module=subprocess,
    ):
        self.command_runner = CommandRunner(logger=logger, subprocess_module=subprocess_module)
        self.executor = executor or select_executor(self.command_runner, logger, detector=detector)
        self.database_service = DatabaseService(executor=self.executor, logger=logger)
        self.dump_service = DumpService(executor=self.executor, logger=logger)

    def create(self, db_name: str, config: ConnectionConfig):
        self.database_service.create(db_name, config)

    def exists(self, db_name: str, config: ConnectionConfig):
        self.database_service.exists(db_name, config)

    def terminate(self, db_name: str, config: ConnectionConfig):
        self.database_service.terminate(db_name, config)

    def drop(self, db_name: str, config: ConnectionConfig):
        self.database_service.drop(db_name, config)

    def import_sql(self, db_name: str, sql_file: str, config: ConnectionConfig) -> ImportSequence:
        return self.database_service.import_sql(db_name, sql_file, config)

    def schema_dump(self, db_name: str, output_file: str, config: ConnectionConfig) -> str:
        return self.dump_service.schema_dump(db_name, output_file, config)

