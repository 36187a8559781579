"""Executor strategies: run client commands natively or in a throwaway container."""

from typing import Callable, List

from pgdock.errors import ImagePullError
from pgdock.services.environment import in_container


class Executor:
    """Runs a rendered ``Command`` and returns its trimmed output."""

    isolated = False

    def __init__(self, runner, logger):
        self.runner = runner
        self.logger = logger

    def run(self, command) -> str:
        raise NotImplementedError


class NativeExecutor(Executor):
    """Runs commands in the current environment, where the client tools are installed."""

    def run(self, command) -> str:
        return self.runner.run(["sh", "-c", command.render()])


class ContainerExecutor(Executor):
    """Pulls the configured image and runs each command in an auto-removed container."""

    isolated = True

    def pull(self, image: str):
        self.runner.run(["docker", "pull", "-q", image], error_cls=ImagePullError)

    def build_run_cmd(self, command) -> List[str]:
        config = command.config
        cmd = ["docker", "run", "--rm"]
        if config.network:
            cmd.append(f"--network={config.network}")
        if command.mount is not None:
            cmd.extend(["--volume", command.mount.render()])
        cmd.extend([config.image, "sh", "-c", command.render()])
        return cmd

    def run(self, command) -> str:
        self.pull(command.config.image)

        cmd = self.build_run_cmd(command)
        if command.config.debug:
            self.logger.info("raw docker command:\n%s", " ".join(cmd))

        return self.runner.run(cmd)


def select_executor(runner, logger, detector: Callable[[], bool] = in_container) -> Executor:
    if detector():
        logger.debug("Container marker found, running client tools natively.")
        return NativeExecutor(runner, logger)
    return ContainerExecutor(runner, logger)
