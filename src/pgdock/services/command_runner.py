"""Subprocess execution service for pgdock."""

import subprocess
from typing import List, Type

from pgdock.errors import ExecutionError


class CommandRunner:
    """Runs external commands to completion and normalizes their result.

    Stdout and stderr are captured together. A zero exit status yields the
    stripped output; anything else raises ``ExecutionError`` carrying the raw
    output so callers can show what the tool printed.
    """

    def __init__(self, logger, subprocess_module=subprocess):
        self.logger = logger
        self.subprocess = subprocess_module

    def run(self, cmd: List[str], error_cls: Type[ExecutionError] = ExecutionError) -> str:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        try:
            result = self.subprocess.run(
                cmd,
                stdout=self.subprocess.PIPE,
                stderr=self.subprocess.STDOUT,
                text=True,
                encoding="utf-8",
            )
        except FileNotFoundError as exc:
            raise error_cls(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except (OSError, ValueError) as exc:
            raise error_cls(f"Failed to execute command: {cmd_str}. {exc}") from exc

        output = result.stdout or ""
        if result.returncode != 0:
            self.logger.debug("Command failed (%s): %s", result.returncode, output.strip())
            raise error_cls(output, returncode=result.returncode)

        return output.strip()
