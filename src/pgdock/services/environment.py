"""Detects whether pgdock already runs inside a container."""

import os

DOCKERENV_MARKER = "/.dockerenv"


def in_container(marker: str = DOCKERENV_MARKER) -> bool:
    return os.path.exists(marker)
