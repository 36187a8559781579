"""YAML connection defaults for the pgdock CLI."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pgdock.errors import ConfigurationError

MAX_PORT = 65535


class ConfigLoader:
    """Reads ``.pgdock.yml`` and returns only the keys that carry a usable value.

    Keys left empty in the file (``password:``) are dropped so they count as
    unset; the connection config then reports them as missing. Values of the
    wrong type are rejected with the offending key named.
    """

    STRING_KEYS = {"image", "network", "host", "user", "password", "database", "log_file"}
    INT_KEYS = {"port"}
    BOOL_KEYS = {"debug"}
    SUPPORTED_KEYS = STRING_KEYS | INT_KEYS | BOOL_KEYS

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(str(key) for key in set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        return {
            key: self._coerce(key, value) for key, value in parsed.items() if value is not None
        }

    def _coerce(self, key: str, value: Any) -> Any:
        if key in self.BOOL_KEYS:
            if not isinstance(value, bool):
                raise ConfigurationError(f"Config key '{key}' must be true or false, got {value!r}.")
            return value

        if key in self.INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"Config key '{key}' must be an integer, got {value!r}.")
            if not 0 <= value <= MAX_PORT:
                raise ConfigurationError(
                    f"Config key '{key}' must be between 0 and {MAX_PORT}, got {value}."
                )
            return value

        # YAML reads unquoted passwords such as 1234 as numbers.
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return str(value)
        raise ConfigurationError(f"Config key '{key}' must be a string, got {value!r}.")
