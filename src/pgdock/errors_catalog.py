"""Actionable error catalog for pgdock."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_option": {
        "what": "pgdock: required option: {label}",
        "next": "Pass {flag} or set `{key}` in the config file.",
    },
    "missing_sql_file": {
        "what": "required option: sql file to import",
        "next": "Pass the path of a `.sql` file relative to the working directory.",
    },
    "bare_sql_file": {
        "what": "SQL file '{path}' has no directory component to mount into the container.",
        "next": "Move the file into a sub-directory, e.g. `./data/{path}`.",
    },
    "dump_write_failed": {
        "what": "Could not write schema dump to '{path}': {reason}",
        "next": "Check that the output directory exists and is writable.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
