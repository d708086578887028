# tinystache/core/context_loader.py
"""
Builds the render context from JSON/TOML files, stdin and KEY=VALUE variables.
"""
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, TextIO

import structlog
import toml

from tinystache.exceptions import ContextError

log = structlog.get_logger(__name__)

STDIN_MARKER = "-"


def parse_user_vars(raw_vars: Iterable[str]) -> Dict[str, str]:
    # turns "KEY=VALUE" strings into a dict; later keys win.
    user_vars: Dict[str, str] = {}
    for item in raw_vars:
        if "=" not in item:
            log.warning("ignoring_user_var_without_equals", value=item)
            continue
        key, value = item.split("=", 1)
        user_vars[key.strip()] = value
    return user_vars


def _decode(text: str, source_name: str, as_toml: bool) -> Dict[str, Any]:
    try:
        data = toml.loads(text) if as_toml else json.loads(text)
    except (toml.TomlDecodeError, json.JSONDecodeError) as e:
        raise ContextError(f"Could not decode context from {source_name}: {e}") from e
    if not isinstance(data, dict):
        raise ContextError(f"Context in {source_name} must be a mapping at the top level, got {type(data).__name__}")
    return data


def load_context_file(path: Path, stdin: Optional[TextIO] = None) -> Dict[str, Any]:
    """
    Loads one context source.

    `-` reads JSON from stdin, `.toml` files are read as TOML and anything else
    as JSON.
    """
    if str(path) == STDIN_MARKER:
        stream = stdin if stdin is not None else sys.stdin
        log.debug("reading_context_from_stdin")
        return _decode(stream.read(), "<stdin>", as_toml=False)

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContextError(f"Failed to read context file {path}: {e}") from e
    data = _decode(text, str(path), as_toml=path.suffix.lower() == ".toml")
    log.info("context_file_loaded", path=str(path), keys=list(data.keys()))
    return data


def load_context(
    context_paths: Iterable[Path] = (),
    user_vars: Optional[Dict[str, Any]] = None,
    stdin: Optional[TextIO] = None,
) -> Dict[str, Any]:
    """Merges context sources left to right, then applies user variables on top."""
    context: Dict[str, Any] = {}
    for path in context_paths:
        context.update(load_context_file(path, stdin=stdin))
    if user_vars:
        context.update(user_vars)
    log.debug("context_built", keys=list(context.keys()))
    return context
