from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional

_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Nested calls inherit the active command and model labels
_current_command: ContextVar[str] = ContextVar("chaosviz_current_command", default="cli")
_current_model: ContextVar[str] = ContextVar("chaosviz_current_model", default="-")


class _ContextFilter(logging.Filter):
    """Stamp every record with the command and model it was emitted under."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.command = getattr(record, "command", None) or _current_command.get()
        record.model = getattr(record, "model", None) or _current_model.get()
        return True


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is when a record is emitted."""

    def __init__(self, level: int = logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(level: str | int = "WARNING") -> None:
    """
    Configure root logging once.

    Records go to stderr as "[command/model] LEVEL: message"; calling again
    only changes the level.
    """
    if isinstance(level, str):
        numeric_level = _LEVELS.get(level.lower(), logging.WARNING)
    else:
        numeric_level = int(level)
    root = logging.getLogger()
    handler = next((h for h in root.handlers if isinstance(h, _StderrHandler)), None)
    if handler is None:
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter("[%(command)s/%(model)s] %(levelname)s: %(message)s"))
        handler.addFilter(_ContextFilter())
        root.addHandler(handler)
    root.setLevel(numeric_level)
    # matplotlib's font manager is noisy below WARNING
    logging.getLogger("matplotlib").setLevel(max(numeric_level, logging.WARNING))
    logging.captureWarnings(True)


def set_command_context(command: str) -> None:
    _current_command.set(command)


def set_model_context(model: str) -> None:
    """Tag subsequent records with the active attractor kind."""
    _current_model.set(model)


def resolve_log_level(verbose: bool, debug: bool) -> str:
    """Derive the configured level name from CLI flags."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return "WARNING"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name if name is not None else __name__)
