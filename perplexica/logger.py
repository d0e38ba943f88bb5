# =============================================================================
# perplexica/logger.py  -  Leveled, redacting logger
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Provides the single process-wide logger used by every stage of a tool
#   call.  Each log line may carry a structured "meta" payload; that payload
#   is ALWAYS passed through redact() before it is serialized.
#
# WHY STDERR:
#   The MCP server talks to its client over STDOUT.  Anything we print there
#   corrupts the JSON-RPC stream, so every handler writes to STDERR.
#
# REDACTION RULES:
#   - a key matching key|token|secret|password|authorization (any case)
#     has its value replaced with "[REDACTED]"
#   - a "history" list is replaced with "len=<n>"
#   - an object that contains itself is replaced with "[Circular]"
#
# LEVELS:
#   error < warn < info < debug, selected by MCP_LOG_LEVEL (default info).
# =============================================================================

import json
import logging
import re
import sys
from collections.abc import Mapping
from typing import Any

REDACTED = "[REDACTED]"
CIRCULAR = "[Circular]"

_SECRET_KEY = re.compile(r"key|token|secret|password|authorization", re.IGNORECASE)

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# ANSI color codes, used only when stderr is a terminal
_RED = "\033[31m"
_YELLOW = "\033[33m"
_CYAN = "\033[36m"
_DIM = "\033[2m"
_RESET = "\033[0m"

_LEVEL_COLORS = {
    logging.ERROR: _RED,
    logging.WARNING: _YELLOW,
    logging.INFO: _CYAN,
    logging.DEBUG: _DIM,
}

_MISSING = object()


def redact(value: Any) -> Any:
    """Return a copy of ``value`` that is safe to write to a log.

    Mappings and sequences are walked recursively.  Scalars and strings are
    returned unchanged.  The input is never mutated.
    """
    ancestors: set[int] = set()

    def walk(v: Any) -> Any:
        if isinstance(v, Mapping):
            container = True
        elif isinstance(v, (list, tuple, set, frozenset)):
            container = False
        else:
            return v

        if id(v) in ancestors:
            return CIRCULAR
        ancestors.add(id(v))
        try:
            if not container:
                return [walk(item) for item in v]
            out = {}
            for k, val in v.items():
                if _SECRET_KEY.search(str(k)):
                    out[k] = REDACTED
                elif k == "history" and isinstance(val, (list, tuple)):
                    out[k] = f"len={len(val)}"
                else:
                    out[k] = walk(val)
            return out
        finally:
            ancestors.discard(id(v))

    return walk(value)


class _StderrFormatter(logging.Formatter):
    """`<time> [MCP] <LEVEL> <message>`, with colored levels on a TTY."""

    def __init__(self, color: bool):
        super().__init__(
            fmt="%(asctime)s [MCP] %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if self._color:
            color = _LEVEL_COLORS.get(record.levelno, "")
            return f"{color}{line}{_RESET}"
        return line


def configure_logging(level: str = "info", stream=None) -> None:
    """Attach the stderr handler and set the threshold.

    Called once by the server entry point.  Calling it again replaces the
    handler instead of stacking a second one.
    """
    stream = stream or sys.stderr
    target = logging.getLogger(logger.name)
    for handler in list(target.handlers):
        target.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(_StderrFormatter(color=hasattr(stream, "isatty") and stream.isatty()))
    target.addHandler(handler)
    target.setLevel(LEVELS.get(level, logging.INFO))


class RedactingLogger:
    """Thin wrapper over a stdlib logger that redacts structured metadata."""

    def __init__(self, name: str = "perplexica"):
        self.name = name
        self._logger = logging.getLogger(name)

    def log(self, level: str, msg: str, meta: Any = _MISSING) -> None:
        levelno = LEVELS.get(level)
        if levelno is None or not self._logger.isEnabledFor(levelno):
            return
        if meta is _MISSING:
            self._logger.log(levelno, msg)
            return
        safe = json.dumps(redact(meta), default=str, separators=(",", ":"))
        self._logger.log(levelno, "%s :: %s", msg, safe)

    def error(self, msg: str, meta: Any = _MISSING) -> None:
        self.log("error", msg, meta)

    def warn(self, msg: str, meta: Any = _MISSING) -> None:
        self.log("warn", msg, meta)

    def info(self, msg: str, meta: Any = _MISSING) -> None:
        self.log("info", msg, meta)

    def debug(self, msg: str, meta: Any = _MISSING) -> None:
        self.log("debug", msg, meta)


logger = RedactingLogger()

