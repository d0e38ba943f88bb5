# =============================================================================
# perplexica/config.py  -  Process-wide settings snapshot
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the three environment knobs once at startup and freezes them into a
#   Settings object.  Every other module receives that object as an argument;
#   none of them look at os.environ.
#
#   PERPLEXICA_BASE_URL      default upstream URL  (http://localhost:3000)
#   MCP_REQUEST_TIMEOUT_MS   default deadline      (120000)
#   MCP_LOG_LEVEL            error|warn|info|debug (info)
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_MS = 120_000
DEFAULT_LOG_LEVEL = "info"
LOG_LEVELS = ("error", "warn", "info", "debug")


@dataclass(frozen=True)
class Settings:
    """Immutable configuration shared by all tool invocations."""

    base_url: str = DEFAULT_BASE_URL
    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_timeout(raw: Optional[str]) -> int:
    # Anything that is not a positive whole number falls back to the default.
    if not raw:
        return DEFAULT_TIMEOUT_MS
    try:
        value = int(float(raw))
    except (ValueError, OverflowError):
        return DEFAULT_TIMEOUT_MS
    return value if value > 0 else DEFAULT_TIMEOUT_MS


def _parse_level(raw: Optional[str]) -> str:
    level = (raw or "").strip().lower()
    return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build the settings snapshot from the environment.

    Args:
        environ: Mapping to read from.  Defaults to ``os.environ``; tests
                 pass a plain dict.
    """
    env = os.environ if environ is None else environ
    return Settings(
        base_url=env.get("PERPLEXICA_BASE_URL") or DEFAULT_BASE_URL,
        default_timeout_ms=_parse_timeout(env.get("MCP_REQUEST_TIMEOUT_MS")),
        log_level=_parse_level(env.get("MCP_LOG_LEVEL")),
    )
