# =============================================================================
# perplexica/models.py  -  Data Models (the "nouns" of a tool call)
# =============================================================================
#
# These dataclasses describe what comes BACK from Perplexica after the
# classifier has picked it apart, and what goes back to the MCP caller.
# The caller-facing INPUT schemas live in schemas.py (pydantic), because
# they need coercion and validation; these ones are plain containers.
#
# DESIGN PRINCIPLE - "Extract, don't trust":
#   Perplexica's JSON is loosely typed and drifts between versions.  The
#   classifier fills these models with whatever it can recognize and leaves
#   the rest at their defaults, so the formatter never sees a KeyError.
# =============================================================================

from dataclasses import dataclass, field
from typing import Optional

from perplexica.errors import ErrorCode


# -----------------------------------------------------------------------------
# Source - one citation attached to an answer
# -----------------------------------------------------------------------------
# Perplexica nests these under "metadata": {"title": ..., "url": ...}.
# Either may be missing; the formatter substitutes "Untitled" / "".
# -----------------------------------------------------------------------------
@dataclass
class Source:
    title: Optional[str] = None
    url: Optional[str] = None


@dataclass
class SearchAnswer:
    """The recognizable part of a POST /api/search reply."""

    message: str = ""
    sources: list[Source] = field(default_factory=list)


@dataclass
class ModelsSummary:
    """Counts derived from a GET /api/models reply."""

    provider_count: int = 0
    model_count: int = 0


# -----------------------------------------------------------------------------
# ToolResult - the only thing a handler ever returns
# -----------------------------------------------------------------------------
# A single text block, plus an error flag and code when the call failed.
# There is no partial or streamed variant.
# -----------------------------------------------------------------------------
@dataclass
class ToolResult:
    text: str
    is_error: bool = False
    code: Optional[ErrorCode] = None
