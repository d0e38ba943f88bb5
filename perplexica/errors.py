# =============================================================================
# perplexica/errors.py  -  Closed error taxonomy
# =============================================================================
#
# Every way a tool call can fail maps to exactly one ErrorCode.  Stages raise
# ToolFailure; the handler boundary (handlers.py) catches it and turns it
# into an error ToolResult.  Nothing else is allowed to escape a handler.
#
#   VALIDATION_ERROR       caller input rejected, no network call was made
#   TIMEOUT                the deadline fired before Perplexica answered
#   NETWORK_ERROR          connection refused, DNS failure, reset, ...
#   UPSTREAM_ERROR         Perplexica answered with a non-2xx status
#   UPSTREAM_INVALID_JSON  Perplexica answered 2xx with an unparseable body
# =============================================================================

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    UPSTREAM_INVALID_JSON = "UPSTREAM_INVALID_JSON"


class ToolFailure(Exception):
    """A classified failure of one tool invocation.

    Attributes:
        code: The taxonomy tag.
        message: Short human-readable explanation, shown after ``[CODE]``.
        details: Diagnostic context (url, status, timeout, ...).  Rendered
                 through the redactor, so it may safely hold caller data.
    """

    def __init__(self, code: ErrorCode, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }
