# =============================================================================
# perplexica/validation.py  -  Input Validator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns the raw arguments object of a tool call into a typed, fully
#   defaulted request - or raises ToolFailure(VALIDATION_ERROR).
#
# DEFAULT PRIORITY:
#   1. the value the caller sent
#   2. the per-field default declared in schemas.py
#   3. the Settings snapshot (base URL, default timeout)
#   An empty baseUrl counts as "not sent".
#
# ORDERING GUARANTEE:
#   handlers.py calls these functions before anything touches the network,
#   so a rejected call never has a network side effect.
# =============================================================================

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from perplexica.config import Settings
from perplexica.errors import ErrorCode, ToolFailure
from perplexica.schemas import HealthRequest, SearchRequest

RequestT = TypeVar("RequestT", HealthRequest, SearchRequest)


def _with_settings_defaults(arguments: Any, settings: Settings) -> dict[str, Any]:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise ToolFailure(
            ErrorCode.VALIDATION_ERROR,
            "Invalid arguments: expected an object.",
            {"errors": [{"field": "(root)", "message": f"got {type(arguments).__name__}"}]},
        )

    data = dict(arguments)
    if not data.get("baseUrl"):
        data["baseUrl"] = settings.base_url
    if data.get("timeoutMs") is None:
        data["timeoutMs"] = settings.default_timeout_ms
    return data


def _describe(exc: ValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "(root)"
        errors.append({"field": field, "message": err["msg"]})
    return errors


def validation_failure(exc: ValidationError) -> ToolFailure:
    """Convert a pydantic ``ValidationError`` into a ``VALIDATION_ERROR`` failure.

    Also used by the MCP layer for arguments FastMCP rejects on its own.
    """
    errors = _describe(exc)
    summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    return ToolFailure(
        ErrorCode.VALIDATION_ERROR,
        f"Invalid arguments: {summary}",
        {"errors": errors},
    )


def _validate(model: type[RequestT], arguments: Any, settings: Settings) -> RequestT:
    data = _with_settings_defaults(arguments, settings)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise validation_failure(exc) from exc


def validate_search_args(arguments: Any, settings: Settings) -> SearchRequest:
    """Validate ``perplexica.search`` arguments."""
    return _validate(SearchRequest, arguments, settings)


def validate_health_args(arguments: Any, settings: Settings) -> HealthRequest:
    """Validate ``perplexica.health`` arguments."""
    return _validate(HealthRequest, arguments, settings)
