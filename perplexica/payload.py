# =============================================================================
# perplexica/payload.py  -  Payload Builder
# =============================================================================
#
# Pure mapping from a validated request to what goes on the wire.  No I/O.
#
# WIRE RULES:
#   - "stream" is always False, whatever the caller asked for
#   - chatModel / embeddingModel / systemInstructions / history appear
#     ONLY when the caller supplied them; absence is signalled by leaving
#     the key out, never by sending null
#   - URLs are baseUrl + path, with at most one trailing slash removed
#     from baseUrl ("http://h//" keeps one of its two)
# =============================================================================

from typing import Any

from perplexica.schemas import SearchRequest


def _endpoint(base_url: str, path: str) -> str:
    # Only one trailing slash is dropped.
    if base_url.endswith("/"):
        base_url = base_url[:-1]
    return f"{base_url}{path}"


def search_url(base_url: str) -> str:
    return _endpoint(base_url, "/api/search")


def models_url(base_url: str) -> str:
    return _endpoint(base_url, "/api/models")


def build_search_payload(request: SearchRequest) -> dict[str, Any]:
    """Build the JSON body for ``POST /api/search``."""
    payload: dict[str, Any] = {
        "query": request.query,
        "focusMode": request.focus_mode,
        "optimizationMode": request.optimization_mode or "balanced",
        "stream": False,
    }

    if request.chat_model is not None:
        payload["chatModel"] = request.chat_model.model_dump(by_alias=True, exclude_none=True)
    if request.embedding_model is not None:
        payload["embeddingModel"] = request.embedding_model.model_dump(by_alias=True, exclude_none=True)
    if request.system_instructions is not None:
        payload["systemInstructions"] = request.system_instructions
    if request.history is not None:
        payload["history"] = [[role, text] for role, text in request.history]

    return payload
