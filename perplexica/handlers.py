# =============================================================================
# perplexica/handlers.py  -  The two tool handlers
# =============================================================================
#
# HOW A CALL FLOWS:
#   1. validate the raw arguments          (validation.py)
#   2. build the upstream URL / payload    (payload.py)
#   3. one bounded HTTP call               (upstream.py)   <- only await
#   4. classify status + body              (classifier.py)
#   5. render a single text block          (formatter.py)
#
# Any ToolFailure raised along the way is caught HERE and becomes an error
# ToolResult.  Callers of search()/health() always get a ToolResult back.
#
# Each invocation owns its deadline and (unless one is injected) its httpx
# client.  The only shared state is the read-only Settings snapshot.
# =============================================================================

from typing import Any, Optional

import httpx

from perplexica.classifier import classify_models_response, classify_search_response
from perplexica.config import Settings
from perplexica.errors import ToolFailure
from perplexica.formatter import format_failure, format_health_summary, format_search_answer
from perplexica.logger import logger
from perplexica.models import ToolResult
from perplexica.payload import build_search_payload, models_url, search_url
from perplexica.upstream import invoke, open_client
from perplexica.validation import validate_health_args, validate_search_args


def _failed(failure: ToolFailure, what: str, level: str = "error") -> ToolResult:
    logger.log(level, what, failure.to_dict())
    return format_failure(failure)


async def search(
    arguments: Any,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> ToolResult:
    """Run ``perplexica.search``: POST the query and render answer + sources."""
    logger.debug("perplexica.search invoked", {"args": arguments})
    try:
        request = validate_search_args(arguments, settings)
    except ToolFailure as failure:
        return _failed(failure, "Rejected perplexica.search arguments", "warn")

    url = search_url(request.base_url)
    payload = build_search_payload(request)
    if request.stream:
        logger.debug("stream=true requested; upstream call stays non-streaming")
    logger.debug("Prepared payload for Perplexica API", {"url": url, "payload": payload})

    try:
        async with open_client(client) as http:
            logger.info("POST /api/search", {"url": url, "timeoutMs": request.timeout_ms})
            response = await invoke(http, "POST", url, request.timeout_ms, json_body=payload)
        logger.info(
            "Received response from Perplexica",
            {"status": response.status_code, "ok": response.is_success},
        )
        if not response.is_success:
            logger.warn(
                "Perplexica returned non-OK status",
                {"status": response.status_code, "bodyPreview": response.text[:500]},
            )
        answer = classify_search_response(response)
    except ToolFailure as failure:
        return _failed(failure, "Error calling Perplexica API")

    logger.debug(
        "Parsed Perplexica response",
        {"messageLength": len(answer.message), "sourcesCount": len(answer.sources)},
    )
    return ToolResult(text=format_search_answer(answer))


async def health(
    arguments: Any,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> ToolResult:
    """Run ``perplexica.health``: GET /api/models and summarize the counts."""
    logger.debug("perplexica.health invoked", {"args": arguments})
    try:
        request = validate_health_args(arguments, settings)
    except ToolFailure as failure:
        return _failed(failure, "Rejected perplexica.health arguments", "warn")

    url = models_url(request.base_url)
    try:
        async with open_client(client) as http:
            logger.info("GET /api/models", {"url": url, "timeoutMs": request.timeout_ms})
            response = await invoke(http, "GET", url, request.timeout_ms)
        logger.info(
            "Received response from Perplexica (models)",
            {"status": response.status_code, "ok": response.is_success},
        )
        if not response.is_success:
            logger.warn(
                "Models probe returned non-OK status",
                {"status": response.status_code, "bodyPreview": response.text[:500]},
            )
        summary = classify_models_response(response)
    except ToolFailure as failure:
        return _failed(failure, "Error probing Perplexica models")

    logger.debug(
        "Health probe summary",
        {"providers": summary.provider_count, "count": summary.model_count},
    )
    return ToolResult(text=format_health_summary(request.base_url, summary))
