# =============================================================================
# perplexica/classifier.py  -  Response Classifier
# =============================================================================
#
# Looks at one completed HTTP exchange and decides how it ended:
#
#   non-2xx status                  -> UPSTREAM_ERROR (status, reason, body)
#   2xx, body is not JSON           -> UPSTREAM_INVALID_JSON
#   2xx, JSON of unexpected shape   -> success with whatever we recognize
#   2xx, JSON as documented         -> success
#
# Shape drift is tolerated on purpose: a renamed or missing field degrades
# the answer (empty message, no sources, zero models) but never fails the
# tool call.  (Transport failures were already classified in upstream.py.)
# =============================================================================

from collections.abc import Mapping
from typing import Any, Optional

import httpx

from perplexica.errors import ErrorCode, ToolFailure
from perplexica.logger import logger
from perplexica.models import ModelsSummary, SearchAnswer, Source

BODY_PREVIEW_CHARS = 1000


def _body_text(response: httpx.Response) -> str:
    try:
        return response.text
    except (httpx.ResponseNotRead, LookupError, ValueError):
        return ""


def _parse_json(response: httpx.Response) -> Any:
    if not response.is_success:
        body = _body_text(response)
        raise ToolFailure(
            ErrorCode.UPSTREAM_ERROR,
            f"Perplexica returned HTTP {response.status_code} {response.reason_phrase}".rstrip() + ".",
            {
                "url": str(response.request.url),
                "status": response.status_code,
                "statusText": response.reason_phrase,
                "bodyPreview": body[:BODY_PREVIEW_CHARS],
            },
        )
    try:
        return response.json()
    except ValueError as exc:
        raise ToolFailure(
            ErrorCode.UPSTREAM_INVALID_JSON,
            "Perplexica returned a response that is not valid JSON.",
            {
                "url": str(response.request.url),
                "status": response.status_code,
                "bodyPreview": _body_text(response)[:BODY_PREVIEW_CHARS],
            },
        ) from exc


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _optional_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (Mapping, list)):
        return None
    return str(value)


def _source(raw: Any) -> Source:
    metadata = raw.get("metadata") if isinstance(raw, Mapping) else None
    if not isinstance(metadata, Mapping):
        return Source()
    return Source(
        title=_optional_text(metadata.get("title")),
        url=_optional_text(metadata.get("url")),
    )


def extract_search_answer(data: Any) -> SearchAnswer:
    """Pull ``message`` and ``sources`` out of a parsed search reply."""
    if not isinstance(data, Mapping):
        logger.warn("Search reply is not a JSON object", {"type": type(data).__name__})
        return SearchAnswer()
    sources = data.get("sources")
    return SearchAnswer(
        message=_text(data.get("message")),
        sources=[_source(s) for s in sources] if isinstance(sources, list) else [],
    )


def extract_models_summary(data: Any) -> ModelsSummary:
    """Count providers and models in a parsed ``/api/models`` reply.

    Only list values count as models; anything else under a provider key
    counts as zero.
    """
    models = data.get("models") if isinstance(data, Mapping) else None
    if not isinstance(models, Mapping):
        return ModelsSummary()
    return ModelsSummary(
        provider_count=len(models),
        model_count=sum(len(v) for v in models.values() if isinstance(v, list)),
    )


def classify_search_response(response: httpx.Response) -> SearchAnswer:
    return extract_search_answer(_parse_json(response))


def classify_models_response(response: httpx.Response) -> ModelsSummary:
    return extract_models_summary(_parse_json(response))
