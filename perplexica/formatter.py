# =============================================================================
# perplexica/formatter.py  -  Result Formatter
# =============================================================================
#
# Renders every outcome as ONE text block.  Output is deterministic: the
# same input always produces byte-identical text.
#
#   search, with sources:
#       <message>
#
#       ---
#
#       Sources:
#       1. **<title or "Untitled">**: <url or "">
#       2. ...
#
#   search, no sources:   <message>, or "No message returned." if empty
#   health:               OK: reachable at <baseUrl>. Providers: N, total models: M.
#   failure:              [CODE] <message>  (+ redacted JSON details)
# =============================================================================

import json

from perplexica.errors import ToolFailure
from perplexica.logger import redact
from perplexica.models import ModelsSummary, SearchAnswer, Source, ToolResult

NO_MESSAGE = "No message returned."


def format_source(index: int, source: Source) -> str:
    title = source.title if source.title is not None else "Untitled"
    url = source.url if source.url is not None else ""
    return f"{index}. **{title}**: {url}"


def format_search_answer(answer: SearchAnswer) -> str:
    if not answer.sources:
        return answer.message or NO_MESSAGE
    listing = "\n".join(format_source(i, s) for i, s in enumerate(answer.sources, start=1))
    return f"{answer.message}\n\n---\n\nSources:\n{listing}"


def format_health_summary(base_url: str, summary: ModelsSummary) -> str:
    return (
        f"OK: reachable at {base_url}. "
        f"Providers: {summary.provider_count}, total models: {summary.model_count}."
    )


def format_failure(failure: ToolFailure) -> ToolResult:
    """Error ToolResult for a classified failure.

    The details dict goes through the same redactor as the logs, so a
    custom API key that ended up in diagnostics is never echoed back.
    """
    text = f"[{failure.code.value}] {failure.message}"
    if failure.details:
        text += "\n\n" + json.dumps(redact(failure.details), indent=2, default=str)
    return ToolResult(text=text, is_error=True, code=failure.code)
