# =============================================================================
# perplexica/upstream.py  -  Bounded HTTP Invoker
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Issues exactly one HTTP request to Perplexica under a deadline and
#   returns the fully-read response, or raises ToolFailure.
#
# THE DEADLINE:
#   Each call opens its own asyncio.timeout() scope.  The scope is the
#   cancellation token: when it fires, the in-flight request task is
#   cancelled, httpx releases the connection, and we report TIMEOUT.
#   Leaving the `async with` block disarms the timer on every path
#   (response, transport error, cancellation), so nothing stays scheduled.
#
#   httpx gets the same value as its own timeout; if it trips first the
#   result is still TIMEOUT.
#
# CLASSIFICATION DONE HERE:
#   deadline fired / httpx timeout   -> TIMEOUT
#   any other request failure        -> NETWORK_ERROR (with errno if known)
#   Status codes and bodies are the classifier's job, not ours.
# =============================================================================

import asyncio
import errno as errno_names
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx

from perplexica.errors import ErrorCode, ToolFailure


@asynccontextmanager
async def open_client(client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield ``client`` as-is, or a fresh one that is closed afterwards."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as owned:
        yield owned


def _root_cause(exc: BaseException) -> BaseException:
    seen = {id(exc)}
    current = exc
    while True:
        nxt = current.__cause__ or current.__context__
        if nxt is None or id(nxt) in seen:
            return current
        seen.add(id(nxt))
        current = nxt


def _network_details(url: str, exc: Exception) -> dict[str, Any]:
    root = _root_cause(exc)
    details: dict[str, Any] = {
        "url": url,
        "error": type(exc).__name__,
        "cause": str(root) or str(exc) or type(root).__name__,
    }
    code = getattr(root, "errno", None)
    if isinstance(code, int):
        details["errno"] = errno_names.errorcode.get(code, code)
    return details


async def invoke(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    timeout_ms: int,
    json_body: Optional[dict[str, Any]] = None,
) -> httpx.Response:
    """Send one request and return the response with its body already read.

    Args:
        client: Open httpx client (see ``open_client``).
        method: "GET" or "POST".
        url: Absolute target URL.
        timeout_ms: Positive deadline in milliseconds.
        json_body: Serialized as JSON with ``Content-Type: application/json``.

    Raises:
        ToolFailure: TIMEOUT or NETWORK_ERROR.  A response with ANY status
        code is returned normally.
    """
    seconds = timeout_ms / 1000
    headers = {"Content-Type": "application/json"} if json_body is not None else None
    try:
        async with asyncio.timeout(seconds):
            return await client.request(
                method,
                url,
                json=json_body,
                headers=headers,
                timeout=seconds,
            )
    except (TimeoutError, httpx.TimeoutException) as exc:
        raise ToolFailure(
            ErrorCode.TIMEOUT,
            f"Request aborted after {timeout_ms} ms (timeout).",
            {"url": url, "timeoutMs": timeout_ms},
        ) from exc
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        details = _network_details(url, exc)
        raise ToolFailure(
            ErrorCode.NETWORK_ERROR,
            f"Failed to reach Perplexica: {details['cause']}",
            details,
        ) from exc
