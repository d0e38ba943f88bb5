# =============================================================================
# perplexica_tools/mcp_server.py  -  FastMCP Tool Server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the two Perplexica handlers as MCP tools.  Each tool is a thin
#   wrapper: it collects its typed arguments into a plain dict, hands them to
#   perplexica.handlers, and converts the ToolResult into what FastMCP
#   expects (a string on success, a ToolError on failure).
#
# HOW IT WORKS (the flow):
#   1. An MCP client (Claude Desktop, an IDE, main.py ...) calls a tool
#   2. FastMCP checks the arguments against the schema built from the
#      function signature below.  A rejection there is caught by
#      ArgumentErrorMiddleware and reported as [VALIDATION_ERROR], the
#      same as a rejection by perplexica.validation
#   3. The wrapper calls perplexica.handlers.search() / health()
#   4. Success  -> the text block is returned as the tool content
#      Failure  -> ToolError("[CODE] message ..."), which FastMCP turns
#                  into a result flagged isError with that same text
#
# TOOLS:
#   perplexica.search  - POST {baseUrl}/api/search, answer + numbered sources
#   perplexica.health  - GET  {baseUrl}/api/models, provider/model counts
#
# RUNNING THIS SERVER:
#   a) perplexica-mcp                         (console script)
#   b) python -m perplexica_tools.mcp_server
#   Both speak MCP over stdio, so logs go to STDERR only.
# =============================================================================

from typing import Annotated, Any, Optional

import httpx
from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from pydantic import Field, ValidationError

from perplexica import handlers
from perplexica.config import Settings, load_settings
from perplexica.formatter import format_failure
from perplexica.logger import configure_logging, logger
from perplexica.models import ToolResult
from perplexica.schemas import ChatModel, EmbeddingModel, FocusMode, HistoryRole, OptimizationMode
from perplexica.validation import validation_failure

SERVER_NAME = "perplexica-mcp"

TimeoutMs = Annotated[int, Field(gt=0, strict=True, description="Request timeout in milliseconds")]


def _unwrap(result: ToolResult) -> str:
    if result.is_error:
        raise ToolError(result.text)
    return result.text


def _collect(**arguments: Any) -> dict[str, Any]:
    # Drop arguments the caller left unset so the payload builder sees them
    # as absent; nested models go back to their camelCase wire form.
    collected = {}
    for name, value in arguments.items():
        if value is None:
            continue
        if isinstance(value, (ChatModel, EmbeddingModel)):
            value = value.model_dump(by_alias=True, exclude_none=True)
        collected[name] = value
    return collected


def _argument_error(exc: BaseException) -> Optional[ValidationError]:
    # FastMCP raises the pydantic error raw or wraps it, depending on version.
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, ValidationError):
            return exc
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return None


class ArgumentErrorMiddleware(Middleware):
    """Report arguments FastMCP rejects as ``[VALIDATION_ERROR]`` results."""

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        try:
            return await call_next(context)
        except Exception as exc:
            cause = _argument_error(exc)
            if cause is None:
                raise
            failure = validation_failure(cause)
            logger.warn(
                f"{context.message.name} rejected invalid arguments",
                failure.to_dict(),
            )
            raise ToolError(format_failure(failure).text) from exc


def create_server(settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> FastMCP:
    """Build the FastMCP server with both tools registered.

    Args:
        settings: Startup snapshot; supplies the schema defaults for
                  ``baseUrl`` and ``timeoutMs``.
        http_client: Shared httpx client.  ``None`` means each call opens
                     and closes its own.
    """
    mcp = FastMCP(SERVER_NAME)
    mcp.add_middleware(ArgumentErrorMiddleware())

    # -------------------------------------------------------------------------
    # TOOL 1: perplexica.search
    # -------------------------------------------------------------------------
    # The docstring-style description is what the calling LLM reads.  `stream`
    # is accepted so existing clients keep working, but the answer always
    # arrives as one complete block.
    # -------------------------------------------------------------------------
    @mcp.tool(
        name="perplexica.search",
        title="Perplexica Search",
        description="Search the internet via Perplexica and return answer with sources.",
    )
    async def perplexica_search(
        query: Annotated[str, Field(description="Search query or question")],
        focusMode: Annotated[FocusMode, Field(description="What to focus on")] = "webSearch",
        optimizationMode: OptimizationMode = "balanced",
        baseUrl: Annotated[str, Field(description="Perplexica base URL")] = settings.base_url,
        chatModel: Optional[ChatModel] = None,
        embeddingModel: Optional[EmbeddingModel] = None,
        systemInstructions: Optional[str] = None,
        history: Optional[list[tuple[HistoryRole, str]]] = None,
        stream: bool = False,
        timeoutMs: TimeoutMs = settings.default_timeout_ms,
    ) -> str:
        arguments = _collect(
            query=query,
            focusMode=focusMode,
            optimizationMode=optimizationMode,
            baseUrl=baseUrl,
            chatModel=chatModel,
            embeddingModel=embeddingModel,
            systemInstructions=systemInstructions,
            history=history,
            stream=stream,
            timeoutMs=timeoutMs,
        )
        return _unwrap(await handlers.search(arguments, settings, http_client))

    # -------------------------------------------------------------------------
    # TOOL 2: perplexica.health
    # -------------------------------------------------------------------------
    # Cheap connectivity check: lists the models Perplexica has configured
    # and reports only the counts.
    # -------------------------------------------------------------------------
    @mcp.tool(
        name="perplexica.health",
        title="Perplexica Health",
        description="Check connectivity to Perplexica and basic API health.",
    )
    async def perplexica_health(
        baseUrl: Annotated[str, Field(description="Perplexica base URL")] = settings.base_url,
        timeoutMs: TimeoutMs = settings.default_timeout_ms,
    ) -> str:
        arguments = _collect(baseUrl=baseUrl, timeoutMs=timeoutMs)
        return _unwrap(await handlers.health(arguments, settings, http_client))

    return mcp


def main() -> None:
    """Console entry point: read config once, then serve MCP over stdio."""
    load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info(
        "Starting MCP server",
        {
            "defaultTimeoutMs": settings.default_timeout_ms,
            "baseUrl": settings.base_url,
            "logLevel": settings.log_level,
        },
    )
    create_server(settings).run()


if __name__ == "__main__":
    main()
