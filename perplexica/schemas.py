# =============================================================================
# perplexica/schemas.py  -  Caller-facing input schemas
# =============================================================================
#
# The argument objects accepted by the two tools.  Field aliases are the
# camelCase names callers (and Perplexica) use; Python code reads the
# snake_case attributes.
#
# Unknown fields are IGNORED, not rejected, so newer clients that send extra
# options keep working against this server.
#
# Defaults that come from configuration (base_url, timeout_ms) are NOT set
# here: validation.py fills them in from the Settings snapshot before the
# model is built.
# =============================================================================

from typing import Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field

FocusMode = Literal[
    "webSearch",
    "academicSearch",
    "writingAssistant",
    "wolframAlphaSearch",
    "youtubeSearch",
    "redditSearch",
]
OptimizationMode = Literal["speed", "balanced"]
HistoryRole = Literal["human", "assistant"]

FOCUS_MODES: tuple[str, ...] = get_args(FocusMode)


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ChatModel(_Schema):
    provider: Optional[str] = None
    name: Optional[str] = None
    custom_openai_base_url: Optional[str] = Field(default=None, alias="customOpenAIBaseURL")
    custom_openai_key: Optional[str] = Field(default=None, alias="customOpenAIKey")


class EmbeddingModel(_Schema):
    provider: Optional[str] = None
    name: Optional[str] = None


class HealthRequest(_Schema):
    """Arguments of ``perplexica.health``."""

    base_url: str = Field(alias="baseUrl", min_length=1)
    timeout_ms: int = Field(alias="timeoutMs", gt=0, strict=True)


class SearchRequest(HealthRequest):
    """Arguments of ``perplexica.search``.

    ``stream`` is accepted for compatibility but never changes behavior:
    the upstream call is always non-streaming.
    """

    query: str = Field(min_length=1, description="Search query or question")
    focus_mode: FocusMode = Field(default="webSearch", alias="focusMode")
    optimization_mode: OptimizationMode = Field(default="balanced", alias="optimizationMode")
    chat_model: Optional[ChatModel] = Field(default=None, alias="chatModel")
    embedding_model: Optional[EmbeddingModel] = Field(default=None, alias="embeddingModel")
    system_instructions: Optional[str] = Field(default=None, alias="systemInstructions")
    history: Optional[list[tuple[HistoryRole, str]]] = None
    stream: bool = False
