"""
DevMind Backend — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between frontend and backend.
Why:   Strict input validation, automatic serialization, and OpenAPI doc generation.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate Swagger/OpenAPI documentation automatically.
Who:   Used by route handlers and by the AssistanceService as return types.

Security:
    No response model has a field for vendor payloads or credentials.
    ProviderKeyRequest carries an API key inbound only; it is never echoed.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, SecretStr

from devmind.providers.base import ConversationMessage


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class AssistanceRequest(BaseModel):
    """
    What:  General text assistance request.
    Who:   Sent by the note editor's AI menu.
    """
    content: str = Field(min_length=1, description="Note text to work on")
    context: Optional[str] = Field(default=None, description="Optional surrounding context")
    type: Literal[
        "improve", "summarize", "explain", "code_review", "generate_tags", "suggest_title"
    ] = Field(description="Which assistance task to run")


class ContentRequest(BaseModel):
    """Tag and title requests only need the text (may be empty)."""
    content: str = Field(description="Note text")


class CodeRequest(BaseModel):
    """
    What:  Code-specific request from a code block in the editor.
    """
    code: str = Field(min_length=1)
    language: str = Field(min_length=1, description="Programming language name")
    action: Literal["suggestions", "explain"]


class ChatRequest(BaseModel):
    """
    What:  One chat turn with the prior conversation.
    Why list of messages: The assistant answers in context; the client owns
           the history and resends it each turn.
    """
    messages: List[ConversationMessage] = Field(default_factory=list)
    new_message: str = Field(min_length=1)


class SetActiveProviderRequest(BaseModel):
    vendor_id: str = Field(description="openai, gemini or claude")


class ProviderKeyRequest(BaseModel):
    """
    What:  Credential (and optional knobs) entered in the provider settings screen.
    """
    api_key: SecretStr = Field(description="Vendor API key")
    model: Optional[str] = Field(default=None)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_output_tokens: Optional[int] = Field(default=None, gt=0)


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class AssistanceResponse(BaseModel):
    """
    What:  Result of a general assistance task.
    confidence: fixed estimate, not a model score
    """
    result: str = Field(description="AI output, verbatim; empty when nothing was produced")
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class TagsResponse(BaseModel):
    tags: List[str]


class TitleResponse(BaseModel):
    title: str


class CodeSuggestionsResponse(BaseModel):
    suggestions: List[str]


class CodeExplanationResponse(BaseModel):
    explanation: str


class ChatResponse(BaseModel):
    content: str
    confidence: Optional[float] = None


class ProviderInfo(BaseModel):
    vendor_id: str
    active: bool
    models: List[str]


class ProviderListResponse(BaseModel):
    """
    What:  Everything the provider settings screen needs to render.
    """
    active: Optional[str] = Field(default=None, description="Active vendor id, if any")
    providers: List[ProviderInfo] = Field(default_factory=list)


class ProviderValidationResponse(BaseModel):
    vendor_id: str
    valid: bool


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "provider_error",
            "message": "The AI provider could not complete the request. Please try again later.",
            "details": {"vendor_id": "gemini"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response. Reports configuration state only; it never
           calls a vendor (that is what /api/providers/{id}/validate is for).
    """
    status: str = Field(description="healthy (a provider is active) or degraded")
    version: str
    active_provider: Optional[str] = None
    registered_providers: List[str] = Field(default_factory=list)
    uptime_seconds: float
