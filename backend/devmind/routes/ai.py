"""
DevMind Backend — AI Assistance Route Handlers
================================================

What:  POST /api/ai       (task dispatch: text, tags, title, code)
       POST /api/ai/chat  (multi-turn chat)
Who:   Called by the editor's AI menu, code blocks, and the chat panel.

Dispatch rules for POST /api/ai (same body shapes the frontend already sends):
    action ∈ {suggestions, explain}  → CodeRequest  → {suggestions} / {explanation}
    type == generate_tags            → {tags}
    type == suggest_title            → {title}
    anything else                    → AssistanceRequest → {result, confidence}

Best-effort tasks:
    Tags, titles and code suggestions are decoration, so a failed vendor
    call is replaced with an empty result HERE rather than failing the
    editor action. The service layer always raises; this route decides.
"""

import logging
from typing import Any, Dict, Type, TypeVar, Union

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from devmind.config import Settings
from devmind.dependencies import bounded, get_assistance_service, get_settings
from devmind.exceptions import ProviderCallFailed, ValidationError
from devmind.schemas.ai import (
    AssistanceRequest,
    AssistanceResponse,
    ChatRequest,
    ChatResponse,
    CodeExplanationResponse,
    CodeRequest,
    CodeSuggestionsResponse,
    ContentRequest,
    ErrorResponse,
    TagsResponse,
    TitleResponse,
)
from devmind.services.assistance import UNTITLED_NOTE, AssistanceService
from devmind.services.prompts import TaskKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI"])

RequestModel = TypeVar("RequestModel", bound=BaseModel)

_ERROR_RESPONSES = {
    400: {"description": "Invalid request body", "model": ErrorResponse},
    503: {"description": "No active provider or provider failure", "model": ErrorResponse},
    504: {"description": "Provider did not answer in time", "model": ErrorResponse},
}


def _parse(model: Type[RequestModel], body: Dict[str, Any]) -> RequestModel:
    """Validate a raw body against a schema, reporting failures as a 400."""
    try:
        return model.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(
            message="Invalid request format",
            context={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        ) from None


@router.post(
    "",
    responses=_ERROR_RESPONSES,
    summary="Run an AI assistance task",
)
async def assist(
    body: Dict[str, Any] = Body(...),
    service: AssistanceService = Depends(get_assistance_service),
    app_settings: Settings = Depends(get_settings),
) -> Union[
    AssistanceResponse, TagsResponse, TitleResponse, CodeSuggestionsResponse, CodeExplanationResponse
]:
    """
    Dispatch one assistance request by body shape.

    Error responses (handled by global exception handlers):
        HTTP 400: body matches none of the request shapes
        HTTP 503: NoActiveProvider, or ProviderCallFailed for non-best-effort tasks
        HTTP 504: AI_REQUEST_TIMEOUT elapsed
    """
    timeout = app_settings.ai_request_timeout

    if body.get("action") in ("suggestions", "explain"):
        request = _parse(CodeRequest, body)
        if request.action == "suggestions":
            try:
                suggestions = await bounded(
                    service.generate_code_suggestions(request.code, request.language), timeout
                )
            except ProviderCallFailed as e:
                logger.warning("Code suggestions unavailable (%s); returning none", e.vendor_id)
                suggestions = []
            return CodeSuggestionsResponse(suggestions=suggestions)
        explanation = await bounded(service.explain_code(request.code, request.language), timeout)
        return CodeExplanationResponse(explanation=explanation)

    if body.get("type") == TaskKind.GENERATE_TAGS.value:
        request = _parse(ContentRequest, body)
        try:
            tags = await bounded(service.generate_tags(request.content), timeout)
        except ProviderCallFailed as e:
            logger.warning("Tag generation unavailable (%s); returning none", e.vendor_id)
            tags = []
        return TagsResponse(tags=tags)

    if body.get("type") == TaskKind.SUGGEST_TITLE.value:
        request = _parse(ContentRequest, body)
        try:
            title = await bounded(service.suggest_title(request.content), timeout)
        except ProviderCallFailed as e:
            logger.warning("Title suggestion unavailable (%s); using fallback", e.vendor_id)
            title = UNTITLED_NOTE
        return TitleResponse(title=title)

    request = _parse(AssistanceRequest, body)
    return await bounded(
        service.get_assistance(request.content, TaskKind(request.type), context=request.context),
        timeout,
    )


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses=_ERROR_RESPONSES,
    summary="Continue an assistant chat",
)
async def chat(
    request: ChatRequest,
    service: AssistanceService = Depends(get_assistance_service),
    app_settings: Settings = Depends(get_settings),
) -> ChatResponse:
    """
    Answer the next chat message in the context of the prior turns.

    The client owns the history and sends it every time; nothing is stored.
    """
    response = await bounded(
        service.chat(request.messages, request.new_message), app_settings.ai_request_timeout
    )
    return ChatResponse(content=response.result, confidence=response.confidence)
