"""
DevMind Backend — Anthropic Claude Adapter
============================================

What:  ProviderAdapter for the Anthropic Messages API.

Translation rules:
    - First system message → top-level `system` parameter
    - Later system messages → "user" turns at their original position
    - max_output_units → max_tokens (tokens)
    - temperature is clamped to Anthropic's accepted range [0, 1]

Probe: one page of models.list(): authenticated, costs no tokens.
"""

import logging
from typing import Any, Dict, List, Optional

from anthropic import AsyncAnthropic
from anthropic.types import MessageParam

from devmind.providers.base import (
    ConversationMessage,
    GenerationResult,
    ProviderAdapter,
    ProviderConfig,
    Usage,
    VendorId,
    fold_system_messages,
)

logger = logging.getLogger(__name__)

_MAX_TEMPERATURE = 1.0


class ClaudeAdapter(ProviderAdapter):
    """Adapter for Anthropic Claude models."""

    VENDOR = VendorId.CLAUDE
    DEFAULT_MODEL = "claude-haiku-4-5"
    MODELS = (
        "claude-haiku-4-5",
        "claude-sonnet-4-5",
        "claude-opus-4-1",
    )

    def __init__(self, config: ProviderConfig, client: Optional[AsyncAnthropic] = None) -> None:
        super().__init__(config)
        self._client = client or AsyncAnthropic(api_key=config.api_key())

    def _build_request(self, conversation: List[ConversationMessage]) -> Dict[str, Any]:
        # Anthropic takes the instruction as a parameter, not a turn
        system_prompt, turns = fold_system_messages(conversation)
        chat_messages: List[MessageParam] = [
            {"role": m.role, "content": m.content} for m in turns
        ]
        request: Dict[str, Any] = {
            "model": self.model_id,
            "max_tokens": self.max_output_units,
            "temperature": min(self.temperature, _MAX_TEMPERATURE),
            "messages": chat_messages,
        }
        if system_prompt is not None:
            request["system"] = system_prompt
        return request

    async def _call_vendor(self, conversation: List[ConversationMessage]) -> GenerationResult:
        response = await self._client.messages.create(**self._build_request(conversation))

        content = ""
        for block in response.content:
            if block.type == "text":
                content += block.text

        usage = None
        if response.usage is not None:
            prompt = getattr(response.usage, "input_tokens", None)
            completion = getattr(response.usage, "output_tokens", None)
            total = prompt + completion if prompt is not None and completion is not None else None
            usage = Usage.from_counts(prompt, completion, total)

        return GenerationResult(
            content=content,
            provider_id=self.VENDOR,
            model_id=response.model or self.model_id,
            usage=usage,
        )

    async def _probe(self) -> None:
        await self._client.models.list(limit=1)
