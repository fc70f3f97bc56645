"""
DevMind Backend — OpenAI Adapter
==================================

What:  ProviderAdapter for the OpenAI Chat Completions API.
How:   Messages map 1:1 onto chat messages (OpenAI accepts any number of
       system messages, anywhere), so no folding is needed.
Units: max_output_units → max_tokens (tokens).
Probe: models.list(): authenticated, costs no tokens.
"""

import logging
from typing import List, Optional

from openai import AsyncOpenAI
from openai.types.chat import (
    ChatCompletionAssistantMessageParam,
    ChatCompletionSystemMessageParam,
    ChatCompletionUserMessageParam,
)
from openai.types.chat.chat_completion_message_param import ChatCompletionMessageParam

from devmind.providers.base import (
    ConversationMessage,
    GenerationResult,
    ProviderAdapter,
    ProviderConfig,
    Usage,
    VendorId,
)

logger = logging.getLogger(__name__)


def _to_openai_message(m: ConversationMessage) -> ChatCompletionMessageParam:
    if m.role == "system":
        return ChatCompletionSystemMessageParam(role="system", content=m.content)
    if m.role == "assistant":
        return ChatCompletionAssistantMessageParam(role="assistant", content=m.content)
    return ChatCompletionUserMessageParam(role="user", content=m.content)


class OpenAIAdapter(ProviderAdapter):
    """Adapter for OpenAI chat models."""

    VENDOR = VendorId.OPENAI
    DEFAULT_MODEL = "gpt-4o-mini"
    MODELS = (
        "gpt-4o-mini",
        "gpt-4o",
        "gpt-4-turbo",
        "gpt-3.5-turbo",
    )

    def __init__(self, config: ProviderConfig, client: Optional[AsyncOpenAI] = None) -> None:
        super().__init__(config)
        self._client = client or AsyncOpenAI(api_key=config.api_key())

    async def _call_vendor(self, conversation: List[ConversationMessage]) -> GenerationResult:
        response = await self._client.chat.completions.create(
            model=self.model_id,
            messages=[_to_openai_message(m) for m in conversation],
            temperature=self.temperature,
            max_tokens=self.max_output_units,
        )

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        usage = None
        if response.usage:
            usage = Usage.from_counts(
                response.usage.prompt_tokens,
                response.usage.completion_tokens,
                response.usage.total_tokens,
            )

        return GenerationResult(
            content=content,
            provider_id=self.VENDOR,
            model_id=response.model or self.model_id,
            usage=usage,
        )

    async def _probe(self) -> None:
        await self._client.models.list()
