"""
DevMind Backend — Google Gemini Adapter
=========================================

What:  ProviderAdapter for Google Gemini via the google-genai SDK.
Why google-genai (not google-generativeai):
       The legacy SDK authenticates through a module-global genai.configure(),
       so two adapters (or a test and the app) would share one credential.
       genai.Client(api_key=...) gives each adapter its own private client.

Translation rules:
    - First system message → GenerateContentConfig.system_instruction
    - Later system messages → "user" turns at their original position
    - "assistant" → "model" (Gemini's name for its own turns)
    - max_output_units → max_output_tokens (tokens)

Probe: one page of models.list(). Authenticated and free, the same check
       the original health endpoint relied on.
"""

import logging
from typing import List, Optional, Tuple

from google import genai
from google.genai import types

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

_ROLE_MAP = {"user": "user", "assistant": "model"}


def _to_gemini_content(m: ConversationMessage) -> types.Content:
    return types.Content(role=_ROLE_MAP[m.role], parts=[types.Part(text=m.content)])


class GeminiAdapter(ProviderAdapter):
    """
    Google Gemini implementation.

    Gemini reports usage in tokens via usage_metadata; any of its counters
    may be missing (e.g. blocked prompts), so each is read independently.
    """

    VENDOR = VendorId.GEMINI
    DEFAULT_MODEL = "gemini-2.5-flash-lite"
    MODELS = (
        "gemini-2.5-flash-lite",
        "gemini-2.5-flash",
        "gemini-2.5-pro",
    )

    def __init__(self, config: ProviderConfig, client: Optional[genai.Client] = None) -> None:
        super().__init__(config)
        self._client = client or genai.Client(api_key=config.api_key())

    def _build_request(
        self, conversation: List[ConversationMessage]
    ) -> Tuple[List[types.Content], types.GenerateContentConfig]:
        """Returns (contents, config) for generate_content."""
        instruction, turns = fold_system_messages(conversation)
        contents = [_to_gemini_content(m) for m in turns]
        config = types.GenerateContentConfig(
            system_instruction=instruction,
            temperature=self.temperature,
            max_output_tokens=self.max_output_units,
        )
        return contents, config

    async def _call_vendor(self, conversation: List[ConversationMessage]) -> GenerationResult:
        contents, config = self._build_request(conversation)
        response = await self._client.aio.models.generate_content(
            model=self.model_id,
            contents=contents,
            config=config,
        )

        metadata = getattr(response, "usage_metadata", None)
        usage = None
        if metadata is not None:
            usage = Usage.from_counts(
                getattr(metadata, "prompt_token_count", None),
                getattr(metadata, "candidates_token_count", None),
                getattr(metadata, "total_token_count", None),
            )

        return GenerationResult(
            content=response.text or "",
            provider_id=self.VENDOR,
            model_id=self.model_id,
            usage=usage,
        )

    async def _probe(self) -> None:
        await self._client.aio.models.list(config={"page_size": 1})
