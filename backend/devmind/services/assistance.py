"""
DevMind Backend — Assistance Service (Facade)
===============================================

What:  The single entry point the rest of the app uses for AI help:
       improve/summarize/explain/review text, tags, titles, code suggestions,
       code explanations, and multi-turn chat.
Why:   Callers ask for "tags for this note", not "a chat completion". This
       layer hides the conversation model and the vendor entirely.
How:   build prompt → registry.generate() → post-process text → plain result.
Who:   Injected into route handlers via FastAPI dependencies.

Per-request lifecycle:
    Idle → Building prompt → Awaiting provider → Post-processing → Done
                                    │
                                    └→ Failed (NoActiveProvider / ProviderCallFailed)

    No retries and no partial output: a failed vendor call propagates as-is.
    Substituting fallbacks for best-effort tasks is the HTTP layer's job.
"""

import logging
from typing import List, Optional, Sequence

from devmind.providers.base import ConversationMessage
from devmind.providers.registry import ProviderRegistry
from devmind.schemas.ai import AssistanceResponse
from devmind.services.prompts import CHAT_SYSTEM_PROMPT, TaskKind, build_prompt

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.8
UNTITLED_NOTE = "Untitled Note"
EXPLAIN_CODE_FALLBACK = "Unable to explain the code."

MAX_TAGS = 7
MAX_TAG_LENGTH = 20  # tags this long or longer are dropped
MAX_CODE_SUGGESTIONS = 5


# ══════════════════════════════════════════════════════════════════════════
# Post-processing
# ══════════════════════════════════════════════════════════════════════════


def parse_tags(text: str) -> List[str]:
    """
    Comma-separated vendor text → clean tag list.

    Trims and lowercases each entry, drops empty and over-long ones, keeps
    vendor order, and caps the list at MAX_TAGS.

    Example:
        "a, B , ,verylongtagnamethatexceedslimit,c" → ["a", "b", "c"]
    """
    tags = []
    for raw in text.split(","):
        tag = raw.strip().lower()
        if tag and len(tag) < MAX_TAG_LENGTH:
            tags.append(tag)
    return tags[:MAX_TAGS]


def parse_title(text: str) -> str:
    title = text.strip()
    return title or UNTITLED_NOTE


def parse_suggestions(text: str) -> List[str]:
    """
    One suggestion per non-blank line, in order, at most MAX_CODE_SUGGESTIONS.

    Lines are split on "\n" only and kept as written, so indented sub-points
    keep their indentation.
    """
    lines = text.split("\n")
    return [line for line in lines if line.strip()][:MAX_CODE_SUGGESTIONS]


# ══════════════════════════════════════════════════════════════════════════
# Facade
# ══════════════════════════════════════════════════════════════════════════


class AssistanceService:
    """
    Task-oriented AI operations on top of a ProviderRegistry.

    One instance per process, created in main.py's lifespan and shared by
    all requests. It keeps no per-request state.
    """

    def __init__(self, registry: ProviderRegistry):
        self.registry = registry

    async def _run(
        self,
        task: TaskKind,
        content: str,
        context: Optional[str] = None,
        language: Optional[str] = None,
    ) -> str:
        """Build the [system, user] pair for a task and return the raw reply text."""
        logger.debug("%s: building prompt", task.value)
        system_text, user_text = build_prompt(task, content, context=context, language=language)
        conversation = [
            ConversationMessage(role="system", content=system_text),
            ConversationMessage(role="user", content=user_text),
        ]

        logger.debug("%s: awaiting provider response", task.value)
        result = await self.registry.generate(conversation)

        logger.debug("%s: post-processing %d chars", task.value, len(result.content))
        return result.content

    async def get_assistance(
        self,
        content: str,
        task: TaskKind,
        context: Optional[str] = None,
    ) -> AssistanceResponse:
        """
        General assistance: improve, summarize, explain, code_review
        (generate_tags and suggest_title are accepted too and return raw text).

        Returns the vendor text verbatim; "" stays "".

        Raises:
            NoActiveProvider, ProviderCallFailed
        """
        text = await self._run(TaskKind(task), content, context=context)
        return AssistanceResponse(result=text, confidence=DEFAULT_CONFIDENCE)

    async def generate_tags(self, content: str) -> List[str]:
        text = await self._run(TaskKind.GENERATE_TAGS, content)
        return parse_tags(text)

    async def suggest_title(self, content: str) -> str:
        text = await self._run(TaskKind.SUGGEST_TITLE, content)
        return parse_title(text)

    async def generate_code_suggestions(self, code: str, language: str) -> List[str]:
        text = await self._run(TaskKind.CODE_SUGGESTIONS, code, language=language)
        return parse_suggestions(text)

    async def explain_code(self, code: str, language: str) -> str:
        """
        Plain-language explanation of a code snippet.

        An empty vendor reply becomes EXPLAIN_CODE_FALLBACK. A failed call is
        NOT turned into the fallback here; it propagates.
        """
        text = await self._run(TaskKind.EXPLAIN_CODE, code, language=language)
        return text or EXPLAIN_CODE_FALLBACK

    async def chat(
        self,
        history: Sequence[ConversationMessage],
        new_message: str,
    ) -> AssistanceResponse:
        """
        Continue a conversation.

        Conversation sent: [chat system prompt, *history, user(new_message)],
        history in the order given. History may itself contain system
        messages; adapters fold those per vendor rules.
        """
        conversation = [
            ConversationMessage(role="system", content=CHAT_SYSTEM_PROMPT),
            *history,
            ConversationMessage(role="user", content=new_message),
        ]
        logger.debug("%s: awaiting provider response (%d turns)", TaskKind.CHAT.value, len(conversation))
        result = await self.registry.generate(conversation)
        return AssistanceResponse(result=result.content, confidence=DEFAULT_CONFIDENCE)
