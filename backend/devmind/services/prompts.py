"""
DevMind Backend — Task Prompt Templates
=========================================

What:  Static (system, user) instruction pairs for every assistance task.
Why:   Keeping templates as pure functions makes them testable without any
       provider and keeps the facade free of string formatting.
How:   build_prompt(task, content, ...) → (system_text, user_text).
       Templates are fixed; nothing here is user-configurable.
"""

from enum import Enum
from typing import Optional, Tuple

# Input caps for short-answer tasks: the head of a note is enough to
# tag or title it, and keeps those requests cheap
TAG_CONTENT_LIMIT = 1000
TITLE_CONTENT_LIMIT = 500


class TaskKind(str, Enum):
    """Every task the facade can run."""

    IMPROVE = "improve"
    SUMMARIZE = "summarize"
    EXPLAIN = "explain"
    CODE_REVIEW = "code_review"
    GENERATE_TAGS = "generate_tags"
    SUGGEST_TITLE = "suggest_title"
    CODE_SUGGESTIONS = "code_suggestions"
    EXPLAIN_CODE = "explain_code"
    CHAT = "chat"


ASSISTANT_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in helping developers with their notes, "
    "code, and documentation. Provide concise, helpful responses."
)

CHAT_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in helping developers with their notes, "
    "code, and documentation. You're integrated into DevMind, a knowledge management "
    "app. Provide helpful, concise responses and offer to help with specific tasks "
    "like organizing thoughts, explaining concepts, or improving content."
)

_GENERAL_TEMPLATES = {
    TaskKind.IMPROVE: (
        "Please improve the following text for clarity, grammar, and technical "
        "accuracy:\n\n{content}"
    ),
    TaskKind.SUMMARIZE: "Please provide a concise summary of the following content:\n\n{content}",
    TaskKind.EXPLAIN: "Please explain the following content in simple terms:\n\n{content}",
    TaskKind.CODE_REVIEW: (
        "Please review the following code and provide feedback on best practices, "
        "potential issues, and improvements:\n\n{content}"
    ),
}

TAGS_SYSTEM_PROMPT = (
    "Generate 3-7 relevant tags for the given content. Focus on programming languages, "
    "technologies, concepts, and topics. Return only the tags separated by commas."
)

TITLE_SYSTEM_PROMPT = (
    "Generate a concise, descriptive title for the given content. The title should be "
    "3-8 words and capture the main topic or purpose."
)


def _with_context(user_text: str, context: Optional[str]) -> str:
    if context and context.strip():
        return f"{user_text}\n\nContext:\n{context.strip()}"
    return user_text


def build_prompt(
    task: TaskKind,
    content: str,
    context: Optional[str] = None,
    language: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Build the (system, user) instruction pair for a task.

    Args:
        task:     which task to prompt for
        content:  note text, or source code for the code tasks
        context:  optional extra text appended under a "Context:" heading
        language: programming language name, used by the code tasks

    Raises:
        ValueError: CHAT has no single-shot template (see AssistanceService.chat)
    """
    task = TaskKind(task)
    lang = (language or "").strip() or "source"

    if task in _GENERAL_TEMPLATES:
        user = _GENERAL_TEMPLATES[task].format(content=content)
        return ASSISTANT_SYSTEM_PROMPT, _with_context(user, context)

    if task is TaskKind.GENERATE_TAGS:
        user = f"Generate tags for this content:\n\n{content[:TAG_CONTENT_LIMIT]}"
        return TAGS_SYSTEM_PROMPT, _with_context(user, context)

    if task is TaskKind.SUGGEST_TITLE:
        user = f"Generate a title for this content:\n\n{content[:TITLE_CONTENT_LIMIT]}"
        return TITLE_SYSTEM_PROMPT, _with_context(user, context)

    if task is TaskKind.CODE_SUGGESTIONS:
        system = (
            f"You are a code review assistant. Analyze the {lang} code and provide 3-5 "
            "specific improvement suggestions. Focus on best practices, performance, "
            "and readability."
        )
        user = f"Please review this {lang} code and provide improvement suggestions:\n\n{content}"
        return system, _with_context(user, context)

    if task is TaskKind.EXPLAIN_CODE:
        system = (
            f"You are a code explanation assistant. Explain {lang} code in simple terms, "
            "describing what it does, how it works, and any important concepts involved."
        )
        user = f"Please explain this {lang} code:\n\n{content}"
        return system, _with_context(user, context)

    raise ValueError(f"No single-shot prompt template for task '{task.value}'")
