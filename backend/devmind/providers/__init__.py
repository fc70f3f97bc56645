# Providers package init
"""
DevMind Backend — AI Provider Layer
=====================================

What:  Vendor-neutral message model, one adapter per AI vendor, and the
       registry that routes generation to the active vendor.

Module Inventory:
    - base.py:            ConversationMessage, GenerationResult, ProviderConfig,
                          ProviderAdapter (abstract)
    - openai_adapter.py:  OpenAI Chat Completions
    - gemini_adapter.py:  Google Gemini (google-genai)
    - claude_adapter.py:  Anthropic Messages
    - registry.py:        ProviderRegistry (register / set_active / generate)
    - factory.py:         create_adapter(), build_registry(settings)
"""

from devmind.providers.base import (
    ConversationMessage,
    GenerationResult,
    ProviderAdapter,
    ProviderConfig,
    Usage,
    VendorId,
)
from devmind.providers.factory import build_registry, create_adapter
from devmind.providers.registry import ProviderRegistry

__all__ = [
    "ConversationMessage",
    "GenerationResult",
    "ProviderAdapter",
    "ProviderConfig",
    "ProviderRegistry",
    "Usage",
    "VendorId",
    "build_registry",
    "create_adapter",
]
