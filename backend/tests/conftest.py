"""
DevMind Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (fake adapters, registries,
       settings without real keys, an HTTP client bound to the app).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── make_adapter:   factory for in-memory ProviderAdapter fakes
    ├── registry:       empty ProviderRegistry
    ├── test_settings:  Settings with no vendor keys and no .env file
    └── make_client:    factory for an httpx AsyncClient bound to create_app()
"""

import asyncio
import os
from typing import List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
# Why: A developer's real API keys must never be picked up by the test run
for _name in (
    "OPENAI_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "ANTHROPIC_API_KEY",
    "CLAUDE_API_KEY",
):
    os.environ.pop(_name, None)
os.environ.pop("AI_REQUEST_TIMEOUT", None)
os.environ.pop("PROVIDER_PRIORITY", None)
os.environ["LOG_LEVEL"] = "WARNING"

from devmind.config import Settings  # noqa: E402
from devmind.providers.base import (  # noqa: E402
    ConversationMessage,
    GenerationResult,
    ProviderAdapter,
    ProviderConfig,
    Usage,
    VendorId,
)
from devmind.providers.registry import ProviderRegistry  # noqa: E402


class FakeAdapter(ProviderAdapter):
    """
    In-memory adapter: records every conversation it receives and answers
    with a canned reply, a canned exception, or after a delay.
    """

    DEFAULT_MODEL = "fake-small"
    MODELS = ("fake-small", "fake-large")

    def __init__(
        self,
        vendor: VendorId = VendorId.GEMINI,
        reply: str = "",
        error: Optional[Exception] = None,
        probe_ok: bool = True,
        delay: float = 0.0,
        usage: Optional[Usage] = None,
    ):
        super().__init__(ProviderConfig(credential="test-key-not-real"))
        self.VENDOR = vendor
        self.reply = reply
        self.error = error
        self.probe_ok = probe_ok
        self.delay = delay
        self.usage = usage
        self.calls: List[List[ConversationMessage]] = []

    async def _call_vendor(self, conversation):
        self.calls.append(conversation)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return GenerationResult(
            content=self.reply,
            provider_id=self.VENDOR,
            model_id=self.model_id,
            usage=self.usage,
        )

    async def _probe(self):
        if not self.probe_ok:
            raise PermissionError("invalid api key")


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_adapter():
    """
    Factory for FakeAdapter instances.

    Usage:
        def test_x(make_adapter):
            gemini = make_adapter(VendorId.GEMINI, reply="hello")
    """
    def _make(vendor: VendorId = VendorId.GEMINI, **kwargs) -> FakeAdapter:
        return FakeAdapter(vendor=vendor, **kwargs)

    return _make


@pytest.fixture
def registry() -> ProviderRegistry:
    return ProviderRegistry()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with no vendor credentials and no .env lookup."""
    return Settings(_env_file=None)


@pytest.fixture
def conversation() -> List[ConversationMessage]:
    """One system instruction followed by alternating user/assistant turns."""
    return [
        ConversationMessage(role="system", content="Be brief."),
        ConversationMessage(role="user", content="What is a closure?"),
        ConversationMessage(role="assistant", content="A function plus its environment."),
        ConversationMessage(role="user", content="Show one in Python."),
    ]


@pytest.fixture
def make_client(test_settings):
    """
    Factory for an httpx AsyncClient talking to a fresh app.

    Usage:
        async def test_health(make_client, registry):
            async with make_client(registry) as client:
                response = await client.get("/health")
    """
    from devmind.main import create_app

    def _make(registry: ProviderRegistry, app_settings: Optional[Settings] = None) -> AsyncClient:
        app = create_app(registry=registry, app_settings=app_settings or test_settings)
        transport = ASGITransport(app=app)
        return AsyncClient(transport=transport, base_url="http://test")

    return _make
