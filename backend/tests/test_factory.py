"""
DevMind Backend — Adapter Factory and Startup Registry Tests
==============================================================

What:  Tests for create_adapter() and build_registry().
How:   Real adapter classes are constructed (SDK clients do no I/O until
       called); the end-to-end test patches the google-genai module used
       by the Gemini adapter so no request leaves the process.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from devmind.config import Settings
from devmind.providers.base import ProviderConfig, VendorId
from devmind.providers.claude_adapter import ClaudeAdapter
from devmind.providers.factory import build_registry, create_adapter
from devmind.providers.gemini_adapter import GeminiAdapter
from devmind.providers.openai_adapter import OpenAIAdapter
from devmind.services.assistance import AssistanceService
from devmind.services.prompts import TaskKind


class TestCreateAdapter:

    @pytest.mark.parametrize(
        "vendor, adapter_class",
        [("openai", OpenAIAdapter), ("gemini", GeminiAdapter), ("claude", ClaudeAdapter)],
    )
    def test_builds_each_vendor(self, vendor, adapter_class):
        client = MagicMock()
        adapter = create_adapter(vendor, ProviderConfig(credential="k"), client=client)
        assert isinstance(adapter, adapter_class)
        assert adapter.vendor_identity() == VendorId(vendor)

    def test_unknown_vendor(self):
        with pytest.raises(ValueError, match="Unknown provider: mistral"):
            create_adapter("mistral", ProviderConfig(credential="k"))


class TestBuildRegistry:

    def test_no_credentials_empty_registry(self, test_settings):
        registry = build_registry(test_settings)
        assert registry.list_registered() == set()
        assert registry.active_vendor() is None

    def test_gemini_only(self):
        registry = build_registry(Settings(_env_file=None, gemini_api_key="AIza-test"))
        assert registry.list_registered() == {VendorId.GEMINI}
        assert registry.active_vendor() == VendorId.GEMINI

    def test_first_in_priority_becomes_active(self):
        s = Settings(
            _env_file=None,
            openai_api_key="sk-test",
            gemini_api_key="AIza-test",
            claude_api_key="sk-ant-test",
        )
        registry = build_registry(s)
        assert registry.list_registered() == set(VendorId)
        assert registry.active_vendor() == VendorId.OPENAI

    def test_priority_override(self):
        s = Settings(
            _env_file=None,
            openai_api_key="sk-test",
            claude_api_key="sk-ant-test",
            provider_priority="claude",
        )
        assert build_registry(s).active_vendor() == VendorId.CLAUDE

    def test_construction_failure_skips_vendor(self):
        s = Settings(_env_file=None, openai_api_key="sk-test", gemini_api_key="AIza-test")
        with patch(
            "devmind.providers.openai_adapter.AsyncOpenAI",
            side_effect=RuntimeError("bad key format"),
        ):
            registry = build_registry(s)
        assert registry.list_registered() == {VendorId.GEMINI}
        assert registry.active_vendor() == VendorId.GEMINI


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_summarize_through_gemini(self):
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text="Gemini summary.", usage_metadata=None)
        )

        with patch("devmind.providers.gemini_adapter.genai") as genai_module:
            genai_module.Client.return_value = client
            registry = build_registry(Settings(_env_file=None, gemini_api_key="AIza-test"))

        genai_module.Client.assert_called_once_with(api_key="AIza-test")
        response = await AssistanceService(registry).get_assistance("Long text", TaskKind.SUMMARIZE)

        assert response.result == "Gemini summary."
        assert response.confidence == 0.8
        client.aio.models.generate_content.assert_awaited_once()
