"""
DevMind Backend — Provider Registry Tests
===========================================

What:  Tests for ProviderRegistry bookkeeping and dispatch.
How:   FakeAdapter instances from conftest; no vendor SDKs involved.

What we test:
    ✅ Activation requires registration
    ✅ Registering twice keeps one entry, active status survives replacement
    ✅ Removing the active vendor clears the selection (no auto-pick)
    ✅ generate() with nothing active → NoActiveProvider
    ✅ Vendor failures pass through unchanged
    ✅ validate() answers False for unknown/unregistered vendors
"""

import asyncio

import pytest

from devmind.exceptions import NoActiveProvider, ProviderCallFailed, ProviderNotRegistered
from devmind.providers.base import ConversationMessage, VendorId


HELLO = [ConversationMessage(role="user", content="hello")]


class TestRegistration:

    def test_set_active_before_register_raises(self, registry):
        with pytest.raises(ProviderNotRegistered) as exc_info:
            registry.set_active("claude")
        assert exc_info.value.vendor_id == "claude"
        assert registry.active_vendor() is None

    def test_set_active_unknown_name_raises(self, registry):
        with pytest.raises(ProviderNotRegistered):
            registry.set_active("mistral")

    def test_register_then_activate(self, registry, make_adapter):
        registry.register(make_adapter(VendorId.GEMINI))
        registry.set_active("gemini")
        assert registry.active_vendor() == VendorId.GEMINI
        assert registry.list_registered() == {VendorId.GEMINI}

    def test_register_is_idempotent_by_identity(self, registry, make_adapter):
        first = make_adapter(VendorId.OPENAI, reply="first")
        second = make_adapter(VendorId.OPENAI, reply="second")
        registry.register(first)
        registry.set_active(VendorId.OPENAI)
        registry.register(second)

        assert registry.list_registered() == {VendorId.OPENAI}
        assert registry.active_vendor() == VendorId.OPENAI
        assert registry.active_adapter() is second

    def test_register_does_not_activate(self, registry, make_adapter):
        registry.register(make_adapter(VendorId.CLAUDE))
        assert registry.active_vendor() is None

    def test_get(self, registry, make_adapter):
        adapter = make_adapter(VendorId.CLAUDE)
        registry.register(adapter)
        assert registry.get("claude") is adapter
        with pytest.raises(ProviderNotRegistered):
            registry.get("openai")

    def test_unregister_active_clears_selection(self, registry, make_adapter):
        registry.register(make_adapter(VendorId.OPENAI))
        registry.register(make_adapter(VendorId.GEMINI))
        registry.set_active("openai")

        registry.unregister("openai")

        assert registry.list_registered() == {VendorId.GEMINI}
        assert registry.active_vendor() is None

    def test_unregister_inactive_keeps_selection(self, registry, make_adapter):
        registry.register(make_adapter(VendorId.OPENAI))
        registry.register(make_adapter(VendorId.GEMINI))
        registry.set_active("gemini")

        registry.unregister(VendorId.OPENAI)

        assert registry.active_vendor() == VendorId.GEMINI

    def test_unregister_missing_raises(self, registry):
        with pytest.raises(ProviderNotRegistered):
            registry.unregister("gemini")

    def test_describe_in_vendor_order(self, registry, make_adapter):
        registry.register(make_adapter(VendorId.CLAUDE))
        registry.register(make_adapter(VendorId.OPENAI))
        registry.set_active("claude")

        assert registry.describe() == [
            {"vendor_id": "openai", "active": False, "models": ["fake-small", "fake-large"]},
            {"vendor_id": "claude", "active": True, "models": ["fake-small", "fake-large"]},
        ]


class TestDispatch:

    @pytest.mark.asyncio
    async def test_generate_with_nothing_registered(self, registry):
        with pytest.raises(NoActiveProvider):
            await registry.generate(HELLO)

    @pytest.mark.asyncio
    async def test_generate_with_nothing_active(self, registry, make_adapter):
        registry.register(make_adapter(VendorId.GEMINI))
        with pytest.raises(NoActiveProvider):
            await registry.generate(HELLO)

    @pytest.mark.asyncio
    async def test_generate_uses_active_adapter_only(self, registry, make_adapter):
        openai = make_adapter(VendorId.OPENAI, reply="from openai")
        gemini = make_adapter(VendorId.GEMINI, reply="from gemini")
        registry.register(openai)
        registry.register(gemini)
        registry.set_active("gemini")

        result = await registry.generate(HELLO)

        assert result.content == "from gemini"
        assert result.provider_id == VendorId.GEMINI
        assert openai.calls == []
        assert len(gemini.calls) == 1

    @pytest.mark.asyncio
    async def test_failure_passes_through_without_fallback(self, registry, make_adapter):
        failing = make_adapter(VendorId.OPENAI, error=RuntimeError("boom"))
        backup = make_adapter(VendorId.GEMINI, reply="unused")
        registry.register(failing)
        registry.register(backup)
        registry.set_active("openai")

        with pytest.raises(ProviderCallFailed) as exc_info:
            await registry.generate(HELLO)

        assert exc_info.value.vendor_id == "openai"
        assert len(failing.calls) == 1
        assert backup.calls == []

    @pytest.mark.asyncio
    async def test_switch_during_inflight_call(self, registry, make_adapter):
        slow = make_adapter(VendorId.OPENAI, reply="slow", delay=0.05)
        registry.register(slow)
        registry.register(make_adapter(VendorId.CLAUDE, reply="fast"))
        registry.set_active("openai")

        task = asyncio.create_task(registry.generate(HELLO))
        await asyncio.sleep(0)
        registry.set_active("claude")

        assert (await task).content == "slow"
        assert (await registry.generate(HELLO)).content == "fast"


class TestValidate:

    @pytest.mark.asyncio
    async def test_unregistered_vendor_is_false(self, registry):
        assert await registry.validate("openai") is False

    @pytest.mark.asyncio
    async def test_unknown_vendor_is_false(self, registry):
        assert await registry.validate("not-a-vendor") is False

    @pytest.mark.asyncio
    async def test_delegates_to_adapter(self, registry, make_adapter):
        registry.register(make_adapter(VendorId.OPENAI, probe_ok=True))
        registry.register(make_adapter(VendorId.CLAUDE, probe_ok=False))
        assert await registry.validate("openai") is True
        assert await registry.validate(VendorId.CLAUDE) is False
