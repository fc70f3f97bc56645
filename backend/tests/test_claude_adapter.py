"""
DevMind Backend — Claude Adapter Tests
========================================

What:  Unit tests for ClaudeAdapter request/response translation.
How:   MagicMock AsyncAnthropic injected through the constructor.

What we test:
    ✅ First system message → `system` parameter, omitted when absent
    ✅ Temperature clamped to 1.0, 0 honoured
    ✅ Text blocks concatenated, other blocks ignored
    ✅ Usage total derived only when both counts exist
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from devmind.exceptions import ProviderCallFailed
from devmind.providers.base import ConversationMessage, ProviderConfig, VendorId
from devmind.providers.claude_adapter import ClaudeAdapter


def _message(blocks=None, usage=None, model="claude-haiku-4-5"):
    if blocks is None:
        blocks = [SimpleNamespace(type="text", text="Claude answer")]
    return SimpleNamespace(content=blocks, usage=usage, model=model)


@pytest.fixture
def client():
    mock = MagicMock()
    mock.messages.create = AsyncMock(return_value=_message())
    mock.models.list = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def adapter(client):
    return ClaudeAdapter(ProviderConfig(credential="sk-ant-test"), client=client)


class TestRequestTranslation:

    @pytest.mark.asyncio
    async def test_system_prompt_lifted_out(self, adapter, client, conversation):
        await adapter.generate(conversation)

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["system"] == "Be brief."
        assert kwargs["messages"] == [
            {"role": "user", "content": "What is a closure?"},
            {"role": "assistant", "content": "A function plus its environment."},
            {"role": "user", "content": "Show one in Python."},
        ]
        assert kwargs["model"] == "claude-haiku-4-5"
        assert kwargs["max_tokens"] == 1000

    @pytest.mark.asyncio
    async def test_no_system_parameter_without_system_message(self, adapter, client):
        await adapter.generate([ConversationMessage(role="user", content="hi")])
        assert "system" not in client.messages.create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_temperature_clamped_to_one(self, client, conversation):
        config = ProviderConfig(credential="sk-ant-test", temperature=1.6)
        await ClaudeAdapter(config, client=client).generate(conversation)
        assert client.messages.create.call_args.kwargs["temperature"] == 1.0

    @pytest.mark.asyncio
    async def test_zero_temperature_sent(self, client, conversation):
        config = ProviderConfig(credential="sk-ant-test", temperature=0.0)
        await ClaudeAdapter(config, client=client).generate(conversation)
        assert client.messages.create.call_args.kwargs["temperature"] == 0.0


class TestResponseTranslation:

    @pytest.mark.asyncio
    async def test_text_blocks_concatenated(self, adapter, client, conversation):
        client.messages.create.return_value = _message(
            blocks=[
                SimpleNamespace(type="text", text="part one, "),
                SimpleNamespace(type="tool_use", text=None),
                SimpleNamespace(type="text", text="part two"),
            ],
            usage=SimpleNamespace(input_tokens=30, output_tokens=7),
        )
        result = await adapter.generate(conversation)

        assert result.content == "part one, part two"
        assert result.provider_id == VendorId.CLAUDE
        assert result.usage.total_units == 37

    @pytest.mark.asyncio
    async def test_empty_content(self, adapter, client, conversation):
        client.messages.create.return_value = _message(blocks=[])
        result = await adapter.generate(conversation)
        assert result.content == ""
        assert result.usage is None

    @pytest.mark.asyncio
    async def test_total_left_unset_when_a_count_is_missing(self, adapter, client, conversation):
        client.messages.create.return_value = _message(
            usage=SimpleNamespace(input_tokens=30, output_tokens=None)
        )
        result = await adapter.generate(conversation)
        assert result.usage.prompt_units == 30
        assert result.usage.total_units is None


class TestFailures:

    @pytest.mark.asyncio
    async def test_sdk_error_wrapped(self, adapter, client, conversation):
        client.messages.create.side_effect = ConnectionError("overloaded")
        with pytest.raises(ProviderCallFailed) as exc_info:
            await adapter.generate(conversation)
        assert exc_info.value.vendor_id == "claude"
        assert exc_info.value.context["error_type"] == "ConnectionError"

    @pytest.mark.asyncio
    async def test_validate(self, adapter, client):
        assert await adapter.validate_credential() is True
        client.models.list.side_effect = PermissionError("401")
        assert await adapter.validate_credential() is False


class TestSystemOnlyConversation:

    @pytest.mark.asyncio
    async def test_system_only_conversation_sent_as_user_turn(self, adapter, client):
        await adapter.generate([ConversationMessage(role="system", content="Say hello.")])

        kwargs = client.messages.create.call_args.kwargs
        assert "system" not in kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "Say hello."}]


class TestCatalogue:

    def test_default_model_listed_first(self, adapter):
        assert adapter.model_id == "claude-haiku-4-5"
        assert adapter.list_models()[0] == "claude-haiku-4-5"

    def test_installed_sdk_supports_credential_check(self):
        # Built without an injected client: the real AsyncAnthropic must
        # expose the Models API that validate_credential() relies on
        adapter = ClaudeAdapter(ProviderConfig(credential="sk-ant-test"))
        assert hasattr(adapter._client, "models")
        assert hasattr(adapter._client.models, "list")
