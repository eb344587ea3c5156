"""Tests for completion adapter selection."""
import pytest
from finwise.adapters import factory
from finwise.adapters.factory import build_default_adapter, get_completion_adapter
from finwise.adapters.mock import MockCompletionAdapter
from finwise.adapters.openai_adapter import OpenAIAdapter
from finwise.config import settings
from finwise.errors import CompletionServiceError


@pytest.fixture
def no_keys(monkeypatch):
    for field in ("gemini_api_key", "openai_api_key", "anthropic_api_key"):
        monkeypatch.setattr(settings, field, "")


def test_mock_adapter_selected():
    adapter = get_completion_adapter("mock:finwise")
    assert isinstance(adapter, MockCompletionAdapter)


def test_unknown_model_rejected():
    with pytest.raises(ValueError):
        get_completion_adapter("llama-local")


@pytest.mark.parametrize("model_id", ["gemini-2.0-flash", "gpt-4o-mini", "claude-3-5-haiku-latest"])
def test_provider_without_key_rejected(no_keys, model_id):
    with pytest.raises(ValueError):
        get_completion_adapter(model_id)


def test_openai_compatible_prefix_is_stripped(no_keys):
    adapter = get_completion_adapter("openai:llama3", api_key="sk-test", base_url="http://localhost:8001/v1")

    assert isinstance(adapter, OpenAIAdapter)
    assert adapter.remote_model == "llama3"


def test_default_adapter_is_none_when_unconfigured(no_keys, monkeypatch):
    monkeypatch.setattr(settings, "completion_model", "gemini-2.0-flash")

    assert build_default_adapter() is None


def test_default_adapter_uses_configured_model(monkeypatch):
    monkeypatch.setattr(factory.settings, "completion_model", "mock:finwise")

    assert isinstance(build_default_adapter(), MockCompletionAdapter)


@pytest.mark.asyncio
async def test_mock_records_prompts():
    adapter = MockCompletionAdapter("mock:finwise", response="Spend less on coffee.")

    answer = await adapter.complete("How do I save?")

    assert answer == "Spend less on coffee."
    assert adapter.prompts == ["How do I save?"]


@pytest.mark.asyncio
async def test_mock_empty_answer_raises():
    adapter = MockCompletionAdapter("mock:empty")

    with pytest.raises(CompletionServiceError):
        await adapter.complete("anything")
