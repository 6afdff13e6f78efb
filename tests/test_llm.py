import os

import pytest

from weatherbot.errors import ConfigurationError
from weatherbot.llm import (
    GPT_DEFAULT_MODEL,
    LLMUsage,
    default_chat_model,
    model_key_name,
    setup_model_key,
)


@pytest.mark.parametrize(
    "model,key",
    [
        ("gpt-4o-mini", "OPENAI_API_KEY"),
        ("openai/gpt-4o", "OPENAI_API_KEY"),
        ("anthropic/claude-3-5-sonnet-20240620", "ANTHROPIC_API_KEY"),
        ("claude-3-7-sonnet-20250219", "ANTHROPIC_API_KEY"),
        ("gemini/gemini-2.0-flash", "GEMINI_API_KEY"),
        ("ollama/qwen2.5", None),
    ],
)
def test_model_key_name(model, key):
    assert model_key_name(model) == key


def test_unknown_model():
    with pytest.raises(ConfigurationError, match="Unknown model"):
        model_key_name("mystery-model")


def test_setup_model_key(isolated_store, monkeypatch):
    _, secrets = isolated_store
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        setup_model_key("openai/gpt-4o-mini")

    secrets.set_secret("OPENAI_API_KEY", "sk-test")
    assert setup_model_key("openai/gpt-4o-mini") == "sk-test"
    assert os.environ["OPENAI_API_KEY"] == "sk-test"
    monkeypatch.delenv("OPENAI_API_KEY")


def test_default_chat_model(isolated_store):
    settings, _ = isolated_store
    assert default_chat_model() == GPT_DEFAULT_MODEL
    settings.set("DEFAULT_CHAT_MODEL", "openai/gpt-4o")
    assert default_chat_model() == "openai/gpt-4o"


def test_usage_str():
    usage = LLMUsage(input_tokens=12, output_tokens=3, calls=1, model="openai/gpt-4o-mini")
    assert str(usage) == "[openai/gpt-4o-mini: 1 calls, tokens: 12 --> 3]"
