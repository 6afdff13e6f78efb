import os
import re
from dataclasses import dataclass

from .errors import ConfigurationError
from .settings import settings
from .weather_secrets import weather_secrets

GPT_DEFAULT_MODEL = "openai/gpt-4o-mini"


def default_chat_model() -> str:
    return settings.get("DEFAULT_CHAT_MODEL", GPT_DEFAULT_MODEL)


@dataclass
class LLMUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    calls: int = 0
    model: str = ""

    def add(self, response) -> None:
        usage = getattr(response, "usage", None)
        self.calls += 1
        if usage:
            self.input_tokens += usage.prompt_tokens or 0
            self.output_tokens += usage.completion_tokens or 0

    def __str__(self) -> str:
        return f"[{self.model}: {self.calls} calls, tokens: {self.input_tokens} --> {self.output_tokens}]"


def model_key_name(model: str) -> str | None:
    if re.match(r"^gpt-\d+", model) or model.startswith("openai/"):
        return "OPENAI_API_KEY"
    elif re.match(r"^claude-\w+", model) or model.startswith("anthropic/"):
        return "ANTHROPIC_API_KEY"
    elif model.startswith("gemini/") or model.startswith("google/"):
        return "GEMINI_API_KEY"
    elif model.startswith("ollama/") or model.startswith("lm_studio/"):
        return None
    raise ConfigurationError(f"Unknown model {model}")


def setup_model_key(model: str) -> str | None:
    """Copy the model provider's key from secrets into the environment.

    litellm reads provider keys from the environment only.
    """
    key_name = model_key_name(model)
    if key_name is None:
        return None

    value = weather_secrets.get_secret(key_name)
    if not value:
        raise ConfigurationError(f"Missing API key {key_name} to use {model}")
    os.environ[key_name] = value
    return value
