"""Factory mapping provider settings to a concrete chat client."""

from typing import Any, Optional

from llm_structured.core.config import ProviderSettings
from llm_structured.core.exceptions import ConfigurationError
from llm_structured.llm.client import ChatClient
from llm_structured.llm.providers.gemini_provider import GeminiChatClient
from llm_structured.llm.providers.openai_provider import OpenAIChatClient


SUPPORTED_PROVIDERS = ("openai", "gemini")


def build_chat_client(settings: ProviderSettings, client: Optional[Any] = None) -> ChatClient:
    """
    Construct the adapter for ``settings.provider``.

    Args:
        settings: Provider configuration
        client: Optional pre-built SDK client passed through to the adapter

    Returns:
        ChatClient for the configured backend

    Raises:
        ConfigurationError: If the provider is not supported
    """
    api_key = settings.api_key.get_secret_value()
    if settings.provider == "openai":
        return OpenAIChatClient(api_key, model=settings.model, timeout=settings.timeout, client=client)
    if settings.provider == "gemini":
        return GeminiChatClient(api_key, model=settings.model, timeout=settings.timeout, client=client)

    raise ConfigurationError(f"Unknown LLM provider: {settings.provider}")
