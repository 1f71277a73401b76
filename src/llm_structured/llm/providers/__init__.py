"""
Chat client implementations.

Concrete adapters for each structured-output backend.
"""

from llm_structured.llm.providers.mock import MockChatClient
from llm_structured.llm.providers.openai_provider import OpenAIChatClient
from llm_structured.llm.providers.gemini_provider import GeminiChatClient

__all__ = [
    "MockChatClient",
    "OpenAIChatClient",
    "GeminiChatClient",
]
