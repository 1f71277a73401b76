"""
Chat client abstraction, request/response value objects and provider factory.
"""

from llm_structured.llm.client import ChatClient, decode_json_payload
from llm_structured.llm.factory import build_chat_client
from llm_structured.llm.models import (
    Message,
    StructuredOutputRequest,
    StructuredOutputResponse,
)

__all__ = [
    "ChatClient",
    "decode_json_payload",
    "build_chat_client",
    "Message",
    "StructuredOutputRequest",
    "StructuredOutputResponse",
]
