"""
llm_structured - Structured JSON output from interchangeable LLM providers.

Describe the output once as a canonical schema, then ask OpenAI (strict
Structured Outputs) or Gemini (controlled generation) for it through the same
ChatClient interface. Each call is a single blocking request/response.
"""

__version__ = "0.1.0"

# Core components
from llm_structured.core.config import ProviderSettings, load_provider_settings
from llm_structured.core.exceptions import (
    LLMStructuredError,
    ConfigurationError,
    SchemaError,
    UnsupportedSchemaTypeError,
    StrictSchemaError,
    ResponseParseError,
    ContentRefusedError,
    EmptyResponseError,
    CallAbortedError,
)

# Schema model and translators
from llm_structured.schema.nodes import (
    ArrayNode,
    BooleanNode,
    NumberNode,
    ObjectNode,
    StringNode,
    UnionNode,
)
from llm_structured.schema.parser import parse_schema, schema_from_model
from llm_structured.schema.translator import to_gemini_schema, to_openai_schema

# Chat clients
from llm_structured.llm.client import ChatClient
from llm_structured.llm.factory import build_chat_client
from llm_structured.llm.models import Message, StructuredOutputRequest, StructuredOutputResponse
from llm_structured.llm.providers.mock import MockChatClient
from llm_structured.llm.providers.openai_provider import OpenAIChatClient
from llm_structured.llm.providers.gemini_provider import GeminiChatClient

__all__ = [
    # Version
    "__version__",
    # Core
    "ProviderSettings",
    "load_provider_settings",
    "LLMStructuredError",
    "ConfigurationError",
    "SchemaError",
    "UnsupportedSchemaTypeError",
    "StrictSchemaError",
    "ResponseParseError",
    "ContentRefusedError",
    "EmptyResponseError",
    "CallAbortedError",
    # Schema
    "ArrayNode",
    "BooleanNode",
    "NumberNode",
    "ObjectNode",
    "StringNode",
    "UnionNode",
    "parse_schema",
    "schema_from_model",
    "to_gemini_schema",
    "to_openai_schema",
    # Chat clients
    "ChatClient",
    "build_chat_client",
    "Message",
    "StructuredOutputRequest",
    "StructuredOutputResponse",
    "MockChatClient",
    "OpenAIChatClient",
    "GeminiChatClient",
]
