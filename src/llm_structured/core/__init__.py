"""
Core components for llm_structured.

Includes the exception hierarchy and provider configuration.
"""

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

__all__ = [
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
]
