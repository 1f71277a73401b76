"""Chat client abstraction and the shared response decoding policy."""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel

from llm_structured.core.exceptions import EmptyResponseError, ResponseParseError
from llm_structured.llm.models import Message, StructuredOutputRequest, StructuredOutputResponse
from llm_structured.schema.parser import schema_from_model


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def decode_json_payload(text: Optional[str], provider: str = "unknown") -> Any:
    """
    Decode a backend's text payload as a single JSON document.

    Exactly one strict parse is attempted; there is no repair, no stripping
    of markdown fences and no partial recovery.

    Args:
        text: Raw text returned by the backend
        provider: Provider name, used in error messages

    Returns:
        The decoded JSON value

    Raises:
        EmptyResponseError: If text is None, empty or whitespace only
        ResponseParseError: If text is not valid JSON (raw_text keeps it verbatim)

    Example:
        >>> decode_json_payload('{"name": "Bob", "age": 42}')
        {'name': 'Bob', 'age': 42}
    """
    if text is None or not text.strip():
        raise EmptyResponseError(provider, "Response contained no text")

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        logger.error(f"Invalid JSON from {provider}: {e}")
        raise ResponseParseError(text, provider=provider, detail=str(e)) from e


class ChatClient(ABC):
    """
    Abstract base class for structured-output chat clients.

    Every backend adapter implements the single operation
    ``chat_with_structured_output``; callers depend only on this class, so
    swapping providers means constructing a different adapter and nothing else.
    """

    provider_name: str = "unknown"

    @abstractmethod
    def chat_with_structured_output(
        self,
        messages: Sequence[Message | Mapping[str, Any]],
        request: StructuredOutputRequest,
    ) -> StructuredOutputResponse:
        """
        Send messages to the backend and return its schema-constrained output.

        Performs exactly one network call. The decoded data is not re-validated
        against the schema.

        Args:
            messages: Conversation in order (Message objects or role/content mappings)
            request: Target schema, its name and optional description

        Returns:
            Envelope with the decoded ``data`` and the provider's ``raw_response``

        Raises:
            UnsupportedSchemaTypeError: If the schema cannot be expressed for this backend
            ContentRefusedError: If the backend declines to answer
            EmptyResponseError: If the backend returns no content
            ResponseParseError: If the content is not valid JSON
            CallAbortedError: If the transport timed out
        """
        pass

    def chat_with_model(
        self,
        messages: Sequence[Message | Mapping[str, Any]],
        response_model: Type[M],
        schema_name: Optional[str] = None,
        schema_description: Optional[str] = None,
    ) -> StructuredOutputResponse[M]:
        """
        Structured call described by a pydantic model instead of a raw schema.

        The request schema is derived from ``response_model`` and the decoded
        data is validated into an instance of it.

        Args:
            messages: Conversation in order
            response_model: Pydantic model class describing the output
            schema_name: Name to register the schema under (defaults to the class name)
            schema_description: Optional description forwarded to the provider

        Returns:
            Envelope whose ``data`` is a ``response_model`` instance

        Raises:
            pydantic.ValidationError: If the decoded data does not fit the model
        """
        request = StructuredOutputRequest(
            schema=schema_from_model(response_model),
            schema_name=schema_name or response_model.__name__,
            schema_description=schema_description,
        )
        response = self.chat_with_structured_output(messages, request)
        return StructuredOutputResponse(
            data=response_model.model_validate(response.data),
            raw_response=response.raw_response,
        )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"{self.__class__.__name__}(provider={self.provider_name!r})"
