"""OpenAI provider using Structured Outputs in strict mode."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from openai import APITimeoutError, OpenAI

from llm_structured.core.exceptions import (
    CallAbortedError,
    ConfigurationError,
    ContentRefusedError,
    EmptyResponseError,
    StrictSchemaError,
)
from llm_structured.llm.client import ChatClient, decode_json_payload
from llm_structured.llm.models import (
    Message,
    StructuredOutputRequest,
    StructuredOutputResponse,
    coerce_messages,
)
from llm_structured.schema.nodes import ObjectNode
from llm_structured.schema.translator import to_openai_schema


logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o-2024-08-06"


class OpenAIChatClient(ChatClient):
    """
    OpenAI chat client with strict JSON-schema structured outputs.

    Strict mode makes the API guarantee the reply conforms to the schema, so
    the canonical schema is emitted in the strict dialect (all properties
    required, no additional properties) before every call.

    Example:
        >>> client = OpenAIChatClient(api_key="sk-...")
        >>> response = client.chat_with_structured_output(
        ...     [Message(role="user", content="Bob is 42")],
        ...     StructuredOutputRequest(schema=person_schema, schema_name="person"),
        ... )
        >>> response.data
        {'name': 'Bob', 'age': 42}
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        timeout: float = 60.0,
        client: Optional[Any] = None,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Model identifier supporting structured outputs
            timeout: Request timeout in seconds
            client: Pre-built SDK client exposing ``chat.completions.create``
                    (an ``openai.OpenAI`` is created when omitted)

        Raises:
            ConfigurationError: If api_key is empty and no client is given
        """
        if not api_key and client is None:
            raise ConfigurationError("An OpenAI API key is required", missing=["api_key"])

        self.model = model
        self.timeout = timeout
        self.client = client if client is not None else OpenAI(api_key=api_key, timeout=timeout)

        logger.info(f"Initialized OpenAIChatClient: model={self.model}, timeout={self.timeout}s")

    def _build_response_format(self, request: StructuredOutputRequest) -> dict[str, Any]:
        if not isinstance(request.schema, ObjectNode):
            raise StrictSchemaError("#", f"the root schema must be an object, got {request.schema.kind}")
        json_schema: dict[str, Any] = {
            "name": request.schema_name,
            "schema": to_openai_schema(request.schema, strict=True),
            "strict": True,
        }
        if request.schema_description:
            json_schema["description"] = request.schema_description
        return {"type": "json_schema", "json_schema": json_schema}

    def chat_with_structured_output(
        self,
        messages: Sequence[Message | Mapping[str, Any]],
        request: StructuredOutputRequest,
    ) -> StructuredOutputResponse:
        """
        Send messages to OpenAI and decode the strict JSON reply.

        A refusal is reported before any parsing is attempted. Timeouts are
        surfaced as CallAbortedError; other API errors propagate unchanged.
        """
        response_format = self._build_response_format(request)
        openai_messages = [
            {"role": msg.role, "content": msg.content} for msg in coerce_messages(messages)
        ]

        logger.debug(
            f"OpenAI request: model={self.model}, schema={request.schema_name}, "
            f"messages={len(openai_messages)}"
        )

        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=openai_messages,
                response_format=response_format,
            )
        except APITimeoutError as e:
            logger.error(f"OpenAI call timed out after {self.timeout}s")
            raise CallAbortedError(self.provider_name, self.timeout) from e

        choices = getattr(completion, "choices", None) or []
        message = choices[0].message if choices else None
        if message is None:
            logger.error("OpenAI returned no message")
            raise EmptyResponseError(self.provider_name, "No response from OpenAI")

        refusal = getattr(message, "refusal", None)
        if refusal:
            logger.warning(f"OpenAI refused to respond: {refusal}")
            raise ContentRefusedError(refusal, provider=self.provider_name)

        if not message.content:
            logger.error("OpenAI message has no content")
            raise EmptyResponseError(self.provider_name, "No content in OpenAI response")

        data = decode_json_payload(message.content, provider=self.provider_name)
        return StructuredOutputResponse(data=data, raw_response=completion)

    def __repr__(self) -> str:
        return f"OpenAIChatClient(model={self.model!r}, timeout={self.timeout!r})"
