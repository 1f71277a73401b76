"""Gemini provider using controlled generation (response_schema)."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

import httpx
from google import genai
from google.genai import types

from llm_structured.core.exceptions import (
    CallAbortedError,
    ConfigurationError,
    ContentRefusedError,
    EmptyResponseError,
)
from llm_structured.llm.client import ChatClient, decode_json_payload
from llm_structured.llm.models import (
    Message,
    StructuredOutputRequest,
    StructuredOutputResponse,
    coerce_messages,
)
from llm_structured.schema.translator import to_gemini_schema


logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"

# Finish reasons that mean the model stopped for policy reasons
REFUSAL_FINISH_REASONS = frozenset(
    {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII", "IMAGE_SAFETY"}
)

_GEMINI_ROLES = {"user": "user", "assistant": "model"}


def _enum_value(value: Any) -> str:
    return str(getattr(value, "value", value))


class GeminiChatClient(ChatClient):
    """
    Gemini chat client with JSON controlled generation.

    Controlled generation strongly biases the model toward the schema but does
    not guarantee conformity. The canonical schema is translated to Gemini's
    dialect before every call; unions are not expressible and fail early.

    Example:
        >>> client = GeminiChatClient(api_key="...")
        >>> response = client.chat_with_structured_output(messages, request)
        >>> response.data["name"]
        'Bob'
    """

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        timeout: float = 60.0,
        client: Optional[Any] = None,
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: Gemini (Google AI Studio) API key
            model: Gemini model name
            timeout: Request timeout in seconds
            client: Pre-built SDK client exposing ``models.generate_content``
                    (a ``google.genai.Client`` is created when omitted)

        Raises:
            ConfigurationError: If api_key is empty and no client is given
        """
        if not api_key and client is None:
            raise ConfigurationError("A Gemini API key is required", missing=["api_key"])

        self.model = model
        self.timeout = timeout
        if client is None:
            # HttpOptions.timeout is in milliseconds
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout * 1000)),
            )
        self.client = client

        logger.info(f"Initialized GeminiChatClient: model={self.model}, timeout={self.timeout}s")

    def _build_contents(
        self, messages: Sequence[Message | Mapping[str, Any]]
    ) -> tuple[Optional[str], list[types.Content]]:
        """
        Split messages into a system instruction and ordered contents.

        System messages are joined in order; user and assistant messages keep
        their relative order as "user" and "model" turns.
        """
        system_parts: list[str] = []
        contents: list[types.Content] = []
        for msg in coerce_messages(messages):
            if msg.role == "system":
                system_parts.append(msg.content)
            else:
                contents.append(
                    types.Content(role=_GEMINI_ROLES[msg.role], parts=[types.Part(text=msg.content)])
                )
        system_instruction = "\n\n".join(system_parts) if system_parts else None
        return system_instruction, contents

    def _build_config(
        self, request: StructuredOutputRequest, system_instruction: Optional[str]
    ) -> types.GenerateContentConfig:
        response_schema = to_gemini_schema(request.schema)
        if request.schema_description and "description" not in response_schema:
            response_schema["description"] = request.schema_description
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
            system_instruction=system_instruction,
        )

    def _check_refusal(self, response: Any) -> None:
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None)
        if block_reason:
            reason = _enum_value(block_reason)
            detail = getattr(feedback, "block_reason_message", None)
            if detail:
                reason = f"{reason}: {detail}"
            logger.warning(f"Gemini blocked the prompt: {reason}")
            raise ContentRefusedError(reason, provider=self.provider_name)

        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            logger.error("Gemini returned no candidates")
            raise EmptyResponseError(self.provider_name, "No candidates in Gemini response")

        finish_reason = getattr(candidates[0], "finish_reason", None)
        if finish_reason is not None and _enum_value(finish_reason) in REFUSAL_FINISH_REASONS:
            reason = _enum_value(finish_reason)
            logger.warning(f"Gemini stopped generation: {reason}")
            raise ContentRefusedError(reason, provider=self.provider_name)

    def chat_with_structured_output(
        self,
        messages: Sequence[Message | Mapping[str, Any]],
        request: StructuredOutputRequest,
    ) -> StructuredOutputResponse:
        """
        Send messages to Gemini and decode the JSON reply.

        The schema is translated before the network call, so an inexpressible
        schema never reaches the API.
        """
        system_instruction, contents = self._build_contents(messages)
        config = self._build_config(request, system_instruction)

        logger.debug(
            f"Gemini request: model={self.model}, schema={request.schema_name}, "
            f"contents={len(contents)}, system={system_instruction is not None}"
        )

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Gemini call timed out after {self.timeout}s")
            raise CallAbortedError(self.provider_name, self.timeout) from e

        self._check_refusal(response)

        text = getattr(response, "text", None)
        if not text:
            logger.error("Gemini response has no text")
            raise EmptyResponseError(self.provider_name, "No text in Gemini response")

        data = decode_json_payload(text, provider=self.provider_name)
        return StructuredOutputResponse(data=data, raw_response=response)

    def __repr__(self) -> str:
        return f"GeminiChatClient(model={self.model!r}, timeout={self.timeout!r})"
