"""Mock chat client for testing without API calls."""

import json
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from llm_structured.core.exceptions import ContentRefusedError
from llm_structured.llm.client import ChatClient, decode_json_payload
from llm_structured.llm.models import (
    Message,
    StructuredOutputRequest,
    StructuredOutputResponse,
    coerce_messages,
)


class MockChatClient(ChatClient):
    """
    Deterministic simulated backend.

    Returns predefined payloads in order and runs them through the same
    decoding policy as the real adapters, so parse failures, empty replies
    and refusals can be simulated exactly.

    Example:
        >>> client = MockChatClient(responses=['{"name": "Bob", "age": 42}'])
        >>> client.chat_with_structured_output(messages, request).data
        {'name': 'Bob', 'age': 42}
    """

    provider_name = "mock"

    def __init__(
        self,
        responses: Optional[list[str | dict | list | None]] = None,
        default_response: Optional[str | dict | list] = None,
        refusal: Optional[str] = None,
    ):
        """
        Initialize mock client.

        Args:
            responses: Payloads returned by successive calls. Strings are used
                       as raw response text; other values are serialized to JSON.
            default_response: Payload used once ``responses`` is exhausted
            refusal: If set, every call is refused with this reason
        """
        self.responses = list(responses or [])
        self.default_response = default_response
        self.refusal = refusal
        self.calls: list[tuple[tuple[Message, ...], StructuredOutputRequest]] = []

    def set_response(self, response: str | dict | list | None) -> None:
        """
        Queue a payload for the next call.

        Args:
            response: Raw text, or a value to be serialized to JSON
        """
        self.responses.append(response)

    def _next_payload(self) -> Optional[str]:
        if self.responses:
            payload = self.responses.pop(0)
        elif self.default_response is not None:
            payload = self.default_response
        else:
            raise ValueError(
                "No mock response configured. "
                "Use set_response() or provide default_response."
            )

        if payload is None or isinstance(payload, str):
            return payload
        return json.dumps(payload)

    def chat_with_structured_output(
        self,
        messages: Sequence[Message | Mapping[str, Any]],
        request: StructuredOutputRequest,
    ) -> StructuredOutputResponse:
        """
        Record the call and return the next payload, decoded.

        Raises:
            ContentRefusedError: If the mock was configured with a refusal
            EmptyResponseError: If the payload is None or empty
            ResponseParseError: If the payload is not valid JSON
            ValueError: If no payload is configured
        """
        self.calls.append((coerce_messages(messages), request))

        if self.refusal is not None:
            raise ContentRefusedError(self.refusal, provider=self.provider_name)

        text = self._next_payload()
        data = decode_json_payload(text, provider=self.provider_name)
        return StructuredOutputResponse(
            data=data,
            raw_response={"text": text, "schema_name": request.schema_name},
        )
