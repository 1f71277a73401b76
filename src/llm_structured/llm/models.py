"""
Value objects shared by every chat client.

Messages, structured-output requests and response envelopes are immutable and
built by the caller per request; nothing here outlives a single call.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from llm_structured.schema.nodes import SchemaNode
from llm_structured.schema.parser import parse_schema


T = TypeVar("T")

Role = Literal["system", "user", "assistant"]

SCHEMA_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class Message(BaseModel):
    """
    A single role-tagged conversation message.

    Attributes:
        role: One of "system", "user", "assistant"
        content: Message text
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Speaker of the message")
    content: str = Field(..., description="Message text")


def coerce_messages(messages: Iterable[Message | Mapping[str, Any]]) -> tuple[Message, ...]:
    """
    Normalize a message sequence to a tuple of Message objects.

    Order is preserved exactly; mappings must provide "role" and "content".

    Example:
        >>> coerce_messages([{"role": "user", "content": "Bob is 42"}])
        (Message(role='user', content='Bob is 42'),)
    """
    return tuple(
        msg if isinstance(msg, Message) else Message.model_validate(dict(msg))
        for msg in messages
    )


@dataclass(frozen=True)
class StructuredOutputRequest:
    """
    What the caller wants back: a schema plus the name it is registered under.

    ``schema`` may be given as a canonical node or as a JSON-Schema mapping;
    mappings are parsed into the canonical model on construction, so an
    invalid schema fails here rather than inside a provider call.

    Attributes:
        schema: Canonical schema tree
        schema_name: Identifier of the schema (letters, digits, "_" and "-", at most 64)
        schema_description: Optional description forwarded to the provider

    Example:
        >>> request = StructuredOutputRequest(
        ...     schema={"type": "object", "properties": {"name": {"type": "string"}}, "required": ["name"]},
        ...     schema_name="person",
        ... )
        >>> request.schema.kind
        'object'
    """

    schema: SchemaNode
    schema_name: str
    schema_description: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "schema", parse_schema(self.schema))
        if not SCHEMA_NAME_PATTERN.match(self.schema_name or ""):
            raise ValueError(
                f"Invalid schema_name {self.schema_name!r}: must match {SCHEMA_NAME_PATTERN.pattern}"
            )


@dataclass(frozen=True)
class StructuredOutputResponse(Generic[T]):
    """
    Provider-neutral result envelope.

    Attributes:
        data: Decoded JSON value returned by the model
        raw_response: Full provider payload, kept for diagnostics
    """

    data: T
    raw_response: Any = field(repr=False)
