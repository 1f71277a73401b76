"""
Custom exceptions for llm_structured.

Provides a hierarchy of exceptions that carry the diagnostic payload of each
failure (offending type tag, raw response text, refusal reason) so callers can
diagnose a failed call without the library interpreting it.

Transport failures (non-2xx responses, connection errors) are not part of this
hierarchy: the provider SDK's own exceptions propagate unchanged.
"""

from typing import Optional


class LLMStructuredError(Exception):
    """
    Base exception for all llm_structured errors.

    Example:
        >>> try:
        ...     client.chat_with_structured_output(messages, request)
        ... except LLMStructuredError as e:
        ...     print(f"Structured call failed: {e}")
    """

    pass


class ConfigurationError(LLMStructuredError):
    """
    Raised when provider configuration is missing or invalid.

    Attributes:
        missing: Names of the settings (usually environment variables) that were absent
    """

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        self.missing = list(missing or [])
        super().__init__(message)

    def __repr__(self) -> str:
        return f"ConfigurationError({str(self)!r}, missing={self.missing!r})"


class SchemaError(LLMStructuredError):
    """
    Raised when a schema document or tree cannot be processed.

    Subclasses narrow the cause; a bare SchemaError means the document itself
    is malformed (e.g. an unresolvable or recursive $ref).
    """

    pass


class UnsupportedSchemaTypeError(SchemaError):
    """
    Raised when a schema node kind cannot be expressed in the target dialect.

    This is a hard stop: translation never returns a partial tree.

    Attributes:
        type_tag: The offending node kind or JSON-Schema type tag
        dialect: Name of the target dialect ("canonical" when raised while parsing)
        path: JSON-pointer-like location of the node in the source tree

    Example:
        >>> raise UnsupportedSchemaTypeError("anyOf", dialect="gemini", path="#/properties/value")
    """

    def __init__(self, type_tag: object, dialect: str = "canonical", path: str = "#"):
        self.type_tag = type_tag
        self.dialect = dialect
        self.path = path

        message = (
            f"Unsupported schema type {type_tag!r} for {dialect} dialect at {path}"
        )
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"UnsupportedSchemaTypeError(type_tag={self.type_tag!r}, "
            f"dialect={self.dialect!r}, "
            f"path={self.path!r})"
        )


class StrictSchemaError(SchemaError):
    """
    Raised when an object node cannot satisfy a strict dialect.

    Strict mode requires every object to forbid additional properties; a node
    that explicitly allows them cannot be carried without relaxing it.

    Attributes:
        path: Location of the offending object node
        reason: Human readable explanation
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Schema at {path} is not valid in strict mode: {reason}")

    def __repr__(self) -> str:
        return f"StrictSchemaError(path={self.path!r}, reason={self.reason!r})"


class ResponseParseError(LLMStructuredError):
    """
    Raised when the backend's text payload is not a valid JSON document.

    The raw text is preserved verbatim for diagnosis. No repair is attempted.

    Attributes:
        raw_text: Exact text returned by the backend
        provider: Name of the provider that produced it
    """

    def __init__(self, raw_text: str, provider: str = "unknown", detail: Optional[str] = None):
        self.raw_text = raw_text
        self.provider = provider
        self.detail = detail

        message = f"Failed to parse {provider} JSON response"
        if detail:
            message += f" ({detail})"
        message += f": {raw_text}"
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"ResponseParseError(raw_text={self.raw_text!r}, "
            f"provider={self.provider!r})"
        )


class ContentRefusedError(LLMStructuredError):
    """
    Raised when the backend explicitly declines to produce the content.

    Attributes:
        reason: Refusal text or block reason reported by the backend
        provider: Name of the provider that refused
    """

    def __init__(self, reason: str, provider: str = "unknown"):
        self.reason = reason
        self.provider = provider
        super().__init__(f"{provider} refused to respond: {reason}")

    def __repr__(self) -> str:
        return f"ContentRefusedError(reason={self.reason!r}, provider={self.provider!r})"


class EmptyResponseError(LLMStructuredError):
    """
    Raised when the backend returns no usable content.

    Attributes:
        provider: Name of the provider
    """

    def __init__(self, provider: str = "unknown", detail: str = "No content in response"):
        self.provider = provider
        self.detail = detail
        super().__init__(f"{provider}: {detail}")

    def __repr__(self) -> str:
        return f"EmptyResponseError(provider={self.provider!r}, detail={self.detail!r})"


class CallAbortedError(LLMStructuredError):
    """
    Raised when a call is cancelled because its deadline expired.

    Attributes:
        provider: Name of the provider being called
        timeout: Deadline in seconds, if known
    """

    def __init__(self, provider: str = "unknown", timeout: Optional[float] = None):
        self.provider = provider
        self.timeout = timeout

        message = f"{provider} call aborted"
        if timeout is not None:
            message += f" after {timeout}s timeout"
        super().__init__(message)

    def __repr__(self) -> str:
        return f"CallAbortedError(provider={self.provider!r}, timeout={self.timeout!r})"
