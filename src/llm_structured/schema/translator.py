"""
Schema dialect translators.

Each translator is a pure recursive function from the canonical tree to one
provider's native schema dialect:

- ``to_openai_schema``: JSON Schema subset used by OpenAI Structured Outputs
  (strict mode: every property required, no additional properties).
- ``to_gemini_schema``: OpenAPI 3.0 subset used by Gemini controlled
  generation (upper-case type names, optional ``required``,
  ``propertyOrdering``).

Both accept a canonical node or a JSON-Schema mapping. Object properties are
always visited in declaration order.
"""

import logging
from collections.abc import Mapping
from typing import Any, Union

from llm_structured.core.exceptions import StrictSchemaError, UnsupportedSchemaTypeError
from llm_structured.schema.nodes import (
    ArrayNode,
    BooleanNode,
    NumberNode,
    ObjectNode,
    SchemaNode,
    StringNode,
    UnionNode,
)
from llm_structured.schema.parser import parse_schema


logger = logging.getLogger(__name__)

GEMINI_TYPES = {
    "string": "STRING",
    "number": "NUMBER",
    "integer": "INTEGER",
    "boolean": "BOOLEAN",
    "array": "ARRAY",
    "object": "OBJECT",
}

# String formats Gemini honours; anything else is dropped
GEMINI_STRING_FORMATS = frozenset({"date-time", "enum"})


def _node_kind(node: Any) -> object:
    return getattr(node, "kind", type(node).__name__)


def _set_optional(target: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


# ---------------------------------------------------------------------------
# Gemini (controlled generation)
# ---------------------------------------------------------------------------


def to_gemini_schema(schema: Union[SchemaNode, Mapping[str, Any]]) -> dict[str, Any]:
    """
    Translate a schema into Gemini's ``response_schema`` dialect.

    Args:
        schema: Canonical node or JSON-Schema mapping

    Returns:
        New dict tree in Gemini's dialect

    Raises:
        UnsupportedSchemaTypeError: For unions (Gemini has no anyOf in this
            dialect) or any unrecognised node kind

    Example:
        >>> to_gemini_schema({"type": "array", "items": {"type": "integer"}})
        {'type': 'ARRAY', 'items': {'type': 'INTEGER'}}
    """
    return _to_gemini(parse_schema(schema), "#")


def _to_gemini(node: SchemaNode, path: str) -> dict[str, Any]:
    if isinstance(node, ObjectNode):
        result: dict[str, Any] = {
            "type": "OBJECT",
            "properties": {
                name: _to_gemini(child, f"{path}/properties/{name}")
                for name, child in node.properties.items()
            },
            "required": list(node.required),
            "propertyOrdering": list(node.properties),
        }
    elif isinstance(node, ArrayNode):
        result = {"type": "ARRAY", "items": _to_gemini(node.items, f"{path}/items")}
        _set_optional(result, "minItems", node.min_items)
        _set_optional(result, "maxItems", node.max_items)
    elif isinstance(node, StringNode):
        result = {"type": "STRING"}
        if node.enum is not None:
            result["enum"] = list(node.enum)
        if node.format in GEMINI_STRING_FORMATS:
            result["format"] = node.format
        dropped = [
            key
            for key, value in (
                ("pattern", node.pattern),
                ("minLength", node.min_length),
                ("maxLength", node.max_length),
                ("format", node.format if node.format not in GEMINI_STRING_FORMATS else None),
            )
            if value is not None
        ]
        if dropped:
            logger.debug(f"Dropping string keywords {dropped} unsupported by Gemini at {path}")
    elif isinstance(node, NumberNode):
        result = {"type": GEMINI_TYPES[node.kind]}
        _set_optional(result, "minimum", node.minimum)
        _set_optional(result, "maximum", node.maximum)
        dropped = [
            key
            for key, value in (
                ("exclusiveMinimum", node.exclusive_minimum),
                ("exclusiveMaximum", node.exclusive_maximum),
                ("multipleOf", node.multiple_of),
                ("enum", node.enum),
            )
            if value is not None
        ]
        if dropped:
            logger.debug(f"Dropping numeric keywords {dropped} unsupported by Gemini at {path}")
    elif isinstance(node, BooleanNode):
        result = {"type": "BOOLEAN"}
    elif isinstance(node, UnionNode):
        raise UnsupportedSchemaTypeError("anyOf", dialect="gemini", path=path)
    else:
        raise UnsupportedSchemaTypeError(_node_kind(node), dialect="gemini", path=path)

    _set_optional(result, "description", node.description)
    if node.nullable:
        result["nullable"] = True
    return result


# ---------------------------------------------------------------------------
# OpenAI (strict structured outputs)
# ---------------------------------------------------------------------------


def to_openai_schema(schema: Union[SchemaNode, Mapping[str, Any]], strict: bool = True) -> dict[str, Any]:
    """
    Translate a schema into OpenAI's Structured Outputs JSON Schema dialect.

    In strict mode every object lists all of its properties in ``required``
    and sets ``additionalProperties`` to false. Properties the canonical node
    leaves optional are normalized rather than rejected: they are added to
    ``required`` and made nullable, so the model emits ``null`` instead of
    omitting the key.

    Args:
        schema: Canonical node or JSON-Schema mapping
        strict: Apply the strict-mode object rules (default True)

    Returns:
        New dict tree in OpenAI's dialect

    Raises:
        StrictSchemaError: If strict and an object allows additional properties
        UnsupportedSchemaTypeError: For any unrecognised node kind

    Example:
        >>> to_openai_schema({
        ...     "type": "object",
        ...     "properties": {"name": {"type": "string"}},
        ...     "required": ["name"],
        ... })
        {'type': 'object', 'properties': {'name': {'type': 'string'}}, 'required': ['name'], 'additionalProperties': False}
    """
    return _to_openai(parse_schema(schema), "#", strict)


def _to_openai(node: SchemaNode, path: str, strict: bool, force_nullable: bool = False) -> dict[str, Any]:
    nullable = node.nullable or force_nullable

    if isinstance(node, UnionNode):
        branches = [
            _to_openai(alt, f"{path}/anyOf/{index}", strict)
            for index, alt in enumerate(node.alternatives)
        ]
        if nullable:
            branches.append({"type": "null"})
        result: dict[str, Any] = {"anyOf": branches}
        _set_optional(result, "description", node.description)
        return result

    if isinstance(node, ObjectNode):
        result = {"type": "object", "properties": {}}
        optional = [name for name in node.properties if name not in node.required]
        if strict and node.additional_properties:
            raise StrictSchemaError(path, "additionalProperties must be false")
        if strict and optional:
            logger.debug(f"Normalizing optional properties {optional} to required+nullable at {path}")
        for name, child in node.properties.items():
            result["properties"][name] = _to_openai(
                child,
                f"{path}/properties/{name}",
                strict,
                force_nullable=strict and name in optional,
            )
        if strict:
            result["required"] = list(node.properties)
            result["additionalProperties"] = False
        else:
            result["required"] = list(node.required)
            result["additionalProperties"] = node.additional_properties
    elif isinstance(node, ArrayNode):
        result = {"type": "array", "items": _to_openai(node.items, f"{path}/items", strict)}
        _set_optional(result, "minItems", node.min_items)
        _set_optional(result, "maxItems", node.max_items)
    elif isinstance(node, StringNode):
        result = {"type": "string"}
        _set_optional(result, "pattern", node.pattern)
        _set_optional(result, "format", node.format)
        _set_optional(result, "minLength", node.min_length)
        _set_optional(result, "maxLength", node.max_length)
        if node.enum is not None:
            result["enum"] = list(node.enum) + ([None] if nullable else [])
    elif isinstance(node, NumberNode):
        result = {"type": node.kind}
        _set_optional(result, "minimum", node.minimum)
        _set_optional(result, "maximum", node.maximum)
        _set_optional(result, "exclusiveMinimum", node.exclusive_minimum)
        _set_optional(result, "exclusiveMaximum", node.exclusive_maximum)
        _set_optional(result, "multipleOf", node.multiple_of)
        if node.enum is not None:
            result["enum"] = list(node.enum) + ([None] if nullable else [])
    elif isinstance(node, BooleanNode):
        result = {"type": "boolean"}
    else:
        raise UnsupportedSchemaTypeError(_node_kind(node), dialect="openai", path=path)

    if nullable:
        result["type"] = [result["type"], "null"]
    _set_optional(result, "description", node.description)
    return result
