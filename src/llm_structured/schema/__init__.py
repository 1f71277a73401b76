"""
Canonical schema model, document parser and dialect translators.
"""

from llm_structured.schema.nodes import (
    ArrayNode,
    BooleanNode,
    NumberNode,
    ObjectNode,
    SchemaNode,
    StringNode,
    UnionNode,
)
from llm_structured.schema.parser import parse_schema, schema_from_model
from llm_structured.schema.translator import to_gemini_schema, to_openai_schema

__all__ = [
    "ArrayNode",
    "BooleanNode",
    "NumberNode",
    "ObjectNode",
    "SchemaNode",
    "StringNode",
    "UnionNode",
    "parse_schema",
    "schema_from_model",
    "to_gemini_schema",
    "to_openai_schema",
]
