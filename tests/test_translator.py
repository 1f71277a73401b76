"""
Tests for the schema dialect translators.

Validates:
- Shape preservation (property names, depth, array item types) for both dialects
- Strict-dialect required/additionalProperties rules and the normalization policy
- Gemini-specific output (upper-case types, propertyOrdering, dropped keywords)
- Unsupported kinds fail without producing output
- Translation is deterministic and does not mutate its input
"""

import pytest

from llm_structured.core.exceptions import StrictSchemaError, UnsupportedSchemaTypeError
from llm_structured.schema.nodes import (
    ArrayNode,
    BooleanNode,
    NumberNode,
    ObjectNode,
    StringNode,
    UnionNode,
)
from llm_structured.schema.translator import GEMINI_TYPES, to_gemini_schema, to_openai_schema


def _shape(node, depth=0):
    """Collect (depth, property names / item kind) facts from a canonical tree."""
    facts = []
    if isinstance(node, ObjectNode):
        facts.append((depth, "object", tuple(node.properties)))
        for child in node.properties.values():
            facts.extend(_shape(child, depth + 1))
    elif isinstance(node, ArrayNode):
        facts.append((depth, "array", node.items.kind))
        facts.extend(_shape(node.items, depth + 1))
    return facts


def _gemini_shape(schema, depth=0):
    facts = []
    if schema["type"] == "OBJECT":
        facts.append((depth, "object", tuple(schema["properties"])))
        for child in schema["properties"].values():
            facts.extend(_gemini_shape(child, depth + 1))
    elif schema["type"] == "ARRAY":
        item_type = {v: k for k, v in GEMINI_TYPES.items()}[schema["items"]["type"]]
        facts.append((depth, "array", item_type))
        facts.extend(_gemini_shape(schema["items"], depth + 1))
    return facts


def _openai_shape(schema, depth=0):
    facts = []
    if schema.get("type") == "object":
        facts.append((depth, "object", tuple(schema["properties"])))
        for child in schema["properties"].values():
            facts.extend(_openai_shape(child, depth + 1))
    elif schema.get("type") == "array":
        facts.append((depth, "array", schema["items"]["type"]))
        facts.extend(_openai_shape(schema["items"], depth + 1))
    return facts


def test_gemini_preserves_shape(cv_schema):
    """Test property names, nesting depth and item types survive translation."""
    assert _gemini_shape(to_gemini_schema(cv_schema)) == _shape(cv_schema)


def test_openai_preserves_shape(cv_schema):
    assert _openai_shape(to_openai_schema(cv_schema)) == _shape(cv_schema)


def test_gemini_end_to_end_person(person_schema):
    """Test the exact Gemini output for a simple object."""
    assert to_gemini_schema(person_schema) == {
        "type": "OBJECT",
        "properties": {"name": {"type": "STRING"}, "age": {"type": "INTEGER"}},
        "required": ["name", "age"],
        "propertyOrdering": ["name", "age"],
    }


def test_gemini_defaults_required_to_empty_list():
    """Test that an object without required still emits an empty list."""
    result = to_gemini_schema({"type": "object", "properties": {"a": {"type": "string"}}})
    assert result["required"] == []
    assert result["propertyOrdering"] == ["a"]


def test_gemini_property_order_follows_declaration():
    props = {name: StringNode() for name in ["zeta", "alpha", "mid"]}
    result = to_gemini_schema(ObjectNode(properties=props, required=("alpha",)))
    assert list(result["properties"]) == ["zeta", "alpha", "mid"]
    assert result["propertyOrdering"] == ["zeta", "alpha", "mid"]


def test_gemini_drops_unsupported_keywords():
    """Test that keywords Gemini cannot express are dropped, not reinterpreted."""
    result = to_gemini_schema(
        ObjectNode(
            properties={
                "code": StringNode(pattern="^[A-Z]{3}$", min_length=3, max_length=3, format="email"),
                "when": StringNode(format="date-time"),
                "color": StringNode(enum=("red", "blue")),
                "qty": NumberNode(kind="integer", minimum=1, maximum=9, multiple_of=1),
                "tags": ArrayNode(items=StringNode(), min_items=1, max_items=4),
            },
            required=("code", "when", "color", "qty", "tags"),
        )
    )
    props = result["properties"]
    assert props["code"] == {"type": "STRING"}
    assert props["when"] == {"type": "STRING", "format": "date-time"}
    assert props["color"] == {"type": "STRING", "enum": ["red", "blue"]}
    assert props["qty"] == {"type": "INTEGER", "minimum": 1, "maximum": 9}
    assert props["tags"] == {"type": "ARRAY", "items": {"type": "STRING"}, "minItems": 1, "maxItems": 4}


def test_gemini_carries_description_and_nullable():
    result = to_gemini_schema(StringNode(description="Nick", nullable=True))
    assert result == {"type": "STRING", "description": "Nick", "nullable": True}


def test_gemini_number_kinds_are_distinct():
    assert to_gemini_schema(NumberNode(kind="number"))["type"] == "NUMBER"
    assert to_gemini_schema(NumberNode(kind="integer"))["type"] == "INTEGER"
    assert to_gemini_schema(BooleanNode())["type"] == "BOOLEAN"


def test_gemini_rejects_union_with_path():
    """Test that unions fail the whole translation."""
    schema = ObjectNode(
        properties={
            "ok": StringNode(),
            "value": UnionNode(alternatives=(StringNode(), NumberNode())),
        },
        required=("ok", "value"),
    )
    with pytest.raises(UnsupportedSchemaTypeError) as exc_info:
        to_gemini_schema(schema)
    assert exc_info.value.type_tag == "anyOf"
    assert exc_info.value.dialect == "gemini"
    assert exc_info.value.path == "#/properties/value"


def test_unknown_type_tag_is_rejected():
    """Test that an unrecognised kind fails in both dialects."""
    document = {"type": "object", "properties": {"blob": {"type": "binary"}}}
    with pytest.raises(UnsupportedSchemaTypeError) as exc_info:
        to_gemini_schema(document)
    assert exc_info.value.type_tag == "binary"

    with pytest.raises(UnsupportedSchemaTypeError):
        to_openai_schema(document)


def test_openai_strict_object(person_schema):
    """Test that a fully required object maps to a strict object."""
    result = to_openai_schema(person_schema)
    assert result == {
        "type": "object",
        "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
        "required": ["name", "age"],
        "additionalProperties": False,
    }
    assert set(result["required"]) == set(result["properties"])


def test_openai_normalizes_optional_properties_to_nullable():
    """Test the strict policy: optional properties become required and nullable."""
    schema = ObjectNode(
        properties={"a": StringNode(), "b": NumberNode(), "c": BooleanNode()},
        required=("a",),
    )
    result = to_openai_schema(schema)

    assert result["required"] == ["a", "b", "c"]
    assert result["additionalProperties"] is False
    assert result["properties"]["a"] == {"type": "string"}
    assert result["properties"]["b"] == {"type": ["number", "null"]}
    assert result["properties"]["c"] == {"type": ["boolean", "null"]}


def test_openai_normalizes_nested_objects():
    inner = ObjectNode(properties={"x": StringNode(), "y": StringNode()}, required=("x",))
    outer = ObjectNode(properties={"inner": ArrayNode(items=inner)}, required=("inner",))
    items = to_openai_schema(outer)["properties"]["inner"]["items"]
    assert items["required"] == ["x", "y"]
    assert items["additionalProperties"] is False
    assert items["properties"]["y"]["type"] == ["string", "null"]


def test_openai_strict_rejects_additional_properties():
    schema = ObjectNode(properties={"a": StringNode()}, required=("a",), additional_properties=True)
    with pytest.raises(StrictSchemaError) as exc_info:
        to_openai_schema(schema)
    assert exc_info.value.path == "#"


def test_openai_non_strict_keeps_object_rules():
    schema = ObjectNode(
        properties={"a": StringNode(), "b": StringNode()},
        required=("a",),
        additional_properties=True,
    )
    result = to_openai_schema(schema, strict=False)
    assert result["required"] == ["a"]
    assert result["additionalProperties"] is True
    assert result["properties"]["b"] == {"type": "string"}


def test_openai_carries_all_keywords():
    result = to_openai_schema(
        ObjectNode(
            properties={
                "code": StringNode(pattern="^[A-Z]+$", format="email", min_length=1, max_length=9),
                "qty": NumberNode(kind="integer", minimum=0, maximum=10, multiple_of=2),
                "tags": ArrayNode(items=StringNode(), min_items=1, max_items=3),
            },
            required=("code", "qty", "tags"),
            description="Order line",
        )
    )
    assert result["description"] == "Order line"
    assert result["properties"]["code"] == {
        "type": "string",
        "pattern": "^[A-Z]+$",
        "format": "email",
        "minLength": 1,
        "maxLength": 9,
    }
    assert result["properties"]["qty"] == {
        "type": "integer",
        "minimum": 0,
        "maximum": 10,
        "multipleOf": 2,
    }
    assert result["properties"]["tags"]["minItems"] == 1
    assert result["properties"]["tags"]["maxItems"] == 3


def test_openai_union_maps_to_any_of():
    result = to_openai_schema(UnionNode(alternatives=(StringNode(), NumberNode(kind="integer"))))
    assert result == {"anyOf": [{"type": "string"}, {"type": "integer"}]}

    nullable = to_openai_schema(UnionNode(alternatives=(StringNode(), BooleanNode()), nullable=True))
    assert nullable["anyOf"][-1] == {"type": "null"}


def test_openai_nullable_enum_includes_null():
    result = to_openai_schema(StringNode(enum=("a", "b"), nullable=True))
    assert result == {"type": ["string", "null"], "enum": ["a", "b", None]}


def test_translation_is_deterministic_and_pure(cv_schema):
    """Test repeated translation yields equal, independent trees."""
    before = cv_schema.model_dump()
    first = to_gemini_schema(cv_schema)
    second = to_gemini_schema(cv_schema)

    assert first == second
    assert first is not second
    first["properties"]["name"]["type"] = "CHANGED"
    assert to_gemini_schema(cv_schema)["properties"]["name"]["type"] == "STRING"
    assert cv_schema.model_dump() == before
    assert to_openai_schema(cv_schema) == to_openai_schema(cv_schema)


def test_translators_accept_json_schema_documents():
    document = {
        "type": "object",
        "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
        "required": ["name", "age"],
        "additionalProperties": False,
    }
    assert to_openai_schema(document) == document
    assert to_gemini_schema(document)["properties"]["age"] == {"type": "INTEGER"}


def test_openai_carries_numeric_enum_const_and_exclusive_bounds():
    document = {
        "type": "object",
        "properties": {
            "n": {"type": "integer", "enum": [1, 2, 3]},
            "x": {"type": "number", "exclusiveMinimum": 0},
            "c": {"type": "string", "const": "fixed"},
        },
        "required": ["n", "x", "c"],
    }
    props = to_openai_schema(document)["properties"]
    assert props["n"] == {"type": "integer", "enum": [1, 2, 3]}
    assert props["x"] == {"type": "number", "exclusiveMinimum": 0}
    assert props["c"] == {"type": "string", "enum": ["fixed"]}


def test_openai_nullable_numeric_enum_includes_null():
    result = to_openai_schema(NumberNode(kind="integer", enum=(1, 2), nullable=True))
    assert result == {"type": ["integer", "null"], "enum": [1, 2, None]}


def test_gemini_drops_numeric_keywords_and_keeps_string_const():
    result = to_gemini_schema(
        ObjectNode(
            properties={
                "n": NumberNode(kind="integer", enum=(1, 2), exclusive_minimum=0, maximum=5),
                "c": StringNode(enum=("fixed",)),
            },
            required=("n", "c"),
        )
    )
    assert result["properties"]["n"] == {"type": "INTEGER", "maximum": 5}
    assert result["properties"]["c"] == {"type": "STRING", "enum": ["fixed"]}


def test_openai_output_parses_back_to_the_same_tree():
    """Test that translator output, nullable enums included, is accepted as input again."""
    schema = ObjectNode(
        properties={
            "tier": StringNode(enum=("a", "b"), nullable=True),
            "level": NumberNode(kind="integer", enum=(1, 2)),
            "note": StringNode(),
        },
        required=("tier", "level"),
    )
    first = to_openai_schema(schema)
    assert to_openai_schema(first) == first
    assert to_openai_schema(to_openai_schema(StringNode(enum=("a", "b"), nullable=True))) == {
        "type": ["string", "null"],
        "enum": ["a", "b", None],
    }
