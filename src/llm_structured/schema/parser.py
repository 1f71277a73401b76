"""
Parse JSON-Schema-like documents into the canonical schema model.

Accepts the plain dictionaries callers already write for structured outputs
(and the output of pydantic's ``model_json_schema()``) and returns a tree of
``llm_structured.schema.nodes`` objects. Unknown type tags and validation
keywords the canonical model cannot hold fail the whole parse; annotation-only
keywords such as ``title`` or ``default`` are ignored.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationError

from llm_structured.core.exceptions import SchemaError, UnsupportedSchemaTypeError
from llm_structured.schema.nodes import (
    NODE_TYPES,
    ArrayNode,
    BooleanNode,
    NumberNode,
    ObjectNode,
    SchemaNode,
    StringNode,
    UnionNode,
)


logger = logging.getLogger(__name__)

_REF_PREFIXES = ("#/$defs/", "#/definitions/")

# Constraint keywords each kind carries into the canonical model
_KIND_KEYWORDS = {
    "string": frozenset({"pattern", "format", "minLength", "maxLength", "enum", "const"}),
    "number": frozenset(
        {"minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf", "enum", "const"}
    ),
    "integer": frozenset(
        {"minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf", "enum", "const"}
    ),
    "boolean": frozenset(),
    "array": frozenset({"items", "minItems", "maxItems"}),
    "object": frozenset({"properties", "required", "additionalProperties"}),
}

# Every validation keyword the parser recognises; one outside its kind's set fails the parse
_CONSTRAINT_KEYWORDS = frozenset().union(
    *_KIND_KEYWORDS.values(),
    {
        "allOf",
        "not",
        "if",
        "then",
        "else",
        "uniqueItems",
        "prefixItems",
        "contains",
        "minContains",
        "maxContains",
        "patternProperties",
        "propertyNames",
        "minProperties",
        "maxProperties",
        "dependentRequired",
        "dependentSchemas",
        "unevaluatedItems",
        "unevaluatedProperties",
    },
)


def parse_schema(document: Union[Mapping[str, Any], SchemaNode]) -> SchemaNode:
    """
    Convert a JSON-Schema mapping into a canonical schema tree.

    Args:
        document: JSON-Schema-like mapping, or an already canonical node
                  (returned unchanged)

    Returns:
        Root node of the canonical tree

    Raises:
        UnsupportedSchemaTypeError: If a node declares a type tag outside the canonical set
        SchemaError: If the document is malformed (bad $ref, invalid constraints)

    Example:
        >>> node = parse_schema({
        ...     "type": "object",
        ...     "properties": {"name": {"type": "string"}},
        ...     "required": ["name"],
        ... })
        >>> node.properties["name"].kind
        'string'
    """
    if isinstance(document, NODE_TYPES):
        return document
    if not isinstance(document, Mapping):
        if hasattr(document, "kind"):
            raise UnsupportedSchemaTypeError(document.kind)
        raise SchemaError(f"Schema document must be a mapping, got {type(document).__name__}")

    definitions: dict[str, Any] = {}
    for key in ("$defs", "definitions"):
        defs = document.get(key)
        if isinstance(defs, Mapping):
            definitions.update(defs)

    return _SchemaParser(definitions).parse(document, "#", ())


def schema_from_model(model_cls: type[BaseModel]) -> SchemaNode:
    """
    Build a canonical tree from a pydantic model class.

    Args:
        model_cls: Pydantic model describing the desired output

    Returns:
        Canonical ObjectNode mirroring the model's JSON schema
    """
    document = model_cls.model_json_schema()
    node = parse_schema(document)
    if not isinstance(node, ObjectNode):
        raise SchemaError(f"{model_cls.__name__} does not describe a JSON object")
    return node


class _SchemaParser:
    """Recursive-descent parser holding the document's $defs for $ref lookups."""

    def __init__(self, definitions: Mapping[str, Any]):
        self.definitions = definitions

    def parse(self, node: Any, path: str, ref_stack: tuple[str, ...]) -> SchemaNode:
        if not isinstance(node, Mapping):
            raise SchemaError(f"Schema node at {path} must be a mapping, got {type(node).__name__}")

        if "$ref" in node:
            return self._parse_ref(node, path, ref_stack)

        try:
            return self._parse_node(node, path, ref_stack)
        except ValidationError as e:
            raise SchemaError(f"Invalid schema at {path}: {e}") from e

    def _parse_ref(self, node: Mapping[str, Any], path: str, ref_stack: tuple[str, ...]) -> SchemaNode:
        ref = node["$ref"]
        name = None
        for prefix in _REF_PREFIXES:
            if isinstance(ref, str) and ref.startswith(prefix):
                name = ref[len(prefix):]
        if name is None or name not in self.definitions:
            raise SchemaError(f"Unresolvable $ref {ref!r} at {path}")
        if ref in ref_stack:
            raise SchemaError(f"Recursive $ref {ref!r} at {path} cannot be inlined")

        # Sibling keywords (e.g. description) override the referenced definition
        target = dict(self.definitions[name])
        target.update({k: v for k, v in node.items() if k != "$ref"})
        return self.parse(target, path, ref_stack + (ref,))

    def _parse_node(self, node: Mapping[str, Any], path: str, ref_stack: tuple[str, ...]) -> SchemaNode:
        common = {
            "description": node.get("description"),
            "nullable": bool(node.get("nullable", False)),
        }

        for key in ("anyOf", "oneOf"):
            if key in node:
                return self._parse_union(node[key], key, common, path, ref_stack)

        type_tag = node.get("type")
        if isinstance(type_tag, list):
            non_null = [t for t in type_tag if t != "null"]
            if len(non_null) != 1:
                raise UnsupportedSchemaTypeError(type_tag, path=path)
            type_tag = non_null[0]
            common["nullable"] = common["nullable"] or len(non_null) != len(node["type"])

        if type_tag is None and "kind" in node:
            type_tag = node["kind"]
        if type_tag is None and ("enum" in node or "const" in node):
            type_tag = "string"
        if type_tag is None and "properties" in node:
            type_tag = "object"

        if isinstance(type_tag, str) and type_tag in _KIND_KEYWORDS:
            unsupported = sorted(
                key for key in node if key in _CONSTRAINT_KEYWORDS and key not in _KIND_KEYWORDS[type_tag]
            )
            if unsupported:
                raise SchemaError(f"Keywords {unsupported} are not supported on {type_tag} schemas (at {path})")

        if type_tag == "string":
            return self._parse_string(node, common, path)
        if type_tag in ("number", "integer"):
            enum = self._parse_enum(node, common, path, (int, float), "numeric")
            return NumberNode(
                kind=type_tag,
                minimum=node.get("minimum"),
                maximum=node.get("maximum"),
                exclusive_minimum=node.get("exclusiveMinimum"),
                exclusive_maximum=node.get("exclusiveMaximum"),
                multiple_of=node.get("multipleOf"),
                enum=enum,
                **common,
            )
        if type_tag == "boolean":
            return BooleanNode(**common)
        if type_tag == "array":
            if "items" not in node:
                raise SchemaError(f"Array schema at {path} has no 'items'")
            return ArrayNode(
                items=self.parse(node["items"], f"{path}/items", ref_stack),
                min_items=node.get("minItems"),
                max_items=node.get("maxItems"),
                **common,
            )
        if type_tag == "object":
            return self._parse_object(node, common, path, ref_stack)

        raise UnsupportedSchemaTypeError(type_tag, path=path)

    def _parse_enum(
        self, node: Mapping[str, Any], common: dict, path: str, value_types: tuple[type, ...], label: str
    ) -> Optional[tuple]:
        """
        Read ``enum``/``const`` as a tuple of allowed values.

        ``const`` becomes a one-value enum. A ``None`` member marks the node
        nullable instead of being kept as a value.
        """
        values = node.get("enum")
        if "const" in node:
            if values is not None and node["const"] not in values:
                raise SchemaError(f"const {node['const']!r} is not one of enum {values!r} (at {path})")
            values = [node["const"]]
        if values is None:
            return None
        if not isinstance(values, list) or not values:
            raise SchemaError(f"enum at {path} must be a non-empty list")

        if None in values:
            common["nullable"] = True
            values = [value for value in values if value is not None]
            if not values:
                raise UnsupportedSchemaTypeError("null", path=path)
        if not all(isinstance(value, value_types) and not isinstance(value, bool) for value in values):
            raise SchemaError(f"Only {label} enums are supported (at {path}): {values!r}")
        return tuple(values)

    def _parse_string(self, node: Mapping[str, Any], common: dict, path: str) -> StringNode:
        enum = self._parse_enum(node, common, path, (str,), "string")
        return StringNode(
            pattern=node.get("pattern"),
            format=node.get("format"),
            min_length=node.get("minLength"),
            max_length=node.get("maxLength"),
            enum=enum,
            **common,
        )

    def _parse_object(
        self, node: Mapping[str, Any], common: dict, path: str, ref_stack: tuple[str, ...]
    ) -> ObjectNode:
        properties = {
            name: self.parse(value, f"{path}/properties/{name}", ref_stack)
            for name, value in (node.get("properties") or {}).items()
        }
        additional = node.get("additionalProperties", False)
        if isinstance(additional, Mapping):
            # Typed additionalProperties is not part of the canonical model
            raise SchemaError(f"Schema-valued additionalProperties at {path} is not supported")
        return ObjectNode(
            properties=properties,
            required=tuple(node.get("required") or ()),
            additional_properties=bool(additional),
            **common,
        )

    def _parse_union(
        self, branches: Any, key: str, common: dict, path: str, ref_stack: tuple[str, ...]
    ) -> SchemaNode:
        if not isinstance(branches, list) or not branches:
            raise SchemaError(f"'{key}' at {path} must be a non-empty list")

        alternatives = []
        nullable = common["nullable"]
        for index, branch in enumerate(branches):
            if isinstance(branch, Mapping) and branch.get("type") == "null":
                nullable = True
                continue
            alternatives.append(self.parse(branch, f"{path}/{key}/{index}", ref_stack))

        if not alternatives:
            raise UnsupportedSchemaTypeError("null", path=path)

        if len(alternatives) == 1:
            # [X, null] collapses to a nullable X
            single = alternatives[0]
            updates: dict[str, Any] = {"nullable": single.nullable or nullable}
            if common["description"] is not None:
                updates["description"] = common["description"]
            return single.model_copy(update=updates)

        logger.debug(f"Parsed {key} with {len(alternatives)} alternatives at {path}")
        return UnionNode(alternatives=tuple(alternatives), description=common["description"], nullable=nullable)
