"""
Canonical schema model.

A closed set of immutable node types describing a JSON-Schema-like structure.
The tree is provider-agnostic: dialect translators in
``llm_structured.schema.translator`` turn it into each backend's native format.

Example:
    >>> person = ObjectNode(
    ...     properties={"name": StringNode(), "age": NumberNode(kind="integer")},
    ...     required=("name", "age"),
    ... )
    >>> person.is_strict
    True
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _BaseNode(BaseModel):
    """Attributes shared by every node kind."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: Optional[str] = Field(None, description="Free text shown to the model")
    nullable: bool = Field(False, description="Whether null is an accepted value")


def _check_bounds(low: Optional[float], high: Optional[float], low_name: str, high_name: str) -> None:
    if low is not None and high is not None and low > high:
        raise ValueError(f"{low_name} ({low}) must not exceed {high_name} ({high})")


class StringNode(_BaseNode):
    kind: Literal["string"] = "string"
    pattern: Optional[str] = None
    format: Optional[str] = None
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    enum: Optional[tuple[str, ...]] = None

    @model_validator(mode="after")
    def _validate_lengths(self) -> "StringNode":
        _check_bounds(self.min_length, self.max_length, "min_length", "max_length")
        if self.enum is not None and not self.enum:
            raise ValueError("enum must not be empty")
        return self


class NumberNode(_BaseNode):
    """Numeric node; ``kind`` keeps the number/integer distinction."""

    kind: Literal["number", "integer"] = "number"
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[float] = None
    exclusive_maximum: Optional[float] = None
    multiple_of: Optional[float] = Field(None, gt=0)
    enum: Optional[tuple[Union[int, float], ...]] = None

    @model_validator(mode="after")
    def _validate_range(self) -> "NumberNode":
        _check_bounds(self.minimum, self.maximum, "minimum", "maximum")
        _check_bounds(self.exclusive_minimum, self.exclusive_maximum, "exclusive_minimum", "exclusive_maximum")
        if self.enum is not None:
            if not self.enum:
                raise ValueError("enum must not be empty")
            if self.kind == "integer" and not all(float(value).is_integer() for value in self.enum):
                raise ValueError(f"integer enum contains non-integral values: {list(self.enum)}")
        return self


class BooleanNode(_BaseNode):
    kind: Literal["boolean"] = "boolean"


class ArrayNode(_BaseNode):
    kind: Literal["array"] = "array"
    items: "SchemaNode"
    min_items: Optional[int] = Field(None, ge=0)
    max_items: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _validate_counts(self) -> "ArrayNode":
        _check_bounds(self.min_items, self.max_items, "min_items", "max_items")
        return self


class ObjectNode(_BaseNode):
    """
    Object node with ordered properties.

    Property order is the declaration order of ``properties`` and is preserved
    by every translator, since some dialects use it as output-ordering guidance.

    Attributes:
        properties: Ordered mapping of property name to schema node
        required: Names of required properties (each must be a key of properties)
        additional_properties: Whether keys outside ``properties`` are allowed
    """

    kind: Literal["object"] = "object"
    properties: dict[str, "SchemaNode"] = Field(default_factory=dict)
    required: tuple[str, ...] = ()
    additional_properties: bool = False

    @model_validator(mode="after")
    def _validate_required(self) -> "ObjectNode":
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(
                f"required names {unknown} are not declared in properties "
                f"{list(self.properties)}"
            )
        if len(set(self.required)) != len(self.required):
            raise ValueError(f"required contains duplicate names: {list(self.required)}")
        return self

    @property
    def is_strict(self) -> bool:
        """True when every property is required and no extra keys are allowed."""
        return set(self.required) == set(self.properties) and not self.additional_properties


class UnionNode(_BaseNode):
    """Value matching any one of ``alternatives`` (``anyOf`` in JSON Schema)."""

    kind: Literal["union"] = "union"
    alternatives: tuple["SchemaNode", ...]

    @model_validator(mode="after")
    def _validate_alternatives(self) -> "UnionNode":
        if not self.alternatives:
            raise ValueError("alternatives must not be empty")
        return self


SchemaNode = Annotated[
    Union[StringNode, NumberNode, BooleanNode, ArrayNode, ObjectNode, UnionNode],
    Field(discriminator="kind"),
]

NODE_TYPES = (StringNode, NumberNode, BooleanNode, ArrayNode, ObjectNode, UnionNode)

ArrayNode.model_rebuild()
ObjectNode.model_rebuild()
UnionNode.model_rebuild()
