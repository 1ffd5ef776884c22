"""Rule-tree data model: rules, groups and the tagged ``Node`` union."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    model_serializer,
)
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class Combinator(str, Enum):
    """Join semantics of a group."""

    AND = "and"
    OR = "or"


class NameLabelPair(BaseModel):
    """An operator or combinator choice."""

    name: str = Field(..., description="Machine name")
    label: str = Field(..., description="Display label")


class FieldDescriptor(BaseModel):
    """Externally owned field metadata."""

    model_config = _WIRE_CONFIG

    name: str = Field(..., description="Field key referenced by rules")
    label: str = Field(..., description="Display label")
    field_type: str | None = Field(
        default=None,
        description="Semantic category; 'column' and 'measure' force AND on ancestors",
    )


class Rule(BaseModel):
    """Leaf comparison: field / operator / value."""

    model_config = _WIRE_CONFIG

    kind: Literal["rule"] = Field(default="rule", exclude=True)
    id: str | None = Field(default=None, description="Unique id within the tree")
    field: str = Field(..., description="Key into field metadata")
    operator: str = Field(default="", description="Key into the resolved operator set")
    value: Any = Field(default="", description="Opaque value payload")
    parent_operator: str | None = Field(
        default="", description="Outer-level operator for two-tier operator sets"
    )
    value_meta: Any = Field(default=None, description="Denormalized display label")

    @model_serializer(mode="wrap")
    def _drop_unset_meta(self, handler):
        data = handler(self)
        if self.value_meta is None:
            data.pop("valueMeta", None)
            data.pop("value_meta", None)
        return data


class RuleGroup(BaseModel):
    """Interior node joining its children with a combinator."""

    model_config = _WIRE_CONFIG

    kind: Literal["group"] = Field(default="group", exclude=True)
    id: str | None = Field(default=None, description="Unique id within the tree")
    combinator: Combinator = Field(default=Combinator.AND)
    not_: bool = Field(default=False, alias="not", description="Invert the group's result")
    rules: list[Node] = Field(default_factory=list)

    # Display metadata, carried through untouched.
    name: str | None = None
    email: str | None = None
    is_active: bool | None = None
    disabled: bool | None = None

    @model_serializer(mode="wrap")
    def _drop_unset_metadata(self, handler):
        data = handler(self)
        for attr in ("name", "email", "is_active", "disabled"):
            if getattr(self, attr) is None:
                data.pop(attr, None)
                data.pop(to_camel(attr), None)
        return data


def _node_tag(value: Any) -> str:
    if isinstance(value, (Rule, RuleGroup)):
        return value.kind
    if isinstance(value, dict):
        kind = value.get("kind")
        if kind in ("rule", "group"):
            return kind
        return "group" if value.get("combinator") else "rule"
    return "rule"


Node = Annotated[
    Union[
        Annotated[RuleGroup, Tag("group")],
        Annotated[Rule, Tag("rule")],
    ],
    Discriminator(_node_tag),
]

RuleGroup.model_rebuild()

_NODE_ADAPTER: TypeAdapter[Rule | RuleGroup] = TypeAdapter(Node)


def parse_node(data: Any) -> Rule | RuleGroup:
    """Validate a raw payload (or model) into a Rule or RuleGroup."""
    if isinstance(data, (Rule, RuleGroup)):
        return data.model_copy(deep=True)
    return _NODE_ADAPTER.validate_python(data)


def is_rule_group(node: Any) -> bool:
    return isinstance(node, RuleGroup)


def dump_query(node: Rule | RuleGroup) -> dict:
    """Return the camelCase wire form of a node."""
    return node.model_dump(mode="json", by_alias=True)


def iter_nodes(node: Rule | RuleGroup):
    """Yield every node depth-first, parents before children."""
    yield node
    if isinstance(node, RuleGroup):
        for child in node.rules:
            yield from iter_nodes(child)
