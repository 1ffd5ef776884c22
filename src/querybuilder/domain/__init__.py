"""Domain layer: rule-tree model and the pure tree algorithms."""

from .combinator_policy import PROTECTED_FIELD_TYPES, CombinatorPolicy
from .defaults import DEFAULT_COMBINATORS, DEFAULT_OPERATORS, LAST_UPDATED_BY_FIELD
from .field_resolver import FieldResolver
from .locator import LEVEL_NOT_FOUND, find_node, level_of
from .projector import ValidityProjector
from .query import (
    Combinator,
    FieldDescriptor,
    NameLabelPair,
    Node,
    Rule,
    RuleGroup,
    dump_query,
    is_rule_group,
    iter_nodes,
    parse_node,
)
from .value_resolver import ValueChange, ValueResolver, normalize_value_change

__all__ = [
    "Combinator",
    "CombinatorPolicy",
    "DEFAULT_COMBINATORS",
    "DEFAULT_OPERATORS",
    "FieldDescriptor",
    "FieldResolver",
    "LAST_UPDATED_BY_FIELD",
    "LEVEL_NOT_FOUND",
    "NameLabelPair",
    "Node",
    "PROTECTED_FIELD_TYPES",
    "Rule",
    "RuleGroup",
    "ValidityProjector",
    "ValueChange",
    "ValueResolver",
    "dump_query",
    "find_node",
    "is_rule_group",
    "iter_nodes",
    "level_of",
    "normalize_value_change",
    "parse_node",
]
