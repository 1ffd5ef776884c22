"""Query builder application package."""

from .domain import (
    Combinator,
    FieldDescriptor,
    NameLabelPair,
    Rule,
    RuleGroup,
    dump_query,
)
from .services import BuilderSchema, QueryBuilder, QueryView

__version__ = "0.1.0"
__all__ = [
    "BuilderSchema",
    "Combinator",
    "FieldDescriptor",
    "NameLabelPair",
    "QueryBuilder",
    "QueryView",
    "Rule",
    "RuleGroup",
    "dump_query",
]
