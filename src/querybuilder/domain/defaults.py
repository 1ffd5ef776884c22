"""Built-in operator/combinator sets and well-known field names."""

from __future__ import annotations

from .query import NameLabelPair

DEFAULT_OPERATORS: tuple[NameLabelPair, ...] = (
    NameLabelPair(name="in", label="in"),
    NameLabelPair(name="null", label="is null"),
    NameLabelPair(name="notNull", label="is not null"),
    NameLabelPair(name="notIn", label="not in"),
    NameLabelPair(name="=", label="="),
    NameLabelPair(name="!=", label="!="),
    NameLabelPair(name="<", label="<"),
    NameLabelPair(name=">", label=">"),
    NameLabelPair(name="<=", label="<="),
    NameLabelPair(name=">=", label=">="),
    NameLabelPair(name="contains", label="contains"),
    NameLabelPair(name="beginsWith", label="begins with"),
    NameLabelPair(name="endsWith", label="ends with"),
    NameLabelPair(name="doesNotContain", label="does not contain"),
    NameLabelPair(name="doesNotBeginWith", label="does not begin with"),
    NameLabelPair(name="doesNotEndWith", label="does not end with"),
)

DEFAULT_COMBINATORS: tuple[NameLabelPair, ...] = (
    NameLabelPair(name="and", label="And"),
    NameLabelPair(name="or", label="Or"),
)

# Field categories that pin every enclosing group to AND.
FIELD_TYPE_COLUMN = "column"
FIELD_TYPE_MEASURE = "measure"

# Value editor kinds with special default/transition handling.
EDITOR_TEXT = "text"
EDITOR_CHECKBOX = "checkbox"
EDITOR_RADIO = "radio"

INPUT_TEXT = "text"

# Rules on this field store the picked user's label instead of the object.
LAST_UPDATED_BY_FIELD = "LAST_UPDATED_BY"

PERSON_ID_KEY = "id"
PERSON_LABEL_KEY = "label"
PERSON_META_KEY = "email"
