"""FieldResolver tests: defaults, hook overrides, two-tier operators."""

from querybuilder.domain.defaults import DEFAULT_OPERATORS
from querybuilder.domain.field_resolver import FieldResolver
from querybuilder.domain.query import NameLabelPair
from querybuilder.ports.hooks import BuilderHooks, CallbackHooks

ANY = NameLabelPair(name="any", label="Any of")
ALL = NameLabelPair(name="all", label="All of")


def _tiered_operators(field, is_parent, parent_operator):
    """'tags' has a parent tier; everything else uses the defaults."""
    if field != "tags":
        return None
    if is_parent:
        return [ANY, ALL]
    if parent_operator == "all":
        return [NameLabelPair(name="containsAll", label="contains all")]
    return [NameLabelPair(name="containsAny", label="contains any")]


class TestDefaults:
    def test_sixteen_default_operators(self):
        ops = FieldResolver().operators("anything")
        assert len(ops) == 16
        assert ops[0].name == "in"
        assert [o.name for o in ops] == [o.name for o in DEFAULT_OPERATORS]

    def test_default_kinds_values_placeholder(self):
        r = FieldResolver()
        assert r.value_editor_type("f", "=") == "text"
        assert r.input_type("f", "=") == "text"
        assert r.values("f", "=") == []
        assert r.placeholder("f", "=", None) == ""
        assert r.parent_operators("f") == []
        assert r.selected_column() is None

    def test_custom_default_operator_set(self):
        r = FieldResolver(operators=[NameLabelPair(name="eq", label="equals")])
        assert [o.name for o in r.operators("f")] == ["eq"]


class TestHookOverrides:
    def test_hooks_override_defaults(self):
        hooks = CallbackHooks(
            value_editor_type=lambda f, op, parent: "select" if f == "status" else None,
            input_type=lambda f, op: "number" if f == "age" else None,
            values=lambda f, op: ["open", "closed"] if f == "status" else None,
            placeholder=lambda f, op, parent: f"Enter {f}",
        )
        r = FieldResolver(hooks)
        assert r.value_editor_type("status", "=") == "select"
        assert r.value_editor_type("name", "=") == "text"
        assert r.input_type("age", "=") == "number"
        assert r.values("status", "=") == ["open", "closed"]
        assert r.placeholder("name", "=", None) == "Enter name"

    def test_falsy_hook_results_fall_back(self):
        hooks = CallbackHooks(
            operators=lambda f, is_parent, parent: [],
            value_editor_type=lambda f, op, parent: "",
            values=lambda f, op: [],
            placeholder=lambda f, op, parent: None,
            selected_column=lambda: "",
        )
        r = FieldResolver(hooks)
        assert len(r.operators("f")) == 16
        assert r.value_editor_type("f", "=") == "text"
        assert r.values("f", "=") == []
        assert r.placeholder("f", "=", None) == ""
        assert r.selected_column() is None

    def test_callback_hooks_satisfy_protocol(self):
        assert isinstance(CallbackHooks(), BuilderHooks)


class TestTwoTierOperators:
    def test_parent_operators_from_hook(self):
        r = FieldResolver(CallbackHooks(operators=_tiered_operators))
        assert [o.name for o in r.parent_operators("tags")] == ["any", "all"]
        assert r.parent_operators("name") == []

    def test_parent_operator_parameterizes_operator_set(self):
        r = FieldResolver(CallbackHooks(operators=_tiered_operators))
        assert [o.name for o in r.operators("tags", "all")] == ["containsAll"]
        assert [o.name for o in r.operators("tags", "any")] == ["containsAny"]

    def test_derive_operator_uses_first_parent(self):
        r = FieldResolver(CallbackHooks(operators=_tiered_operators))
        assert r.derive_operator("tags") == ("containsAny", "any")

    def test_derive_operator_without_parent_tier(self):
        r = FieldResolver(CallbackHooks(operators=_tiered_operators))
        assert r.derive_operator("name") == ("in", "")
