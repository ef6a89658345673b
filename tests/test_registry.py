"""Popup definitions and key-level editing."""

import pytest

from flagpop.definition import ActionSpec, KeyedList, OptionSpec, SwitchSpec, read_string
from flagpop.errors import InvalidDefinition


def noop():
    return None


def keys(registry, name, cls):
    return registry.get(name).entries(cls).keys()


def test_define_and_get(registry, simple_popup):
    assert registry.get("simple") is simple_popup
    assert "simple" in registry
    assert registry.names() == ["simple"]
    assert simple_popup.variable == "simple-arguments"


def test_get_unknown_popup(registry):
    with pytest.raises(InvalidDefinition, match="not defined"):
        registry.get("missing")


def test_redefine_replaces(registry):
    registry.define("p", actions=[ActionSpec("x", "Run", noop)])
    registry.define("p", actions=[ActionSpec("y", "Other", noop)])
    assert keys(registry, "p", "actions") == ["y"]


def test_tuple_entries(registry):
    definition = registry.define(
        "p",
        switches=[("a", "All", "--all", True)],
        options=[("o", "Output", "--output=")],
        actions=[("x", "Run", noop)],
    )
    assert definition.switches.get("a") == SwitchSpec("a", "All", "--all", True)
    assert definition.options.get("o").reader is read_string
    assert definition.default_arguments() == ["--all"]


def test_explicit_variable(registry):
    definition = registry.define("p", variable="custom-slot")
    assert definition.variable == "custom-slot"


def test_unknown_config_key(registry):
    with pytest.raises(InvalidDefinition, match="Unknown popup config"):
        registry.define("p", colour="red")


@pytest.mark.parametrize("config", [{"use_prefix": "sometimes"}, {"serialization": "json"}])
def test_invalid_policy_values(registry, config):
    with pytest.raises(InvalidDefinition):
        registry.define("p", **config)


def test_duplicate_key_in_class(registry):
    with pytest.raises(InvalidDefinition, match="Duplicate"):
        registry.define("p", switches=[("a", "All", "--all"), ("a", "Again", "--again")])


def test_cross_class_collision(registry):
    with pytest.raises(InvalidDefinition, match="both"):
        registry.define("p", switches=[("a", "All", "--all")], actions=[("a", "Apply", noop)])


@pytest.mark.parametrize("key", ["?", "ctrl+g", "ctrl+c", "tab"])
def test_reserved_keys(registry, key):
    with pytest.raises(InvalidDefinition, match="reserved"):
        registry.define("p", actions=[(key, "Run", noop)])


def test_prefix_overlap(registry):
    with pytest.raises(InvalidDefinition, match="overlaps"):
        registry.define("p", switches=[("-", "Dash", "--dash"), ("- a", "All", "--all")])


def test_malformed_entries(registry):
    with pytest.raises(InvalidDefinition, match="no flag"):
        registry.define("p", switches=[("a", "All", "")])
    with pytest.raises(InvalidDefinition, match="not callable"):
        registry.define("p", actions=[("x", "Run", "not a function")])
    with pytest.raises(InvalidDefinition, match="Malformed"):
        registry.define("p", switches=["a"])


def test_max_columns(registry):
    definition = registry.define("p", max_columns={"switches": 2}, max_action_columns=3)
    assert definition.max_columns == {"switches": 2, "actions": 3}
    with pytest.raises(InvalidDefinition):
        registry.define("q", max_columns={"switches": 0})


def test_add_event_appends_new_key(registry, simple_popup):
    registry.add_event("simple", "switches", "s", ("Signoff", "--signoff"))
    assert keys(registry, "simple", "switches") == ["a", "s"]
    assert simple_popup.switches.get("s").flag == "--signoff"


def test_add_event_replaces_in_place(registry):
    registry.define("p", switches=[("a", "All", "--all"), ("b", "Bare", "--bare")])
    registry.add_event("p", "switches", "a", SwitchSpec("a", "Everything", "--everything"))
    assert keys(registry, "p", "switches") == ["a", "b"]
    assert registry.get("p").switches.get("a").description == "Everything"


def test_add_event_prepend(registry):
    registry.define("p", actions=[("x", "Run", noop)])
    registry.add_event("p", "actions", "w", ("Walk", noop), prepend=True)
    assert keys(registry, "p", "actions") == ["w", "x"]


def test_add_event_anchor(registry):
    registry.define("p", switches=[("a", "A", "--a"), ("b", "B", "--b"), ("c", "C", "--c")])
    registry.add_event("p", "switches", "n", ("N", "--n"), at="a")
    assert keys(registry, "p", "switches") == ["a", "n", "b", "c"]
    registry.add_event("p", "switches", "m", ("M", "--m"), at="c", prepend=True)
    assert keys(registry, "p", "switches") == ["a", "n", "b", "m", "c"]


def test_add_event_anchor_moves_existing(registry):
    registry.define("p", switches=[("a", "A", "--a"), ("b", "B", "--b"), ("c", "C", "--c")])
    registry.add_event("p", "switches", "c", ("C", "--c"), at="a", prepend=True)
    assert keys(registry, "p", "switches") == ["c", "a", "b"]


def test_add_event_missing_anchor(registry, simple_popup):
    with pytest.raises(InvalidDefinition, match="Anchor"):
        registry.add_event("simple", "switches", "s", ("Signoff", "--signoff"), at="zz")


def test_add_event_rejects_collision(registry, simple_popup):
    with pytest.raises(InvalidDefinition):
        registry.add_event("simple", "actions", "a", ("Apply", noop))


def test_add_event_unknown_class(registry, simple_popup):
    with pytest.raises(InvalidDefinition, match="Unknown event class"):
        registry.add_event("simple", "flags", "f", ("F", "--f"))


def test_remove_event(registry, simple_popup):
    registry.remove_event("simple", "switches", "a")
    assert keys(registry, "simple", "switches") == []
    with pytest.raises(InvalidDefinition):
        registry.remove_event("simple", "switches", "a")


def test_rebind_key_keeps_position(registry):
    registry.define("p", options=[("a", "A", "--a="), ("b", "B", "--b=")])
    registry.rebind_key("p", "options", "a", "z")
    assert keys(registry, "p", "options") == ["z", "b"]
    assert registry.get("p").options.get("z") == OptionSpec("z", "A", "--a=")


def test_rebind_key_to_bound_key(registry):
    registry.define("p", options=[("a", "A", "--a="), ("b", "B", "--b=")])
    with pytest.raises(InvalidDefinition, match="already bound"):
        registry.rebind_key("p", "options", "a", "b")
    with pytest.raises(InvalidDefinition, match="not bound"):
        registry.rebind_key("p", "options", "q", "r")


def test_rebind_key_extends_own_chord(registry):
    registry.define("p", switches=[("a", "All", "--all"), ("b", "Bare", "--bare")])
    registry.rebind_key("p", "switches", "a", "a b")
    assert keys(registry, "p", "switches") == ["a b", "b"]
    with pytest.raises(InvalidDefinition, match="overlaps"):
        registry.rebind_key("p", "switches", "b", "a b c")


def test_keyed_list_order():
    items = KeyedList([("a", 1), ("b", 2)])
    items.put("c", 3, at="a")
    items.put("a", 10)
    assert items.keys() == ["a", "c", "b"]
    assert list(items) == [10, 3, 2]
    assert items.remove("c") == 3
    assert len(items) == 2
    copy = items.copy()
    copy.put("d", 4)
    assert "d" not in items
    with pytest.raises(KeyError):
        items.index("d")
