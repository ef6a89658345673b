"""Prefix argument policy."""

import pytest

from flagpop.dispatch import Dispatcher
from flagpop.errors import PolicyMisuseError
from flagpop.invocation import decide, invoke_popup
from flagpop.types import PrefixArg

UNIVERSAL = PrefixArg()


@pytest.mark.parametrize(
    "policy, prefix, run_default",
    [
        ("default", None, False),
        ("default", UNIVERSAL, True),
        ("popup", None, True),
        ("popup", UNIVERSAL, False),
        ("none", None, False),
        ("none", UNIVERSAL, False),
        ("disabled", None, False),
    ],
)
def test_policy_table(registry, handler, policy, prefix, run_default):
    definition = registry.define("p", actions=[("x", "Run", handler)], default_action=handler, use_prefix=policy)
    assert decide(definition, prefix, "default").run_default is run_default


def test_global_policy_applies_without_popup_policy(log_popup):
    assert decide(log_popup, None, "popup").run_default
    assert not decide(log_popup, UNIVERSAL, "popup").run_default


def test_popup_policy_overrides_global(registry, handler):
    definition = registry.define("p", default_action=handler, use_prefix="default")
    assert not decide(definition, None, "popup").run_default


def test_disabled_with_prefix(registry, handler):
    definition = registry.define("p", default_action=handler, use_prefix="disabled")
    with pytest.raises(PolicyMisuseError):
        decide(definition, UNIVERSAL, "default")


def test_invalid_global_policy(simple_popup):
    with pytest.raises(PolicyMisuseError, match="Invalid use_prefix_argument"):
        decide(simple_popup, None, "sometimes")


def test_missing_default_action_is_advisory(simple_popup):
    decision = decide(simple_popup, UNIVERSAL, "default")
    assert not decision.run_default
    assert "no default action" in decision.advisory


@pytest.mark.parametrize(
    "given, forwarded",
    [
        (PrefixArg(4), None),
        (PrefixArg(16), PrefixArg(4)),
        (PrefixArg(64), PrefixArg(16)),
        (PrefixArg(3, universal=False), PrefixArg(3, universal=False)),
    ],
)
def test_forwarded_prefix(log_popup, given, forwarded):
    decision = decide(log_popup, given, "default")
    assert decision.run_default
    assert decision.prefix_arg == forwarded


def test_invoke_opens_popup(log_popup, runtime, display, handler):
    dispatcher = invoke_popup("log", None, runtime, display)
    assert isinstance(dispatcher, Dispatcher)
    assert dispatcher.is_open
    assert handler.calls == []


def test_invoke_runs_default_action(log_popup, runtime, display, handler):
    runtime.store.set("log-arguments", ["--decorate"])
    assert invoke_popup("log", PrefixArg(16), runtime, display) == "done"

    invocation = handler.calls[0]
    assert invocation.default
    assert invocation.args == ["--decorate"]
    assert invocation.prefix_arg == PrefixArg(4)
    assert display.surfaces == []


def test_invoke_falls_back_with_advisory(simple_popup, runtime, display):
    dispatcher = invoke_popup("simple", UNIVERSAL, runtime, display)
    assert dispatcher.is_open
    assert "no default action" in display.messages[-1]


def test_invoke_uses_global_setting(log_popup, runtime, display, handler):
    runtime.settings.use_prefix_argument = "popup"
    assert invoke_popup("log", None, runtime, display) == "done"
