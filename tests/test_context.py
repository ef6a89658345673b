"""Invocation context for action handlers."""

from flagpop.context import Invocation, current_args, current_invocation, invoking


def test_outside_an_action():
    assert current_invocation() is None
    assert current_args() == []


def test_invoking_sets_and_resets():
    invocation = Invocation(popup="log", args=["--graph"])
    with invoking(invocation):
        assert current_invocation() is invocation
        assert current_args() == ["--graph"]
    assert current_invocation() is None


def test_current_args_is_a_copy():
    with invoking(Invocation(popup="log", args=["--graph"])):
        current_args().append("--all")
        assert current_args() == ["--graph"]


def test_nested_invocations():
    with invoking(Invocation(popup="outer", args=["-a"])):
        with invoking(Invocation(popup="inner", args=["-b"])):
            assert current_args() == ["-b"]
        assert current_args() == ["-a"]
