"""A popup from definition to action, including persisted defaults."""

from flagpop.dispatch import Dispatcher
from flagpop.invocation import invoke_popup
from flagpop.store import PreferenceStore
from flagpop.types import DispatchState


def run(runtime, display, *keys):
    dispatcher = invoke_popup("simple", None, runtime, display)
    assert isinstance(dispatcher, Dispatcher)
    result = None
    for key in keys:
        result = dispatcher.press(key)
    return dispatcher, result


def test_switch_then_action(simple_popup, runtime, display, handler):
    dispatcher, result = run(runtime, display, "a", "x")
    assert result == "done"
    assert handler.args == [["--all"]]
    assert dispatcher.state is DispatchState.CLOSED


def test_action_alone(simple_popup, runtime, display, handler):
    run(runtime, display, "x")
    assert handler.args == [[]]


def test_session_changes_are_discarded(simple_popup, runtime, display, handler):
    run(runtime, display, "a", "ctrl+g")
    run(runtime, display, "x")
    assert handler.args == [[]]


def test_persisted_defaults_survive_reopen(simple_popup, runtime, display, handler):
    run(runtime, display, "a", "ctrl+c", "ctrl+c")

    dispatcher, _ = run(runtime, display)
    assert dispatcher.session.switches[0].enabled

    dispatcher.press("x")
    assert handler.args == [["--all"]]


def test_saved_defaults_survive_restart(simple_popup, runtime, display, handler):
    run(runtime, display, "a", "ctrl+x", "ctrl+s")
    runtime.store = PreferenceStore(path=runtime.store.path)

    run(runtime, display, "x")
    assert handler.args == [["--all"]]
