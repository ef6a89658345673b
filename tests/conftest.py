"""Shared fixtures for the popup engine tests."""

import pytest

from flagpop.config import Settings
from flagpop.definition import ActionSpec, OptionSpec, SwitchSpec
from flagpop.keys import KeyBindingTable
from flagpop.registry import PopupRegistry
from flagpop.runtime import Runtime
from flagpop.store import PreferenceStore


class RecordingDisplay:
    """Display that keeps every surface and message it receives."""

    def __init__(self):
        self.state = "shell"
        self.surfaces = []
        self.messages = []
        self.snapshots = 0
        self.restored = []

    def snapshot(self):
        self.snapshots += 1
        return self.state

    def restore(self, token):
        self.restored.append(token)
        self.state = token

    def show(self, surface):
        self.state = "popup"
        self.surfaces.append(surface)

    def message(self, text):
        self.messages.append(text)

    @property
    def last(self):
        return self.surfaces[-1]


class RecordingDescriber:
    """Describer that records requests instead of showing them."""

    def __init__(self):
        self.manuals = []
        self.handlers = []

    def show_manual(self, topic, flag):
        self.manuals.append((topic, flag))

    def describe_handler(self, handler, title):
        self.handlers.append((handler, title))


class Recorder:
    """Action handler remembering the arguments of each call."""

    def __init__(self, result="done"):
        self.calls = []
        self.result = result

    def __call__(self):
        from flagpop.context import current_invocation

        self.calls.append(current_invocation())
        return self.result

    @property
    def args(self):
        return [invocation.args for invocation in self.calls]


def scripted_reader(*answers):
    """Build a value reader returning answers in order and logging prompts."""
    queue = list(answers)
    prompts = []

    def reader(prompt, current):
        prompts.append((prompt, current))
        answer = queue.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    reader.prompts = prompts
    return reader


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def describer():
    return RecordingDescriber()


@pytest.fixture
def registry():
    return PopupRegistry()


@pytest.fixture
def store(tmp_path):
    return PreferenceStore(path=tmp_path / "preferences.yaml")


@pytest.fixture
def runtime(registry, store, describer):
    return Runtime(
        registry=registry,
        store=store,
        settings=Settings(preferences=store.path),
        keymap=KeyBindingTable(),
        describer=describer,
    )


@pytest.fixture
def handler():
    return Recorder()


@pytest.fixture
def simple_popup(registry, handler):
    """One switch (a, --all) and one action (x)."""
    return registry.define(
        "simple",
        switches=[SwitchSpec("a", "All", "--all")],
        actions=[ActionSpec("x", "Run", handler)],
    )


@pytest.fixture
def log_popup(registry, handler):
    """Popup with switches, options, actions and a default action."""
    return registry.define(
        "log",
        man_page="git-log",
        switches=[
            SwitchSpec("- g", "Graph", "--graph", enabled=True),
            SwitchSpec("- d", "Decorate", "--decorate"),
        ],
        options=[
            OptionSpec("= a", "Author", "--author="),
            OptionSpec("= n", "Limit", "-n", default="256"),
        ],
        actions=[
            ActionSpec("l", "Log current", handler),
            ActionSpec("o", "Log other", handler),
        ],
        default_action=handler,
    )


@pytest.fixture
def make_reader():
    return scripted_reader
