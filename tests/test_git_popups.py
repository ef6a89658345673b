"""Bundled git popups."""

import pytest

from flagpop.context import Invocation, invoking
from flagpop.popups import git
from flagpop.session import materialize
from flagpop.types import PrefixArg


@pytest.fixture
def git_calls(monkeypatch):
    calls = []

    def fake_run_git(args):
        calls.append(args)
        return 0, f"ran {' '.join(args)}\n", ""

    monkeypatch.setattr(git, "run_git", fake_run_git)
    return calls


@pytest.fixture
def popups(registry):
    git.register_git_popups(registry)
    return registry


def test_registered_popups(popups):
    assert popups.names() == ["commit", "fetch", "log", "push", "rebase"]
    assert popups.get("log").man_page == "git-log"
    assert popups.get("log").max_columns == {"actions": 2}
    assert popups.get("commit").serialization == "structured"


def test_log_defaults(popups):
    assert materialize(popups.get("log"), None).flat_args() == ["--graph", "--decorate"]


def test_handlers_use_current_args(popups, git_calls):
    with invoking(Invocation(popup="log", args=["--graph", "--author=jane"])):
        assert git.log_all() == "ran log --graph --author=jane --all\n"
    assert git_calls == [["log", "--graph", "--author=jane", "--all"]]


def test_log_head_numeric_prefix(git_calls):
    with invoking(Invocation(popup="log", args=[], prefix_arg=PrefixArg(5, universal=False), default=True)):
        git.log_head()
    assert git_calls == [["log", "-n", "5", "HEAD"]]


def test_commit_without_message_does_not_run_git(git_calls):
    with invoking(Invocation(popup="commit", args=["--all"])):
        assert "set a message" in git.commit_create()
    assert git_calls == []


def test_commit_with_message(git_calls):
    with invoking(Invocation(popup="commit", args=["--all", "--message=fix"])):
        git.commit_create()
    assert git_calls == [["commit", "--all", "--message=fix"]]


def test_amend_keeps_message_without_editor(git_calls):
    with invoking(Invocation(popup="commit", args=[])):
        git.commit_amend()
    with invoking(Invocation(popup="commit", args=["--message=better"])):
        git.commit_amend()
    assert git_calls == [["commit", "--amend", "--no-edit"], ["commit", "--message=better", "--amend"]]


def test_rebase_continue_reports_stderr(monkeypatch):
    monkeypatch.setattr(git, "run_git", lambda args: (1, "", "error: could not apply 1a2b3c\n"))
    assert git.rebase_continue() == "error: could not apply 1a2b3c\n"
    assert git.rebase_abort() == "error: could not apply 1a2b3c\n"


def test_rebase_sequence_actions(popups, tmp_path, monkeypatch):
    (tmp_path / "rebase-apply").mkdir()
    monkeypatch.setattr(git, "run_git", lambda args: (0, f"{tmp_path}\n", ""))
    keys = [event.key for event in materialize(popups.get("rebase"), None).actions]
    assert keys == ["r", "s", "a"]


def test_rebase_in_progress(tmp_path, monkeypatch):
    monkeypatch.setattr(git, "run_git", lambda args: (0, f"{tmp_path}\n", ""))
    assert not git.rebase_in_progress()
    (tmp_path / "rebase-merge").mkdir()
    assert git.rebase_in_progress()


def test_rebase_outside_repository(monkeypatch):
    monkeypatch.setattr(git, "run_git", lambda args: (128, "", "not a git repository"))
    assert not git.rebase_in_progress()


def test_every_handler_is_documented(popups):
    for name in popups.names():
        definition = popups.get(name)
        for action in list(definition.actions) + list(definition.sequence_actions):
            assert action.handler.__doc__, f"{name} {action.key}"
