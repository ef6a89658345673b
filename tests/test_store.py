"""YAML preference store."""

import yaml

from flagpop.store import PreferenceStore


def test_missing_file_is_empty(tmp_path):
    store = PreferenceStore(path=tmp_path / "none.yaml")
    assert store.get("log-arguments") is None


def test_set_is_not_written(store):
    store.set("log-arguments", ["--graph"])
    assert store.get("log-arguments") == ["--graph"]
    assert not store.path.exists()
    assert PreferenceStore(path=store.path).get("log-arguments") is None


def test_save_round_trip(store):
    store.save("log-arguments", ["--graph", "--author=jane"])
    store.save("commit-arguments", [("--all", True), ("--author=", "me")])

    reloaded = PreferenceStore(path=store.path)
    assert reloaded.get("log-arguments") == ["--graph", "--author=jane"]
    assert reloaded.get("commit-arguments") == [("--all", True), ("--author=", "me")]


def test_save_writes_plain_yaml(store):
    store.save("log-arguments", ["--graph"])
    with open(store.path) as f:
        assert yaml.safe_load(f) == {"log-arguments": ["--graph"]}


def test_save_replaces_override(store):
    store.set("log-arguments", ["--oneline"])
    store.save("log-arguments", ["--graph"])
    assert store.get("log-arguments") == ["--graph"]


def test_empty_value_is_kept(store):
    store.save("log-arguments", [])
    assert PreferenceStore(path=store.path).get("log-arguments") == []


def test_malformed_file(tmp_path):
    path = tmp_path / "preferences.yaml"
    path.write_text("- just\n- a list\n")
    assert PreferenceStore(path=path).values == {}

    path.write_text("log-arguments: oops\n")
    assert PreferenceStore(path=path).get("log-arguments") is None


def test_memory_only_store():
    store = PreferenceStore(path=None)
    store.save("log-arguments", ["--graph"])
    assert store.get("log-arguments") == ["--graph"]
