"""Configuration loading."""

from pathlib import Path

from flagpop.config import ConfigManager, Settings


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    manager = ConfigManager(path=tmp_path / "missing.toml")
    assert manager.settings == Settings()


def test_default_table(tmp_path):
    path = tmp_path / "flagpop.toml"
    path.write_text(
        "[default]\n"
        'use_prefix_argument = "popup"\n'
        "show_common_commands = true\n"
        "min_padding = 2\n"
        "width = 120\n"
        'preferences = "~/prefs.yaml"\n'
    )
    settings = ConfigManager(path=path).settings
    assert settings.use_prefix_argument == "popup"
    assert settings.show_common_commands
    assert settings.min_padding == 2
    assert settings.width == 120
    assert settings.preferences == Path("~/prefs.yaml").expanduser()


def test_found_in_parent_directory(tmp_path, monkeypatch):
    (tmp_path / "flagpop.toml").write_text("[default]\nwidth = 60\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    manager = ConfigManager()
    assert manager.config_file == tmp_path / "flagpop.toml"
    assert manager.settings.width == 60


def test_values_are_clamped(tmp_path):
    path = tmp_path / "flagpop.toml"
    path.write_text("[default]\nmin_padding = -4\nwidth = 0\n")
    settings = ConfigManager(path=path).settings
    assert settings.min_padding == 0
    assert settings.width == 1
