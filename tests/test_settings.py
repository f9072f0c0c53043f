from __future__ import annotations

from pathlib import Path

import pytest

from modedit import settings as modedit_settings


def test_defaults_without_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(modedit_settings.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = modedit_settings.load_settings()
    assert settings.editor.default_title == "New File"
    assert settings.editor.poll_interval == pytest.approx(0.1)
    assert settings.editor.clamp_column_on_vertical_move is True
    assert settings.editor.cancel_confirm_on_unknown_key is False
    assert settings.logging.level is modedit_settings.LogLevel.info


def test_load_explicit_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "editor:\n"
        "  default_title: Scratch\n"
        "  cancel_confirm_on_unknown_key: true\n"
        "logging:\n"
        "  file: null\n"
        "  level: debug\n",
        encoding="utf-8",
    )
    settings = modedit_settings.load_settings(path)
    assert settings.editor.default_title == "Scratch"
    assert settings.editor.cancel_confirm_on_unknown_key is True
    assert settings.logging.file is None
    assert settings.logging.level is modedit_settings.LogLevel.debug


def test_env_var_selects_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "env.yaml"
    path.write_text("editor:\n  poll_interval: 0.25\n", encoding="utf-8")
    monkeypatch.setenv(modedit_settings.CONFIG_ENV_VAR, str(path))
    settings = modedit_settings.load_settings()
    assert settings.editor.poll_interval == pytest.approx(0.25)


def test_home_config_is_used(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(modedit_settings.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    config_dir = tmp_path / ".config" / "modedit"
    config_dir.mkdir(parents=True)
    (config_dir / "config.yaml").write_text(
        "editor:\n  clamp_column_on_vertical_move: false\n", encoding="utf-8"
    )
    settings = modedit_settings.load_settings()
    assert settings.editor.clamp_column_on_vertical_move is False


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert modedit_settings.load_settings(path) == modedit_settings.Settings()


@pytest.mark.parametrize(
    "content",
    [
        "editor: [unclosed\n",
        "- just\n- a list\n",
        "editor:\n  poll_interval: 0\n",
        "editor:\n  unknown_option: 1\n",
        "logging:\n  level: verbose\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(modedit_settings.ConfigError) as exc_info:
        modedit_settings.load_settings(path)
    assert str(path) in str(exc_info.value)


def test_unreadable_config_raises(tmp_path: Path) -> None:
    with pytest.raises(modedit_settings.ConfigError):
        modedit_settings.load_settings(tmp_path / "missing.yaml")
