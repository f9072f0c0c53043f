from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Final, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


CONFIG_ENV_VAR: Final[str] = "MODEDIT_CONFIG"
DEFAULT_CONFIG_PATH: Final[Path] = Path("~/.config/modedit/config.yaml")
DEFAULT_TITLE: Final[str] = "New File"


class ConfigError(Exception):
    pass


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # None disables file logging entirely.
    file: Optional[str] = "modedit.log"
    level: LogLevel = LogLevel.info


class EditorSettings(BaseModel):
    """
    Editor behavior knobs.
    - default_title: title of an untitled buffer, also the file it is saved to
    - poll_interval: seconds the loop waits for input before redrawing
    - esc_sequence_timeout: seconds a lone ESC waits for the rest of a sequence
    - clamp_column_on_vertical_move: pull the column back onto shorter lines
    - cancel_confirm_on_unknown_key: any key other than Enter/Esc cancels a
      pending confirmation instead of being ignored
    - status_height_ratio: share of the screen height given to the status area
    """

    model_config = ConfigDict(extra="forbid")

    default_title: str = Field(default=DEFAULT_TITLE, min_length=1)
    poll_interval: float = Field(default=0.1, gt=0)
    esc_sequence_timeout: float = Field(default=0.05, gt=0)
    clamp_column_on_vertical_move: bool = True
    cancel_confirm_on_unknown_key: bool = False
    status_height_ratio: float = Field(default=0.1, gt=0, lt=1)


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    editor: EditorSettings = Field(default_factory=EditorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def resolve_config_path(path: Optional[Path] = None) -> Optional[Path]:
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    default = DEFAULT_CONFIG_PATH.expanduser()
    if default.is_file():
        return default
    return None


def load_settings(path: Optional[Path] = None) -> Settings:
    config_path = resolve_config_path(path)
    if config_path is None:
        return Settings()

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config {config_path}: {exc}") from exc

    try:
        doc = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {config_path}: {exc}") from exc

    if doc is None:
        return Settings()
    if not isinstance(doc, dict):
        raise ConfigError(f"config {config_path} must be a mapping")

    try:
        return Settings.model_validate(doc)
    except ValidationError as exc:
        raise ConfigError(f"invalid config {config_path}: {exc}") from exc
