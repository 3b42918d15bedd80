"""Game settings: defaults, the YAML settings file and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from tccst.core.errors import ConfigError

logger = logging.getLogger(__name__)

COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")


def default_settings_path() -> Path:
    """``$XDG_CONFIG_HOME/tccst/config.yaml`` or ``~/.config/tccst/config.yaml``."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "tccst" / "config.yaml"


def normalize_extension(extension: str) -> str:
    """``.c`` and ``c`` both mean C files."""
    extension = extension.strip()
    if extension.startswith("."):
        extension = extension[1:]
    return extension


@dataclass
class Settings:
    project_path: Optional[Path] = None
    file_extension: str = "rs"
    word_count: int = 10
    word_length: Optional[int] = None
    min_accuracy: Optional[float] = None  # percent, 0-100
    strict: bool = False
    skip_word_on_space: bool = False
    comment_marker: Optional[str] = None
    cursor_foreground: str = "black"
    cursor_background: str = "white"

    @property
    def min_accuracy_ratio(self) -> Optional[float]:
        if self.min_accuracy is None:
            return None
        return self.min_accuracy / 100.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: str = "settings") -> "Settings":
        return cls().merged(data, source=source)

    def merged(self, overrides: Mapping[str, Any], source: str = "settings") -> "Settings":
        """Return a copy with every non-``None`` value of ``overrides`` applied."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"{source}: unknown setting(s): {', '.join(unknown)}")

        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            changes[key] = _coerce(key, value, source)
        return replace(self, **changes)

    def validate(self) -> "Settings":
        if self.project_path is None:
            raise ConfigError("provide a path to a project")
        if not self.file_extension:
            raise ConfigError("file extension can not be empty")
        if self.word_count == 0:
            raise ConfigError("Word count can not be zero")
        if self.word_count < 0:
            raise ConfigError(f"Word count can not be negative ({self.word_count})")
        if self.word_length is not None and self.word_length <= 0:
            raise ConfigError(f"Word length must be positive ({self.word_length})")
        if self.min_accuracy is not None and not 0.0 <= self.min_accuracy <= 100.0:
            raise ConfigError(f"Minimum accuracy must be between 0 and 100 ({self.min_accuracy})")
        for name in ("cursor_foreground", "cursor_background"):
            color = getattr(self, name)
            if color not in COLOR_NAMES:
                raise ConfigError(f"{name}: unknown color {color!r}, expected one of {', '.join(COLOR_NAMES)}")
        return self


def _coerce(key: str, value: Any, source: str) -> Any:
    try:
        if key == "project_path":
            return Path(str(value)).expanduser()
        if key == "file_extension":
            return normalize_extension(str(value))
        if key in ("word_count", "word_length"):
            if isinstance(value, bool):
                raise ValueError("expected an integer")
            return int(value)
        if key == "min_accuracy":
            return float(value)
        if key in ("strict", "skip_word_on_space"):
            if not isinstance(value, bool):
                raise ValueError("expected true or false")
            return value
        if key in ("cursor_foreground", "cursor_background"):
            return str(value).strip().lower()
        return str(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{source}: invalid value for {key!r}: {value!r} ({e})") from e


def load_settings_file(path: Path, required: bool = False) -> Dict[str, Any]:
    """Read a YAML mapping of settings. A missing optional file yields ``{}``."""
    if not path.exists():
        if required:
            raise ConfigError(f"Settings file not found: {path}")
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"{path.name}: could not load settings ({e})") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path.name}: expected a YAML mapping of settings")
    logger.info("Loaded settings from %s", path)
    return raw
