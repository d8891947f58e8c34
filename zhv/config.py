"""Loading and saving of the API settings.

Values are resolved with this priority: environment variables, then the
settings file, then built-in defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

DEFAULT_API_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-3.5-turbo"

ENV_API_URL = "ZHV_API_URL"
ENV_MODEL = "ZHV_MODEL"
ENV_KEY = "ZHV_KEY"

_ENV_FOR_FIELD = {
    "api_url": ENV_API_URL,
    "model": ENV_MODEL,
    "api_key": ENV_KEY,
}


@dataclass
class Config:
    """Settings needed to reach an OpenAI-compatible API."""

    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    api_key: str = ""

    def is_valid(self) -> bool:
        """Return True when every setting has a non-empty value."""
        return bool(self.api_key and self.api_url and self.model)


def config_path() -> Path:
    """Return the path of the settings file in the user's home directory."""
    return Path.home() / ".zhv" / "setting.json"


def _apply_file(config: Config, path: Path) -> None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return
    if not isinstance(data, dict):
        return
    by_lower = {f.name.lower(): f.name for f in fields(Config)}
    for key, value in data.items():
        name = by_lower.get(str(key).lower())
        # Values of the wrong type are skipped, the rest still apply.
        if name is not None and isinstance(value, str):
            setattr(config, name, value)


def _apply_env(config: Config) -> None:
    for name, variable in _ENV_FOR_FIELD.items():
        value = os.environ.get(variable, "")
        if value:
            setattr(config, name, value)


def load_config(path: str | os.PathLike[str] | None = None) -> Config:
    """Build the effective configuration.

    A missing or unreadable settings file is not an error: defaults are used.
    """
    config = Config()
    try:
        file_path = Path(path) if path is not None else config_path()
    except (RuntimeError, KeyError):
        file_path = None
    if file_path is not None:
        _apply_file(config, file_path)
    _apply_env(config)
    return config


def save_config(config: Config, path: str | os.PathLike[str] | None = None) -> Path:
    """Write the configuration as indented JSON and return the file's path."""
    file_path = Path(path) if path is not None else config_path()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(
        json.dumps(asdict(config), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return file_path