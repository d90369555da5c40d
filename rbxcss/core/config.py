from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from .logger import get_logger

log = get_logger(__name__)

__all__ = [
    "ConfigError",
    "DEFAULT_CSS_FILE_PATH",
    "CSS_PATH_ENV",
    "TransformerConfig",
    "TransformerConfigFile",
    "load_config",
]

DEFAULT_CSS_FILE_PATH = "src/roblox.css"
CSS_PATH_ENV = "RBXCSS_CSS_PATH"

# Keys under which the options may be nested, e.g. inside a tsconfig plugin entry
_SECTION_KEYS = ("rbxcss", "transformer")


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or validated."""


class TransformerConfig(BaseModel):
    css_file_path: str = Field(
        DEFAULT_CSS_FILE_PATH,
        alias="cssFilePath",
        description="Stylesheet compiled into element attributes",
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def css_path(self) -> Path:
        return Path(self.css_file_path)


class TransformerConfigFile:
    def __init__(self, path: Path):
        self.path = path
        self.model: Optional[TransformerConfig] = None

    def load(self) -> TransformerConfig:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Could not read config {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config {self.path} must contain a JSON object")
        try:
            self.model = TransformerConfig.model_validate(_section(data))
        except ValidationError as exc:
            raise ConfigError(f"Invalid config {self.path}: {exc}") from exc
        return self.model


def _section(data: Dict[str, Any]) -> Dict[str, Any]:
    for key in _SECTION_KEYS:
        nested = data.get(key)
        if isinstance(nested, dict):
            return nested
    return data


def load_config(path: Optional[Path] = None) -> TransformerConfig:
    """
    Load the transformer configuration.

    A missing (or unspecified) file gives the defaults. The ``RBXCSS_CSS_PATH``
    environment variable overrides the stylesheet path from the file.
    """
    if path is not None and path.exists():
        config = TransformerConfigFile(path).load()
    else:
        if path is not None:
            log.debug(f"Config file {path} not found, using defaults")
        config = TransformerConfig()

    env_path = os.environ.get(CSS_PATH_ENV)
    if env_path:
        log.debug(f"Using stylesheet path from {CSS_PATH_ENV}: {env_path}")
        config = config.model_copy(update={"css_file_path": env_path})
    return config
