"""
Application configuration for the ROPM generator.

Configuration is resolved once at start-up and is immutable afterwards.
Sources, lowest priority first:

1. Built-in defaults
2. Optional YAML or JSON file
3. Environment variables (ROPM_HOST, ROPM_PORT or PORT, ROPM_BASE_DIR)
4. Explicit overrides (CLI options)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ropm.utils.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_VAR_HOST = "ROPM_HOST"
ENV_VAR_PORT = "ROPM_PORT"
ENV_VAR_PORT_FALLBACK = "PORT"
ENV_VAR_BASE_DIR = "ROPM_BASE_DIR"

DEFAULT_PORT = 3000


class AppConfig(BaseModel):
    """Immutable runtime configuration."""
    model_config = ConfigDict(frozen=True)

    host: str = Field("0.0.0.0", description="Interface to listen on")
    port: int = Field(DEFAULT_PORT, description="Listening port", ge=1, le=65535)
    base_dir: Path = Field(default_factory=Path.cwd, description="Directory holding fonts/, public/ and assets/")

    @property
    def fonts_dir(self) -> Path:
        return self.base_dir / "fonts"

    @property
    def public_dir(self) -> Path:
        return self.base_dir / "public"

    @property
    def asset_dirs(self) -> List[Path]:
        """Directories searched for insignia images, in order."""
        return [self.public_dir / "assets", self.base_dir / "assets"]


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file into a dict."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(str(path), str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), "top-level value must be a mapping")
    return data


def _from_environment() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    host = os.environ.get(ENV_VAR_HOST)
    if host:
        values["host"] = host
    port = os.environ.get(ENV_VAR_PORT) or os.environ.get(ENV_VAR_PORT_FALLBACK)
    if port:
        values["port"] = port
    base_dir = os.environ.get(ENV_VAR_BASE_DIR)
    if base_dir:
        values["base_dir"] = base_dir
    return values


def load_config(path: Optional[Union[str, Path]] = None, **overrides: Any) -> AppConfig:
    """
    Build the application configuration.

    Args:
        path: Optional YAML/JSON configuration file
        **overrides: Explicit values; None values are ignored

    Returns:
        AppConfig

    Raises:
        ConfigError: If the file cannot be read or holds invalid values
    """
    values: Dict[str, Any] = {}
    source = "defaults"
    if path is not None:
        path = Path(path)
        values.update(_read_config_file(path))
        source = str(path)
    values.update(_from_environment())
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = AppConfig(**values)
    except ValidationError as e:
        raise ConfigError(source, str(e)) from e

    logger.debug("Configuration loaded from %s: %s", source, config)
    return config
