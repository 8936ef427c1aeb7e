"""Generation settings, optionally loaded from a YAML file.

CLI options (and their SDKGEN_* environment variables) override whatever the
file sets.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from sdkgen.errors import ConfigError


class SdkgenConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    language: str = "typescript"
    format: Literal["auto", "openapi", "apidoc"] = "auto"
    api_version: str | None = None  # version label for OpenAPI routes
    allow_redefinition: bool = False


def load_config(file_path: Path | None = None) -> SdkgenConfig:
    """Load settings from a YAML file; no file means defaults."""
    if file_path is None:
        return SdkgenConfig()

    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {file_path}: {e}") from e

    if data is None:
        return SdkgenConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {file_path} must be a mapping of settings")

    try:
        return SdkgenConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {file_path}:\n{e}") from e


def merge_options(config: SdkgenConfig, **overrides) -> SdkgenConfig:
    """Apply CLI values that were actually given (None means not given)."""
    updates = {key: value for key, value in overrides.items() if value is not None}
    return config.model_copy(update=updates)
