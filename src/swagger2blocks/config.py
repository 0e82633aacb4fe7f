"""Generator configuration: which sources to load and how."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from swagger2blocks.errors import ConfigError
from swagger2blocks.fetch import DEFAULT_TIMEOUT, is_url

TIMEOUT_ENV = "SWAGGER2BLOCKS_TIMEOUT"


def default_timeout() -> float:
    value = os.getenv(TIMEOUT_ENV)
    if not value:
        return DEFAULT_TIMEOUT
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{TIMEOUT_ENV} must be a number, got {value!r}") from e


class GeneratorConfig(BaseModel):
    sources: dict[str, str] = {}  # {key: url or file path}
    timeout: float = Field(default_factory=default_timeout, gt=0)
    max_workers: int = Field(default=4, ge=1)


def load_config(path: Path) -> GeneratorConfig:
    """Load a YAML config file.

    Relative file sources are resolved against the config file's directory.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"{path} is not valid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    try:
        config = GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e

    for key, location in config.sources.items():
        if not is_url(location) and not Path(location).is_absolute():
            config.sources[key] = str(path.parent / location)
    return config
