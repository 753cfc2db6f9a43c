"""Shared configuration management using pydantic-settings.

Environment variables provide the defaults; an optional ``.seeder.yml`` at
the project root overrides them per project (see :func:`load_seeder_config`).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from src.shared import constants
from src.shared.errors import ConfigurationError


class SharedConfig(BaseSettings):
    """Base configuration shared across all components."""
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class ExtractionConfig(SharedConfig):
    """Layout contract and heuristics for the extraction pass."""
    dataset_filename: str = Field(
        default=constants.DATASET_FILENAME,
        validation_alias="SEEDER_DATASET_FILENAME",
    )
    source_dir: str = Field(
        default=constants.SOURCE_DIR, validation_alias="SEEDER_SOURCE_DIR"
    )
    app_dir: str = Field(default=constants.APP_DIR, validation_alias="SEEDER_APP_DIR")
    entry_filename: str = Field(
        default=constants.ENTRY_FILENAME, validation_alias="SEEDER_ENTRY_FILENAME"
    )
    excluded_dir: str = Field(
        default=constants.EXCLUDED_DIR, validation_alias="SEEDER_EXCLUDED_DIR"
    )
    alias_prefix: str = Field(
        default=constants.ALIAS_PREFIX, validation_alias="SEEDER_ALIAS_PREFIX"
    )
    component_extension: str = Field(
        default=constants.COMPONENT_EXTENSION,
        validation_alias="SEEDER_COMPONENT_EXTENSION",
    )
    index_filename: str = Field(
        default=constants.INDEX_FILENAME, validation_alias="SEEDER_INDEX_FILENAME"
    )
    min_span_length: int = Field(
        default=constants.MIN_SPAN_LENGTH,
        ge=0,
        validation_alias="SEEDER_MIN_SPAN_LENGTH",
    )
    min_object_count: int = Field(
        default=constants.MIN_OBJECT_COUNT,
        ge=1,
        validation_alias="SEEDER_MIN_OBJECT_COUNT",
    )


class LLMConfig(SharedConfig):
    """Settings for the OpenAI-compatible completion endpoint."""
    api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    base_url: str = Field(
        default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL"
    )
    schema_model: str = Field(default="gpt-4o-mini", validation_alias="SEEDER_SCHEMA_MODEL")
    validation_model: str = Field(
        default="gpt-4o-mini", validation_alias="SEEDER_VALIDATION_MODEL"
    )
    timeout: float = Field(default=60.0, gt=0, validation_alias="SEEDER_LLM_TIMEOUT")


@dataclass
class SeederConfig:
    """Top-level configuration composing all sub-configs."""

    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)


def load_seeder_config(path: Path | str | None = None) -> SeederConfig:
    """Load seeder configuration from a YAML file.

    Missing sections fall back to environment/defaults.  Unknown keys are
    silently ignored so that forward-compatible config files work.

    Args:
        path: Path to config YAML.  If ``None`` or the file does not
              exist, returns full defaults.

    Returns:
        Populated configuration.

    Raises:
        ConfigurationError: If the file is not valid YAML or a value fails
            validation.
    """
    if path is None:
        return SeederConfig()

    path = Path(path)
    if not path.exists():
        return SeederConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    def _pick(data: Any, cls: type[BaseSettings]) -> dict[str, Any]:
        """Filter *data* to only keys accepted by *cls*."""
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if k in cls.model_fields}

    try:
        return SeederConfig(
            extraction=ExtractionConfig(**_pick(raw.get("extraction"), ExtractionConfig)),
            llm=LLMConfig(**_pick(raw.get("llm"), LLMConfig)),
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {path}: {exc}") from exc


DEFAULT_CONFIG_TEMPLATE = """\
# UI data seeder configuration
extraction:
  dataset_filename: data.json
  source_dir: src
  app_dir: app
  entry_filename: page.tsx
  excluded_dir: api
  alias_prefix: "@"
  component_extension: .tsx
  index_filename: index.tsx
  min_span_length: 20
  min_object_count: 2

llm:
  base_url: https://api.openai.com/v1
  schema_model: gpt-4o-mini
  validation_model: gpt-4o-mini
  timeout: 60
"""
