"""Tests for configuration management."""
from __future__ import annotations

from pathlib import Path

import pytest

from src.shared.config import (
    DEFAULT_CONFIG_TEMPLATE,
    ExtractionConfig,
    LLMConfig,
    SeederConfig,
    SharedConfig,
    load_seeder_config,
)
from src.shared.errors import ConfigurationError


class TestSharedConfig:
    def test_default_values(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        config = SharedConfig()
        assert config.log_level == "info"

    def test_env_override_log_level(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        config = SharedConfig()
        assert config.log_level == "debug"


class TestExtractionConfig:
    def test_default_layout(self):
        config = ExtractionConfig()
        assert config.dataset_filename == "data.json"
        assert config.source_dir == "src"
        assert config.app_dir == "app"
        assert config.entry_filename == "page.tsx"
        assert config.excluded_dir == "api"
        assert config.alias_prefix == "@"
        assert config.component_extension == ".tsx"
        assert config.index_filename == "index.tsx"
        assert config.min_span_length == 20
        assert config.min_object_count == 2

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SEEDER_ENTRY_FILENAME", "page.jsx")
        monkeypatch.setenv("SEEDER_MIN_OBJECT_COUNT", "3")
        config = ExtractionConfig()
        assert config.entry_filename == "page.jsx"
        assert config.min_object_count == 3

    def test_field_name_kwargs(self):
        config = ExtractionConfig(dataset_filename="seed-data.json")
        assert config.dataset_filename == "seed-data.json"


class TestLLMConfig:
    def test_api_key_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert LLMConfig().api_key == "sk-test"

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
        monkeypatch.delenv("SEEDER_SCHEMA_MODEL", raising=False)
        config = LLMConfig()
        assert config.base_url == "https://api.openai.com/v1"
        assert config.schema_model == "gpt-4o-mini"
        assert config.timeout == 60.0


class TestLoadSeederConfig:
    def test_none_returns_defaults(self):
        cfg = load_seeder_config(None)
        assert isinstance(cfg, SeederConfig)
        assert cfg.extraction.dataset_filename == "data.json"

    def test_missing_file_returns_defaults(self, tmp_path: Path):
        cfg = load_seeder_config(tmp_path / "nope.yml")
        assert cfg.extraction.source_dir == "src"

    def test_yaml_overrides_sections(self, tmp_path: Path):
        path = tmp_path / ".seeder.yml"
        path.write_text(
            "extraction:\n  source_dir: web\n  unknown_key: 1\nllm:\n  schema_model: gpt-x\n",
            encoding="utf-8",
        )
        cfg = load_seeder_config(path)
        assert cfg.extraction.source_dir == "web"
        assert cfg.llm.schema_model == "gpt-x"

    def test_template_is_loadable(self, tmp_path: Path):
        path = tmp_path / ".seeder.yml"
        path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
        cfg = load_seeder_config(path)
        assert cfg.extraction.index_filename == "index.tsx"
        assert cfg.llm.timeout == 60

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / ".seeder.yml"
        path.write_text("extraction: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_seeder_config(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / ".seeder.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_seeder_config(path)

    def test_invalid_value_raises(self, tmp_path: Path):
        path = tmp_path / ".seeder.yml"
        path.write_text("extraction:\n  min_object_count: 0\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_seeder_config(path)
