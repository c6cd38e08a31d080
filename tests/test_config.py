"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from promptweave.config import (
    LLMConfig,
    ProjectConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)


class TestConfig:
    def test_default_config(self):
        config = ProjectConfig()
        assert config.llm.provider == "openai"
        assert config.tokenizer.backend == "tiktoken"
        assert config.pipeline.default_limit == 10
        assert config.pipeline.deduplicate is True
        assert config.composer.model is None
        assert config.composer.reserved_output_tokens == 0

    def test_save_and_load(self, tmp_path: Path):
        config = ProjectConfig(name="test-project")
        config.composer.model = "gpt-4o"
        config.tokenizer.backend = "approximate"

        save_config(tmp_path, config)
        loaded = load_config(tmp_path)

        assert loaded.name == "test-project"
        assert loaded.composer.model == "gpt-4o"
        assert loaded.tokenizer.backend == "approximate"

    def test_load_without_file_uses_defaults(self, tmp_path: Path):
        config = load_config(tmp_path)
        assert config.name == tmp_path.name
        assert config.pipeline.format == "numbered"

    def test_find_project_root(self, tmp_path: Path):
        # No .promptweave dir - should return None
        assert find_project_root(tmp_path) is None

        (tmp_path / ".promptweave").mkdir()
        assert find_project_root(tmp_path) == tmp_path

        # Should find from subdirectory
        sub = tmp_path / "src" / "module"
        sub.mkdir(parents=True)
        assert find_project_root(sub) == tmp_path

    def test_set_config_value(self):
        config = ProjectConfig()
        updated = set_config_value(config, "llm.provider", "anthropic")
        assert updated.llm.provider == "anthropic"
        assert config.llm.provider == "openai"

    def test_set_config_nested(self):
        config = ProjectConfig()
        updated = set_config_value(config, "composer.reserved_output_tokens", 1000)
        assert updated.composer.reserved_output_tokens == 1000

    def test_set_config_invalid_key(self):
        config = ProjectConfig()
        with pytest.raises(KeyError):
            set_config_value(config, "nonexistent.key", "value")
        with pytest.raises(KeyError):
            set_config_value(config, "pipeline.nonexistent", "value")


class TestLLMConfig:
    def test_api_key_from_explicit_env(self, monkeypatch):
        monkeypatch.setenv("MY_KEY", "secret")
        assert LLMConfig(api_key_env="MY_KEY").api_key == "secret"

    def test_api_key_from_provider_default(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "anthropic-secret")
        assert LLMConfig(provider="anthropic").api_key == "anthropic-secret"

    def test_api_key_missing(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert LLMConfig().api_key is None
