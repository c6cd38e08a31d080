"""Configuration management for promptweave."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

PROJECT_DIR = ".promptweave"
CONFIG_FILE = "config.json"


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "openai"
    model: str = "gpt-4o"
    api_key_env: str = ""
    max_tokens: int = 4096
    temperature: float = 0.0
    base_url: str | None = None

    @property
    def api_key(self) -> str | None:
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        env_map = {
            "openai": "OPENAI_API_KEY",
            "anthropic": "ANTHROPIC_API_KEY",
        }
        env_var = env_map.get(self.provider, "")
        return os.environ.get(env_var)


class TokenizerConfig(BaseModel):
    """Tokenizer backend selection.

    - "tiktoken": exact BPE counts (downloads encodings on first use)
    - "approximate": offline ~4 characters per token heuristic
    """

    backend: str = "tiktoken"


class PipelineConfig(BaseModel):
    """Context aggregation defaults."""

    default_limit: int = 10
    deduplicate: bool = True
    rerank: bool = True
    format: str = "numbered"  # numbered, markdown, json
    parallel: bool = False


class ComposerConfig(BaseModel):
    """Prompt composer defaults."""

    model: str | None = None
    reserved_output_tokens: int = 0
    default_priority: int = 50


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    llm: LLMConfig = Field(default_factory=LLMConfig)
    tokenizer: TokenizerConfig = Field(default_factory=TokenizerConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    composer: ComposerConfig = Field(default_factory=ComposerConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .promptweave directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / PROJECT_DIR).is_dir():
            return current
        current = current.parent
    if (current / PROJECT_DIR).is_dir():
        return current
    return None


def get_project_dir(root: Path) -> Path:
    """Get the .promptweave directory for a project root."""
    return root / PROJECT_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .promptweave/config.json."""
    config_path = get_project_dir(root) / CONFIG_FILE
    if config_path.exists():
        data = json.loads(config_path.read_text())
        return ProjectConfig(**data)
    return ProjectConfig(name=root.name, root_path=str(root))


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .promptweave/config.json."""
    project_dir = get_project_dir(root)
    project_dir.mkdir(parents=True, exist_ok=True)
    config_path = project_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'composer.model')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    return ProjectConfig(**data)
