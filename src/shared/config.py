"""Configuration management for the tool-calling workflows.

Supports YAML configuration files and environment variable overrides.
Application settings are loaded once and cached.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL_NAME = "openai/gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7


class MissingCredentialError(ValueError):
    """No API key was configured for the model gateway."""
    pass


class OpenRouterSettings(BaseSettings):
    """OpenRouter connection settings."""
    provider: str = Field(default="openrouter", description="Gateway provider: openrouter, mock")
    api_key: Optional[str] = Field(default=None, description="OpenRouter API key")
    base_url: str = Field(default=DEFAULT_BASE_URL)
    model: str = Field(default=DEFAULT_MODEL_NAME)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0, le=2)
    http_referer: str = Field(default="", description="Sent as the HTTP-Referer header")
    app_title: str = Field(default="Hands-on LangChain", description="Sent as the X-Title header")
    context_window: int = Field(default=16385, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="OPENROUTER_",
        env_file=".env",
        extra="ignore"
    )


class WorkflowSettings(BaseSettings):
    """Tool-calling workflow settings."""
    max_iterations: int = Field(default=5, gt=0)
    parallel: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_",
        env_file=".env",
        extra="ignore"
    )


class Settings(BaseSettings):
    """Main application settings."""
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    openrouter: OpenRouterSettings = Field(default_factory=OpenRouterSettings)
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)

    model_config = SettingsConfigDict(
        env_prefix="HANDSON_",
        env_file=".env",
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        return cls(**load_yaml_config(path))


class ModelConfig(BaseModel):
    """Per-workflow model overrides. Unset fields fall back to the environment."""
    model_config = ConfigDict(protected_namespaces=())

    model_name: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    api_key: Optional[str] = None
    base_url: Optional[str] = None


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file."""
    path = Path(path)
    if not path.exists():
        return {}

    with open(path) as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    config_path = os.environ.get("HANDSON_CONFIG_PATH", "config/settings.yaml")
    return Settings.from_yaml(config_path)


def get_api_key(
    config: Optional[ModelConfig] = None,
    settings: Optional[OpenRouterSettings] = None
) -> str:
    """
    Resolve the OpenRouter API key from config or environment.

    Raises:
        MissingCredentialError: If no key is available
    """
    api_key = config.api_key if config else None
    if not api_key:
        api_key = (settings or OpenRouterSettings()).api_key

    if not api_key:
        raise MissingCredentialError(
            "OpenRouter API key is required. Set OPENROUTER_API_KEY environment "
            "variable or pass api_key in config."
        )

    return api_key


def resolve_openrouter_settings(
    config: Optional[ModelConfig] = None,
    settings: Optional[OpenRouterSettings] = None
) -> OpenRouterSettings:
    """
    Merge explicit model overrides on top of environment settings.

    Raises:
        MissingCredentialError: If no API key is available
    """
    base = settings or OpenRouterSettings()
    api_key = get_api_key(config, base)

    overrides: dict[str, Any] = {"api_key": api_key}
    if config is not None:
        if config.model_name is not None:
            overrides["model"] = config.model_name
        if config.temperature is not None:
            overrides["temperature"] = config.temperature
        if config.base_url is not None:
            overrides["base_url"] = config.base_url

    return base.model_copy(update=overrides)
