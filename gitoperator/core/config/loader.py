"""
Configuration loader — builds the hook configuration once at startup.

Secrets come from the process environment; non-secret settings may be
overridden by an optional YAML settings file. The result is a single
``HookConfig`` that the entry point passes explicitly to every engine
call. Nothing below the entry point reads the environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# Env var naming an optional YAML settings file
CONFIG_FILE_ENV = "GITOP_CONFIG_FILE"

# Required at process start, even though only the token is used today
REQUIRED_ENV = ("SLACK_CHANNEL", "OPENAI_API_KEY", "GITHUB_TOKEN")


class ConfigError(Exception):
    """Raised when hook configuration is invalid or missing."""


class HookSettings(BaseModel):
    """Non-secret settings. Every field has a working default."""

    model_config = ConfigDict(extra="forbid")

    branch: str = "gitoperator"
    bot_name: str = "Wing Cloud Bot"
    bot_email: str = "bot@wing.cloud"
    commit_message: str = "update"
    merge_message: str = "Merge default branch into gitoperator"
    pr_body: str = "This pull request was opened by the Wing Cloud git operator."
    git_base_url: str = "https://github.com"
    default_namespace: str = "default"

    git_timeout: int = Field(default=300, gt=0)
    gh_timeout: int = Field(default=30, gt=0)
    kubectl_timeout: int = Field(default=15, gt=0)


class HookConfig(BaseModel):
    """Everything the hook needs, resolved once per process."""

    github_token: str
    slack_channel: str
    openai_api_key: str
    binding_context_path: Path | None = None
    settings: HookSettings = Field(default_factory=HookSettings)

    def require_binding_context(self) -> Path:
        """Path of the binding-context file, or ConfigError if unset."""
        if self.binding_context_path is None:
            raise ConfigError("BINDING_CONTEXT_PATH is not set")
        return self.binding_context_path


def load_settings(path: Path) -> HookSettings:
    """Load and validate a YAML settings file.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    logger.debug("Loading hook settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return HookSettings()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return HookSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid hook settings in {path}: {e}") from e


def load_config(
    environ: Mapping[str, str] | None = None,
    config_file: Path | None = None,
) -> HookConfig:
    """Build the hook configuration.

    Args:
        environ: Environment mapping (default: ``os.environ``).
        config_file: Explicit YAML settings file. Falls back to the
            ``GITOP_CONFIG_FILE`` env var, then to built-in defaults.

    Returns:
        Validated HookConfig.

    Raises:
        ConfigError: If a required variable is missing or settings are invalid.
    """
    env = os.environ if environ is None else environ

    for key in REQUIRED_ENV:
        if not env.get(key):
            raise ConfigError(f"{key} is not set")

    if config_file is None and env.get(CONFIG_FILE_ENV):
        config_file = Path(env[CONFIG_FILE_ENV])

    settings = load_settings(config_file) if config_file else HookSettings()

    context_path = env.get("BINDING_CONTEXT_PATH")

    return HookConfig(
        github_token=env["GITHUB_TOKEN"],
        slack_channel=env["SLACK_CHANNEL"],
        openai_api_key=env["OPENAI_API_KEY"],
        binding_context_path=Path(context_path) if context_path else None,
        settings=settings,
    )
