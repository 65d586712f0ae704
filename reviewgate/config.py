"""Configuration loading from YAML and environment.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from reviewgate.models import PathScopeRule


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so secret lookups can read env/file
_current_env: dict[str, str] = {}


class ScopeConfig(BaseSettings):
    """Monitored directory tree and exempted files."""

    model_config = SettingsConfigDict(env_prefix="SCOPE_", extra="ignore")

    include_globs: list[str] = Field(
        default_factory=lambda: ["apps/backend-e2e/playwright/**"],
        description="Globs of paths that trigger a review",
    )
    exclude_globs: list[str] = Field(
        default_factory=lambda: ["**/*.md"],
        description="Globs removed from the include set",
    )

    def to_rule(self) -> PathScopeRule:
        return PathScopeRule(include_globs=tuple(self.include_globs), exclude_globs=tuple(self.exclude_globs))


class TriggerConfig(BaseSettings):
    """Manual re-run trigger settings."""

    model_config = SettingsConfigDict(env_prefix="TRIGGER_", extra="ignore")

    # Checked as "- [x] <label>" in the PR description on edit
    review_request_label: str = Field(default="Request AI review", min_length=1)


class GitHubConfig(BaseSettings):
    """GitHub API settings (used by the compare change source)."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")


class AgentConfig(BaseSettings):
    """Review agent CLI settings (headless mode)."""

    model_config = SettingsConfigDict(env_prefix="AGENT_", extra="ignore")

    command: str = Field(default="claude", description="CLI command name")
    args: list[str] = Field(default_factory=lambda: ["-p"], description="Args placed before the turn flag")
    max_turns_flag: str = Field(default="--max-turns", description="Flag that caps agent turns")
    prompt_file: str | None = Field(default=None, description="Markdown style guide prepended to the prompt")
    timeout: int = Field(default=1800, ge=1, description="Timeout in seconds")
    working_directory: str = Field(default=".", description="CWD for agent")
    model: str | None = Field(default=None, description="--model: model to use")
    token_env: str = Field(default="ANTHROPIC_API_KEY", description="Env var the CLI reads its key from")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    github_annotations: bool = Field(default=False, description="Emit ::warning::/::error:: workflow commands")


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    scope: ScopeConfig = Field(default_factory=ScopeConfig)
    trigger: TriggerConfig = Field(default_factory=TriggerConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _yaml_section(raw: dict[str, Any], name: str, prefix: str) -> dict[str, Any]:
    """YAML values for one section, minus keys set in env as PREFIX_KEY.

    Init kwargs beat env in pydantic-settings, so keys overridden by env
    are dropped here and the section reads them from env instead.
    """
    section = raw.get(name) or {}
    env_keys = {k.upper() for k in _current_env}
    return {k: v for k, v in section.items() if f"{prefix}{k}".upper() not in env_keys}


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Env vars (SCOPE_*, TRIGGER_*, GITHUB_*, AGENT_*, LOGGING_*) override
    the YAML value of the same key. Secrets: GITHUB_TOKEN or
    GITHUB_TOKEN_FILE.
    """
    global _current_env
    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw)

    return AppConfig(
        scope=ScopeConfig(**_yaml_section(raw, "scope", "SCOPE_")),
        trigger=TriggerConfig(**_yaml_section(raw, "trigger", "TRIGGER_")),
        github=GitHubConfig(**_yaml_section(raw, "github", "GITHUB_")),
        agent=AgentConfig(**_yaml_section(raw, "agent", "AGENT_")),
        logging=LoggingConfig(**_yaml_section(raw, "logging", "LOGGING_")),
    )
