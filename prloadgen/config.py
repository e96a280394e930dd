"""Configuration loading from YAML and environment.

Command line values (number, wait, seed) override YAML, which overrides
environment variables. The GitHub token for the API backend is taken from
config, the GITHUB_TOKEN env var, or a file named by GITHUB_TOKEN_FILE
(Docker secrets). Never put real tokens in config files committed to the
repo.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_NUMBER = 600
DEFAULT_WAIT = 3
DEFAULT_CONFIG_PATH = Path("prloadgen.yaml")


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


# Injected by load_config so secret resolution can read env/file
_current_env: dict[str, str] = {}


class RunConfig(BaseSettings):
    """Run parameters; fixed once the run starts."""

    model_config = SettingsConfigDict(env_prefix="PRLOADGEN_", extra="ignore", frozen=True)

    number: int = Field(default=DEFAULT_NUMBER, ge=0, description="Number of PRs to create")
    wait_seconds: int = Field(default=DEFAULT_WAIT, ge=0, description="Seconds to wait between PRs")
    base_branch: str = Field(default="main", min_length=1, description="Branch every PR targets and merges into")
    remote: str = Field(default="origin", min_length=1, description="Remote to fetch from and push to")
    branch_prefix: str = Field(default="pr-test", description="Namespace for generated branches")
    seed: int | None = Field(default=None, description="Seed for reproducible random picks")


class ArtifactConfig(BaseSettings):
    """Where generated changes are written, relative to the repository root."""

    model_config = SettingsConfigDict(env_prefix="ARTIFACTS_", extra="ignore")

    docs_dir: str = Field(default="docs", description="Directory for markdown notes")
    code_dir: str = Field(default="scripts/examples", description="Directory for shell stubs")
    config_file: str = Field(default=".pr-test-config.ini", description="Config file receiving one entry per PR")


class HostConfig(BaseSettings):
    """PR hosting backend: the gh CLI or the GitHub REST API."""

    model_config = SettingsConfigDict(env_prefix="HOST_", extra="ignore")

    backend: Literal["gh", "api"] = Field(default="gh", description="gh (CLI) or api (REST)")
    command: str = Field(default="gh", description="gh executable name or path")
    repository: str | None = Field(default=None, description="owner/repo; required for the api backend")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    token: str | None = Field(default=None, description="API token; prefer env or secret file")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    # Prefixed so shell variables such as HOST are not read as sections
    model_config = SettingsConfigDict(env_prefix="PRLOADGEN_APP_", extra="ignore")

    run: RunConfig = Field(default_factory=RunConfig)
    artifacts: ArtifactConfig = Field(default_factory=ArtifactConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub API token from config, env or Docker secret file."""
        t = self.host.token
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


def load_config(
    config_path: Path | None = None,
    run_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load config from YAML file and environment.

    run_overrides (e.g. from the command line) replace values in the run
    section; None values are ignored. Raises pydantic.ValidationError on
    invalid values.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or DEFAULT_CONFIG_PATH
    raw: dict[str, Any] = {}
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
        raw = _substitute_env(raw)

    run_raw = dict(raw.get("run") or {})
    for key, value in (run_overrides or {}).items():
        if value is not None:
            run_raw[key] = value

    return AppConfig(
        run=RunConfig(**run_raw),
        artifacts=ArtifactConfig(**(raw.get("artifacts") or {})),
        host=HostConfig(**(raw.get("host") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
