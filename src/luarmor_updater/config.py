"""Configuration management for the Luarmor updater."""

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class ActionInputs(BaseSettings):
    """The four workflow inputs.

    GitHub Actions exposes an input ``foo-bar`` as ``INPUT_FOO-BAR``.
    """

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    api_key: str = Field(default="", validation_alias="INPUT_API-KEY")
    script_id: str = Field(default="", validation_alias="INPUT_SCRIPT-ID")
    project_id: str = Field(default="", validation_alias="INPUT_PROJECT-ID")
    file: str = Field(default="", validation_alias="INPUT_FILE")

    @field_validator("*", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    def with_overrides(self, **values: str | None) -> "ActionInputs":
        """Return a copy where every non-None value replaces the input."""
        update = {k: v.strip() for k, v in values.items() if v is not None}
        return self.model_copy(update=update)

    def require(self, *names: str) -> "ActionInputs":
        """Fail on the first required input that is empty.

        Checks ``api_key``, ``script_id`` and ``file`` unless *names* are given.
        """
        for name in names or ("api_key", "script_id", "file"):
            if not getattr(self, name):
                raise ConfigError(
                    f"Input required and not supplied: {name.replace('_', '-')}"
                )
        return self


class LuarmorConfig(BaseSettings):
    """Luarmor API and polling configuration."""

    model_config = SettingsConfigDict(env_prefix="LUARMOR_")

    base_url: str = Field(
        default="https://api.luarmor.net/v3",
        description="API root including the version segment",
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    poll_interval: float = Field(
        default=5.0, ge=0, description="Seconds between version polls after a 504"
    )
    max_polls: int | None = Field(
        default=None, ge=1, description="Give up after this many polls (default: never)"
    )
    rate_limit_retries: int = Field(
        default=5, ge=0, description="How often a 429 answer is re-sent"
    )


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    luarmor: LuarmorConfig = Field(default_factory=LuarmorConfig)
    inputs: ActionInputs = Field(default_factory=ActionInputs)

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from a YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # Inputs only ever come from the workflow or the command line
        data.pop("inputs", None)
        return cls(**data)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load application configuration from environment and optional YAML file."""
    if config_path:
        return AppConfig.from_yaml(config_path)
    return AppConfig()
