"""Launcher configuration settings."""
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SECRET_FIELDS = {"registries_credentials", "registry_secrets", "proxy_password"}


class Settings(BaseSettings):
    """Launcher settings.

    Action inputs arrive as environment variables prefixed with INPUT_,
    runner locations under their usual RUNNER_/GITHUB_ names. Empty inputs
    count as unset.
    """
    # Action inputs
    registries_credentials: Optional[str] = Field(
        default=None,
        description="Base64 encoded JSON list of registry credentials",
    )
    registry_secrets: Optional[str] = Field(
        default=None,
        description="JSON list of registry credentials",
    )
    proxy_password: Optional[str] = Field(
        default=None,
        description="Password clients use to authenticate to the proxy",
    )

    # Runner environment
    temp_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()),
        validation_alias=AliasChoices("RUNNER_TEMP", "temp_dir"),
    )
    tool_cache_dir: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("RUNNER_TOOL_CACHE", "tool_cache_dir"),
    )
    output_file: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_OUTPUT", "output_file"),
    )
    state_file: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_STATE", "state_file"),
    )
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("RUNNER_DEBUG", "runner_debug"),
    )

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator(
        "registries_credentials", "registry_secrets", "proxy_password",
        "tool_cache_dir", "output_file", "state_file",
        mode="before",
    )
    @classmethod
    def blank_as_unset(cls, value):
        """Treat empty and whitespace-only values as absent."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def log_file_path(self) -> Path:
        """Absolute path of the proxy log file."""
        return (self.temp_dir / "proxy.log").resolve()

    @property
    def resolved_tool_cache_dir(self) -> Path:
        return self.tool_cache_dir or self.temp_dir / "tool-cache"

    def masked_dump(self) -> dict:
        """Settings as a dictionary with secret inputs masked."""
        data = self.model_dump()
        for name in SECRET_FIELDS:
            if data.get(name):
                data[name] = "***"
        return data
