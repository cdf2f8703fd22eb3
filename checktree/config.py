"""Configuration loading for the checktree harness.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
- Derive the read-only RunSettings consumed by the core runner
"""

import re
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from checktree.core.errors import InvalidVersionError
from checktree.core.models import RunSettings
from checktree.core.version import Version


class Settings(BaseSettings):
    """Harness configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv. The whole object is passed to
    every check body and hook as its ``config``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Target server
    api_version: str = Field(
        default="1.5.0",
        description="Protocol version of the server under test, used for version gates",
    )

    # Selection
    match: str | None = Field(
        default=None,
        description="Case-insensitive pattern; only tests whose name matches it run",
    )
    bail: bool = Field(
        default=False,
        description="Stop starting new checks after the first failure",
    )
    start_path: str = Field(
        default="",
        description="Dot-path of the subtree to run or list (empty for everything)",
    )

    # Check discovery
    tests_dir: str = Field(
        default="./checks",
        description="Directory containing check modules",
    )
    pattern: str = Field(
        default="**/*_checks.py",
        description="Glob pattern, relative to tests_dir, selecting check modules",
    )

    # Output
    run_mode: Literal["run", "list"] = Field(
        default="run",
        description="Run the checks or only list the tree as JSON",
    )
    reporter: Literal["stdout", "json"] = Field(
        default="stdout",
        description="Reporter used to render the event stream",
    )
    verbose: bool = Field(
        default=False,
        description="Print console entries of every test, not only failed ones",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("api_version")
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        """Ensure the API version parses."""
        try:
            return str(Version.parse(v))
        except InvalidVersionError as e:
            raise ValueError(str(e)) from e

    @field_validator("match")
    @classmethod
    def validate_match(cls, v: str | None) -> str | None:
        """Ensure the match pattern is a valid regular expression."""
        if not v:
            return None
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"match is not a valid regular expression: {e}") from e
        return v

    @field_validator("start_path")
    @classmethod
    def validate_start_path(cls, v: str) -> str:
        """Ensure the path is empty or a dot-separated list of indexes."""
        v = v.strip()
        if v and not re.fullmatch(r"\d+(\.\d+)*", v):
            raise ValueError(f"start_path must be a dot-separated list of indexes, got {v!r}")
        return v

    def to_run_settings(self) -> RunSettings:
        """Build the settings object the core runner reads."""
        return RunSettings(
            api_version=Version.parse(self.api_version),
            match=self.match,
            bail=self.bail,
        )


def load_settings(env_file: str | None = None) -> Settings:
    """Load harness settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
