"""Configuration module for mdbx-sourcery.

Load and validate the build-stage TOML configuration with Pydantic models and
environment overrides. As a Layer 1 module, may import: api, domain, utils.

Example ``sourcery.toml``::

    [version]
    major = 0
    minor = 14
    release = 1
    revision = 95

    [git]
    timestamp = "2025-09-18T09:21:46+03:00"
    commit_hash = "2c4205d50730b9d43090da71b465e9bb126b631c"
    tree_hash = "924581bdc8a1e217139c1d286c1ffb0ef0f9d14d"
    describe = "v0.14.1-95-g924581bd"

    [build]
    unstable = false

Any key may be overridden from the environment: ``MDBX_BUILD__UNSTABLE=1``,
``MDBX_VERSION__REVISION=96``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

try:
    import tomllib  # Python >= 3.11
except ImportError:
    import tomli as tomllib  # Python < 3.11

from pydantic import BaseModel, Field, field_validator

from mdbx_sourcery.api import MDBX_VERSION_MAJOR, MDBX_VERSION_MINOR

__all__ = [
    "Settings",
    "load_settings",
    "ENV_PREFIX",
    "DEFAULT_OUTPUT",
]

logger = logging.getLogger(__name__)

ENV_PREFIX = "MDBX_"
DEFAULT_OUTPUT = Path("src/mdbx_sourcery/_version.py")


# ============================================================================
# Configuration Models
# ============================================================================


class VersionConfig(BaseModel):
    """Version numbers resolved by the build.

    Unset numbers are filled from ``git describe`` when the build reads git.
    """

    model_config = {"extra": "forbid"}

    major: Optional[int] = Field(default=None, ge=0)
    minor: Optional[int] = Field(default=None, ge=0)
    release: Optional[int] = Field(default=None, ge=0)
    revision: Optional[int] = Field(default=None, ge=0)
    pre_release_label: Optional[str] = Field(default=None)


class GitConfig(BaseModel):
    """Build identity strings; unset values are read from git."""

    model_config = {"extra": "forbid"}

    timestamp: Optional[str] = Field(default=None)
    commit_hash: Optional[str] = Field(default=None)
    tree_hash: Optional[str] = Field(default=None)
    describe: Optional[str] = Field(default=None)


class ApiConfig(BaseModel):
    """Declared API version the build is checked against."""

    model_config = {"extra": "forbid"}

    major: int = Field(default=MDBX_VERSION_MAJOR, ge=0)
    minor: int = Field(default=MDBX_VERSION_MINOR, ge=0)


class BuildConfig(BaseModel):
    """Build-stage switches and output."""

    model_config = {"extra": "forbid"}

    unstable: bool = Field(default=False)
    source_digest: Optional[str] = Field(default=None)
    output: Path = Field(default=DEFAULT_OUTPUT)
    format: Literal["py", "json"] = Field(default="py")

    @field_validator("source_digest")
    @classmethod
    def validate_source_digest(cls, v: Optional[str]) -> Optional[str]:
        """Require a SHA256 hex digest when given."""
        if v is None:
            return v
        v = v.lower()
        if len(v) != 64 or any(c not in "0123456789abcdef" for c in v):
            raise ValueError(f"source_digest must be a 64-character SHA256 hex digest, got '{v}'")
        return v

    @field_validator("output", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        """Expand environment variables and user home in paths."""
        if isinstance(v, str):
            return Path(os.path.expandvars(os.path.expanduser(v)))
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"extra": "forbid"}

    level: str = Field(default="INFO")
    structured: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got '{v}'")
        return v_upper


class Settings(BaseModel):
    """Complete build-stage settings."""

    model_config = {"extra": "forbid"}  # Reject unknown keys

    version: VersionConfig = Field(default_factory=VersionConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ============================================================================
# Loading Functions
# ============================================================================


def load_settings(
    toml_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """Load and validate settings from TOML and environment.

    Args:
        toml_path: Path to TOML configuration file (optional)
        env_prefix: Environment variable prefix (default: MDBX_)

    Returns:
        Validated Settings object

    Raises:
        FileNotFoundError: If toml_path specified but doesn't exist
        TOMLDecodeError: If the TOML file is malformed
        ValidationError: If configuration is invalid
    """
    config_dict: dict[str, Any] = {}

    if toml_path is not None:
        toml_path = Path(toml_path)
        if not toml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {toml_path}")

        with open(toml_path, "rb") as f:
            config_dict = tomllib.load(f)
        logger.debug("Loaded settings from %s", toml_path)

    config_dict = _apply_env_overrides(config_dict, env_prefix)

    return Settings(**config_dict)


def _apply_env_overrides(config: dict[str, Any], prefix: str) -> dict[str, Any]:
    """Apply environment variable overrides to config dict.

    Supports nested keys with double underscore notation:
    MDBX_BUILD__UNSTABLE=1
    MDBX_API__MINOR=15

    Values stay strings; the models coerce them to their field types.

    Args:
        config: Configuration dictionary
        prefix: Environment variable prefix

    Returns:
        Configuration with environment overrides applied
    """
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :].lower()
        parts = config_key.split("__")
        if len(parts) < 2:
            # Flat MDBX_* variables belong to the library, not to this layer
            continue

        current = config
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value
        logger.debug("Environment override %s", key)

    return config
