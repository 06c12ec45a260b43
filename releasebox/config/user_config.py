"""
User configuration management for releasebox.

Pipeline configuration is read from the first YAML file found in:
1. Command-line provided config file
2. ``releasebox.yaml`` / ``.releasebox.yml`` in the current directory
3. The user's XDG config directory

Runtime settings (tokens, log level, work directory) come from environment
variables prefixed with ``RELEASEBOX_``; the usual GitHub Actions variables
are honoured as well.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from releasebox.config.matrix_resolver import create_target_matrix_resolver
from releasebox.config.models import PipelineConfig
from releasebox.core.errors import ConfigError


logger = logging.getLogger(__name__)

ENV_PREFIX = "RELEASEBOX_"
CONFIG_FILE_NAMES = ("releasebox.yaml", ".releasebox.yml")


class ReleaseboxSettings(BaseSettings):
    """Runtime settings with automatic environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(default="WARNING")
    github_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("RELEASEBOX_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    github_repository: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "RELEASEBOX_GITHUB_REPOSITORY", "GITHUB_REPOSITORY"
        ),
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("RELEASEBOX_GITHUB_API_URL", "GITHUB_API_URL"),
    )
    work_dir: Path | None = Field(default=None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v

    def get_log_level_int(self) -> int:
        return int(getattr(logging, self.log_level, logging.WARNING))


def _xdg_config_dir() -> Path:
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "releasebox"
    return Path.home() / ".config" / "releasebox"


def generate_config_paths(cli_config_path: str | Path | None = None) -> list[Path]:
    """Generate a list of config paths to search in order of precedence."""
    config_paths: list[Path] = []

    if cli_config_path:
        config_paths.append(Path(cli_config_path).expanduser().resolve())

    config_paths.extend(Path.cwd() / name for name in CONFIG_FILE_NAMES)

    xdg_dir = _xdg_config_dir()
    config_paths.extend([xdg_dir / "config.yaml", xdg_dir / "config.yml"])
    return config_paths


def find_config_file(cli_config_path: str | Path | None = None) -> Path | None:
    """Return the first existing config file, or None.

    Raises:
        ConfigError: If an explicitly requested config file does not exist
    """
    if cli_config_path:
        explicit = Path(cli_config_path).expanduser().resolve()
        if not explicit.is_file():
            raise ConfigError(
                f"Config file not found: {explicit}", {"path": str(explicit)}
            )
        return explicit

    for path in generate_config_paths():
        if path.is_file():
            logger.debug("Found config file: %s", path)
            return path
    return None


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(
            f"Failed to read config file {path}: {e}", {"path": str(path)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping", {"path": str(path)}
        )
    return data


def load_pipeline_config(cli_config_path: str | Path | None = None) -> PipelineConfig:
    """Load and validate the pipeline configuration.

    A ``matrix_file`` key may point at a GitHub Actions workflow whose
    ``strategy.matrix.target`` entries supply the targets; explicit
    ``targets`` in the config file take precedence.

    Raises:
        ConfigError: If no config file is found or it fails validation
    """
    path = find_config_file(cli_config_path)
    if path is None:
        searched = [str(p) for p in generate_config_paths()]
        raise ConfigError(
            "No releasebox configuration file found", {"searched": searched}
        )

    logger.debug("Loading pipeline configuration from %s", path)
    data = _load_yaml(path)

    matrix_file = data.pop("matrix_file", None)
    if matrix_file and not data.get("targets"):
        matrix_path = Path(matrix_file)
        if not matrix_path.is_absolute():
            matrix_path = path.parent / matrix_path
        resolver = create_target_matrix_resolver()
        data["targets"] = [
            t.to_dict_full()
            for t in resolver.resolve_from_workflow(
                matrix_path, default_platform=data.get("platform")
            )
        ]

    try:
        config = PipelineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {path}: {e}", {"path": str(path)}
        ) from e

    logger.info(
        "Loaded configuration for %s with %d targets from %s",
        config.project_name,
        len(config.targets),
        path,
    )
    return config


def create_settings() -> ReleaseboxSettings:
    """Create runtime settings from the environment."""
    return ReleaseboxSettings()


__all__ = [
    "CONFIG_FILE_NAMES",
    "ENV_PREFIX",
    "ReleaseboxSettings",
    "create_settings",
    "find_config_file",
    "generate_config_paths",
    "load_pipeline_config",
]
