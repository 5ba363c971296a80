"""Configuration management.

This module handles loading and merging configuration from multiple TOML files
with proper precedence. Each section is validated by its own pydantic model.
"""

import logging
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..constants import (
    CONFIG_DIR_NAME,
    DEFAULT_LAYOUT,
    DEFAULT_PROD_ENV,
    DEFAULT_STAGE_ENV,
    LOCAL_CONFIG_NAME,
)

logger = logging.getLogger(__name__)

VERBOSITY_LEVELS = ("quiet", "normal", "verbose", "debug")


class GlobalConfig(BaseModel):
    """Global configuration."""

    model_config = ConfigDict(extra="ignore")

    verbosity: str = Field(
        default="normal",
        description="Output verbosity: quiet, normal, verbose, debug",
    )
    color: bool = Field(default=True, description="Enable colored output")
    default_root: str | None = Field(
        default=None,
        description="Root directory used when none is given on the command line",
    )
    fail_on_drift: bool = Field(
        default=False,
        description="Exit with status 1 when version or component drift is found",
    )

    @field_validator("verbosity")
    @classmethod
    def _check_verbosity(cls, value: str) -> str:
        value = value.lower()
        if value not in VERBOSITY_LEVELS:
            raise ValueError(f"must be one of: {', '.join(VERBOSITY_LEVELS)}")
        return value


class ScanConfig(BaseModel):
    """Directory layout and walk options."""

    model_config = ConfigDict(extra="ignore")

    layout: str = Field(
        default=DEFAULT_LAYOUT,
        description="Environment directory below the root; {env} is replaced by the environment",
    )
    prod_env: str = Field(default=DEFAULT_PROD_ENV, description="Production environment name")
    stage_env: str = Field(default=DEFAULT_STAGE_ENV, description="Staging environment name")
    skip_hidden: bool = Field(default=True, description="Skip files and directories starting with '.'")

    @field_validator("layout")
    @classmethod
    def _check_layout(cls, value: str) -> str:
        if "{env}" not in value:
            raise ValueError("layout must contain the {env} placeholder")
        return value


class ReportConfig(BaseModel):
    """Drift report options."""

    model_config = ConfigDict(extra="ignore")

    include_stage_only: bool = Field(
        default=False,
        description="Also report components that exist only in stage",
    )
    show_in_sync: bool = Field(
        default=True,
        description="Show in-sync components at normal verbosity",
    )


class ConfigManager:
    """
    Manages configuration loading.

    Loads from multiple sources with precedence (highest to lowest):
    1. Extra paths (--config)
    2. Local config (./.deploy-drift.toml)
    3. Home config (~/.deploy-drift.toml)
    4. User config (~/.config/deploy-drift/config.toml)
    5. System config (/etc/deploy-drift/config.toml)
    6. Defaults

    Example TOML structure:
        [global]
        verbosity = "normal"
        default_root = "~/src/integration-services"

        [scan]
        layout = "Terraform/Environments/{env}/workload"

        [report]
        include_stage_only = true
    """

    SECTIONS: dict[str, type[BaseModel]] = {
        "global": GlobalConfig,
        "scan": ScanConfig,
        "report": ReportConfig,
    }

    def __init__(self, strict: bool = False):
        """
        Initialize ConfigManager.

        Args:
            strict: If True, raise exceptions on config load or validation errors.
                   If False (default), log warnings and use defaults.
        """
        self.strict = strict
        self.global_config = GlobalConfig()
        self.scan_config = ScanConfig()
        self.report_config = ReportConfig()

    def load_from_files(self, extra_paths: list[Path] | None = None) -> None:
        """
        Load configuration from TOML files.

        Args:
            extra_paths: Additional config file paths to load (highest precedence)
        """
        paths = self._get_config_paths()
        if extra_paths:
            paths.extend(extra_paths)

        merged_data: dict[str, Any] = {}

        for path in paths:
            if not path.exists():
                logger.debug(f"Config file not found: {path}")
                continue

            try:
                with open(path, "rb") as f:
                    file_data = tomllib.load(f)
                merged_data = self._merge_dicts(merged_data, file_data)
                logger.info(f"Loaded config from {path}")
            except (OSError, tomllib.TOMLDecodeError) as e:
                if self.strict:
                    raise RuntimeError(f"Failed to load config from {path}: {e}") from e
                logger.warning(f"Failed to load config from {path}: {e}")

        self.load_from_dict(merged_data)

    def load_from_dict(self, data: dict[str, Any]) -> None:
        """
        Validate and apply already-merged configuration data.

        Args:
            data: Mapping of section name to section values
        """
        for section, model in self.SECTIONS.items():
            if section not in data:
                continue
            try:
                config = model.model_validate(data[section])
            except ValidationError as e:
                if self.strict:
                    raise
                logger.warning(f"Invalid [{section}] config, using defaults: {e}")
                config = model()
            setattr(self, f"{section}_config", config)

    def to_dict(self) -> dict[str, Any]:
        """Current configuration as a TOML-ready mapping."""
        return {
            section: getattr(self, f"{section}_config").model_dump(exclude_none=True)
            for section in self.SECTIONS
        }

    def export_to_toml(self, path: Path) -> None:
        """
        Export current config to TOML file.

        Args:
            path: Output file path
        """
        import tomli_w

        with open(path, "wb") as f:
            tomli_w.dump(self.to_dict(), f)
        logger.info(f"Exported config to {path}")

    def create_default_config_file(self, path: Path) -> None:
        """
        Create a config file with every section at its defaults.

        Args:
            path: Output file path
        """
        self.global_config = GlobalConfig()
        self.scan_config = ScanConfig()
        self.report_config = ReportConfig()
        self.export_to_toml(path)
        logger.info(f"Created default config file: {path}")

    @staticmethod
    def _get_config_paths() -> list[Path]:
        """
        Get configuration file paths in precedence order (lowest to highest).

        Returns:
            List of config file paths
        """
        return [
            Path("/etc") / CONFIG_DIR_NAME / "config.toml",
            Path.home() / ".config" / CONFIG_DIR_NAME / "config.toml",
            Path.home() / LOCAL_CONFIG_NAME,
            Path.cwd() / LOCAL_CONFIG_NAME,
        ]

    @staticmethod
    def _merge_dicts(base: dict, override: dict) -> dict:
        """
        Recursively merge dictionaries.

        Args:
            base: Base dictionary
            override: Dictionary to merge in (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigManager._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result
