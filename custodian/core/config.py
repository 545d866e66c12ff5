import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from custodian.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_LOG_LEVEL,
    DISPATCHER_IDLE_TIMEOUT_SECONDS,
    DISPATCHER_THREAD_NAME,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


@dataclass(frozen=True)
class DispatcherSettings:
    """Settings for the deferred dispatcher worker."""

    idle_timeout: float = DISPATCHER_IDLE_TIMEOUT_SECONDS
    thread_name: str = DISPATCHER_THREAD_NAME


@dataclass(frozen=True)
class CustodianSettings:
    """Effective package settings."""

    dispatcher: DispatcherSettings = field(default_factory=DispatcherSettings)
    log_level: str = DEFAULT_LOG_LEVEL

    def to_dict(self) -> dict[str, Any]:
        """Render settings in the same shape as the YAML file.

        Returns
        -------
        dict[str, Any]
            Nested settings dictionary
        """
        return {
            "dispatcher": {
                "idle_timeout": self.dispatcher.idle_timeout,
                "thread_name": self.dispatcher.thread_name,
            },
            "logging": {"level": self.log_level},
        }


class ConfigLoader:
    """Load and merge YAML configuration with defaults."""

    def __init__(self) -> None:
        self.BUILT_IN_DEFAULTS = CustodianSettings().to_dict()

    def resolve_path(self, config_path: str | None = None) -> Path:
        """Resolve which configuration file to read.

        Parameters
        ----------
        config_path : str | None
            Explicit path. If None, checks CUSTODIAN_CONFIG env var,
            then falls back to custodian.yaml

        Returns
        -------
        Path
            Configuration file path (may not exist)
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)

        return Path(config_path)

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file, resolved with resolve_path()

        Returns
        -------
        dict[str, Any]
            Parsed configuration with interpolations resolved, or an empty
            dictionary when the file does not exist

        Raises
        ------
        ValueError
            If the file is not valid YAML or variables cannot be resolved
        RuntimeError
            If the file exists but cannot be read
        """
        config_file = self.resolve_path(config_path)

        if not config_file.exists():
            logger.debug("No config file at %s, using defaults", config_file)
            return {}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {}

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if config is None:
            return {}

        if not isinstance(config, dict):
            raise ValueError(f"Configuration in {config_file} must be a mapping")

        return config

    def merge_config(self, config: dict[str, Any]) -> dict[str, Any]:
        """Merge file configuration over built-in defaults.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration loaded from YAML

        Returns
        -------
        dict[str, Any]
            Built-in defaults with each section updated from the file
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        for section, values in config.items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values

        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate merged configuration.

        Parameters
        ----------
        config : dict[str, Any]
            Merged configuration to validate

        Raises
        ------
        ValueError
            If configuration is invalid
        """
        dispatcher = config.get("dispatcher")
        if not isinstance(dispatcher, dict):
            raise ValueError("dispatcher must be a mapping")

        idle_timeout = dispatcher.get("idle_timeout")
        if isinstance(idle_timeout, bool) or not isinstance(idle_timeout, (int, float)):
            raise ValueError("dispatcher.idle_timeout must be a number")

        if idle_timeout <= 0:
            raise ValueError(
                f"dispatcher.idle_timeout must be positive, got {idle_timeout}"
            )

        thread_name = dispatcher.get("thread_name")
        if not isinstance(thread_name, str) or not thread_name.strip():
            raise ValueError("dispatcher.thread_name must be a non-empty string")

        logging_section = config.get("logging")
        if not isinstance(logging_section, dict):
            raise ValueError("logging must be a mapping")

        level = logging_section.get("level")
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid logging.level '{level}'. Must be one of {list(LOG_LEVELS)}"
            )

    def get_settings(self, config: dict[str, Any]) -> CustodianSettings:
        """Build validated settings from loaded configuration.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration loaded from YAML (may be empty)

        Returns
        -------
        CustodianSettings
            Effective settings

        Raises
        ------
        ValueError
            If the merged configuration is invalid
        """
        merged = self.merge_config(config)
        self.validate_config(merged)

        return CustodianSettings(
            dispatcher=DispatcherSettings(
                idle_timeout=float(merged["dispatcher"]["idle_timeout"]),
                thread_name=merged["dispatcher"]["thread_name"],
            ),
            log_level=merged["logging"]["level"].upper(),
        )


def load_settings(config_path: str | None = None) -> CustodianSettings:
    """Load, merge and validate settings in one step.

    Parameters
    ----------
    config_path : str | None
        Path to YAML config file, resolved with ConfigLoader.resolve_path()

    Returns
    -------
    CustodianSettings
        Effective settings
    """
    loader = ConfigLoader()
    return loader.get_settings(loader.load_config(config_path))
