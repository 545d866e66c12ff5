"""CLI entry point for custodian."""

from __future__ import annotations

import os
import sys

import fire
import yaml

from custodian.core.config import ConfigLoader, load_settings
from custodian.logging import configure_logging


class CustodianCLI:
    """Inspect and validate custodian configuration."""

    def __init__(self) -> None:
        self.loader = ConfigLoader()

    def config(self, config_path: str | None = None) -> str:
        """Show the effective settings.

        Parameters
        ----------
        config_path : str | None
            Config file to read, defaults to CUSTODIAN_CONFIG or custodian.yaml

        Returns
        -------
        str
            Settings rendered as YAML
        """
        settings = self.loader.get_settings(self.loader.load_config(config_path))
        return yaml.safe_dump(settings.to_dict(), sort_keys=False).rstrip()

    def validate(self, config_path: str | None = None) -> str:
        """Validate a configuration file.

        Parameters
        ----------
        config_path : str | None
            Config file to read, defaults to CUSTODIAN_CONFIG or custodian.yaml

        Returns
        -------
        str
            Confirmation message

        Raises
        ------
        ValueError
            If the configuration is invalid
        """
        path = self.loader.resolve_path(config_path)

        if not path.exists():
            return f"No config file at {path}, built-in defaults apply"

        self.loader.get_settings(self.loader.load_config(str(path)))
        return f"Configuration OK: {path}"


def handle_config_error(error: Exception, debug_mode: bool) -> None:
    """Report a configuration error and exit.

    Parameters
    ----------
    error : Exception
        The error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    Exception
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(1)


def main() -> None:
    """Entry point for Fire CLI with graceful error handling.

    Logging is configured from the ``logging.level`` setting before any
    command runs.
    """
    debug_mode = os.environ.get("CUSTODIAN_DEBUG") == "1"

    try:
        configure_logging(load_settings().log_level)
        fire.Fire(CustodianCLI())
    except (ValueError, RuntimeError) as e:
        handle_config_error(e, debug_mode)
