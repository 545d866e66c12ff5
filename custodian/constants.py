"""Global constants for custodian.

Values shared by the dispatcher, configuration loader and CLI.
"""

DISPATCHER_IDLE_TIMEOUT_SECONDS = 5.0
"""Seconds an idle dispatcher worker waits for new work before exiting.

The next enqueue after the worker exits starts a fresh thread, so a short
timeout only costs a thread start when disposals arrive in sparse bursts.
"""

DISPATCHER_THREAD_NAME = "custodian-dispatcher"
"""Name given to the dispatcher worker thread."""

DEFAULT_LOG_LEVEL = "WARNING"
"""Level applied by configure_logging when none is configured."""

CONFIG_ENV_VAR = "CUSTODIAN_CONFIG"
"""Environment variable naming the YAML configuration file."""

DEFAULT_CONFIG_FILE = "custodian.yaml"
"""Configuration file used when neither an argument nor the env var is set."""

LOGGER_NAME = "custodian"
"""Root logger for the package."""
