"""Pytest configuration and fixtures for custodian tests."""

import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

from custodian.core.dispatcher import DeferredDispatcher, set_dispatcher

unit_root = Path(__file__).parent
if str(unit_root) not in sys.path:
    sys.path.insert(0, str(unit_root))

from fakes.resources import Recorder  # noqa: E402


@pytest.fixture(autouse=True)
def cleanup_config_env() -> Generator[None, None, None]:
    """Ensure CUSTODIAN_CONFIG is not set for unit tests.

    Yields
    ------
    None
        Control back to test after ensuring clean environment
    """
    original_config = os.environ.pop("CUSTODIAN_CONFIG", None)

    yield

    if original_config is not None:
        os.environ["CUSTODIAN_CONFIG"] = original_config
    else:
        os.environ.pop("CUSTODIAN_CONFIG", None)


@pytest.fixture
def dispatcher() -> Generator[DeferredDispatcher, None, None]:
    """Install a fast-idling dispatcher as the process-wide instance.

    Yields
    ------
    DeferredDispatcher
        Dispatcher used by defer_dispose() during the test
    """
    instance = DeferredDispatcher(idle_timeout=0.2, thread_name="custodian-test")
    set_dispatcher(instance)

    yield instance

    instance.wait_idle(timeout=5.0)
    set_dispatcher(None)


@pytest.fixture
def recorder() -> Recorder:
    """Provide a fresh recording callable."""
    return Recorder()
