"""Shared fixtures for the ShotSolve test suite."""

import sys
from pathlib import Path

import pytest

# Add project root and the tests directory (for support.py) to path
tests_dir = Path(__file__).parent
sys.path.insert(0, str(tests_dir.parent))
sys.path.insert(0, str(tests_dir))

from core.auth.credential_manager import CredentialManager  # noqa: E402
from core.bus.event_bus import EventBus  # noqa: E402
from core.models.solution import SolutionResult  # noqa: E402
from modules.queue.screenshot_queue import ScreenshotQueue  # noqa: E402
from support import TWO_SUM, make_image  # noqa: E402


@pytest.fixture
def image():
    return make_image()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def queue(event_bus):
    return ScreenshotQueue(max_size=5, event_bus=event_bus)


@pytest.fixture
def credentials(tmp_path):
    manager = CredentialManager(use_keyring=False, config_dir=tmp_path / "config")
    manager.set_api_key("sk-test")
    return manager


@pytest.fixture
def no_credentials(tmp_path):
    return CredentialManager(use_keyring=False, config_dir=tmp_path / "empty")


@pytest.fixture
def two_sum_result():
    return SolutionResult.model_validate(TWO_SUM)
