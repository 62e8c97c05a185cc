"""Shared fixtures for the nightlight unit tests."""

import pytest

from config import FixtureConfig
from light_controller import LightController


class RecordingController(LightController):
    """Controller that keeps every frame instead of sending it."""

    def __init__(self, config, fail_writes=False):
        super().__init__(config)
        self.frames = []
        self.fail_writes = fail_writes
        self.disconnected = False

    async def write_frame(self, frame: bytes) -> bool:
        self.frames.append(frame)
        return not self.fail_writes

    async def disconnect(self) -> None:
        self.disconnected = True


@pytest.fixture
def config():
    return FixtureConfig()


@pytest.fixture
def controller(config):
    return RecordingController(config)


@pytest.fixture
def failing_controller(config):
    return RecordingController(config, fail_writes=True)
