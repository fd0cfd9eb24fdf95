import sys
from pathlib import Path

# Ensure repository root in path
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from dummy_http_fixture.config.settings import FixtureConfig
from dummy_http_fixture.core.ports import PortAllocator


@pytest.fixture
def fixture_config():
    return FixtureConfig(log_level="WARNING", startup_poll_interval=0.005)


@pytest.fixture
def port_allocator():
    return PortAllocator()


class FixedPortAllocator(PortAllocator):
    """Allocator that always hands out the same port."""

    def __init__(self, port: int) -> None:
        super().__init__()
        self.port = port
        self.released = []

    def assign_port(self) -> int:
        return self.port

    def release(self, port: int) -> None:
        self.released.append(port)


@pytest.fixture
def make_fixed_allocator():
    return FixedPortAllocator
