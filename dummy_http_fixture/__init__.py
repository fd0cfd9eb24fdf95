"""Disposable in-process HTTP server for tests.

The package is organized like a small service backend: the fixture lifecycle
and its collaborators live under :mod:`core`, the served application and the
fixture itself under :mod:`api`, and configuration helpers under
:mod:`config`. Fixtures are torn down through the
:class:`~dummy_http_fixture.core.service.DropHandler` capability so a
:class:`~dummy_http_fixture.core.environment.TestEnvironment` can clean up
everything it manages in one call.
"""

from .api.server import DummyServer, ServerHandle
from .config.settings import FixtureConfig
from .core.environment import TestEnvironment
from .core.errors import BindError, CloseError, FixtureError, FixtureStateError
from .core.ports import PortAllocator, assign_port
from .core.service import DropHandler, Service

__all__ = [
    "BindError",
    "CloseError",
    "DropHandler",
    "DummyServer",
    "FixtureConfig",
    "FixtureError",
    "FixtureStateError",
    "PortAllocator",
    "Service",
    "ServerHandle",
    "TestEnvironment",
    "assign_port",
]
