"""Test environment that tears down every fixture it manages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple, TypeVar

from dummy_http_fixture.config.settings import FixtureConfig, get_config
from dummy_http_fixture.core.errors import CloseError
from dummy_http_fixture.core.ports import PortAllocator, get_allocator
from dummy_http_fixture.core.service import DropHandler

if TYPE_CHECKING:  # pragma: no cover - for type checking only
    from dummy_http_fixture.api.server import DummyServer

H = TypeVar("H", bound=DropHandler)


class TestEnvironment:
    """Registry of drop handlers that are cleaned up together.

    Handlers are dropped in registration order. A failing handler does not
    stop the others from being dropped; all failures are raised at the end
    as a single :class:`CloseError`.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        config: Optional[FixtureConfig] = None,
        port_allocator: Optional[PortAllocator] = None,
    ) -> None:
        self.config = config or get_config()
        self.port_allocator = port_allocator or get_allocator(self.config.host)
        self.logger = logging.getLogger(__name__)
        self._handlers: List[DropHandler] = []

    @property
    def handlers(self) -> List[DropHandler]:
        return list(self._handlers)

    def register(self, handler: H) -> H:
        """Track ``handler`` so :meth:`drop_all` cleans it up."""
        if not isinstance(handler, DropHandler):
            raise TypeError(f"{type(handler).__name__} does not implement DropHandler")
        self._handlers.append(handler)
        return handler

    def dummy_server(self) -> "DummyServer":
        """Create and register a fixture sharing this environment's settings."""
        from dummy_http_fixture.api.server import DummyServer

        return self.register(DummyServer(self.config, self.port_allocator))

    async def drop_all(self) -> None:
        handlers, self._handlers = self._handlers, []
        failures: List[Tuple[Optional[int], BaseException]] = []

        for handler in handlers:
            name = handler.__class__.__name__
            try:
                self.logger.debug("Dropping %s...", name)
                await handler.drop()
            except CloseError as e:
                self.logger.error("Error dropping %s: %s", name, e)
                failures.extend(e.failures)
            except Exception as e:
                self.logger.error("Error dropping %s: %s", name, e)
                failures.append((None, e))

        if failures:
            raise CloseError(failures) from failures[0][1]

    async def __aenter__(self) -> "TestEnvironment":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.drop_all()
