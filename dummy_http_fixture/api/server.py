from __future__ import annotations

import asyncio
import contextlib
import socket
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Iterator, List, Optional, Tuple

import uvicorn

from dummy_http_fixture.api.app import create_app
from dummy_http_fixture.config.settings import FixtureConfig, get_config
from dummy_http_fixture.core.errors import BindError, CloseError, FixtureStateError
from dummy_http_fixture.core.ports import PortAllocator, get_allocator
from dummy_http_fixture.core.service import DropHandler, Service


class _FixtureServer(uvicorn.Server):
    """uvicorn server that leaves the process's signal handlers untouched.

    Several fixtures run concurrently inside one test process, so no single
    server may claim SIGINT/SIGTERM.
    """

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


@dataclass
class ServerHandle:
    """One bound listening socket and the uvicorn server serving it."""

    port: int
    socket: socket.socket
    server: uvicorn.Server
    task: asyncio.Task
    closed: bool = False

    @property
    def listening(self) -> bool:
        return not self.closed and self.server.started and not self.task.done()


class DummyServer(Service, DropHandler):
    """Ephemeral HTTP endpoint for tests with guaranteed teardown.

    Every :meth:`start` binds a fresh port and serves ``GET /`` and
    ``GET /host`` on it. :meth:`stop` closes all of them, oldest first.
    A stopped fixture cannot be started again.
    """

    def __init__(
        self,
        config: Optional[FixtureConfig] = None,
        port_allocator: Optional[PortAllocator] = None,
    ) -> None:
        super().__init__()
        self.config = config or get_config()
        self.port_allocator = port_allocator or get_allocator(self.config.host)
        self.app = create_app()
        self._handles: List[ServerHandle] = []
        self._stopped = False
        self._metrics = {
            "servers_started": 0,
            "servers_stopped": 0,
            "close_failures": 0,
        }

    @property
    def handles(self) -> List[ServerHandle]:
        return list(self._handles)

    @property
    def ports(self) -> List[int]:
        return [handle.port for handle in self._handles]

    # ------------------------------------------------------------------
    async def start(self) -> int:
        """Bind a newly assigned port, serve on it and return the port.

        Returns only once uvicorn reports the server as started, i.e. the
        socket is bound, listening and accepting connections.
        """
        if self._stopped:
            raise FixtureStateError("Fixture has been stopped and cannot be restarted")

        port = self.port_allocator.assign_port()
        sock = self._bind(port)

        config = uvicorn.Config(
            self.app,
            host=self.config.host,
            port=port,
            log_level=self.config.log_level.lower(),
            log_config=None,
            access_log=self.config.access_log,
            lifespan="off",
            timeout_graceful_shutdown=self.config.graceful_shutdown_timeout,
        )
        server = _FixtureServer(config)
        task = asyncio.create_task(self._serve(server, sock, port))

        try:
            while not server.started and not task.done():
                await asyncio.sleep(self.config.startup_poll_interval)
        except asyncio.CancelledError:
            task.cancel()
            sock.close()
            self.port_allocator.release(port)
            raise

        if not server.started:
            sock.close()
            self.port_allocator.release(port)
            exc = task.exception() if not task.cancelled() else None
            if isinstance(exc, BindError):
                self.logger.error("Server on port %d failed to start: %s", port, exc)
                raise exc
            error = BindError(port, repr(exc) if exc else "server exited before listening")
            self.logger.error("Server on port %d failed to start: %s", port, error)
            raise error from exc

        self._handles.append(ServerHandle(port=port, socket=sock, server=server, task=task))
        self._running = True
        self._metrics["servers_started"] += 1
        self.logger.info("Dummy server listening on %s:%d", self.config.host, port)
        return port

    async def serve(self) -> int:
        """Alias of :meth:`start`."""
        return await self.start()

    async def stop(self) -> None:
        """Close every owned server in creation order.

        Each close is awaited before the next begins. All closes are
        attempted; failures are reported together as a :class:`CloseError`.
        A handle stays owned until its close finishes, so a cancelled stop
        leaves the remaining servers for the next call.
        """
        self._stopped = True
        failures: List[Tuple[Optional[int], BaseException]] = []
        closed = 0

        while self._handles:
            handle = self._handles[0]
            try:
                await self._close(handle)
                self._metrics["servers_stopped"] += 1
            except Exception as exc:
                self.logger.error("Error closing server on port %d: %s", handle.port, exc)
                failures.append((handle.port, exc))
                self._metrics["close_failures"] += 1
                if handle.socket.fileno() != -1:
                    handle.socket.close()
            handle.closed = True
            self._handles.pop(0)
            self.port_allocator.release(handle.port)
            closed += 1

        self._running = False

        if failures:
            raise CloseError(failures) from failures[0][1]
        if closed:
            self.logger.info("Closed %d dummy server(s)", closed)

    async def drop(self) -> None:
        await self.stop()

    def get_metrics(self) -> Dict[str, Any]:
        metrics = super().get_metrics()
        metrics["ports"] = self.ports
        return metrics

    @asynccontextmanager
    async def managed_lifecycle(self) -> AsyncIterator["DummyServer"]:
        """Context manager serving one port for the duration of the block."""
        try:
            await self.start()
            yield self
        finally:
            await self.stop()

    # ------------------------------------------------------------------
    def _bind(self, port: int) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.config.host, port))
            sock.listen()
        except OSError as exc:
            sock.close()
            self.port_allocator.release(port)
            self.logger.error("Failed to bind %s:%d: %s", self.config.host, port, exc)
            raise BindError(port, str(exc)) from exc
        return sock

    async def _serve(self, server: uvicorn.Server, sock: socket.socket, port: int) -> None:
        try:
            await server.serve(sockets=[sock])
        except SystemExit as exc:
            # uvicorn exits the process when startup fails
            raise BindError(port, f"server exited with status {exc.code}") from exc

    async def _close(self, handle: ServerHandle) -> None:
        handle.server.should_exit = True
        if handle.task.cancelled():
            handle.socket.close()
            return
        # shielded so a cancelled stop does not abort uvicorn's shutdown
        await asyncio.shield(handle.task)
