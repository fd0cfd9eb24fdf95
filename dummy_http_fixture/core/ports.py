"""Free TCP port allocation for fixtures running in the same process."""

import logging
import socket
import threading
from typing import Dict, Set

logger = logging.getLogger(__name__)


class PortAllocator:
    """Hands out currently free TCP ports, never the same one twice.

    The allocator asks the OS for an ephemeral port by binding a throwaway
    socket to port 0. Ports stay reserved in this allocator until
    :meth:`release` is called, so two fixtures sharing an allocator never
    receive the same number even if the first has not bound yet.
    """

    def __init__(self, host: str = "127.0.0.1", max_attempts: int = 100) -> None:
        self.host = host
        self.max_attempts = max_attempts
        self._assigned: Set[int] = set()
        self._lock = threading.Lock()

    def assign_port(self) -> int:
        """Return a free port number and mark it as assigned."""
        with self._lock:
            for _ in range(self.max_attempts):
                port = self._probe()
                if port not in self._assigned:
                    self._assigned.add(port)
                    logger.debug("Assigned port %d", port)
                    return port
        raise RuntimeError(
            f"No unassigned port found after {self.max_attempts} attempts"
        )

    def release(self, port: int) -> None:
        """Forget a previously assigned port."""
        with self._lock:
            self._assigned.discard(port)

    @property
    def assigned(self) -> Set[int]:
        with self._lock:
            return set(self._assigned)

    def _probe(self) -> int:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((self.host, 0))
            return s.getsockname()[1]


_allocators: Dict[str, PortAllocator] = {}


def get_allocator(host: str = "127.0.0.1") -> PortAllocator:
    """Return the process-wide allocator probing ``host``."""
    if host not in _allocators:
        _allocators[host] = PortAllocator(host)
    return _allocators[host]


def assign_port() -> int:
    """Assign a port from the process-wide allocator."""
    return get_allocator().assign_port()
