"""API package exposing the fixture's HTTP surface."""

from .app import create_app
from .server import DummyServer, ServerHandle

__all__ = ["DummyServer", "ServerHandle", "create_app"]
