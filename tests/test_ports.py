import socket

import pytest

from dummy_http_fixture.core import ports
from dummy_http_fixture.core.ports import PortAllocator


def test_assigned_ports_are_distinct_and_bindable(port_allocator):
    assigned = [port_allocator.assign_port() for _ in range(5)]
    assert len(set(assigned)) == 5
    assert port_allocator.assigned == set(assigned)

    for port in assigned:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))


def test_release_forgets_port(port_allocator):
    port = port_allocator.assign_port()
    port_allocator.release(port)
    assert port not in port_allocator.assigned

    # releasing twice is harmless
    port_allocator.release(port)


def test_allocator_skips_ports_already_assigned(monkeypatch):
    allocator = PortAllocator()
    probes = iter([4000, 4000, 4001])
    monkeypatch.setattr(allocator, "_probe", lambda: next(probes))

    assert allocator.assign_port() == 4000
    assert allocator.assign_port() == 4001


def test_allocator_gives_up_after_max_attempts(monkeypatch):
    allocator = PortAllocator(max_attempts=3)
    monkeypatch.setattr(allocator, "_probe", lambda: 4000)
    allocator.assign_port()

    with pytest.raises(RuntimeError, match="3 attempts"):
        allocator.assign_port()


def test_module_assign_port_uses_process_allocator(monkeypatch):
    monkeypatch.setattr(ports, "_allocators", {})
    port = ports.assign_port()
    assert port in ports.get_allocator().assigned
    assert ports.get_allocator() is ports.get_allocator()


def test_allocators_are_cached_per_host(monkeypatch):
    monkeypatch.setattr(ports, "_allocators", {})
    loopback = ports.get_allocator()
    wildcard = ports.get_allocator("0.0.0.0")

    assert loopback.host == "127.0.0.1"
    assert wildcard.host == "0.0.0.0"
    assert ports.get_allocator("0.0.0.0") is wildcard
