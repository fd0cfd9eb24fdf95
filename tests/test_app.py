from fastapi.testclient import TestClient

from dummy_http_fixture.api.app import create_app, hostname


def test_root_returns_hello_world():
    client = TestClient(create_app())

    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Hello World!"
    assert resp.headers["content-type"].startswith("text/plain")


def test_host_echoes_hostname():
    client = TestClient(create_app())

    resp = client.get("/host", headers={"Host": "example.test"})
    assert resp.status_code == 200
    assert resp.text == "example.test"
    assert resp.headers["content-type"].startswith("text/plain")


def test_host_strips_port():
    client = TestClient(create_app())

    resp = client.get("/host", headers={"Host": "example.test:8080"})
    assert resp.text == "example.test"

    # default TestClient base URL
    assert client.get("/host").text == "testserver"


def test_unknown_route_is_not_found():
    client = TestClient(create_app())

    resp = client.get("/missing")
    assert resp.status_code == 404


def test_host_keeps_ipv6_brackets():
    client = TestClient(create_app())

    resp = client.get("/host", headers={"Host": "[::1]:8080"})
    assert resp.status_code == 200
    assert resp.text == "[::1]"


def test_hostname_parsing():
    assert hostname("example.test") == "example.test"
    assert hostname("example.test:80") == "example.test"
    assert hostname("[::1]") == "[::1]"
    assert hostname("[::1]:8080") == "[::1]"
    assert hostname("") == ""
