"""Tests for the daemon HTTP connection."""

from __future__ import annotations

import httpx
import pytest

from goxlr_utility_mcp.errors import DaemonError
from goxlr_utility_mcp.protocol.commands import build_set_global_colour, build_set_volume
from goxlr_utility_mcp.transport.http_connection import (
    COMMAND_PATH,
    DEVICES_PATH,
    DaemonConnection,
)

DEVICES = {
    "mixers": {"SER123": {"profile_name": "Default", "levels": {"volumes": {"Mic": 80}}}},
    "files": {"profiles": ["Default"]},
}


def _client(captured: list, command_reply=b'"Ok"', command_status: int = 200) -> httpx.Client:
    def _handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if request.url.path == DEVICES_PATH:
            return httpx.Response(200, json=DEVICES)
        if request.url.path == COMMAND_PATH:
            return httpx.Response(command_status, content=command_reply)
        return httpx.Response(404)

    return httpx.Client(transport=httpx.MockTransport(_handler), base_url="http://test")


def test_open_reads_status():
    captured: list = []
    conn = DaemonConnection(client=_client(captured))
    status = conn.open()
    assert conn.connected
    assert status.single_serial() == "SER123"
    assert captured[0].method == "GET"
    assert captured[0].url.path == DEVICES_PATH


def test_send_posts_exact_envelope_bytes():
    """The request body is the envelope's JSON, unchanged."""
    captured: list = []
    conn = DaemonConnection(client=_client(captured))
    conn.open()

    envelope = build_set_global_colour("SER123", "0000FF")
    result = conn.send(envelope)

    assert result.ok
    request = captured[-1]
    assert request.method == "POST"
    assert request.url.path == COMMAND_PATH
    assert request.content == b'{"Command":["SER123",{"SetGlobalColour":"0000FF"}]}'
    assert request.headers["content-type"] == "application/json"


def test_send_preserves_order():
    captured: list = []
    conn = DaemonConnection(client=_client(captured))
    conn.open()
    for level in (10, 20, 30):
        conn.send(build_set_volume("SER123", "Mic", level))
    bodies = [r.content for r in captured if r.url.path == COMMAND_PATH]
    assert bodies == [build_set_volume("SER123", "Mic", lvl).to_bytes() for lvl in (10, 20, 30)]


def test_send_rejected_by_daemon():
    captured: list = []
    conn = DaemonConnection(client=_client(captured, command_reply=b'{"Error":"Unknown channel"}'))
    conn.open()
    with pytest.raises(DaemonError, match="Unknown channel"):
        conn.send(build_set_volume("SER123", "Nope", 10))


def test_http_error_is_connection_error():
    captured: list = []
    conn = DaemonConnection(client=_client(captured, command_reply=b"boom", command_status=500))
    conn.open()
    with pytest.raises(ConnectionError, match="HTTP 500"):
        conn.send(build_set_volume("SER123", "Mic", 10))


def test_send_when_not_connected():
    conn = DaemonConnection(client=_client([]))
    with pytest.raises(ConnectionError):
        conn.send(build_set_volume("SER123", "Mic", 10))


def test_open_unreachable_daemon():
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(_handler), base_url="http://test")
    conn = DaemonConnection(client=client)
    with pytest.raises(ConnectionError, match="Could not reach daemon"):
        conn.open()
    assert not conn.connected


def test_is_reachable():
    conn = DaemonConnection(client=_client([]))
    assert not conn.is_reachable()
    conn.open()
    assert conn.is_reachable()


def test_close_is_idempotent():
    conn = DaemonConnection(client=_client([]))
    conn.open()
    conn.close()
    conn.close()
    assert not conn.connected


def test_endpoint_trailing_slash():
    assert DaemonConnection("http://localhost:14564/").endpoint == "http://localhost:14564"


def test_get_volume():
    conn = DaemonConnection(client=_client([]))
    conn.open()
    assert conn.get_volume("SER123", "Mic") == 80
    assert conn.get_volume("SER123", "Nope") is None
    assert conn.get_volume("MISSING", "Mic") is None


@pytest.mark.parametrize("delta, expected", [(5, 85), (50, 100), (-200, 0)])
def test_adjust_volume_clamps(delta, expected):
    """The adjusted level stays within 0-100 and is sent as SetVolume."""
    captured: list = []
    conn = DaemonConnection(client=_client(captured))
    conn.open()

    assert conn.adjust_volume("SER123", "Mic", delta) == expected
    request = captured[-1]
    assert request.url.path == COMMAND_PATH
    assert request.content == build_set_volume("SER123", "Mic", expected).to_bytes()


def test_adjust_volume_unknown_channel():
    captured: list = []
    conn = DaemonConnection(client=_client(captured))
    conn.open()
    assert conn.adjust_volume("SER123", "Nope", 10) is None
    assert all(r.url.path != COMMAND_PATH for r in captured)
