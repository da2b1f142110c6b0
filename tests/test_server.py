"""Tests for the MCP tool layer."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

from smart_relay_mcp.errors import RelayConnectionError, TransportWriteError
from smart_relay_mcp.models.options import SessionOptions
from smart_relay_mcp.protocol.commands import PinValue
from smart_relay_mcp.session import RelaySession


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch.dict(sys.modules, {}):
        with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
            # Remove cached server module so it re-imports with our mock
            sys.modules.pop("smart_relay_mcp.server", None)
            import smart_relay_mcp.server as server_mod

    return server_mod


def _open_session(response: bytes = b"\x01") -> MagicMock:
    session = MagicMock()
    session.is_connected.return_value = True
    session.host = "192.0.2.10"
    session.port = 50000
    session.options = SessionOptions()
    session.push.return_value = response
    return session


def test_connect_opens_session():
    server = _get_server_module()
    session = _open_session()
    session_cls = MagicMock(return_value=session)

    with patch.object(server, "RelaySession", session_cls):
        result = server.connect("192.0.2.10", 50001)

    assert result == {"connected": True, "host": "192.0.2.10", "port": 50001}
    session.open.assert_called_once()
    assert server._session is session


def test_connect_failure_reports_error():
    server = _get_server_module()
    session = _open_session()
    session.open.side_effect = RelayConnectionError("Unable to connect")

    with patch.object(server, "RelaySession", MagicMock(return_value=session)):
        result = server.connect("192.0.2.10")

    assert result["connected"] is False
    assert "Unable to connect" in result["error"]
    assert server._session is None


def test_connect_without_host():
    server = _get_server_module()
    server._settings.host = None
    result = server.connect()
    assert "error" in result


def test_connect_when_already_connected():
    server = _get_server_module()
    session = _open_session()
    with patch.object(server, "_session", session):
        result = server.connect("198.51.100.1")
    assert result["message"] == "Already connected"
    assert result["host"] == "192.0.2.10"


def test_disconnect_closes_session():
    server = _get_server_module()
    session = _open_session()
    server._session = session
    assert server.disconnect() == {"disconnected": True}
    session.close.assert_called_once()
    assert server._session is None


def test_set_pin_pushes_command():
    server = _get_server_module()
    session = _open_session(b"\xAA")

    with patch.object(server, "_get_session", return_value=session):
        result = server.set_pin(3, True, "02")

    session.push.assert_called_once_with(3, PinValue.ON, "02")
    assert result["state"] == "on"
    assert result["response"]["raw_hex"] == "aa"


def test_pin_off_uses_default_device():
    server = _get_server_module()
    session = _open_session(b"")
    server._settings.device_id = "01"

    with patch.object(server, "_get_session", return_value=session):
        result = server.pin_off(2)

    session.push.assert_called_once_with(2, PinValue.OFF, "01")
    assert result["response"]["empty"] is True


def test_push_transport_error_is_reported():
    server = _get_server_module()
    session = _open_session()
    session.push.side_effect = TransportWriteError(32, "Broken pipe")

    with patch.object(server, "_get_session", return_value=session):
        result = server.pin_on(1)

    assert "Broken pipe" in result["error"]
    assert result["connected"] is True


def test_push_invalid_pin_is_reported():
    server = _get_server_module()
    session = _open_session()
    session.push.side_effect = ValueError("Pin must be 1-8, got 9")

    with patch.object(server, "_get_session", return_value=session):
        result = server.pin_on(9)

    assert result == {"error": "Pin must be 1-8, got 9"}


def test_encode_command_preview():
    server = _get_server_module()
    result = server.encode_command(1, True, "01")
    assert result["frame_hex"] == "cc dd a1 01 00 01 00 01 4d 9a"
    assert result["length"] == 10
    assert result["bitmask"] == "0x01"
    assert result["checksum"] == ["4D", "9A"]


def test_encode_command_rejects_bad_pin():
    server = _get_server_module()
    assert "error" in server.encode_command(12, True)


def test_set_options_tool():
    server = _get_server_module()
    session = _open_session()

    with patch.object(server, "_get_session", return_value=session):
        server.set_options(max_response_len=64)

    session.set_options.assert_called_once_with({"max_response_len": 64})


def test_status_resource_when_disconnected():
    server = _get_server_module()
    server._session = None
    assert json.loads(server.resource_session_status()) == {"connected": False}


def test_frame_layout_resource():
    server = _get_server_module()
    layout = json.loads(server.resource_frame_layout())
    assert layout["length"] == 10
    assert layout["prefix"] == "cc dd a1"
    assert sum(field["size"] for field in layout["fields"]) == 10


def test_relay_sequence_prompt():
    server = _get_server_module()
    text = server.relay_sequence("blink pin 2")
    assert "blink pin 2" in text
    assert "1-8" in text


def test_options_survive_reconnect():
    """Options changed while connected apply to the next connection."""
    server = _get_server_module()
    transport = MagicMock()
    transport.write.side_effect = lambda data: len(data)
    transport.peek.return_value = b""
    factory = MagicMock(return_value=transport)

    def _session_cls(host, port, options=None):
        return RelaySession(host, port, options=options, transport_factory=factory)

    with patch.object(server, "RelaySession", _session_cls):
        server.connect("192.0.2.10")
        server.set_options(receive_timeout=5.0, max_response_len=64)
        server.disconnect()
        server.connect("192.0.2.10")
        server.pin_on(1)

    timeouts = [c.args[0] for c in transport.set_receive_timeout.call_args_list]
    assert timeouts == [1.0, 5.0]
    transport.peek.assert_called_once_with(64)
    assert server.get_status()["options"] == {
        "max_response_len": 64,
        "receive_timeout": 5.0,
    }


def test_encode_command_off_frame():
    server = _get_server_module()
    result = server.encode_command(1, False, "01")
    assert result["frame_hex"] == "cc dd a1 01 00 00 00 01 4c 98"
