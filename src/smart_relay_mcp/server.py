"""MCP server entry point for the Smart Relay.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import RelaySettings
from .errors import RelayError
from .protocol.commands import PinValue, build_pin_off, build_pin_on
from .protocol.framing import (
    FRAME_SIZE,
    MAX_PIN,
    MIN_PIN,
    PREFIX,
    decode_frame,
)
from .protocol.parser import parse_response
from .session import RelaySession

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "smart-relay",
    instructions="Control Smart Relay TCP relay controllers",
)

# Global session state
_settings = RelaySettings.from_env()
_session: RelaySession | None = None
_options = _settings.session_options


def _get_session() -> RelaySession:
    """Get the open relay session, raising if not connected."""
    if _session is None or not _session.is_connected():
        raise RuntimeError(
            "Not connected to a relay. Use the 'connect' tool first."
        )
    return _session


def _push(pin: int, value: PinValue, device_id: str | None) -> dict[str, Any]:
    session = _get_session()
    device_id = device_id or _settings.device_id
    try:
        raw = session.push(pin, value, device_id)
    except ValueError as e:
        return {"error": str(e)}
    except RelayError as e:
        return {"error": str(e), "connected": session.is_connected()}

    result = {"pin": pin, "state": value.name.lower(), "device_id": device_id}
    result["response"] = parse_response(raw).to_dict()
    return result


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(host: str | None = None, port: int | None = None) -> dict[str, Any]:
    """Open a TCP session to a Smart Relay.

    Args:
        host: Relay IP address or hostname (defaults to SMART_RELAY_HOST).
        port: Relay TCP port (defaults to SMART_RELAY_PORT, 50000).
    """
    global _session
    if _session is not None and _session.is_connected():
        return {
            "connected": True,
            "message": "Already connected",
            "host": _session.host,
            "port": _session.port,
        }

    host = host or _settings.host
    if not host:
        return {"error": "No relay host given and SMART_RELAY_HOST is not set"}
    port = port or _settings.port

    session = RelaySession(host, port, options=_options)
    try:
        session.open()
    except RelayError as e:
        return {"connected": False, "error": str(e)}

    _session = session
    return {"connected": True, "host": host, "port": port}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the TCP session to the relay."""
    global _session
    if _session is None:
        return {"disconnected": True}
    _session.close()
    _session = None
    return {"disconnected": True}


@mcp.tool()
def get_status() -> dict[str, Any]:
    """Report connection state and session options."""
    if _session is None:
        return {"connected": False}
    return {
        "connected": _session.is_connected(),
        "host": _session.host,
        "port": _session.port,
        "options": _session.options.to_dict(),
    }


@mcp.tool()
def set_options(
    max_response_len: int | None = None,
    receive_timeout: float | None = None,
) -> dict[str, Any]:
    """Change session tunables.

    Args:
        max_response_len: Maximum bytes read back per command.
        receive_timeout: Seconds to wait for a reply (applies on next connect).
    """
    global _options
    session = _get_session()
    options: dict[str, Any] = {}
    if max_response_len is not None:
        options["max_response_len"] = max_response_len
    if receive_timeout is not None:
        options["receive_timeout"] = receive_timeout
    try:
        session.set_options(options)
    except ValueError as e:
        return {"error": str(e)}
    _options = session.options
    return {"options": session.options.to_dict()}


# ─── PIN CONTROL TOOLS ───────────────────────────────────────────────

@mcp.tool()
def set_pin(pin: int, on: bool, device_id: str | None = None) -> dict[str, Any]:
    """Switch a relay channel on or off.

    Args:
        pin: Relay channel (1-8).
        on: True to energise the relay, False to release it.
        device_id: Two-digit hex unit address (defaults to SMART_RELAY_DEVICE_ID).
    """
    return _push(pin, PinValue.ON if on else PinValue.OFF, device_id)


@mcp.tool()
def pin_on(pin: int, device_id: str | None = None) -> dict[str, Any]:
    """Switch a relay channel on.

    Args:
        pin: Relay channel (1-8).
        device_id: Two-digit hex unit address.
    """
    return _push(pin, PinValue.ON, device_id)


@mcp.tool()
def pin_off(pin: int, device_id: str | None = None) -> dict[str, Any]:
    """Switch a relay channel off.

    Args:
        pin: Relay channel (1-8).
        device_id: Two-digit hex unit address.
    """
    return _push(pin, PinValue.OFF, device_id)


@mcp.tool()
def encode_command(pin: int, on: bool, device_id: str | None = None) -> dict[str, Any]:
    """Show the frame that would be sent for a pin command, without sending it.

    Args:
        pin: Relay channel (1-8).
        on: Target state.
        device_id: Two-digit hex unit address.
    """
    try:
        builder = build_pin_on if on else build_pin_off
        frame = builder(pin, device_id or _settings.device_id)
    except ValueError as e:
        return {"error": str(e)}
    decoded = decode_frame(frame)
    return {
        "frame_hex": frame.hex(" "),
        "length": len(frame),
        "device_id": f"{decoded.device_id:02X}",
        "bitmask": f"0x{decoded.bitmask:02X}",
        "checksum": [f"{b:02X}" for b in decoded.checksum],
    }


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("relay://session/status")
def resource_session_status() -> str:
    """Connection state and session options."""
    return json.dumps(get_status())


@mcp.resource("relay://protocol/frame-layout")
def resource_frame_layout() -> str:
    """Byte layout of a pin command frame."""
    return json.dumps({
        "length": FRAME_SIZE,
        "prefix": PREFIX.hex(" "),
        "pins": {"min": MIN_PIN, "max": MAX_PIN},
        "fields": [
            {"name": "prefix", "offset": 0, "size": 3},
            {"name": "device_id", "offset": 3, "size": 1},
            {"name": "control", "offset": 4, "size": 2},
            {"name": "enable", "offset": 6, "size": 2},
            {"name": "checksum", "offset": 8, "size": 2},
        ],
    })


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def relay_sequence(description: str) -> str:
    """Guide the AI to drive a sequence of relay switches.

    Args:
        description: What the relays should do, e.g. "pulse pump on pin 3".
    """
    return f"""Plan and run this relay sequence: {description}

Consider:
- Channels are numbered {MIN_PIN}-{MAX_PIN}
- Each command is acknowledged before the next is sent
- An empty response means the relay did not answer within the timeout

Use connect first, then set_pin, pin_on or pin_off for each step.
Use get_status to confirm the session is still open."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=_settings.log_level)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
