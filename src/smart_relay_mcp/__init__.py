"""Smart Relay TCP driver and MCP server."""

from .errors import (
    RelayConnectionError,
    RelayError,
    SessionNotOpenError,
    TransportReadError,
    TransportWriteError,
)
from .models.options import SessionOptions
from .protocol.commands import PinValue
from .session import RelaySession
