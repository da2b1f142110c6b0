"""Request/response session with a single Smart Relay unit.

One command is in flight at a time: ``push`` writes a frame, then peeks the
reply. The session owns its transport exclusively and is not thread-safe;
callers that share a session must serialise access themselves.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .errors import (
    RelayConnectionError,
    SessionNotOpenError,
    TransportReadError,
    TransportWriteError,
)
from .models.options import SessionOptions
from .protocol.commands import to_pin_value
from .protocol.framing import DEFAULT_DEVICE_ID, encode_frame
from .transport.tcp_connection import DEFAULT_PORT, TCPConnection

logger = logging.getLogger(__name__)

TransportFactory = Callable[[str, int], Any]


class RelaySession:
    """Drives pin commands over a transport connection.

    Usage::

        relay = RelaySession("192.168.1.50")
        relay.open()
        relay.push(1, PinValue.ON)
        relay.close()

    ``transport_factory`` is called as ``factory(host, port)`` on every
    ``open`` and must return an object with ``connect``,
    ``set_receive_timeout``, ``write``, ``peek``, ``recv_nowait`` and
    ``close``. It defaults to :class:`TCPConnection`.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        options: SessionOptions | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._options = options or SessionOptions()
        self._transport_factory = transport_factory or TCPConnection
        self._transport = None
        self._connected = False

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def options(self) -> SessionOptions:
        return self._options

    def open(self) -> None:
        """Connect to the relay and apply the receive timeout.

        Raises:
            RelayConnectionError: If the connection cannot be established.
                The session stays unopened; call ``open`` again to retry.
        """
        if self._connected:
            return

        transport = self._transport_factory(self._host, self._port)
        try:
            peer = transport.connect()
            transport.set_receive_timeout(self._options.receive_timeout)
        except OSError as e:
            try:
                transport.close()
            except OSError as close_error:
                logger.debug("Error releasing failed connection: %s", close_error)
            raise RelayConnectionError(
                f"Unable to connect to Smart Relay at {self._host}:{self._port}: {e}"
            ) from e

        self._transport = transport
        self._connected = True
        logger.debug("Session open: %s", peer)

    def is_connected(self) -> bool:
        """Return the result of the last ``open``/``close``; does not probe."""
        return self._connected

    def push(
        self,
        pin: int,
        value: int | bool | str,
        device_id: int | str = DEFAULT_DEVICE_ID,
    ) -> bytes:
        """Send a pin command and return the device's raw response.

        Args:
            pin: Relay channel 1-8.
            value: ``PinValue.ON``/``PinValue.OFF`` (or 1/0, True/False,
                ``"on"``/``"off"``).
            device_id: Target unit address, int or hex string like ``"01"``.

        Returns:
            Up to ``max_response_len`` bytes peeked from the socket. Empty if
            nothing arrived before the receive timeout.

        Raises:
            SessionNotOpenError: If ``open`` has not succeeded.
            ValueError: If pin, value or device id are out of range.
            TransportWriteError: If the frame could not be sent in full.
            TransportReadError: If reading the response failed.
        """
        transport = self._require_open()
        frame = encode_frame(pin, to_pin_value(value), device_id)
        logger.debug("Pushing frame %s", frame.hex(" "))

        try:
            written = transport.write(frame)
        except OSError as e:
            raise TransportWriteError.from_os_error(e) from e
        if written != len(frame):
            raise TransportWriteError(
                None, f"Short write: {written}/{len(frame)} bytes"
            )

        try:
            response = transport.peek(self._options.max_response_len)
        except OSError as e:
            raise TransportReadError.from_os_error(e) from e

        logger.debug("Received %d response bytes", len(response))
        return response

    def drain(self) -> bytes:
        """Consume any bytes left in the receive buffer by earlier peeks."""
        transport = self._require_open()
        try:
            return transport.recv_nowait(self._options.max_response_len)
        except OSError as e:
            raise TransportReadError.from_os_error(e) from e

    def set_options(self, options: dict[str, Any]) -> None:
        """Update session tunables.

        Recognised keys are ``max_response_len`` (applies to the next
        ``push``) and ``receive_timeout`` / ``max_socket_rec_timeout``
        (applies to the next ``open``). Other keys are ignored.
        """
        self._options = self._options.merged(options)

    def close(self) -> None:
        """Release the transport."""
        transport = self._transport
        self._transport = None
        self._connected = False
        if transport is not None:
            transport.close()

    def _require_open(self):
        if not self._connected or self._transport is None:
            raise SessionNotOpenError(
                f"Session to {self._host}:{self._port} is not open"
            )
        return self._transport

    def __enter__(self) -> RelaySession:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self._connected else "closed"
        return f"RelaySession({self._host}:{self._port}, {state})"
