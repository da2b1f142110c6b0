"""TCP connection to a Smart Relay unit.

The relay listens on a plain TCP port (50000 by default) and answers each
command frame with an acknowledgement. Reads use ``MSG_PEEK`` so the reply
stays in the socket buffer until it is drained explicitly.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_PORT = 50000
CONNECT_TIMEOUT_S = 5.0
RECEIVE_TIMEOUT_S = 1.0


@dataclass
class PeerInfo:
    """Endpoint details for an open connection."""

    host: str = ""
    port: int = DEFAULT_PORT
    local_address: str = ""
    local_port: int = 0


class TCPConnection:
    """Manages the TCP socket to the relay.

    Usage::

        conn = TCPConnection("192.168.1.50")
        conn.connect()
        conn.set_receive_timeout(1)
        conn.write(frame_bytes)
        response = conn.peek(20480)
        conn.close()

    Socket failures surface as ``OSError``.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        connect_timeout: float = CONNECT_TIMEOUT_S,
    ) -> None:
        self._host = host
        self._port = port
        self._connect_timeout = connect_timeout
        self._sock: socket.socket | None = None
        self._peer_info = PeerInfo(host=host, port=port)

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> PeerInfo:
        """Open the stream socket to host:port.

        Raises:
            OSError: If the connection is refused, unreachable or times out.
        """
        sock = socket.create_connection(
            (self._host, self._port), timeout=self._connect_timeout
        )
        self._sock = sock

        local_address, local_port = sock.getsockname()[:2]
        self._peer_info = PeerInfo(
            host=self._host,
            port=self._port,
            local_address=local_address,
            local_port=local_port,
        )
        logger.info("Connected to relay at %s:%d", self._host, self._port)
        return self._peer_info

    def set_receive_timeout(self, seconds: float = RECEIVE_TIMEOUT_S) -> None:
        """Bound how long a read may block."""
        self._require_socket().settimeout(seconds)

    def write(self, data: bytes) -> int:
        """Send ``data`` in a single call.

        Returns:
            Number of bytes the socket accepted, which may be short.
        """
        return self._require_socket().send(data)

    def peek(self, max_len: int) -> bytes:
        """Read up to ``max_len`` bytes without consuming them.

        Returns:
            The buffered bytes, or ``b""`` if the receive timeout elapsed
            with nothing to read.
        """
        sock = self._require_socket()
        try:
            return sock.recv(max_len, socket.MSG_PEEK)
        except socket.timeout:
            logger.debug("Peek timed out after %ss", sock.gettimeout())
            return b""

    def recv_nowait(self, max_len: int) -> bytes:
        """Consume whatever is already buffered, without blocking."""
        sock = self._require_socket()
        timeout = sock.gettimeout()
        sock.setblocking(False)
        try:
            return sock.recv(max_len)
        except BlockingIOError:
            return b""
        finally:
            sock.settimeout(timeout)

    def close(self) -> None:
        """Close the socket."""
        if self._sock is None:
            return

        try:
            self._sock.close()
        finally:
            self._sock = None
            logger.info("Disconnected from %s:%d", self._host, self._port)

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("Not connected to relay")
        return self._sock
