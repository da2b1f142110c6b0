"""Exception types raised by the relay session."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for Smart Relay errors."""


class RelayConnectionError(RelayError, ConnectionError):
    """Raised when the session cannot connect to the device."""


class SessionNotOpenError(RelayError, ConnectionError):
    """Raised when I/O is attempted on a session that is not open."""


class TransportError(RelayError, OSError):
    """A socket-level failure while talking to the device.

    Built as ``TransportError(errno, strerror)`` so the underlying error
    code and description are available as ``.errno`` and ``.strerror``.
    """

    _action = "Transport"

    def __str__(self) -> str:
        if self.errno is None:
            return f"{self._action} failed: {self.strerror}"
        return f"{self._action} failed: Error {self.errno}: {self.strerror}"

    @classmethod
    def from_os_error(cls, exc: OSError) -> TransportError:
        return cls(exc.errno, exc.strerror or str(exc))


class TransportWriteError(TransportError):
    """Sending a command frame failed or was short."""

    _action = "Write"


class TransportReadError(TransportError):
    """Reading the device response failed."""

    _action = "Read"
