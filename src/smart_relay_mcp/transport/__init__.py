"""Transport layer: TCP socket connection to the relay."""

from .tcp_connection import TCPConnection
