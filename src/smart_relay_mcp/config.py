"""Configuration helpers for the relay MCP server."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .models.options import DEFAULT_MAX_RESPONSE_LEN, DEFAULT_RECEIVE_TIMEOUT, SessionOptions
from .protocol.framing import parse_device_id
from .transport.tcp_connection import DEFAULT_PORT


@dataclass(slots=True)
class RelaySettings:
    """Runtime configuration sourced from environment variables."""

    host: str | None = None
    port: int = DEFAULT_PORT
    device_id: str = "01"
    receive_timeout: float = DEFAULT_RECEIVE_TIMEOUT
    max_response_len: int = DEFAULT_MAX_RESPONSE_LEN
    log_level: str = "INFO"

    @property
    def session_options(self) -> SessionOptions:
        return SessionOptions(
            max_response_len=self.max_response_len,
            receive_timeout=self.receive_timeout,
        )

    @classmethod
    def from_env(cls) -> "RelaySettings":
        """Create settings object using environment overrides."""

        def _int(name: str, default: int) -> int:
            raw = os.getenv(name)
            try:
                value = int(raw) if raw is not None else default
            except ValueError:
                return default
            return value if value > 0 else default

        def _float(name: str, default: float) -> float:
            raw = os.getenv(name)
            try:
                value = float(raw) if raw is not None else default
            except ValueError:
                return default
            return value if value > 0 else default

        def _device_id(name: str, default: str) -> str:
            raw = os.getenv(name)
            if raw is None:
                return default
            try:
                parse_device_id(raw)
            except ValueError:
                return default
            return raw

        defaults = cls()

        return cls(
            host=os.getenv("SMART_RELAY_HOST") or defaults.host,
            port=_int("SMART_RELAY_PORT", defaults.port),
            device_id=_device_id("SMART_RELAY_DEVICE_ID", defaults.device_id),
            receive_timeout=_float(
                "SMART_RELAY_RECEIVE_TIMEOUT", defaults.receive_timeout
            ),
            max_response_len=_int(
                "SMART_RELAY_MAX_RESPONSE_LEN", defaults.max_response_len
            ),
            log_level=os.getenv("SMART_RELAY_LOG_LEVEL", defaults.log_level).upper(),
        )
