"""Session tunables."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, ClassVar

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESPONSE_LEN = 20480
DEFAULT_RECEIVE_TIMEOUT = 1.0


@dataclass(frozen=True)
class SessionOptions:
    """Read bound and socket receive timeout for a relay session."""

    max_response_len: int = DEFAULT_MAX_RESPONSE_LEN
    receive_timeout: float = DEFAULT_RECEIVE_TIMEOUT

    # Older option names still accepted by ``merged``
    ALIASES: ClassVar[dict[str, str]] = {
        "max_socket_rec_timeout": "receive_timeout",
    }

    def __post_init__(self) -> None:
        if self.max_response_len <= 0:
            raise ValueError(
                f"max_response_len must be positive, got {self.max_response_len}"
            )
        if self.receive_timeout <= 0:
            raise ValueError(
                f"receive_timeout must be positive, got {self.receive_timeout}"
            )

    def merged(self, options: dict[str, Any]) -> SessionOptions:
        """Return a copy with recognised keys from ``options`` applied.

        Unknown keys are skipped with a warning.
        """
        changes: dict[str, Any] = {}
        for key, value in options.items():
            name = self.ALIASES.get(key, key)
            if name == "max_response_len":
                changes[name] = int(value)
            elif name == "receive_timeout":
                changes[name] = float(value)
            else:
                logger.warning("Ignoring unknown session option %r", key)
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> SessionOptions:
        return cls().merged(options)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
