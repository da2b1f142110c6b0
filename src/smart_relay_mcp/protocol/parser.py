"""Response handling for device acknowledgements.

The relay's reply format is undocumented, so responses are kept as raw
bytes and only described, never interpreted.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RelayResponse:
    """Raw acknowledgement bytes returned after a push."""

    raw: bytes

    @property
    def empty(self) -> bool:
        return not self.raw

    def __len__(self) -> int:
        return len(self.raw)

    def to_dict(self) -> dict:
        return {
            "raw_hex": self.raw.hex(" ") if self.raw else "",
            "raw_length": len(self.raw),
            "empty": self.empty,
        }

    def __repr__(self) -> str:
        return (
            f"RelayResponse(raw={self.raw.hex(' ') if self.raw else '(empty)'})"
        )


def parse_response(data: bytes | None) -> RelayResponse:
    """Wrap bytes read from the device.

    ``None`` (nothing read) is treated the same as an empty reply.
    """
    return RelayResponse(raw=bytes(data) if data else b"")
