"""Command frame builder and parser for the Smart Relay wire protocol.

Frame layout::

    +----------+-----------+-----------+-----------+-----------+
    |  Prefix  | Device ID |  Control  |  Enable   | Checksum  |
    |  3 bytes |  1 byte   |  2 bytes  |  2 bytes  |  2 bytes  |
    +----------+-----------+-----------+-----------+-----------+

- Prefix: 0xCC 0xDD 0xA1 (write-pin command family)
- Device ID: target unit address, default 0x01
- Control: high byte always 0x00, low byte carries the pin bit when ON
- Enable: high byte always 0x00, low byte carries the pin bit
- Checksum: c1 = sum of the preceding bytes & 0xFF, c2 = (c1 + c1) & 0xFF

Field order is fixed by the device firmware.
"""

from __future__ import annotations

from dataclasses import dataclass

PREFIX = b"\xCC\xDD\xA1"
FRAME_SIZE = 10
DEFAULT_DEVICE_ID = 0x01

PIN_OFF = 0
PIN_ON = 1

MIN_PIN = 1
MAX_PIN = 8  # one bit per pin in the control/enable low byte


@dataclass
class CommandFrame:
    """A decoded pin command frame."""

    device_id: int
    control: tuple[int, int]
    enable: tuple[int, int]
    checksum: tuple[int, int]

    @property
    def bitmask(self) -> int:
        return self.enable[1]

    @property
    def value(self) -> int:
        return PIN_ON if self.control[1] & self.enable[1] else PIN_OFF

    def __repr__(self) -> str:
        return (
            f"CommandFrame(device_id=0x{self.device_id:02X}, "
            f"control={self.control[0]:02X} {self.control[1]:02X}, "
            f"enable={self.enable[0]:02X} {self.enable[1]:02X}, "
            f"checksum={self.checksum[0]:02X} {self.checksum[1]:02X})"
        )


def pin_to_bitmask(pin: int) -> int:
    """Convert a 1-based pin index to its single-byte bitmask.

    Pins above 8 wrap to 0x00 since only one byte carries the pin bit.
    """
    if pin < MIN_PIN:
        raise ValueError(f"Pin must be >= {MIN_PIN}, got {pin}")
    return (1 << (pin - 1)) & 0xFF


def build_control_bits(bitmask: int, value: int) -> tuple[int, int]:
    """Return the (high, low) control bytes for a pin bitmask and value."""
    if value == PIN_ON:
        return 0x00, bitmask & 0xFF
    return 0x00, 0x00


def build_enable_bits(bitmask: int) -> tuple[int, int]:
    """Return the (high, low) enable bytes addressing a pin bitmask."""
    return 0x00, bitmask & 0xFF


def checksum(data: bytes) -> tuple[int, int]:
    """Compute the two trailing checksum bytes over ``data``."""
    c1 = sum(data) & 0xFF
    c2 = (c1 + c1) & 0xFF
    return c1, c2


def parse_device_id(device_id: int | str) -> int:
    """Normalise a device id given as an int or a hex string such as ``"01"``."""
    if isinstance(device_id, str):
        try:
            device_id = int(device_id, 16)
        except ValueError:
            raise ValueError(f"Device id must be a hex string, got {device_id!r}") from None
    if not 0x00 <= device_id <= 0xFF:
        raise ValueError(f"Device id must be 0x00-0xFF, got {device_id}")
    return device_id


def encode_frame(
    pin: int, value: int, device_id: int | str = DEFAULT_DEVICE_ID
) -> bytes:
    """Build the 10-byte command frame that sets ``pin`` to ``value``.

    Args:
        pin: Relay channel 1-8.
        value: ``PIN_OFF`` (0) or ``PIN_ON`` (1).
        device_id: Target unit address, int or hex string.

    Returns:
        A 10-byte ``bytes`` object ready to write to the device socket.
    """
    if not MIN_PIN <= pin <= MAX_PIN:
        raise ValueError(f"Pin must be {MIN_PIN}-{MAX_PIN}, got {pin}")
    if value not in (PIN_OFF, PIN_ON):
        raise ValueError(f"Pin value must be 0 or 1, got {value}")

    bitmask = pin_to_bitmask(pin)
    body = (
        PREFIX
        + bytes([parse_device_id(device_id)])
        + bytes(build_control_bits(bitmask, value))
        + bytes(build_enable_bits(bitmask))
    )
    return body + bytes(checksum(body))


def decode_frame(data: bytes) -> CommandFrame | None:
    """Parse a 10-byte command frame.

    Returns:
        A ``CommandFrame``, or ``None`` if the length, prefix or checksum
        is wrong.
    """
    if len(data) != FRAME_SIZE:
        return None

    if data[0:3] != PREFIX:
        return None

    # Verify checksum
    expected = (data[8], data[9])
    if checksum(data[:8]) != expected:
        return None

    return CommandFrame(
        device_id=data[3],
        control=(data[4], data[5]),
        enable=(data[6], data[7]),
        checksum=expected,
    )
