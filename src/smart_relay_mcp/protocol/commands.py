"""Pin value constants and high-level command builders.

Every command the relay accepts is a write-pin frame; these helpers name
the common cases and validate arguments before encoding.
"""

from __future__ import annotations

from enum import IntEnum

from .framing import (
    DEFAULT_DEVICE_ID,
    MAX_PIN,
    MIN_PIN,
    PIN_OFF,
    PIN_ON,
    encode_frame,
)


class PinValue(IntEnum):
    """Relay channel states."""

    OFF = PIN_OFF
    ON = PIN_ON


# Accepted spellings for a pin state coming from user input
PIN_VALUE_NAMES: dict[str, PinValue] = {
    "off": PinValue.OFF,
    "on": PinValue.ON,
    "0": PinValue.OFF,
    "1": PinValue.ON,
}


def to_pin_value(value: int | bool | str) -> PinValue:
    """Coerce an int, bool or name (``"on"``/``"off"``) to a PinValue."""
    if isinstance(value, str):
        key = value.strip().lower()
        if key not in PIN_VALUE_NAMES:
            raise ValueError(
                f"Unknown pin value '{value}'. Valid: {list(PIN_VALUE_NAMES)}"
            )
        return PIN_VALUE_NAMES[key]
    if isinstance(value, bool):
        return PinValue.ON if value else PinValue.OFF
    if value not in (PIN_OFF, PIN_ON):
        raise ValueError(f"Pin value must be 0 or 1, got {value}")
    return PinValue(value)


def build_push(
    pin: int, value: int | bool | str, device_id: int | str = DEFAULT_DEVICE_ID
) -> bytes:
    """Build a write-pin frame.

    Args:
        pin: Relay channel 1-8.
        value: Target state; see :func:`to_pin_value`.
        device_id: Target unit address.
    """
    if not MIN_PIN <= pin <= MAX_PIN:
        raise ValueError(f"Pin must be {MIN_PIN}-{MAX_PIN}, got {pin}")
    return encode_frame(pin, to_pin_value(value), device_id)


def build_pin_on(pin: int, device_id: int | str = DEFAULT_DEVICE_ID) -> bytes:
    """Build a frame that switches ``pin`` on."""
    return build_push(pin, PinValue.ON, device_id)


def build_pin_off(pin: int, device_id: int | str = DEFAULT_DEVICE_ID) -> bytes:
    """Build a frame that switches ``pin`` off."""
    return build_push(pin, PinValue.OFF, device_id)
