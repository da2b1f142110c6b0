"""Tests for the two-byte frame checksum."""

from smart_relay_mcp.protocol.framing import checksum


def test_checksum_empty():
    """Checksum of no bytes is zero."""
    assert checksum(b"") == (0x00, 0x00)


def test_checksum_second_byte_doubles_first():
    """c2 is c1 doubled, masked to a byte."""
    assert checksum(bytes([0x9F])) == (0x9F, 0x3E)
    assert checksum(bytes([0x40])) == (0x40, 0x80)


def test_checksum_wraps_at_256():
    """The sum is truncated to its low byte."""
    assert checksum(bytes([0xFF, 0x01])) == (0x00, 0x00)
    assert checksum(bytes([0xFF, 0xFF])) == (0xFE, 0xFC)


def test_checksum_pin1_off_header():
    """Header of the pin 1 OFF frame for device 0x01.

    0xCC + 0xDD + 0xA1 + 0x01 + 0x00 + 0x00 + 0x00 + 0x01 = 0x24C.
    """
    header = bytes([0xCC, 0xDD, 0xA1, 0x01, 0x00, 0x00, 0x00, 0x01])
    assert checksum(header) == (0x4C, 0x98)


def test_checksum_deterministic():
    """Same input should always produce same output."""
    data = b"\xCC\xDD\xA1\x02\x00\x04\x00\x04"
    assert checksum(data) == checksum(data)
