"""Protocol layer: frame encoding, checksum, command builders, and response handling."""

from .framing import encode_frame, decode_frame
from .commands import PinValue, build_push
