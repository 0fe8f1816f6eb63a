"""
Binary Writer

Collects the big-endian, fixed-width and length-prefixed primitives that
make up the Funai consensus wire format.
"""

import struct
from typing import List

from ..runtime.errors import InvalidValueError


class BinaryWriter:
    """
    Binary writer producing consensus byte layouts.

    All multi-byte integers are written big-endian. Values that do not fit
    their slot are rejected instead of being masked.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def _check_range(self, v: int, bits: int) -> None:
        if v < 0 or v >= (1 << bits):
            raise InvalidValueError(f"{v} does not fit in an unsigned {bits}-bit slot")

    def u8(self, v: int) -> None:
        """
        Write unsigned 8-bit integer.

        Args:
            v: Integer value to write (0-255)
        """
        self._check_range(v, 8)
        self._bb.append(v)

    def u16be(self, v: int) -> None:
        """Write unsigned 16-bit integer in big-endian format."""
        self._check_range(v, 16)
        self._bb.extend(struct.pack('>H', v))

    def u32be(self, v: int) -> None:
        """
        Write unsigned 32-bit integer in big-endian format.

        Args:
            v: Integer value to write as 32-bit big-endian
        """
        self._check_range(v, 32)
        self._bb.extend(struct.pack('>I', v))

    def u64be(self, v: int) -> None:
        """
        Write unsigned 64-bit integer in big-endian format.

        Args:
            v: Integer value to write as 64-bit big-endian
        """
        self._check_range(v, 64)
        self._bb.extend(struct.pack('>Q', v))

    def uint_be(self, v: int, width: int) -> None:
        """
        Write an unsigned integer of ``width`` bytes, big-endian.

        Used for the configurable length prefixes (1 or 4 bytes).
        """
        self._check_range(v, width * 8)
        self._bb.extend(v.to_bytes(width, 'big'))

    def u128be(self, v: int) -> None:
        """Write unsigned 128-bit integer in big-endian format."""
        self._check_range(v, 128)
        self._bb.extend(v.to_bytes(16, 'big'))

    def i128be(self, v: int) -> None:
        """Write signed 128-bit integer as big-endian two's complement."""
        if v < -(1 << 127) or v >= (1 << 127):
            raise InvalidValueError(f"{v} does not fit in a signed 128-bit slot")
        self._bb.extend(v.to_bytes(16, 'big', signed=True))

    def bytes(self, v: bytes) -> None:
        """
        Write raw bytes without length prefix.

        Args:
            v: Bytes to write directly
        """
        self._bb.extend(v)

    def len_prefixed_bytes(self, v: bytes, prefix_bytes: int = 4) -> None:
        """
        Write bytes preceded by a big-endian length of ``prefix_bytes`` width.

        Args:
            v: Bytes to write with length prefix
            prefix_bytes: Width of the length prefix (1 or 4)
        """
        self.uint_be(len(v), prefix_bytes)
        self.bytes(v)

    def __len__(self) -> int:
        return len(self._bb)

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            Bytes containing all written data
        """
        return bytes(self._bb)
