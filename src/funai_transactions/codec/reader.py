"""
Binary Reader

Cursor-based decoding of the big-endian primitives written by
``BinaryWriter``. Every read that would run past the end of the buffer raises
``MalformedLengthError``.
"""

import builtins
import struct

from ..runtime.errors import MalformedLengthError


class BinaryReader:
    """
    Binary reader over an immutable byte buffer.

    The reader owns a cursor; ``offset`` can be used to hand the position
    back to callers that decode with explicit cursors.
    """

    def __init__(self, buf: builtins.bytes, offset: int = 0):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
            offset: Starting cursor position
        """
        self._buf = builtins.bytes(buf)
        if offset < 0 or offset > len(self._buf):
            raise MalformedLengthError(f"Cursor {offset} outside buffer of {len(self._buf)} bytes")
        self._off = offset

    @property
    def offset(self) -> int:
        """Current cursor position."""
        return self._off

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._buf) - self._off

    @property
    def eof(self) -> bool:
        """
        Check if at end of buffer.

        Returns:
            True if at end of buffer
        """
        return self._off >= len(self._buf)

    def _require(self, n: int, what: str) -> None:
        if n < 0 or self._off + n > len(self._buf):
            raise MalformedLengthError(
                f"Cannot read {what} of {n} bytes at offset {self._off}: "
                f"only {self.remaining} bytes remain",
                {"offset": self._off, "requested": n, "remaining": self.remaining},
            )

    def u8(self) -> int:
        """
        Read unsigned 8-bit integer.

        Returns:
            Unsigned 8-bit integer value
        """
        self._require(1, "u8")
        val = self._buf[self._off]
        self._off += 1
        return val

    def peek_u8(self) -> int:
        """Read the next byte without advancing the cursor."""
        self._require(1, "u8")
        return self._buf[self._off]

    def u16be(self) -> int:
        """Read unsigned 16-bit big-endian integer."""
        self._require(2, "u16")
        val = struct.unpack(">H", self._buf[self._off : self._off + 2])[0]
        self._off += 2
        return val

    def u32be(self) -> int:
        """
        Read unsigned 32-bit integer in big-endian format.

        Returns:
            Unsigned 32-bit integer value
        """
        self._require(4, "u32")
        val = struct.unpack(">I", self._buf[self._off : self._off + 4])[0]
        self._off += 4
        return val

    def u64be(self) -> int:
        """
        Read unsigned 64-bit integer in big-endian format.

        Returns:
            Unsigned 64-bit integer value
        """
        self._require(8, "u64")
        val = struct.unpack(">Q", self._buf[self._off : self._off + 8])[0]
        self._off += 8
        return val

    def uint_be(self, width: int) -> int:
        """Read an unsigned big-endian integer of ``width`` bytes."""
        return int.from_bytes(self.bytes(width), "big")

    def u128be(self) -> int:
        """Read unsigned 128-bit big-endian integer."""
        return int.from_bytes(self.bytes(16), "big")

    def i128be(self) -> int:
        """Read signed 128-bit big-endian two's complement integer."""
        return int.from_bytes(self.bytes(16), "big", signed=True)

    def bytes(self, n: int) -> builtins.bytes:
        """
        Read n bytes from buffer.

        Args:
            n: Number of bytes to read

        Returns:
            Bytes of specified length
        """
        self._require(n, "bytes")
        out = self._buf[self._off : self._off + n]
        self._off += n
        return out

    def len_prefixed_bytes(self, prefix_bytes: int = 4) -> builtins.bytes:
        """
        Read bytes preceded by a big-endian length prefix.

        Args:
            prefix_bytes: Width of the length prefix (1 or 4)

        Returns:
            Bytes with length read from the prefix
        """
        n = self.uint_be(prefix_bytes)
        return self.bytes(n)
