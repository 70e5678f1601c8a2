"""
Byte Cursor and Primitive Field Readers
=======================================

A ByteCursor is an immutable (buffer, position) pair. Every read returns
the decoded value together with a NEW cursor advanced past the bytes that
were consumed; the original cursor and the buffer are never modified.
This makes it trivial to restart decoding from any earlier position and to
share one buffer between independent decoders.

Readers:
    take(n)          -> n raw bytes
    skip(n)          -> cursor only
    read_u8()        -> unsigned byte
    read_i8()        -> signed byte (-128..127)
    read_u16_le()    -> unsigned 16-bit, little-endian (instruction operands)
    read_u16_be()    -> unsigned 16-bit, big-endian (header global checksum)
    read_ascii(n)    -> n bytes decoded as 7-bit ASCII

Every reader raises OutOfDataError when fewer bytes remain than it needs,
without touching anything past the end of the buffer.

Usage:
    cursor = ByteCursor(rom_bytes, 0x14E)
    checksum, cursor = cursor.read_u16_be("checksum")
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
import struct

from gameboy_rom.errors import InvalidTextError, OutOfDataError


@dataclass(frozen=True)
class ByteCursor:
    """
    Read position over an immutable byte buffer.

    Attributes:
        data: The underlying buffer (never mutated)
        position: Offset of the next byte to read, 0 <= position <= len(data)
    """
    data: bytes = field(repr=False)
    position: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        if not 0 <= self.position <= len(self.data):
            raise ValueError(
                f"Position {self.position} outside buffer of {len(self.data)} bytes"
            )

    @property
    def remaining(self) -> int:
        """Number of bytes between the position and the end of the buffer."""
        return len(self.data) - self.position

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.data)

    def seek(self, position: int) -> "ByteCursor":
        """Return a cursor over the same buffer at an absolute position."""
        return ByteCursor(self.data, position)

    def _require(self, count: int, what: Optional[str]) -> None:
        if count > self.remaining:
            raise OutOfDataError(
                needed=count,
                available=self.remaining,
                position=self.position,
                field=what,
            )

    def take(self, count: int, what: Optional[str] = None) -> Tuple[bytes, "ByteCursor"]:
        """
        Read a fixed-length run of raw bytes.

        Args:
            count: Number of bytes to read
            what: Field name used in error messages

        Returns:
            Tuple of (bytes, advanced cursor)

        Raises:
            OutOfDataError: If fewer than count bytes remain
        """
        self._require(count, what)
        end = self.position + count
        return self.data[self.position:end], ByteCursor(self.data, end)

    def skip(self, count: int, what: Optional[str] = None) -> "ByteCursor":
        self._require(count, what)
        return ByteCursor(self.data, self.position + count)

    def read_u8(self, what: Optional[str] = None) -> Tuple[int, "ByteCursor"]:
        self._require(1, what)
        return self.data[self.position], ByteCursor(self.data, self.position + 1)

    def read_i8(self, what: Optional[str] = None) -> Tuple[int, "ByteCursor"]:
        """Read a two's-complement signed byte (relative jump and SP offsets)."""
        self._require(1, what)
        (value,) = struct.unpack_from("b", self.data, self.position)
        return value, ByteCursor(self.data, self.position + 1)

    def read_u16_le(self, what: Optional[str] = None) -> Tuple[int, "ByteCursor"]:
        self._require(2, what)
        (value,) = struct.unpack_from("<H", self.data, self.position)
        return value, ByteCursor(self.data, self.position + 2)

    def read_u16_be(self, what: Optional[str] = None) -> Tuple[int, "ByteCursor"]:
        self._require(2, what)
        (value,) = struct.unpack_from(">H", self.data, self.position)
        return value, ByteCursor(self.data, self.position + 2)

    def read_ascii(self, count: int, what: Optional[str] = None) -> Tuple[str, "ByteCursor"]:
        """
        Read a fixed-width ASCII text field.

        Padding bytes ($00) are valid ASCII and are kept in the result;
        callers that want a display name strip them.

        Raises:
            OutOfDataError: If fewer than count bytes remain
            InvalidTextError: If any byte is $80 or above
        """
        raw, cursor = self.take(count, what)
        try:
            text = raw.decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidTextError(raw, position=self.position, field=what) from e
        return text, cursor
