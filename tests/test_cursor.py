"""
Unit Tests for the Byte Cursor
==============================

Tests for the immutable cursor and its primitive readers.
"""

import pytest

from gameboy_rom.cursor import ByteCursor
from gameboy_rom.errors import DecodeError, InvalidTextError, OutOfDataError


class TestByteCursor:
    """Tests for ByteCursor."""

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def test_defaults_to_start(self):
        """A new cursor starts at position 0."""
        cursor = ByteCursor(b"\x01\x02")
        assert cursor.position == 0
        assert cursor.remaining == 2
        assert not cursor.at_end

    def test_accepts_bytearray(self):
        """Mutable buffers are copied to bytes."""
        source = bytearray(b"\x01")
        cursor = ByteCursor(source)
        source[0] = 0xFF
        assert cursor.data == b"\x01"

    def test_position_at_end_allowed(self):
        """A cursor may sit exactly at the end of the buffer."""
        cursor = ByteCursor(b"\x01", 1)
        assert cursor.at_end
        assert cursor.remaining == 0

    def test_position_past_end_rejected(self):
        """Positions beyond the buffer are rejected."""
        with pytest.raises(ValueError):
            ByteCursor(b"\x01", 2)

    def test_negative_position_rejected(self):
        with pytest.raises(ValueError):
            ByteCursor(b"\x01", -1)

    # -------------------------------------------------------------------------
    # Readers
    # -------------------------------------------------------------------------

    def test_reads_do_not_move_original(self):
        """Readers return a new cursor and leave the old one untouched."""
        cursor = ByteCursor(b"\x2A\x00")
        value, advanced = cursor.read_u8()
        assert value == 0x2A
        assert cursor.position == 0
        assert advanced.position == 1

    def test_read_i8_negative(self):
        """$FE is -2 as a signed byte."""
        value, _ = ByteCursor(b"\xFE").read_i8()
        assert value == -2

    def test_read_i8_positive(self):
        value, _ = ByteCursor(b"\x7F").read_i8()
        assert value == 127

    def test_read_u16_little_endian(self):
        """Instruction operands are low byte first."""
        value, cursor = ByteCursor(b"\x34\x12").read_u16_le()
        assert value == 0x1234
        assert cursor.at_end

    def test_read_u16_big_endian(self):
        """The global checksum is high byte first."""
        value, _ = ByteCursor(b"\x34\x12").read_u16_be()
        assert value == 0x3412

    def test_take(self):
        chunk, cursor = ByteCursor(b"abcdef", 1).take(3)
        assert chunk == b"bcd"
        assert cursor.position == 4

    def test_skip(self):
        cursor = ByteCursor(b"abcdef").skip(5)
        assert cursor.position == 5

    def test_seek(self):
        cursor = ByteCursor(b"abcdef", 4).seek(1)
        assert cursor.position == 1

    def test_read_ascii_keeps_padding(self):
        """NUL padding is valid ASCII and is kept."""
        text, _ = ByteCursor(b"AB\x00\x00").read_ascii(4)
        assert text == "AB\x00\x00"

    # -------------------------------------------------------------------------
    # Failures
    # -------------------------------------------------------------------------

    def test_out_of_data(self):
        """Reading past the end raises OutOfDataError with details."""
        cursor = ByteCursor(b"\x01\x02\x03", 2)
        with pytest.raises(OutOfDataError) as exc_info:
            cursor.read_u16_le("operand")
        error = exc_info.value
        assert error.needed == 2
        assert error.available == 1
        assert error.position == 2
        assert error.field == "operand"
        assert "operand at offset $0002" in str(error)

    def test_out_of_data_on_empty(self):
        with pytest.raises(OutOfDataError):
            ByteCursor(b"").read_u8()

    def test_take_too_much(self):
        with pytest.raises(OutOfDataError):
            ByteCursor(b"abc").take(4)

    def test_invalid_ascii(self):
        """Bytes of $80 and above are rejected in text fields."""
        with pytest.raises(InvalidTextError) as exc_info:
            ByteCursor(b"A\xC0B", 0).read_ascii(3, "title")
        assert exc_info.value.raw == b"A\xC0B"
        assert exc_info.value.field == "title"

    def test_errors_share_base_class(self):
        """All cursor errors are DecodeErrors."""
        with pytest.raises(DecodeError):
            ByteCursor(b"").read_u8()
