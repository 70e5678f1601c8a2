"""
Game Boy ROM Error Hierarchy
============================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from RomError, allowing callers to catch every
decoding problem with a single except clause if desired.

Exception Hierarchy
-------------------
RomError (base)
└── DecodeError (byte-level decoding)
    ├── OutOfDataError - fewer bytes remain than a field requires
    ├── InvalidTextError - title bytes are not 7-bit ASCII
    ├── UnknownRomSizeError - ROM size byte outside the known table
    ├── UnknownRamSizeError - RAM size byte outside the known table
    └── UndefinedOpcodeError - opcode byte has no meaning on the SM83

Header validation failures are deliberately NOT exceptions. They are
returned as HeaderValidationError values (see gameboy_rom.header.records)
so that a caller always gets a structurally parsed header and can decide
what to do with a cartridge that fails the checks.

Error messages follow this format:
    <what> at offset $XXXX: <detail>
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class RomError(Exception):
    """
    Base exception for all gameboy_rom errors.

        try:
            header = parse_rom_header(data)
        except RomError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Decoding Exceptions
# =============================================================================

class DecodeError(RomError):
    """
    Base exception for failures while decoding bytes.

    Attributes:
        message: The error description
        position: Buffer offset where decoding failed (optional)
        field: Name of the field being decoded (optional)
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        field: Optional[str] = None,
    ):
        self.message = message
        self.position = position
        self.field = field
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        subject = self.field or "data"
        if self.position is not None:
            return f"{subject} at offset ${self.position:04X}: {self.message}"
        return f"{subject}: {self.message}"


class OutOfDataError(DecodeError):
    """
    Not enough bytes remain for the field being read.

    Raised by every primitive reader and therefore by both the header
    parser and the instruction decoder. A reader never looks past the
    end of the buffer before raising this.
    """

    def __init__(
        self,
        needed: int,
        available: int,
        position: Optional[int] = None,
        field: Optional[str] = None,
    ):
        self.needed = needed
        self.available = available
        byte_word = "byte" if needed == 1 else "bytes"
        super().__init__(
            f"need {needed} {byte_word}, only {available} available",
            position=position,
            field=field,
        )


class InvalidTextError(DecodeError):
    """
    A fixed-width text field contains bytes outside 7-bit ASCII.

    Attributes:
        raw: The offending byte run
    """

    def __init__(
        self,
        raw: bytes,
        position: Optional[int] = None,
        field: Optional[str] = None,
    ):
        self.raw = raw
        super().__init__(
            f"not valid ASCII text: {raw.hex(' ')}",
            position=position,
            field=field,
        )


class UnknownRomSizeError(DecodeError):
    """
    ROM size byte is not one of the twelve known encodings.

    Known values are $00-$08 and $52-$54.
    """

    def __init__(self, value: int, position: Optional[int] = None):
        self.value = value
        super().__init__(
            f"unknown ROM size byte ${value:02X}",
            position=position,
            field="ROM size byte",
        )


class UnknownRamSizeError(DecodeError):
    """RAM size byte is outside $00-$05."""

    def __init__(self, value: int, position: Optional[int] = None):
        self.value = value
        super().__init__(
            f"unknown RAM size byte ${value:02X}",
            position=position,
            field="RAM size byte",
        )


class UndefinedOpcodeError(DecodeError):
    """
    Opcode byte has no instruction meaning on the SM83.

    Eleven primary opcodes are holes in the instruction set:
    $D3, $DB, $DD, $E3, $E4, $EB, $EC, $ED, $F4, $FC, $FD.
    Every byte following the $CB escape is defined, so this error is
    never raised for the extended table.
    """

    def __init__(self, opcode: int, position: Optional[int] = None):
        self.opcode = opcode
        super().__init__(
            f"undefined opcode ${opcode:02X}",
            position=position,
            field="opcode",
        )
