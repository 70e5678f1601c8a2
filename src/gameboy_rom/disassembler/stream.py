"""
Instruction Stream
==================

A lazy, forward-only sequence of decoded instructions starting at any
offset of a buffer.

States
------
positioned
    Holds the buffer and the offset of the next instruction. Each call to
    next() decodes one instruction, advances the offset by the number of
    bytes consumed and yields the instruction.
exhausted
    Terminal. Reached at the end of the buffer or at the first byte run
    that cannot be decoded.

By default a decode failure simply ends the sequence, exactly like a
clean end of buffer. The failure is kept on ``stream.error`` so a caller
can still tell the two apart afterwards. With ``strict=True`` the failure
is raised from next() instead.

The stream does no cycle detection; following jumps and remembering which
addresses were already visited is up to the consumer.

Usage:
    >>> stream = InstructionStream(rom_bytes, 0x100)
    >>> for instruction in stream:
    ...     print(instruction)
    >>> if stream.error is not None:
    ...     print(f"stopped at ${stream.position:04X}: {stream.error}")
"""

from typing import Iterator, List, Optional
import logging

from gameboy_rom.cursor import ByteCursor
from gameboy_rom.errors import DecodeError
from gameboy_rom.cpu.sm83 import Instruction
from gameboy_rom.disassembler.decoder import decode_at

# Logger for this module
logger = logging.getLogger(__name__)


class InstructionStream(Iterator[Instruction]):
    """
    Iterator over the instructions of a buffer from a start offset.

    Attributes:
        position: Offset of the next instruction to decode
        error: The decode failure that ended the stream, or None
        strict: Raise decode failures instead of stopping silently
    """

    def __init__(self, data: bytes, offset: int = 0, strict: bool = False):
        """
        Create a stream positioned at an offset.

        Args:
            data: Byte buffer containing machine code
            offset: Offset of the first instruction
            strict: If True, next() raises the terminal DecodeError

        Raises:
            ValueError: If offset lies outside the buffer
        """
        self._cursor = ByteCursor(data, offset)
        self.strict = strict
        self.error: Optional[DecodeError] = None
        self._exhausted = False

    @property
    def position(self) -> int:
        return self._cursor.position

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def __iter__(self) -> "InstructionStream":
        return self

    def __next__(self) -> Instruction:
        if self._exhausted:
            raise StopIteration

        if self._cursor.at_end:
            self._exhausted = True
            logger.debug(f"Instruction stream reached end of data at ${self.position:04X}")
            raise StopIteration

        try:
            instruction, self._cursor = decode_at(self._cursor)
        except DecodeError as e:
            self._exhausted = True
            self.error = e
            logger.debug(f"Instruction stream stopped: {e}")
            if self.strict:
                raise
            raise StopIteration

        return instruction

    def take(self, count: int) -> List[Instruction]:
        """Decode up to count further instructions."""
        result: List[Instruction] = []
        if count <= 0:
            return result
        for instruction in self:
            result.append(instruction)
            if len(result) >= count:
                break
        return result


def iter_instructions(data: bytes, offset: int = 0, strict: bool = False) -> InstructionStream:
    """
    Return a lazy instruction stream starting at offset.

    With strict=False (the default) the sequence silently stops at the
    first undecodable byte; with strict=True that DecodeError is raised.
    """
    return InstructionStream(data, offset, strict=strict)
