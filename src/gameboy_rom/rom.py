"""
Game Boy ROM Image
==================

A thin view over a whole cartridge image that ties the header parser,
the validator and the instruction stream together.

The image is held as an immutable bytes object; nothing here ever copies
or modifies it, so any number of headers and streams can share one
GameBoyRom.

Usage:
    >>> rom = GameBoyRom.from_file("tetris.gb")
    >>> rom.header.get_display_title()
    'TETRIS'
    >>> for instruction in rom.instructions_at(0x100).take(2):
    ...     print(instruction)
    NOP
    JP $0150

Or, for the common parse-and-check sequence:
    >>> header, rom = parse_rom(data)
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import logging

from gameboy_rom.header import HeaderValidationError, RomHeader, parse_rom_header
from gameboy_rom.disassembler.stream import InstructionStream

# Logger for this module
logger = logging.getLogger(__name__)


class GameBoyRom:
    """
    A cartridge image.

    Attributes:
        data: The raw ROM bytes
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self._header: Optional[RomHeader] = None

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "GameBoyRom":
        """
        Load a ROM image from disk.

        Raises:
            FileNotFoundError: If path does not exist
        """
        path = Path(path)
        data = path.read_bytes()
        logger.debug(f"Loaded {path} ({len(data)} bytes)")
        return cls(data)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"GameBoyRom({len(self.data)} bytes)"

    def parse_header(self) -> RomHeader:
        """
        Parse the header from the image.

        Parsing is pure: calling this twice gives equal headers.

        Raises:
            DecodeError: If the image is too short or a header field is malformed
        """
        return parse_rom_header(self.data)

    @property
    def header(self) -> RomHeader:
        """The parsed header, parsed on first access."""
        if self._header is None:
            self._header = self.parse_header()
        return self._header

    def validate(self) -> Optional[HeaderValidationError]:
        """Validate the header; None means both checks passed."""
        return self.header.validate()

    def instructions_at(self, offset: int = 0x100, strict: bool = False) -> InstructionStream:
        """
        Lazily decode instructions starting at offset.

        Args:
            offset: Offset into the image (default: the cartridge entry point)
            strict: Raise the DecodeError that ends the stream

        Raises:
            ValueError: If offset lies outside the image
        """
        return InstructionStream(self.data, offset, strict=strict)


def parse_rom(data: bytes) -> Tuple[RomHeader, GameBoyRom]:
    """
    Parse and validate a ROM image in one step.

    A header that fails validation is still returned; the failure is
    logged as a warning and can be re-checked with header.validate().

    Returns:
        (header, rom) tuple

    Raises:
        DecodeError: If the header cannot be parsed
    """
    rom = GameBoyRom(data)
    header = rom.header
    error = header.validate()
    if error is not None:
        logger.warning(f"ROM header '{header.get_display_title()}' failed validation: {error}")
    return header, rom
