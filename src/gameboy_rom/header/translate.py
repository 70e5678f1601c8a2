"""
Header Field Translators
========================

Pure lookup functions turning the ROM size and RAM size codes of the
cartridge header into bank counts.

Reference
---------
- http://gbdev.gg8.se/wiki/articles/The_Cartridge_Header
"""

from typing import Optional, Tuple

from gameboy_rom.errors import UnknownRamSizeError, UnknownRomSizeError


TWO_KB = 2 * 1024
EIGHT_KB = 8 * 1024

# ROM size code -> number of 16KB banks
ROM_BANKS = {
    0x00: 2,
    0x01: 4,
    0x02: 8,
    0x03: 16,
    0x04: 32,
    0x05: 64,
    0x06: 128,
    0x07: 256,
    0x08: 512,
    0x52: 72,
    0x53: 80,
    0x54: 96,
}

# RAM size code -> (number of banks, bytes per bank)
RAM_BANKS = {
    0x00: (0, 0),
    0x01: (1, TWO_KB),
    0x02: (1, EIGHT_KB),
    0x03: (4, EIGHT_KB),
    0x04: (16, EIGHT_KB),
    0x05: (8, EIGHT_KB),
}


def translate_rom_size(value: int, position: Optional[int] = None) -> int:
    """
    Translate the ROM size byte into a bank count.

    Args:
        value: The byte at $0148
        position: Buffer offset, for error messages

    Returns:
        Number of 16KB ROM banks

    Raises:
        UnknownRomSizeError: If the byte is not a known ROM size code

    Example:
        >>> translate_rom_size(0x05)
        64
    """
    try:
        return ROM_BANKS[value]
    except KeyError:
        raise UnknownRomSizeError(value, position=position) from None


def translate_ram_size(value: int, position: Optional[int] = None) -> Tuple[int, int]:
    """
    Translate the RAM size byte into (bank count, bank size in bytes).

    Raises:
        UnknownRamSizeError: If the byte is above $05
    """
    try:
        return RAM_BANKS[value]
    except KeyError:
        raise UnknownRamSizeError(value, position=position) from None
