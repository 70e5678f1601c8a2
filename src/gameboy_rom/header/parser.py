"""
Cartridge Header Parser
=======================

Parses the fixed-layout header at $0100-$014F of a Game Boy ROM image.

Each field has a small parse_* function taking a ByteCursor and returning
(value, cursor). parse_rom_header() chains them in layout order. The
first failing field aborts the whole parse; there is no partial header.

Usage Examples
--------------
    >>> from gameboy_rom.header import parse_rom_header
    >>> header = parse_rom_header(Path("tetris.gb").read_bytes())
    >>> print(header.get_display_title(), header.cartridge_type.get_description())
    TETRIS ROM ONLY
"""

from typing import Tuple
import logging

from gameboy_rom.cursor import ByteCursor
from gameboy_rom.header.records import CartridgeType, RomHeader
from gameboy_rom.header.translate import translate_ram_size, translate_rom_size

# Logger for this module
logger = logging.getLogger(__name__)


ENTRY_POINT_OFFSET = 0x100
SCROLLING_GRAPHIC_SIZE = 0x30
TITLE_SIZE = 0x0F

CGB_FLAG = 0x80
SGB_FLAG = 0x03
JAPANESE_REGION = 0x00


# =============================================================================
# Field Parsers
# =============================================================================

def parse_scrolling_graphic(cursor: ByteCursor) -> Tuple[bytes, ByteCursor]:
    return cursor.take(SCROLLING_GRAPHIC_SIZE, "scrolling graphic")


def parse_game_title(cursor: ByteCursor) -> Tuple[str, ByteCursor]:
    return cursor.read_ascii(TITLE_SIZE, "game title as ASCII")


def parse_gbc_byte(cursor: ByteCursor) -> Tuple[bool, ByteCursor]:
    value, cursor = cursor.read_u8("CGB flag")
    return value == CGB_FLAG, cursor


def parse_new_licensee_code(cursor: ByteCursor) -> Tuple[bytes, ByteCursor]:
    return cursor.take(2, "new licensee code")


def parse_sgb_byte(cursor: ByteCursor) -> Tuple[bool, ByteCursor]:
    """$03 is SGB, $00 is plain GB."""
    value, cursor = cursor.read_u8("SGB flag")
    return value == SGB_FLAG, cursor


def parse_rom_type(cursor: ByteCursor) -> Tuple[CartridgeType, ByteCursor]:
    value, cursor = cursor.read_u8("cartridge type")
    return CartridgeType.from_byte(value), cursor


def parse_rom_size(cursor: ByteCursor) -> Tuple[int, ByteCursor]:
    value, next_cursor = cursor.read_u8("ROM size byte")
    return translate_rom_size(value, position=cursor.position), next_cursor


def parse_ram_size(cursor: ByteCursor) -> Tuple[Tuple[int, int], ByteCursor]:
    value, next_cursor = cursor.read_u8("RAM size byte")
    return translate_ram_size(value, position=cursor.position), next_cursor


def parse_jp_byte(cursor: ByteCursor) -> Tuple[bool, ByteCursor]:
    """Region byte: $00 means Japanese, anything else is overseas."""
    value, cursor = cursor.read_u8("region")
    return value == JAPANESE_REGION, cursor


# =============================================================================
# Header Parser
# =============================================================================

def parse_rom_header(data: bytes) -> RomHeader:
    """
    Parse the cartridge header of a ROM image.

    Args:
        data: The ROM image; at least $150 bytes are needed

    Returns:
        The parsed RomHeader

    Raises:
        OutOfDataError: If the buffer ends before $0150
        InvalidTextError: If the title is not ASCII
        UnknownRomSizeError: If the ROM size code is unknown
        UnknownRamSizeError: If the RAM size code is unknown
    """
    cursor = ByteCursor(data).skip(ENTRY_POINT_OFFSET, "ROM start")
    entry_point, cursor = cursor.take(4, "begin code execution point")
    scrolling_graphic, cursor = parse_scrolling_graphic(cursor)
    game_title, cursor = parse_game_title(cursor)
    gameboy_color, cursor = parse_gbc_byte(cursor)
    licensee_code_new, cursor = parse_new_licensee_code(cursor)
    super_gameboy, cursor = parse_sgb_byte(cursor)
    cartridge_type, cursor = parse_rom_type(cursor)
    rom_banks, cursor = parse_rom_size(cursor)
    (ram_banks, ram_bank_size), cursor = parse_ram_size(cursor)
    japanese, cursor = parse_jp_byte(cursor)
    licensee_code, cursor = cursor.read_u8("old licensee code")
    mask_rom_version, cursor = cursor.read_u8("mask rom version number")
    complement, cursor = cursor.read_u8("complement")
    checksum, cursor = cursor.read_u16_be("checksum")

    header = RomHeader(
        entry_point=entry_point,
        scrolling_graphic=scrolling_graphic,
        title=game_title,
        gameboy_color=gameboy_color,
        licensee_code_new=licensee_code_new,
        super_gameboy=super_gameboy,
        cartridge_type=cartridge_type,
        rom_banks=rom_banks,
        ram_banks=ram_banks,
        ram_bank_size=ram_bank_size,
        japanese=japanese,
        licensee_code=licensee_code,
        mask_rom_version=mask_rom_version,
        complement=complement,
        checksum=checksum,
    )
    logger.debug(
        f"Parsed header '{header.get_display_title()}': "
        f"{cartridge_type.get_description()}, {rom_banks} ROM banks, "
        f"{ram_banks}x{ram_bank_size} RAM"
    )
    return header
