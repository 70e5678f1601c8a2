"""
Cartridge Header Record Definitions
===================================

Data structures produced by the header parser.

Header Layout
-------------
    Offset  Size    Description
    ------  ----    -----------
    $0000   $100    Entry-point region (not parsed)
    $0100   4       Code execution point (kept, not interpreted)
    $0104   $30     Scrolling logo graphic
    $0134   $0F     Title (ASCII, NUL padded)
    $0143   1       CGB flag ($80 = Game Boy Color capable)
    $0144   2       New licensee code (two ASCII characters)
    $0146   1       SGB flag ($03 = Super Game Boy capable)
    $0147   1       Cartridge type (MBC / accessories)
    $0148   1       ROM size code
    $0149   1       RAM size code
    $014A   1       Region ($00 = Japanese)
    $014B   1       Old licensee code ($33 = use new code)
    $014C   1       Mask ROM version
    $014D   1       Header complement
    $014E   2       Global checksum (big-endian)

Reference
---------
- Pan Docs, The Cartridge Header: https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


# =============================================================================
# Enumeration Types
# =============================================================================

class CartridgeType(IntEnum):
    """
    Cartridge hardware type (byte $0147).

    The mapping from a byte is total: bytes without a named member produce
    an OTHER pseudo-member that still carries the raw value, so
    ``CartridgeType(0x42).value == 0x42`` and ``.is_other`` is True.
    """
    ROM_ONLY = 0x00
    MBC1 = 0x01
    MBC1_RAM = 0x02
    MBC1_RAM_BATTERY = 0x03
    MBC2 = 0x05
    MBC2_BATTERY = 0x06
    ROM_RAM = 0x08
    ROM_RAM_BATTERY = 0x09
    MMM01 = 0x0B
    MMM01_SRAM = 0x0C
    MMM01_SRAM_BATTERY = 0x0D
    MBC3_TIMER_BATTERY = 0x0F
    MBC3_TIMER_RAM_BATTERY = 0x10
    MBC3 = 0x11
    MBC3_RAM = 0x12
    MBC3_RAM_BATTERY = 0x13
    MBC5 = 0x19
    MBC5_RAM = 0x1A
    MBC5_RAM_BATTERY = 0x1B
    MBC5_RUMBLE = 0x1C
    MBC5_RUMBLE_SRAM = 0x1D
    MBC5_RUMBLE_SRAM_BATTERY = 0x1E
    POCKET_CAMERA = 0x1F
    TAMA5 = 0xFD
    HUC3 = 0xFE
    HUC1 = 0xFF

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int) and 0 <= value <= 0xFF:
            member = int.__new__(cls, value)
            member._name_ = "OTHER"
            member._value_ = value
            return member
        return None

    @classmethod
    def from_byte(cls, value: int) -> "CartridgeType":
        """Convert a cartridge type byte; never fails for 0-255."""
        return cls(value)

    @property
    def is_other(self) -> bool:
        """True for bytes with no named cartridge type."""
        return self._name_ == "OTHER"

    def get_description(self) -> str:
        """Human-readable description, e.g. 'MBC1+RAM+BATTERY'."""
        if self.is_other:
            return f"Other (0x{self.value:02X})"
        if self in (CartridgeType.ROM_ONLY, CartridgeType.POCKET_CAMERA):
            return self.name.replace("_", " ")
        return self.name.replace("_", "+")


class HeaderValidationError(Enum):
    """
    Reasons a parsed header fails validation.

    These are returned by validate_header(), never raised.
    """
    # The 48 logo bytes do not match the fingerprint of the boot logo
    LOGO_MISMATCH = "scrolling logo mismatch"
    # SGB support requires the old licensee code to be $33
    SGB_LICENSEE_MISMATCH = "SGB flag set but old licensee code is not $33"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Header Record
# =============================================================================

@dataclass(frozen=True)
class RomHeader:
    """
    The parsed cartridge header.

    Byte fields are copies of the input buffer, so a RomHeader stays valid
    after the caller drops the ROM image.

    Attributes:
        entry_point: The 4 bytes at $0100 (usually NOP; JP $0150)
        scrolling_graphic: 48 logo bytes checked by the boot ROM
        title: 15 ASCII characters, NUL padding included
        gameboy_color: CGB flag byte was $80
        licensee_code_new: Two raw bytes of the new licensee code
        super_gameboy: SGB flag byte was $03
        cartridge_type: Memory bank controller and accessories
        rom_banks: Number of 16KB ROM banks
        ram_banks: Number of external RAM banks
        ram_bank_size: Size of each RAM bank in bytes
        japanese: Region byte was $00
        licensee_code: Old licensee code byte
        mask_rom_version: Mask ROM version number
        complement: Header complement byte
        checksum: Global checksum (big-endian in the ROM)
    """
    entry_point: bytes = field(repr=False)
    scrolling_graphic: bytes = field(repr=False)
    title: str
    gameboy_color: bool
    licensee_code_new: bytes
    super_gameboy: bool
    cartridge_type: CartridgeType
    rom_banks: int
    ram_banks: int
    ram_bank_size: int
    japanese: bool
    licensee_code: int
    mask_rom_version: int
    complement: int
    checksum: int

    HEADER_START = 0x100
    HEADER_END = 0x150

    def get_display_title(self) -> str:
        """Title with trailing NUL and space padding removed."""
        return self.title.rstrip("\x00 ")

    @property
    def rom_size(self) -> int:
        """Total ROM size in bytes (16KB per bank)."""
        return self.rom_banks * 0x4000

    @property
    def ram_size(self) -> int:
        """Total external RAM in bytes."""
        return self.ram_banks * self.ram_bank_size

    def validate(self) -> Optional[HeaderValidationError]:
        """Shortcut for validate_header(self)."""
        from gameboy_rom.header.validation import validate_header
        return validate_header(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "entry_point": self.entry_point.hex(),
            "scrolling_graphic": self.scrolling_graphic.hex(),
            "title": self.get_display_title(),
            "gameboy_color": self.gameboy_color,
            "licensee_code_new": self.licensee_code_new.decode("latin-1"),
            "super_gameboy": self.super_gameboy,
            "cartridge_type": self.cartridge_type.get_description(),
            "cartridge_type_byte": f"0x{self.cartridge_type.value:02X}",
            "rom_banks": self.rom_banks,
            "ram_banks": self.ram_banks,
            "ram_bank_size": self.ram_bank_size,
            "japanese": self.japanese,
            "licensee_code": f"0x{self.licensee_code:02X}",
            "mask_rom_version": self.mask_rom_version,
            "complement": f"0x{self.complement:02X}",
            "checksum": f"0x{self.checksum:04X}",
        }
