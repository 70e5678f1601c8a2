"""
Cartridge Header Handling
=========================

Parsing and validation of the fixed metadata block at $0100-$014F of a
Game Boy ROM image.

This module provides:
- **parse_rom_header**: Decode the header into a RomHeader record
- **validate_header**: Logo fingerprint and SGB licensee checks
- **translate_rom_size / translate_ram_size**: Size code lookups
- **analyze_checksums**: Informational complement/global checksum report

Quick Start
-----------
    >>> from gameboy_rom.header import parse_rom_header, validate_header
    >>> header = parse_rom_header(rom_bytes)
    >>> error = validate_header(header)
    >>> print(header.get_display_title(), "OK" if error is None else error)
"""

from gameboy_rom.header.records import (
    CartridgeType,
    HeaderValidationError,
    RomHeader,
)
from gameboy_rom.header.translate import (
    TWO_KB,
    EIGHT_KB,
    translate_rom_size,
    translate_ram_size,
)
from gameboy_rom.header.parser import parse_rom_header
from gameboy_rom.header.validation import (
    logo_fingerprint_matches,
    validate_header,
)
from gameboy_rom.header.checksum import (
    ChecksumAnalysis,
    analyze_checksums,
    calculate_global_checksum,
    calculate_header_complement,
)

__all__ = [
    # Records
    "CartridgeType",
    "HeaderValidationError",
    "RomHeader",
    # Translators
    "TWO_KB",
    "EIGHT_KB",
    "translate_rom_size",
    "translate_ram_size",
    # Parser
    "parse_rom_header",
    # Validation
    "logo_fingerprint_matches",
    "validate_header",
    # Checksums
    "ChecksumAnalysis",
    "analyze_checksums",
    "calculate_global_checksum",
    "calculate_header_complement",
]
