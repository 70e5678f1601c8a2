"""
Cartridge Checksum Calculations
===============================

Informational checksum helpers. Neither result feeds validate_header();
they are reported alongside the header so a user can tell a patched or
truncated image from a pristine one.

Header Complement
-----------------
The boot ROM computes, over bytes $0134-$014C:

    x = 0
    for each byte b: x = x - b - 1   (mod 256)

and locks up if the result differs from the byte at $014D.

Global Checksum
---------------
The 16-bit sum of every byte in the ROM except the two checksum bytes
($014E-$014F). Real hardware never checks it.

Reference
---------
- Pan Docs, The Cartridge Header: https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

from dataclasses import dataclass

from gameboy_rom.cursor import ByteCursor
from gameboy_rom.header.records import RomHeader


COMPLEMENT_START = 0x134
COMPLEMENT_END = 0x14D
CHECKSUM_OFFSET = 0x14E


@dataclass
class ChecksumAnalysis:
    """
    Result of recomputing both header checksums.

    Attributes:
        stored_complement: Byte $014D as read by the parser
        calculated_complement: Complement computed from $0134-$014C
        stored_checksum: Global checksum as read by the parser
        calculated_checksum: Sum of all bytes except $014E-$014F
    """
    stored_complement: int
    calculated_complement: int
    stored_checksum: int
    calculated_checksum: int

    @property
    def complement_ok(self) -> bool:
        return self.stored_complement == self.calculated_complement

    @property
    def checksum_ok(self) -> bool:
        return self.stored_checksum == self.calculated_checksum

    @property
    def message(self) -> str:
        parts = []
        if self.complement_ok:
            parts.append("header complement OK")
        else:
            parts.append(
                f"header complement mismatch (stored 0x{self.stored_complement:02X}, "
                f"calculated 0x{self.calculated_complement:02X})"
            )
        if self.checksum_ok:
            parts.append("global checksum OK")
        else:
            parts.append(
                f"global checksum mismatch (stored 0x{self.stored_checksum:04X}, "
                f"calculated 0x{self.calculated_checksum:04X})"
            )
        return "; ".join(parts)


def calculate_header_complement(data: bytes) -> int:
    """
    Calculate the header complement byte the boot ROM expects at $014D.

    Raises:
        OutOfDataError: If the image ends before $014D
    """
    region, _ = ByteCursor(data, min(COMPLEMENT_START, len(data))).take(
        COMPLEMENT_END - COMPLEMENT_START, "header complement region"
    )
    value = 0
    for byte in region:
        value = (value - byte - 1) & 0xFF
    return value


def calculate_global_checksum(data: bytes) -> int:
    """Calculate the 16-bit sum of the image, skipping the checksum word."""
    total = sum(data[:CHECKSUM_OFFSET]) + sum(data[CHECKSUM_OFFSET + 2:])
    return total & 0xFFFF


def analyze_checksums(data: bytes, header: RomHeader) -> ChecksumAnalysis:
    """Recompute both checksums of an image whose header is already parsed."""
    return ChecksumAnalysis(
        stored_complement=header.complement,
        calculated_complement=calculate_header_complement(data),
        stored_checksum=header.checksum,
        calculated_checksum=calculate_global_checksum(data),
    )
