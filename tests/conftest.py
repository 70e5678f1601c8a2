"""
Shared Test Fixtures
====================

Builders for synthetic cartridge images. Every image produced here has a
well-formed header at $0100-$014F; individual fields can be overridden to
provoke parse or validation failures.
"""

from typing import Optional

import pytest

from gameboy_rom.config import set_default_config


# The 48-byte boot logo every licensed cartridge carries at $0104
NINTENDO_LOGO = bytes([
    0xCE, 0xED, 0x66, 0x66, 0xCC, 0x0D, 0x00, 0x0B,
    0x03, 0x73, 0x00, 0x83, 0x00, 0x0C, 0x00, 0x0D,
    0x00, 0x08, 0x11, 0x1F, 0x88, 0x89, 0x00, 0x0E,
    0xDC, 0xCC, 0x6E, 0xE6, 0xDD, 0xDD, 0xD9, 0x99,
    0xBB, 0xBB, 0x67, 0x63, 0x6E, 0x0E, 0xEC, 0xCC,
    0xDD, 0xDC, 0x99, 0x9F, 0xBB, 0xB9, 0x33, 0x3E,
])

# NOP; JP $0150
DEFAULT_ENTRY = bytes([0x00, 0xC3, 0x50, 0x01])


def build_rom(
    title: bytes = b"TETRIS",
    cgb: int = 0x00,
    new_licensee: bytes = b"00",
    sgb: int = 0x00,
    cartridge_type: int = 0x00,
    rom_size: int = 0x00,
    ram_size: int = 0x00,
    destination: int = 0x00,
    licensee: int = 0x01,
    version: int = 0x00,
    logo: bytes = NINTENDO_LOGO,
    entry: bytes = DEFAULT_ENTRY,
    code: bytes = b"",
    size: Optional[int] = None,
    fix_checksums: bool = True,
) -> bytes:
    """
    Build a ROM image with the given header fields.

    code is placed at $0150. The image is zero-filled up to size, which
    defaults to just past the end of code.
    """
    if size is None:
        size = 0x150 + len(code)
    image = bytearray(max(size, 0x150 + len(code)))

    image[0x100:0x104] = entry
    image[0x104:0x134] = logo
    image[0x134:0x143] = title.ljust(15, b"\x00")[:15]
    image[0x143] = cgb
    image[0x144:0x146] = new_licensee
    image[0x146] = sgb
    image[0x147] = cartridge_type
    image[0x148] = rom_size
    image[0x149] = ram_size
    image[0x14A] = destination
    image[0x14B] = licensee
    image[0x14C] = version
    image[0x150:0x150 + len(code)] = code

    if fix_checksums:
        complement = 0
        for byte in image[0x134:0x14D]:
            complement = (complement - byte - 1) & 0xFF
        image[0x14D] = complement
        total = (sum(image[:0x14E]) + sum(image[0x150:])) & 0xFFFF
        image[0x14E] = total >> 8
        image[0x14F] = total & 0xFF

    return bytes(image)


@pytest.fixture
def rom_builder():
    """The build_rom function, for tests that need custom headers."""
    return build_rom


@pytest.fixture
def valid_rom() -> bytes:
    """A minimal ROM-only cartridge image that passes validation."""
    return build_rom()


@pytest.fixture
def nintendo_logo() -> bytes:
    return NINTENDO_LOGO


@pytest.fixture(autouse=True)
def reset_default_config(monkeypatch):
    """Keep environment overrides from leaking between tests."""
    for name in ("GBROM_ENTRY_POINT", "GBROM_MAX_INSTRUCTIONS", "GBROM_TOP_N", "GBROM_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)
