"""
gameboy_rom - Game Boy Cartridge ROM Decoding
=============================================

This package decodes Nintendo Game Boy cartridge images: the fixed
cartridge header at $0100-$014F and the Sharp SM83 machine code in the
rest of the ROM.

Main Components
---------------
- **header**: Header parsing, validation and checksums
    Turns the 80 header bytes into a RomHeader and applies the boot ROM
    logo fingerprint and Super Game Boy licensee checks

- **disassembler**: SM83 instruction decoding
    Single instructions, lazy instruction streams and annotated listings

- **cpu**: SM83 instruction set definitions
    Registers, conditions and one value type per instruction form

- **rom**: GameBoyRom, a view over a whole image

- **analysis**: Instruction frequency statistics over reachable code

Quick Start
-----------
Parse and validate a header:
    >>> from gameboy_rom import parse_rom_header, validate_header
    >>> header = parse_rom_header(data)
    >>> header.get_display_title()
    'TETRIS'
    >>> validate_header(header) is None
    True

Decode machine code:
    >>> from gameboy_rom import decode_instruction, InstructionStream
    >>> decode_instruction(bytes([0xC3, 0x34, 0x12]))
    (Jp(address=4660, condition=None), 3)
    >>> for instruction in InstructionStream(data, 0x100):
    ...     print(instruction)

Or use the command-line tool:
    $ gbrom header tetris.gb
    $ gbrom disasm tetris.gb -c 20
    $ gbrom stats tetris.gb

Reference Documentation
-----------------------
- Pan Docs, The Cartridge Header: https://gbdev.io/pandocs/The_Cartridge_Header.html
- SM83 opcode table: https://gbdev.io/gb-opcodes/optables/

Version History
---------------
1.0.0 - Header parser, validator, SM83 decoder and gbrom tool
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from gameboy_rom.errors import (
    RomError,
    DecodeError,
    OutOfDataError,
    InvalidTextError,
    UnknownRomSizeError,
    UnknownRamSizeError,
    UndefinedOpcodeError,
)

from gameboy_rom.cursor import ByteCursor

from gameboy_rom.header import (
    CartridgeType,
    HeaderValidationError,
    RomHeader,
    parse_rom_header,
    translate_rom_size,
    translate_ram_size,
    validate_header,
    analyze_checksums,
)

from gameboy_rom.cpu import Instruction, instruction_to_dict

from gameboy_rom.disassembler import (
    decode_instruction,
    InstructionStream,
    iter_instructions,
    SM83Disassembler,
    DisassembledInstruction,
)

from gameboy_rom.rom import GameBoyRom, parse_rom
from gameboy_rom.analysis import InstructionStatistics, count_reachable_instructions

__all__ = [
    "__version__",
    # Errors
    "RomError",
    "DecodeError",
    "OutOfDataError",
    "InvalidTextError",
    "UnknownRomSizeError",
    "UnknownRamSizeError",
    "UndefinedOpcodeError",
    # Cursor
    "ByteCursor",
    # Header
    "CartridgeType",
    "HeaderValidationError",
    "RomHeader",
    "parse_rom_header",
    "translate_rom_size",
    "translate_ram_size",
    "validate_header",
    "analyze_checksums",
    # Instructions
    "Instruction",
    "instruction_to_dict",
    "decode_instruction",
    "InstructionStream",
    "iter_instructions",
    "SM83Disassembler",
    "DisassembledInstruction",
    # ROM
    "GameBoyRom",
    "parse_rom",
    "InstructionStatistics",
    "count_reachable_instructions",
]
