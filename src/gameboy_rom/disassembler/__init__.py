"""
SM83 Disassembler Module
========================

Decoding of Game Boy machine code:

- **decoder**: single instruction decoding (primary and $CB tables)
- **stream**: lazy instruction sequences from any offset
- **listing**: address-annotated listings for display

Usage:
    from gameboy_rom.disassembler import decode_instruction, InstructionStream

    instruction, size = decode_instruction(rom_bytes, 0x100)
    for instruction in InstructionStream(rom_bytes, 0x150):
        print(instruction)
"""

from .decoder import (
    ESCAPE_OPCODE,
    EXTENDED_TABLE,
    PRIMARY_TABLE,
    UNDEFINED_OPCODES,
    OpcodeEntry,
    OperandKind,
    decode_at,
    decode_extended,
    decode_instruction,
    instruction_size,
)
from .stream import InstructionStream, iter_instructions
from .listing import (
    HARDWARE_SYMBOLS,
    DisassembledInstruction,
    SM83Disassembler,
    create_gameboy_disassembler,
)

__all__ = [
    # Decoder
    "ESCAPE_OPCODE",
    "EXTENDED_TABLE",
    "PRIMARY_TABLE",
    "UNDEFINED_OPCODES",
    "OpcodeEntry",
    "OperandKind",
    "decode_at",
    "decode_extended",
    "decode_instruction",
    "instruction_size",
    # Stream
    "InstructionStream",
    "iter_instructions",
    # Listing
    "HARDWARE_SYMBOLS",
    "DisassembledInstruction",
    "SM83Disassembler",
    "create_gameboy_disassembler",
]
