"""
CPU Package
===========

Instruction set definitions for the Game Boy's Sharp SM83 CPU, shared by
the decoder, the listing disassembler and the reachability analysis.

Usage:
    from gameboy_rom.cpu import Instruction, Register8, Jp, Call
"""

from gameboy_rom.cpu.sm83 import (
    # Operand selectors
    Register8,
    Register16,
    Condition,
    AluOperation,
    ShiftOperation,
    REGISTER_PAIRS,
    STACK_PAIRS,
    RST_VECTORS,
    # Instructions
    Nop, Stop, Halt, Di, Ei, Reti, JpHl, LdSpHl,
    Daa, Cpl, Scf, Ccf, Rlca, Rla, Rrca, Rra,
    LdImm8, LdImm16, Ld8, StoreAIndirect, LoadAIndirect, StoreAHl, LoadAHl,
    StoreSp, StoreAbsolute, LoadAbsolute, StoreHigh, LoadHigh,
    StoreHighC, LoadHighC, LdHlSp,
    Inc8, Dec8, Inc16, Dec16, AddHl, AddSp, Alu, AluImm,
    Push, Pop,
    Jr, Jp, Call, Ret, Rst,
    Shift, Bit, Res, Set,
    # Union and helpers
    Instruction,
    INSTRUCTION_TYPES,
    is_instruction,
    instruction_to_dict,
)

__all__ = [
    "Register8",
    "Register16",
    "Condition",
    "AluOperation",
    "ShiftOperation",
    "REGISTER_PAIRS",
    "STACK_PAIRS",
    "RST_VECTORS",
    "Nop", "Stop", "Halt", "Di", "Ei", "Reti", "JpHl", "LdSpHl",
    "Daa", "Cpl", "Scf", "Ccf", "Rlca", "Rla", "Rrca", "Rra",
    "LdImm8", "LdImm16", "Ld8", "StoreAIndirect", "LoadAIndirect",
    "StoreAHl", "LoadAHl", "StoreSp", "StoreAbsolute", "LoadAbsolute",
    "StoreHigh", "LoadHigh", "StoreHighC", "LoadHighC", "LdHlSp",
    "Inc8", "Dec8", "Inc16", "Dec16", "AddHl", "AddSp", "Alu", "AluImm",
    "Push", "Pop",
    "Jr", "Jp", "Call", "Ret", "Rst",
    "Shift", "Bit", "Res", "Set",
    "Instruction",
    "INSTRUCTION_TYPES",
    "is_instruction",
    "instruction_to_dict",
]
