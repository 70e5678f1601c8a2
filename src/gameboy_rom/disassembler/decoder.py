"""
SM83 Instruction Decoder
========================

Turns the bytes at an instruction boundary into one Instruction value.

Decoding Strategy
-----------------
Two 256-entry tables are built once, at import time:

PRIMARY_TABLE
    Indexed by the first opcode byte. Each entry is an OpcodeEntry saying
    how many operand bytes follow (none, an unsigned byte, a signed byte or
    a little-endian word) and how to build the instruction from them.
    The regular blocks are filled by bit-field decomposition:

        $40-$7F  LD r,r'      destination = bits 3-5, source = bits 0-2
                              ($76, which would be LD (HL),(HL), is HALT)
        $80-$BF  ALU A,r      operation = bits 3-5, operand = bits 0-2

    The remaining opcodes (control flow, stack, immediate forms) are listed
    explicitly. Eleven opcodes are left empty; they are holes in the
    SM83 instruction set and raise UndefinedOpcodeError.

EXTENDED_TABLE
    Indexed by the byte following the $CB escape. Every entry is a ready
    Instruction value, so the table is total:

        $00-$3F  RLC/RRC/RL/RR/SLA/SRA/SWAP/SRL   op = bits 3-5
        $40-$7F  BIT b,r                            b = bits 3-5
        $80-$BF  RES b,r
        $C0-$FF  SET b,r
    with the register in bits 0-2 for all of them.

Usage:
    >>> instruction, size = decode_instruction(bytes([0xC3, 0x34, 0x12]))
    >>> str(instruction), size
    ('JP $1234', 3)
"""

from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, List, Optional, Tuple

from gameboy_rom.cursor import ByteCursor
from gameboy_rom.errors import UndefinedOpcodeError
from gameboy_rom.cpu.sm83 import (
    REGISTER_PAIRS,
    RST_VECTORS,
    STACK_PAIRS,
    AddHl,
    AddSp,
    Alu,
    AluImm,
    AluOperation,
    Bit,
    Call,
    Ccf,
    Condition,
    Cpl,
    Daa,
    Dec16,
    Dec8,
    Di,
    Ei,
    Halt,
    Inc16,
    Inc8,
    Instruction,
    Jp,
    JpHl,
    Jr,
    Ld8,
    LdHlSp,
    LdImm16,
    LdImm8,
    LdSpHl,
    LoadAbsolute,
    LoadAHl,
    LoadAIndirect,
    LoadHigh,
    LoadHighC,
    Nop,
    Pop,
    Push,
    Register16,
    Register8,
    Res,
    Ret,
    Reti,
    Rla,
    Rlca,
    Rra,
    Rrca,
    Rst,
    Scf,
    Set,
    Shift,
    ShiftOperation,
    Stop,
    StoreAbsolute,
    StoreAHl,
    StoreAIndirect,
    StoreHigh,
    StoreHighC,
    StoreSp,
)


ESCAPE_OPCODE = 0xCB
HALT_OPCODE = 0x76

# Opcodes with no meaning on the SM83
UNDEFINED_OPCODES = frozenset(
    (0xD3, 0xDB, 0xDD, 0xE3, 0xE4, 0xEB, 0xEC, 0xED, 0xF4, 0xFC, 0xFD)
)


# =============================================================================
# Table Entries
# =============================================================================

class OperandKind(Enum):
    """Trailing operand bytes an opcode consumes."""
    NONE = "none"
    BYTE = "byte"                # unsigned 8-bit (immediates, LDH offsets)
    SIGNED_BYTE = "signed byte"  # signed 8-bit (JR, ADD SP, LD HL,SP+)
    WORD = "word"                # little-endian 16-bit

    @property
    def size(self) -> int:
        return 0 if self is OperandKind.NONE else 2 if self is OperandKind.WORD else 1


@dataclass(frozen=True)
class OpcodeEntry:
    """
    How to decode one primary opcode.

    Attributes:
        operand: Kind of trailing operand
        build: Called with no argument (NONE) or with the operand value
    """
    operand: OperandKind
    build: Callable[..., Instruction]

    @property
    def size(self) -> int:
        """Encoded size in bytes, opcode included."""
        return 1 + self.operand.size

    def decode(self, cursor: ByteCursor) -> Tuple[Instruction, ByteCursor]:
        if self.operand is OperandKind.NONE:
            return self.build(), cursor
        if self.operand is OperandKind.BYTE:
            value, cursor = cursor.read_u8("8-bit operand")
        elif self.operand is OperandKind.SIGNED_BYTE:
            value, cursor = cursor.read_i8("signed 8-bit operand")
        else:
            value, cursor = cursor.read_u16_le("16-bit operand")
        return self.build(value), cursor


def _fixed(instruction: Instruction) -> OpcodeEntry:
    return OpcodeEntry(OperandKind.NONE, lambda: instruction)


def _byte(build: Callable[[int], Instruction]) -> OpcodeEntry:
    return OpcodeEntry(OperandKind.BYTE, build)


def _signed(build: Callable[[int], Instruction]) -> OpcodeEntry:
    return OpcodeEntry(OperandKind.SIGNED_BYTE, build)


def _word(build: Callable[[int], Instruction]) -> OpcodeEntry:
    return OpcodeEntry(OperandKind.WORD, build)


# =============================================================================
# Primary Table
# =============================================================================

def _build_primary_table() -> List[Optional[OpcodeEntry]]:
    """
    Build the opcode -> OpcodeEntry table for unprefixed instructions.

    Returns:
        256-entry list; None marks undefined opcodes and the $CB escape.
    """
    table: List[Optional[OpcodeEntry]] = [None] * 256

    # $00-$3F: columns repeat every 16 bytes with the register pair in
    # bits 4-5 and the 8-bit register in bits 3-5
    for index, pair in enumerate(REGISTER_PAIRS):
        base = index << 4
        table[base | 0x01] = _word(partial(LdImm16, pair))
        table[base | 0x03] = _fixed(Inc16(pair))
        table[base | 0x09] = _fixed(AddHl(pair))
        table[base | 0x0B] = _fixed(Dec16(pair))

    for register in Register8:
        base = register << 3
        table[base | 0x04] = _fixed(Inc8(register))
        table[base | 0x05] = _fixed(Dec8(register))
        table[base | 0x06] = _byte(partial(LdImm8, register))

    table[0x00] = _fixed(Nop())
    table[0x10] = _fixed(Stop())
    table[0x02] = _fixed(StoreAIndirect(Register16.BC))
    table[0x12] = _fixed(StoreAIndirect(Register16.DE))
    table[0x22] = _fixed(StoreAHl(True))
    table[0x32] = _fixed(StoreAHl(False))
    table[0x0A] = _fixed(LoadAIndirect(Register16.BC))
    table[0x1A] = _fixed(LoadAIndirect(Register16.DE))
    table[0x2A] = _fixed(LoadAHl(True))
    table[0x3A] = _fixed(LoadAHl(False))
    table[0x07] = _fixed(Rlca())
    table[0x17] = _fixed(Rla())
    table[0x27] = _fixed(Daa())
    table[0x37] = _fixed(Scf())
    table[0x0F] = _fixed(Rrca())
    table[0x1F] = _fixed(Rra())
    table[0x2F] = _fixed(Cpl())
    table[0x3F] = _fixed(Ccf())
    table[0x08] = _word(StoreSp)
    table[0x18] = _signed(Jr)
    for condition in Condition:
        table[0x20 | (condition << 3)] = _signed(partial(Jr, condition=condition))

    # $40-$7F: LD r,r'
    for opcode in range(0x40, 0x80):
        destination = Register8((opcode >> 3) & 7)
        source = Register8(opcode & 7)
        table[opcode] = _fixed(Ld8(destination, source))
    table[HALT_OPCODE] = _fixed(Halt())

    # $80-$BF: ALU A,r
    for opcode in range(0x80, 0xC0):
        operation = AluOperation((opcode >> 3) & 7)
        table[opcode] = _fixed(Alu(operation, Register8(opcode & 7)))

    # $C0-$FF: conditional control flow in the low half, bits 3-4 select
    # the condition
    for condition in Condition:
        base = 0xC0 | (condition << 3)
        table[base | 0x00] = _fixed(Ret(condition))
        table[base | 0x02] = _word(partial(Jp, condition=condition))
        table[base | 0x04] = _word(partial(Call, condition=condition))

    for index, pair in enumerate(STACK_PAIRS):
        base = 0xC0 | (index << 4)
        table[base | 0x01] = _fixed(Pop(pair))
        table[base | 0x05] = _fixed(Push(pair))

    for operation in AluOperation:
        table[0xC6 | (operation << 3)] = _byte(partial(AluImm, operation))

    for index, vector in enumerate(RST_VECTORS):
        table[0xC7 | (index << 3)] = _fixed(Rst(vector))

    table[0xC3] = _word(Jp)
    table[0xC9] = _fixed(Ret())
    table[0xCD] = _word(Call)
    table[0xD9] = _fixed(Reti())
    table[0xE0] = _byte(StoreHigh)
    table[0xF0] = _byte(LoadHigh)
    table[0xE2] = _fixed(StoreHighC())
    table[0xF2] = _fixed(LoadHighC())
    table[0xE8] = _signed(AddSp)
    table[0xF8] = _signed(LdHlSp)
    table[0xE9] = _fixed(JpHl())
    table[0xF9] = _fixed(LdSpHl())
    table[0xEA] = _word(StoreAbsolute)
    table[0xFA] = _word(LoadAbsolute)
    table[0xF3] = _fixed(Di())
    table[0xFB] = _fixed(Ei())

    return table


# =============================================================================
# Extended ($CB) Table
# =============================================================================

def _build_extended_table() -> Tuple[Instruction, ...]:
    """Build the total 256-entry table of $CB-prefixed instructions."""
    table: List[Instruction] = []
    for byte in range(256):
        group = byte >> 6
        selector = (byte >> 3) & 7
        register = Register8(byte & 7)
        if group == 0:
            table.append(Shift(ShiftOperation(selector), register))
        elif group == 1:
            table.append(Bit(selector, register))
        elif group == 2:
            table.append(Res(selector, register))
        else:
            table.append(Set(selector, register))
    return tuple(table)


PRIMARY_TABLE: Tuple[Optional[OpcodeEntry], ...] = tuple(_build_primary_table())
EXTENDED_TABLE: Tuple[Instruction, ...] = _build_extended_table()


# =============================================================================
# Decoding
# =============================================================================

def decode_extended(cursor: ByteCursor) -> Tuple[Instruction, ByteCursor]:
    """
    Decode the byte following a $CB escape.

    Raises:
        OutOfDataError: If the buffer ends after the escape byte
    """
    byte, cursor = cursor.read_u8("extended opcode")
    return EXTENDED_TABLE[byte], cursor


def decode_at(cursor: ByteCursor) -> Tuple[Instruction, ByteCursor]:
    """
    Decode one instruction at the cursor position.

    Args:
        cursor: Cursor positioned at an instruction boundary

    Returns:
        Tuple of (instruction, cursor advanced past its operands)

    Raises:
        OutOfDataError: If the opcode or any operand byte is missing
        UndefinedOpcodeError: If the opcode is one of the eleven holes
    """
    start = cursor.position
    opcode, cursor = cursor.read_u8("opcode")
    if opcode == ESCAPE_OPCODE:
        return decode_extended(cursor)

    entry = PRIMARY_TABLE[opcode]
    if entry is None:
        raise UndefinedOpcodeError(opcode, position=start)
    return entry.decode(cursor)


def decode_instruction(data: bytes, offset: int = 0) -> Tuple[Instruction, int]:
    """
    Decode one instruction from a byte buffer.

    Args:
        data: Byte buffer containing machine code
        offset: Offset of the instruction's first byte

    Returns:
        Tuple of (instruction, number of bytes consumed)

    Raises:
        OutOfDataError: If the buffer is too short for the instruction
        UndefinedOpcodeError: If the opcode has no meaning on the SM83
    """
    cursor = ByteCursor(data, offset)
    instruction, end = decode_at(cursor)
    return instruction, end.position - offset


def instruction_size(opcode: int) -> Optional[int]:
    """
    Encoded size of the instruction starting with an opcode byte.

    Returns 2 for the $CB escape and None for undefined opcodes.
    """
    if opcode == ESCAPE_OPCODE:
        return 2
    entry = PRIMARY_TABLE[opcode]
    return entry.size if entry is not None else None
