"""
SM83 Instruction Set Definitions
================================

The Game Boy CPU (Sharp SM83, often called "LR35902" or "GBZ80") is an
8080/Z80 hybrid: the Z80's register file and most of its 8-bit opcode map,
minus the IX/IY index registers, the ED/DD/FD prefixes and the shadow
registers, plus a handful of high-memory and stack-relative loads.

Architecture:
    - 8-bit registers: A, B, C, D, E, H, L (F holds the flags)
    - 16-bit pairs: BC, DE, HL, SP (AF for PUSH/POP only)
    - (HL) as an 8-bit operand means "the byte HL points to"
    - Little-endian 16-bit immediates

Instruction Model
-----------------
Every decoded instruction is an immutable value of one of the dataclasses
below. The classes share no base class: ``Instruction`` is a Union of all
of them, and consumers dispatch on the concrete type (``isinstance`` or a
``match`` statement). None of them carry an address or an encoded length;
the decoder reports how many bytes it consumed.

``str(instruction)`` renders conventional assembler syntax:
    >>> str(LdImm8(Register8.A, 0x42))
    'LD A,$42'
    >>> str(Jp(0x1234, Condition.NZ))
    'JP NZ,$1234'

Reference
---------
- Pan Docs, CPU Instruction Set: https://gbdev.io/pandocs/CPU_Instruction_Set.html
- Opcode table: https://gbdev.io/gb-opcodes/optables/
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union


# =============================================================================
# Operand Selectors
# =============================================================================

class Register8(IntEnum):
    """
    8-bit operand selector.

    Values match the 3-bit register field used throughout the opcode map
    (bits 0-2 for sources, bits 3-5 for destinations), so
    ``Register8(opcode & 7)`` decodes a source register directly.
    DEREF_HL is not a register but the byte addressed by HL.
    """
    B = 0
    C = 1
    D = 2
    E = 3
    H = 4
    L = 5
    DEREF_HL = 6
    A = 7

    def __str__(self) -> str:
        return "(HL)" if self is Register8.DEREF_HL else self.name

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


class Register16(Enum):
    """16-bit register pair selector."""
    BC = "BC"
    DE = "DE"
    HL = "HL"
    SP = "SP"
    AF = "AF"

    def __str__(self) -> str:
        return self.value


class Condition(IntEnum):
    """Branch condition (bits 3-4 of conditional opcodes)."""
    NZ = 0
    Z = 1
    NC = 2
    C = 3

    def __str__(self) -> str:
        return self.name

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


class AluOperation(IntEnum):
    """8-bit accumulator operation (bits 3-5 of $80-$BF and $C6-$FE)."""
    ADD = 0
    ADC = 1
    SUB = 2
    SBC = 3
    AND = 4
    XOR = 5
    OR = 6
    CP = 7

    def format(self, operand: str) -> str:
        # ADD, ADC and SBC name the accumulator explicitly
        if self in (AluOperation.ADD, AluOperation.ADC, AluOperation.SBC):
            return f"{self.name} A,{operand}"
        return f"{self.name} {operand}"


class ShiftOperation(IntEnum):
    """Rotate/shift/swap operation of the $CB $00-$3F block (bits 3-5)."""
    RLC = 0
    RRC = 1
    RL = 2
    RR = 3
    SLA = 4
    SRA = 5
    SWAP = 6
    SRL = 7


# Register pair order of the bits 4-5 field in $x1/$x3/$x9/$xB opcodes
REGISTER_PAIRS = (Register16.BC, Register16.DE, Register16.HL, Register16.SP)

# PUSH/POP replace SP with AF
STACK_PAIRS = (Register16.BC, Register16.DE, Register16.HL, Register16.AF)

# RST targets, indexed by bits 3-5
RST_VECTORS = (0x00, 0x08, 0x10, 0x18, 0x20, 0x28, 0x30, 0x38)


def _hex8(value: int) -> str:
    return f"${value:02X}"


def _hex16(value: int) -> str:
    return f"${value:04X}"


def _with_condition(mnemonic: str, condition: Optional[Condition], operand: str = "") -> str:
    if condition is None:
        return f"{mnemonic} {operand}" if operand else mnemonic
    if operand:
        return f"{mnemonic} {condition},{operand}"
    return f"{mnemonic} {condition}"


# =============================================================================
# Control Instructions (no operands)
# =============================================================================

@dataclass(frozen=True)
class Nop:
    def __str__(self) -> str:
        return "NOP"


@dataclass(frozen=True)
class Stop:
    def __str__(self) -> str:
        return "STOP"


@dataclass(frozen=True)
class Halt:
    def __str__(self) -> str:
        return "HALT"


@dataclass(frozen=True)
class Di:
    """Disable interrupts."""

    def __str__(self) -> str:
        return "DI"


@dataclass(frozen=True)
class Ei:
    """Enable interrupts (after the next instruction)."""

    def __str__(self) -> str:
        return "EI"


@dataclass(frozen=True)
class Reti:
    """Return and enable interrupts."""

    def __str__(self) -> str:
        return "RETI"


@dataclass(frozen=True)
class JpHl:
    """Jump to the address held in HL."""

    def __str__(self) -> str:
        return "JP HL"


@dataclass(frozen=True)
class LdSpHl:
    def __str__(self) -> str:
        return "LD SP,HL"


@dataclass(frozen=True)
class Daa:
    def __str__(self) -> str:
        return "DAA"


@dataclass(frozen=True)
class Cpl:
    def __str__(self) -> str:
        return "CPL"


@dataclass(frozen=True)
class Scf:
    def __str__(self) -> str:
        return "SCF"


@dataclass(frozen=True)
class Ccf:
    def __str__(self) -> str:
        return "CCF"


@dataclass(frozen=True)
class Rlca:
    def __str__(self) -> str:
        return "RLCA"


@dataclass(frozen=True)
class Rla:
    def __str__(self) -> str:
        return "RLA"


@dataclass(frozen=True)
class Rrca:
    def __str__(self) -> str:
        return "RRCA"


@dataclass(frozen=True)
class Rra:
    def __str__(self) -> str:
        return "RRA"


# =============================================================================
# Loads
# =============================================================================

@dataclass(frozen=True)
class LdImm8:
    """LD r,d8 (r may be (HL))."""
    register: Register8
    value: int

    def __str__(self) -> str:
        return f"LD {self.register},{_hex8(self.value)}"


@dataclass(frozen=True)
class LdImm16:
    """LD rr,d16."""
    register: Register16
    value: int

    def __str__(self) -> str:
        return f"LD {self.register},{_hex16(self.value)}"


@dataclass(frozen=True)
class Ld8:
    """LD r,r' for the $40-$7F block; either side may be (HL), never both."""
    destination: Register8
    source: Register8

    def __str__(self) -> str:
        return f"LD {self.destination},{self.source}"


@dataclass(frozen=True)
class StoreAIndirect:
    """LD (BC),A or LD (DE),A."""
    register: Register16

    def __str__(self) -> str:
        return f"LD ({self.register}),A"


@dataclass(frozen=True)
class LoadAIndirect:
    """LD A,(BC) or LD A,(DE)."""
    register: Register16

    def __str__(self) -> str:
        return f"LD A,({self.register})"


@dataclass(frozen=True)
class StoreAHl:
    """LD (HL+),A when increment is True, LD (HL-),A otherwise."""
    increment: bool

    def __str__(self) -> str:
        return f"LD (HL{'+' if self.increment else '-'}),A"


@dataclass(frozen=True)
class LoadAHl:
    """LD A,(HL+) when increment is True, LD A,(HL-) otherwise."""
    increment: bool

    def __str__(self) -> str:
        return f"LD A,(HL{'+' if self.increment else '-'})"


@dataclass(frozen=True)
class StoreSp:
    """LD (a16),SP."""
    address: int

    def __str__(self) -> str:
        return f"LD ({_hex16(self.address)}),SP"


@dataclass(frozen=True)
class StoreAbsolute:
    """LD (a16),A."""
    address: int

    def __str__(self) -> str:
        return f"LD ({_hex16(self.address)}),A"


@dataclass(frozen=True)
class LoadAbsolute:
    """LD A,(a16)."""
    address: int

    def __str__(self) -> str:
        return f"LD A,({_hex16(self.address)})"


@dataclass(frozen=True)
class StoreHigh:
    """LDH (a8),A: store A at $FF00 + offset."""
    offset: int

    def __str__(self) -> str:
        return f"LDH ({_hex8(self.offset)}),A"


@dataclass(frozen=True)
class LoadHigh:
    """LDH A,(a8): load A from $FF00 + offset."""
    offset: int

    def __str__(self) -> str:
        return f"LDH A,({_hex8(self.offset)})"


@dataclass(frozen=True)
class StoreHighC:
    """LD ($FF00+C),A."""

    def __str__(self) -> str:
        return "LD (C),A"


@dataclass(frozen=True)
class LoadHighC:
    """LD A,($FF00+C)."""

    def __str__(self) -> str:
        return "LD A,(C)"


@dataclass(frozen=True)
class LdHlSp:
    """LD HL,SP+r8 with a signed offset."""
    offset: int

    def __str__(self) -> str:
        return f"LD HL,SP{self.offset:+d}"


# =============================================================================
# Arithmetic
# =============================================================================

@dataclass(frozen=True)
class Inc8:
    register: Register8

    def __str__(self) -> str:
        return f"INC {self.register}"


@dataclass(frozen=True)
class Dec8:
    register: Register8

    def __str__(self) -> str:
        return f"DEC {self.register}"


@dataclass(frozen=True)
class Inc16:
    register: Register16

    def __str__(self) -> str:
        return f"INC {self.register}"


@dataclass(frozen=True)
class Dec16:
    register: Register16

    def __str__(self) -> str:
        return f"DEC {self.register}"


@dataclass(frozen=True)
class AddHl:
    """ADD HL,rr."""
    register: Register16

    def __str__(self) -> str:
        return f"ADD HL,{self.register}"


@dataclass(frozen=True)
class AddSp:
    """ADD SP,r8 with a signed offset."""
    offset: int

    def __str__(self) -> str:
        return f"ADD SP,{self.offset:+d}"


@dataclass(frozen=True)
class Alu:
    """8-bit accumulator operation against a register or (HL)."""
    operation: AluOperation
    operand: Register8

    def __str__(self) -> str:
        return self.operation.format(str(self.operand))


@dataclass(frozen=True)
class AluImm:
    """8-bit accumulator operation against an immediate byte."""
    operation: AluOperation
    value: int

    def __str__(self) -> str:
        return self.operation.format(_hex8(self.value))


# =============================================================================
# Stack
# =============================================================================

@dataclass(frozen=True)
class Push:
    register: Register16

    def __str__(self) -> str:
        return f"PUSH {self.register}"


@dataclass(frozen=True)
class Pop:
    register: Register16

    def __str__(self) -> str:
        return f"POP {self.register}"


# =============================================================================
# Control Flow
# =============================================================================

@dataclass(frozen=True)
class Jr:
    """
    Relative jump.

    The offset is signed and relative to the address of the NEXT
    instruction (two bytes after the opcode).
    """
    offset: int
    condition: Optional[Condition] = None

    def __str__(self) -> str:
        return _with_condition("JR", self.condition, f"{self.offset:+d}")


@dataclass(frozen=True)
class Jp:
    """Absolute jump to a 16-bit address."""
    address: int
    condition: Optional[Condition] = None

    def __str__(self) -> str:
        return _with_condition("JP", self.condition, _hex16(self.address))


@dataclass(frozen=True)
class Call:
    address: int
    condition: Optional[Condition] = None

    def __str__(self) -> str:
        return _with_condition("CALL", self.condition, _hex16(self.address))


@dataclass(frozen=True)
class Ret:
    condition: Optional[Condition] = None

    def __str__(self) -> str:
        return _with_condition("RET", self.condition)


@dataclass(frozen=True)
class Rst:
    """Call one of the eight fixed vectors $00, $08, ... $38."""
    vector: int

    def __str__(self) -> str:
        return f"RST {_hex8(self.vector)}"


# =============================================================================
# $CB-Prefixed Bit Operations
# =============================================================================

@dataclass(frozen=True)
class Shift:
    """Rotate, shift or nibble swap of a register or (HL)."""
    operation: ShiftOperation
    register: Register8

    def __str__(self) -> str:
        return f"{self.operation.name} {self.register}"


@dataclass(frozen=True)
class Bit:
    """Test bit (0-7) of a register or (HL)."""
    bit: int
    register: Register8

    def __str__(self) -> str:
        return f"BIT {self.bit},{self.register}"


@dataclass(frozen=True)
class Res:
    """Reset (clear) bit (0-7) of a register or (HL)."""
    bit: int
    register: Register8

    def __str__(self) -> str:
        return f"RES {self.bit},{self.register}"


@dataclass(frozen=True)
class Set:
    """Set bit (0-7) of a register or (HL)."""
    bit: int
    register: Register8

    def __str__(self) -> str:
        return f"SET {self.bit},{self.register}"


# =============================================================================
# The Instruction Union
# =============================================================================

INSTRUCTION_TYPES = (
    Nop, Stop, Halt, Di, Ei, Reti, JpHl, LdSpHl,
    Daa, Cpl, Scf, Ccf, Rlca, Rla, Rrca, Rra,
    LdImm8, LdImm16, Ld8, StoreAIndirect, LoadAIndirect, StoreAHl, LoadAHl,
    StoreSp, StoreAbsolute, LoadAbsolute, StoreHigh, LoadHigh,
    StoreHighC, LoadHighC, LdHlSp,
    Inc8, Dec8, Inc16, Dec16, AddHl, AddSp, Alu, AluImm,
    Push, Pop,
    Jr, Jp, Call, Ret, Rst,
    Shift, Bit, Res, Set,
)

Instruction = Union[
    Nop, Stop, Halt, Di, Ei, Reti, JpHl, LdSpHl,
    Daa, Cpl, Scf, Ccf, Rlca, Rla, Rrca, Rra,
    LdImm8, LdImm16, Ld8, StoreAIndirect, LoadAIndirect, StoreAHl, LoadAHl,
    StoreSp, StoreAbsolute, LoadAbsolute, StoreHigh, LoadHigh,
    StoreHighC, LoadHighC, LdHlSp,
    Inc8, Dec8, Inc16, Dec16, AddHl, AddSp, Alu, AluImm,
    Push, Pop,
    Jr, Jp, Call, Ret, Rst,
    Shift, Bit, Res, Set,
]


def is_instruction(value: object) -> bool:
    """True if value is one of the decoded instruction types."""
    return isinstance(value, INSTRUCTION_TYPES)


def instruction_to_dict(instruction: Instruction) -> dict:
    """
    Convert an instruction to a dictionary for JSON serialization.

    Enum operands are rendered by name, everything else is kept as is.

    Example:
        >>> instruction_to_dict(Jp(0x150))
        {'kind': 'Jp', 'text': 'JP $0150', 'address': 336, 'condition': None}
    """
    result = {"kind": type(instruction).__name__, "text": str(instruction)}
    for name, value in vars(instruction).items():
        result[name] = value.name if isinstance(value, Enum) else value
    return result
