"""
Unit Tests for the SM83 Instruction Decoder
===========================================

Test coverage includes:
- Both opcode tables are complete (only the eleven holes are undefined)
- The LD r,r block with HALT in place of LD (HL),(HL)
- The ALU block
- Operand widths, signedness and little-endian order
- The $CB extended table
- Truncated instructions and undefined opcodes
"""

import pytest

from gameboy_rom.cursor import ByteCursor
from gameboy_rom.cpu.sm83 import (
    AddSp,
    Alu,
    AluImm,
    AluOperation,
    Bit,
    Call,
    Condition,
    Dec8,
    Di,
    Halt,
    Inc16,
    Jp,
    JpHl,
    Jr,
    Ld8,
    LdHlSp,
    LdImm16,
    LdImm8,
    LoadAHl,
    LoadHigh,
    LoadHighC,
    Nop,
    Pop,
    Push,
    Register16,
    Register8,
    Res,
    Ret,
    Rst,
    Set,
    Shift,
    ShiftOperation,
    Stop,
    StoreAHl,
    StoreAbsolute,
    StoreHigh,
    StoreSp,
    instruction_to_dict,
    is_instruction,
)
from gameboy_rom.disassembler.decoder import (
    ESCAPE_OPCODE,
    EXTENDED_TABLE,
    PRIMARY_TABLE,
    UNDEFINED_OPCODES,
    decode_at,
    decode_instruction,
    instruction_size,
)
from gameboy_rom.errors import DecodeError, OutOfDataError, UndefinedOpcodeError


def decode(*data):
    return decode_instruction(bytes(data))


# =============================================================================
# Table Tests
# =============================================================================

class TestOpcodeTables:
    """Structural tests for the two opcode tables."""

    def test_exactly_eleven_undefined(self):
        """Every primary opcode except the holes and $CB has an entry."""
        missing = {op for op, entry in enumerate(PRIMARY_TABLE) if entry is None}
        assert missing == set(UNDEFINED_OPCODES) | {ESCAPE_OPCODE}
        assert len(UNDEFINED_OPCODES) == 11

    def test_extended_table_total(self):
        """All 256 $CB sub-opcodes decode."""
        assert len(EXTENDED_TABLE) == 256
        for sub in range(256):
            instruction, size = decode(0xCB, sub)
            assert is_instruction(instruction)
            assert size == 2

    def test_every_defined_opcode_decodes(self):
        """Each defined opcode decodes with its declared size."""
        for opcode in range(256):
            size = instruction_size(opcode)
            if size is None:
                continue
            data = bytes([opcode, 0x00, 0x00])
            instruction, consumed = decode_instruction(data)
            assert consumed == size, f"opcode ${opcode:02X}"
            assert is_instruction(instruction)

    @pytest.mark.parametrize("opcode", sorted(UNDEFINED_OPCODES))
    def test_undefined_opcodes_raise(self, opcode):
        with pytest.raises(UndefinedOpcodeError) as exc_info:
            decode(opcode, 0x00, 0x00)
        assert exc_info.value.opcode == opcode
        assert exc_info.value.position == 0

    def test_instruction_size(self):
        assert instruction_size(0x00) == 1
        assert instruction_size(0x3E) == 2
        assert instruction_size(0xC3) == 3
        assert instruction_size(0xCB) == 2
        assert instruction_size(0xD3) is None


# =============================================================================
# Primary Opcode Tests
# =============================================================================

class TestPrimaryOpcodes:
    """Decoding of unprefixed instructions."""

    # -------------------------------------------------------------------------
    # No-operand instructions
    # -------------------------------------------------------------------------

    def test_nop(self):
        assert decode(0x00) == (Nop(), 1)

    def test_stop(self):
        assert decode(0x10) == (Stop(), 1)

    def test_halt_replaces_ld_hl_hl(self):
        """$76 is HALT, not LD (HL),(HL)."""
        assert decode(0x76) == (Halt(), 1)

    def test_di_and_jp_hl(self):
        assert decode(0xF3) == (Di(), 1)
        assert decode(0xE9) == (JpHl(), 1)

    def test_ldh_c(self):
        assert decode(0xF2) == (LoadHighC(), 1)

    # -------------------------------------------------------------------------
    # LD r,r block
    # -------------------------------------------------------------------------

    def test_ld_b_b(self):
        assert decode(0x40) == (Ld8(Register8.B, Register8.B), 1)

    def test_ld_a_hl(self):
        assert decode(0x7E) == (Ld8(Register8.A, Register8.DEREF_HL), 1)

    def test_ld_hl_a(self):
        assert decode(0x77) == (Ld8(Register8.DEREF_HL, Register8.A), 1)

    def test_ld_block_fields(self):
        """Destination is bits 3-5 and source is bits 0-2."""
        for opcode in range(0x40, 0x80):
            if opcode == 0x76:
                continue
            instruction, _ = decode(opcode)
            assert instruction == Ld8(Register8((opcode >> 3) & 7), Register8(opcode & 7))

    # -------------------------------------------------------------------------
    # ALU block
    # -------------------------------------------------------------------------

    def test_add_a_b(self):
        assert decode(0x80) == (Alu(AluOperation.ADD, Register8.B), 1)

    def test_xor_a(self):
        assert decode(0xAF) == (Alu(AluOperation.XOR, Register8.A), 1)

    def test_cp_hl(self):
        assert decode(0xBE) == (Alu(AluOperation.CP, Register8.DEREF_HL), 1)

    def test_alu_immediate(self):
        assert decode(0xFE, 0x90) == (AluImm(AluOperation.CP, 0x90), 2)
        assert decode(0xE6, 0x0F) == (AluImm(AluOperation.AND, 0x0F), 2)

    # -------------------------------------------------------------------------
    # Immediate operands
    # -------------------------------------------------------------------------

    def test_ld_a_immediate(self):
        assert decode(0x3E, 0x42) == (LdImm8(Register8.A, 0x42), 2)

    def test_ld_hl_immediate_byte(self):
        assert decode(0x36, 0x01) == (LdImm8(Register8.DEREF_HL, 0x01), 2)

    def test_ld_sp_immediate_word(self):
        """16-bit operands are little-endian."""
        assert decode(0x31, 0xFE, 0xFF) == (LdImm16(Register16.SP, 0xFFFE), 3)

    def test_ld_nn_sp(self):
        assert decode(0x08, 0x00, 0xC0) == (StoreSp(0xC000), 3)

    def test_ld_nn_a(self):
        assert decode(0xEA, 0x00, 0xC0) == (StoreAbsolute(0xC000), 3)

    def test_ldh(self):
        assert decode(0xE0, 0x40) == (StoreHigh(0x40), 2)
        assert decode(0xF0, 0x44) == (LoadHigh(0x44), 2)

    def test_ldi_ldd(self):
        assert decode(0x22) == (StoreAHl(True), 1)
        assert decode(0x3A) == (LoadAHl(False), 1)

    def test_signed_operands(self):
        assert decode(0xE8, 0xFF) == (AddSp(-1), 2)
        assert decode(0xF8, 0x05) == (LdHlSp(5), 2)

    def test_register_pairs(self):
        assert decode(0x23) == (Inc16(Register16.HL), 1)
        assert decode(0x33) == (Inc16(Register16.SP), 1)
        assert decode(0x2D) == (Dec8(Register8.L), 1)

    # -------------------------------------------------------------------------
    # Control flow
    # -------------------------------------------------------------------------

    def test_jp(self):
        assert decode(0xC3, 0x34, 0x12) == (Jp(0x1234), 3)

    def test_conditional_jp(self):
        assert decode(0xCA, 0x50, 0x01) == (Jp(0x0150, Condition.Z), 3)

    def test_call(self):
        assert decode(0xCD, 0x00, 0x40) == (Call(0x4000), 3)
        assert decode(0xDC, 0x00, 0x40) == (Call(0x4000, Condition.C), 3)

    def test_jr_backwards(self):
        """JR offsets are signed."""
        assert decode(0x18, 0xFE) == (Jr(-2), 2)

    def test_jr_conditional(self):
        assert decode(0x20, 0x05) == (Jr(5, Condition.NZ), 2)
        assert decode(0x38, 0x80) == (Jr(-128, Condition.C), 2)

    def test_ret(self):
        assert decode(0xC9) == (Ret(), 1)
        assert decode(0xD0) == (Ret(Condition.NC), 1)

    def test_rst(self):
        assert decode(0xC7) == (Rst(0x00), 1)
        assert decode(0xFF) == (Rst(0x38), 1)

    def test_push_pop_use_af(self):
        assert decode(0xF5) == (Push(Register16.AF), 1)
        assert decode(0xC1) == (Pop(Register16.BC), 1)

    # -------------------------------------------------------------------------
    # Offsets and purity
    # -------------------------------------------------------------------------

    def test_decode_at_offset(self):
        data = bytes([0xFF, 0xFF, 0x3E, 0x42])
        assert decode_instruction(data, 2) == (LdImm8(Register8.A, 0x42), 2)

    def test_decoding_is_pure(self):
        data = bytes([0xC3, 0x34, 0x12])
        assert decode_instruction(data) == decode_instruction(data)

    def test_decode_at_returns_advanced_cursor(self):
        cursor = ByteCursor(bytes([0x00, 0xC3, 0x50, 0x01]), 1)
        instruction, after = decode_at(cursor)
        assert instruction == Jp(0x0150)
        assert after.position == 4
        assert cursor.position == 1


# =============================================================================
# Extended Opcode Tests
# =============================================================================

class TestExtendedOpcodes:
    """Decoding of $CB-prefixed instructions."""

    def test_rlc_b(self):
        assert decode(0xCB, 0x00) == (Shift(ShiftOperation.RLC, Register8.B), 2)

    def test_swap_a(self):
        assert decode(0xCB, 0x37) == (Shift(ShiftOperation.SWAP, Register8.A), 2)

    def test_srl_hl(self):
        assert decode(0xCB, 0x3E) == (Shift(ShiftOperation.SRL, Register8.DEREF_HL), 2)

    def test_bit(self):
        assert decode(0xCB, 0x7C) == (Bit(7, Register8.H), 2)

    def test_res(self):
        assert decode(0xCB, 0x87) == (Res(0, Register8.A), 2)

    def test_set(self):
        assert decode(0xCB, 0xFE) == (Set(7, Register8.DEREF_HL), 2)


# =============================================================================
# Failure Tests
# =============================================================================

class TestDecodeFailures:
    """Truncated and undefined instructions."""

    def test_empty_buffer(self):
        with pytest.raises(OutOfDataError):
            decode_instruction(b"")

    def test_escape_without_sub_opcode(self):
        with pytest.raises(OutOfDataError):
            decode(0xCB)

    def test_truncated_word(self):
        with pytest.raises(OutOfDataError) as exc_info:
            decode(0xC3, 0x34)
        assert exc_info.value.needed == 2
        assert exc_info.value.available == 1

    def test_truncated_byte(self):
        with pytest.raises(OutOfDataError):
            decode(0x3E)

    def test_every_truncation_raises(self):
        """Cutting any multi-byte instruction short raises OutOfDataError."""
        for opcode in range(256):
            size = instruction_size(opcode)
            if size is None or size == 1:
                continue
            data = bytes([opcode] + [0x00] * (size - 2))
            with pytest.raises(OutOfDataError):
                decode_instruction(data)

    def test_undefined_at_offset(self):
        with pytest.raises(UndefinedOpcodeError) as exc_info:
            decode_instruction(bytes([0x00, 0xDD]), 1)
        assert exc_info.value.position == 1
        assert "undefined opcode $DD" in str(exc_info.value)

    def test_failures_are_decode_errors(self):
        with pytest.raises(DecodeError):
            decode(0xFD)


# =============================================================================
# Rendering Tests
# =============================================================================

class TestInstructionText:
    """Tests for the assembler-syntax rendering of instructions."""

    @pytest.mark.parametrize("data,text", [
        ((0x00,), "NOP"),
        ((0x76,), "HALT"),
        ((0x3E, 0x42), "LD A,$42"),
        ((0x7E,), "LD A,(HL)"),
        ((0x21, 0x00, 0xC0), "LD HL,$C000"),
        ((0x22,), "LD (HL+),A"),
        ((0xE0, 0x40), "LDH ($40),A"),
        ((0x80,), "ADD A,B"),
        ((0x90,), "SUB B"),
        ((0xFE, 0x90), "CP $90"),
        ((0xC3, 0x50, 0x01), "JP $0150"),
        ((0xC2, 0x50, 0x01), "JP NZ,$0150"),
        ((0x20, 0xFE), "JR NZ,-2"),
        ((0xC8,), "RET Z"),
        ((0xFF,), "RST $38"),
        ((0xE8, 0x05), "ADD SP,+5"),
        ((0xCB, 0x7C), "BIT 7,H"),
        ((0xCB, 0x37), "SWAP A"),
    ])
    def test_text(self, data, text):
        instruction, _ = decode(*data)
        assert str(instruction) == text

    def test_to_dict(self):
        instruction, _ = decode(0xC2, 0x50, 0x01)
        assert instruction_to_dict(instruction) == {
            "kind": "Jp",
            "text": "JP NZ,$0150",
            "address": 0x0150,
            "condition": "NZ",
        }
