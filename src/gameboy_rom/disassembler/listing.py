"""
SM83 Disassembly Listings
=========================

Builds address-annotated listings on top of the instruction decoder.
The decoder itself only returns position-free Instruction values; this
module pairs each of them with its address and raw bytes for display.

Usage:
    disasm = SM83Disassembler()

    # Disassemble from the cartridge entry point
    instructions = disasm.disassemble(rom_bytes, offset=0x100, count=10)

    # Disassemble single instruction
    instr = disasm.disassemble_one(rom_bytes, offset=0x150)
    print(f"{instr.address:04X}: {instr.instruction}")
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from gameboy_rom.cpu.sm83 import (
    Call,
    Instruction,
    Jp,
    Jr,
    Rst,
    instruction_to_dict,
)
from gameboy_rom.disassembler.decoder import decode_instruction
from gameboy_rom.errors import DecodeError


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A decoded instruction together with where it came from.

    Attributes:
        address: Address of the first byte
        instruction: The decoded instruction
        raw_bytes: Opcode and operand bytes
        comment: Optional comment (branch targets, known addresses)
    """
    address: int
    instruction: Instruction
    raw_bytes: bytes
    comment: str = ""

    @property
    def size(self) -> int:
        return len(self.raw_bytes)

    def __str__(self) -> str:
        """Format as assembly line: ADDRESS: BYTES  INSTRUCTION"""
        hex_bytes = " ".join(f"{b:02X}" for b in self.raw_bytes)
        # Widest instruction is 3 bytes = 8 chars with spaces
        hex_bytes = hex_bytes.ljust(8)
        asm = str(self.instruction)

        if self.comment:
            return f"${self.address:04X}: {hex_bytes}  {asm:<16} ; {self.comment}"
        return f"${self.address:04X}: {hex_bytes}  {asm}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:04X}",
            "address_int": self.address,
            "size": self.size,
            "bytes": [f"${b:02X}" for b in self.raw_bytes],
            "instruction": instruction_to_dict(self.instruction),
            "comment": self.comment,
        }


# =============================================================================
# SM83 Disassembler
# =============================================================================

class SM83Disassembler:
    """
    Disassembler producing annotated listings of SM83 machine code.

    Attributes:
        _symbol_table: Optional symbol table for address annotation
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        """
        Initialize the disassembler.

        Args:
            symbol_table: Optional dict mapping addresses to symbol names.
                         Used to annotate jump and call targets.
        """
        self._symbol_table = symbol_table or {}

    def disassemble_one(
        self,
        data: bytes,
        offset: int = 0,
        address: Optional[int] = None,
    ) -> DisassembledInstruction:
        """
        Disassemble a single instruction.

        Args:
            data: Byte buffer containing the instruction
            offset: Offset into data buffer where instruction starts
            address: Address to display (defaults to offset)

        Returns:
            DisassembledInstruction with decoded information

        Raises:
            OutOfDataError: If the instruction runs past the buffer end
            UndefinedOpcodeError: If the opcode is undefined
        """
        if address is None:
            address = offset
        instruction, size = decode_instruction(data, offset)
        raw_bytes = bytes(data[offset:offset + size])
        return DisassembledInstruction(
            address=address,
            instruction=instruction,
            raw_bytes=raw_bytes,
            comment=self._comment_for(instruction, address, size),
        )

    def _comment_for(self, instruction: Instruction, address: int, size: int) -> str:
        """Annotate control transfers with their target."""
        if isinstance(instruction, Jr):
            # Relative to the address AFTER the instruction
            target = (address + size + instruction.offset) & 0xFFFF
            return self._symbol_table.get(target, f"-> ${target:04X}")
        if isinstance(instruction, (Jp, Call)):
            return self._symbol_table.get(instruction.address, "")
        if isinstance(instruction, Rst):
            return self._symbol_table.get(instruction.vector, "")
        return ""

    def disassemble(
        self,
        data: bytes,
        offset: int = 0,
        count: Optional[int] = None,
        base_address: Optional[int] = None,
        strict: bool = False,
    ) -> List[DisassembledInstruction]:
        """
        Disassemble consecutive instructions.

        Stops at the end of the buffer, after count instructions, or at
        the first byte run that does not decode.

        Args:
            data: Byte buffer containing machine code
            offset: Offset of the first instruction
            count: Maximum number of instructions (None = all)
            base_address: Address of data[offset] (defaults to offset)
            strict: Raise the DecodeError that ends the listing

        Returns:
            List of DisassembledInstruction objects
        """
        result = []
        address = offset if base_address is None else base_address

        while offset < len(data):
            if count is not None and len(result) >= count:
                break
            try:
                instr = self.disassemble_one(data, offset, address)
            except DecodeError:
                if strict:
                    raise
                break
            result.append(instr)
            offset += instr.size
            address += instr.size

        return result

    def disassemble_to_text(
        self,
        data: bytes,
        offset: int = 0,
        count: Optional[int] = None,
    ) -> str:
        """Disassemble and return a multi-line listing."""
        instructions = self.disassemble(data, offset, count)
        return "\n".join(str(instr) for instr in instructions)

    def add_symbol(self, address: int, name: str) -> None:
        self._symbol_table[address] = name

    def add_symbols(self, symbols: Dict[int, str]) -> None:
        self._symbol_table.update(symbols)


# =============================================================================
# Well-Known Game Boy Addresses
# =============================================================================

# Interrupt vectors and the cartridge entry point; RST vectors share the
# low area with the interrupt handlers
HARDWARE_SYMBOLS = {
    0x0040: "VBLANK_IRQ",
    0x0048: "LCD_STAT_IRQ",
    0x0050: "TIMER_IRQ",
    0x0058: "SERIAL_IRQ",
    0x0060: "JOYPAD_IRQ",
    0x0100: "ENTRY_POINT",
    0x0150: "START",
}


def create_gameboy_disassembler() -> SM83Disassembler:
    """Create a disassembler pre-configured with the hardware vectors."""
    return SM83Disassembler(symbol_table=HARDWARE_SYMBOLS.copy())
