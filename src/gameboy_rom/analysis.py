"""
Reachability Statistics
=======================

Counts how often each instruction occurs in code reachable from an entry
point, following absolute JP and CALL targets breadth-first.

Every start address is scanned linearly until its instruction stream
ends; the scan does not stop at unconditional jumps or returns. Relative
jumps are not followed, ROM banks are not modelled, and an instruction
that is reached through two different start addresses is counted twice.
The numbers are therefore a rough profile of a ROM rather than an exact
static analysis.

Usage:
    >>> stats = count_reachable_instructions(rom)
    >>> for instruction, count in stats.most_common(10):
    ...     print(f"{instruction} appearing {count} times")
"""

from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Set, Tuple

from gameboy_rom.cpu.sm83 import Call, Instruction, Jp
from gameboy_rom.rom import GameBoyRom


@dataclass
class InstructionStatistics:
    """
    Result of a reachability scan.

    Attributes:
        counts: Occurrences per distinct instruction
        visited: Start addresses that were scanned
        skipped: Jump targets outside the image
    """
    counts: Counter = field(default_factory=Counter)
    visited: Set[int] = field(default_factory=set)
    skipped: Set[int] = field(default_factory=set)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def most_common(self, n: Optional[int] = None) -> List[Tuple[Instruction, int]]:
        return self.counts.most_common(n)

    def least_common(self, n: int) -> List[Tuple[Instruction, int]]:
        """The n rarest instructions, rarest first."""
        if n <= 0:
            return []
        return self.counts.most_common()[:-n - 1:-1]


def count_reachable_instructions(rom: GameBoyRom, entry: int = 0x100) -> InstructionStatistics:
    """
    Scan the ROM from entry, queueing every absolute JP/CALL target once.

    Args:
        rom: The ROM image
        entry: First address to scan

    Returns:
        InstructionStatistics with the frequency of each instruction
    """
    stats = InstructionStatistics()
    queue: Deque[int] = deque([entry])
    stats.visited.add(entry)

    while queue:
        location = queue.popleft()
        if location >= len(rom):
            stats.skipped.add(location)
            continue

        for instruction in rom.instructions_at(location):
            if isinstance(instruction, (Jp, Call)):
                target = instruction.address
                if target not in stats.visited:
                    stats.visited.add(target)
                    queue.append(target)
            stats.counts[instruction] += 1

    return stats
