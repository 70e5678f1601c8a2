"""
Header Validation
=================

Consistency checks over an already parsed RomHeader.

Two rules are checked, in this order:

1. Logo fingerprint. The boot ROM refuses to start a cartridge whose 48
   logo bytes differ from its own copy. Rather than embedding those bytes,
   we check four aggregate values that the genuine logo satisfies:
   sum 5446, OR 255, AND 0, XOR 134.
2. SGB licensee. A cartridge flagged for Super Game Boy support must use
   old licensee code $33, otherwise the SGB functions are disabled.

Only the first failing rule is reported.
"""

from functools import reduce
from typing import Optional
import operator

from gameboy_rom.header.records import HeaderValidationError, RomHeader


LOGO_SUM = 5446
LOGO_OR = 255
LOGO_AND = 0
LOGO_XOR = 134

SGB_LICENSEE_CODE = 0x33


def logo_fingerprint_matches(graphic: bytes) -> bool:
    """Check the sum/OR/AND/XOR proxy of the 48-byte boot logo."""
    return (
        sum(graphic) == LOGO_SUM
        and reduce(operator.or_, graphic, 0) == LOGO_OR
        and reduce(operator.and_, graphic, 0xFF) == LOGO_AND
        and reduce(operator.xor, graphic, 0) == LOGO_XOR
    )


def validate_header(header: RomHeader) -> Optional[HeaderValidationError]:
    """
    Check that the ROM header is internally consistent.

    This does not guarantee that the whole header is well formed; it only
    applies the two rules described in the module docstring.

    Args:
        header: A parsed header

    Returns:
        None if both rules pass, otherwise the first failing rule

    Example:
        >>> error = validate_header(header)
        >>> if error is not None:
        ...     print(f"Invalid cartridge: {error}")
    """
    if not logo_fingerprint_matches(header.scrolling_graphic):
        return HeaderValidationError.LOGO_MISMATCH
    if header.super_gameboy and header.licensee_code != SGB_LICENSEE_CODE:
        return HeaderValidationError.SGB_LICENSEE_MISMATCH
    return None
