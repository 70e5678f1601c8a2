"""
gbrom - Game Boy ROM Inspection Command-Line Interface
======================================================

This module implements the command-line interface for inspecting Game Boy
cartridge images: decoding the header, listing machine code and
profiling which instructions a ROM uses.

Commands
--------
- **header**: Show the parsed cartridge header and validation result
- **disasm**: Disassemble SM83 machine code from an offset
- **stats**: Count instructions reachable through JP/CALL from the entry point

Usage Examples
--------------
Show the header:
    $ gbrom header tetris.gb

Header as JSON:
    $ gbrom header tetris.gb --json

Disassemble from the entry point:
    $ gbrom disasm tetris.gb

Disassemble 20 instructions at $0150 to a file:
    $ gbrom disasm tetris.gb -a 0x150 -c 20 -o listing.asm

Most and least common instructions:
    $ gbrom stats tetris.gb -n 5
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click

from gameboy_rom import __version__
from gameboy_rom.config import RomToolConfig, get_default_config, parse_int
from gameboy_rom.disassembler import SM83Disassembler, create_gameboy_disassembler
from gameboy_rom.header import analyze_checksums
from gameboy_rom.rom import GameBoyRom
from gameboy_rom.analysis import count_reachable_instructions
from gameboy_rom.cli.errors import handle_cli_exception

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Shared Context
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores verbosity and the tool configuration.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: RomToolConfig = get_default_config()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else self.config.logging_level
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


class AddressType(click.ParamType):
    """
    Click parameter type for ROM offsets.

    Accepts decimal, 0x-prefixed or $-prefixed hexadecimal values.
    """
    name = "address"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        if isinstance(value, int):
            return value
        try:
            address = parse_int(value)
        except ValueError:
            self.fail(f"Invalid address '{value}'", param, ctx)
        if address < 0:
            self.fail(f"Address must not be negative: '{value}'", param, ctx)
        return address


ADDRESS = AddressType()


def load_rom(path: Path) -> GameBoyRom:
    rom = GameBoyRom.from_file(path)
    if len(rom) == 0:
        raise click.BadParameter(f"{path} is empty")
    return rom


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(__version__, "--version", "-V", prog_name="gbrom")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Game Boy ROM inspection tools.

    Decode cartridge headers and SM83 machine code.

    \b
    Commands:
      header    Show the cartridge header
      disasm    Disassemble machine code
      stats     Instruction frequency statistics

    \b
    Examples:
      gbrom header tetris.gb
      gbrom disasm tetris.gb -a 0x150 -c 20
      gbrom stats tetris.gb
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Header Command
# =============================================================================

def format_header(rom: GameBoyRom) -> str:
    """Render the header and its checks as aligned text."""
    header = rom.header
    error = header.validate()
    checksums = analyze_checksums(rom.data, header)

    lines = [
        f"Title:             {header.get_display_title()}",
        f"Cartridge type:    {header.cartridge_type.get_description()} "
        f"(0x{header.cartridge_type.value:02X})",
        f"ROM:               {header.rom_banks} banks ({header.rom_size} bytes)",
        f"RAM:               {header.ram_banks} x {header.ram_bank_size} bytes "
        f"({header.ram_size} bytes)",
        f"Game Boy Color:    {'yes' if header.gameboy_color else 'no'}",
        f"Super Game Boy:    {'yes' if header.super_gameboy else 'no'}",
        f"Region:            {'Japan' if header.japanese else 'Overseas'}",
        f"Licensee:          0x{header.licensee_code:02X} "
        f"(new code '{header.licensee_code_new.decode('latin-1')}')",
        f"Mask ROM version:  {header.mask_rom_version}",
        f"Checksums:         {checksums.message}",
        f"Validation:        {'OK' if error is None else f'FAILED ({error})'}",
    ]
    return "\n".join(lines)


@main.command("header")
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print the header as JSON",
)
@pass_context
def cmd_header(ctx: Context, rom_file: Path, as_json: bool) -> None:
    """
    Show the cartridge header of ROM_FILE.

    \b
    Examples:
      gbrom header tetris.gb
      gbrom header tetris.gb --json
    """
    try:
        rom = load_rom(rom_file)
        if as_json:
            error = rom.validate()
            checksums = analyze_checksums(rom.data, rom.header)
            document = rom.header.to_dict()
            document["validation_error"] = None if error is None else str(error)
            document["header_complement_ok"] = checksums.complement_ok
            document["global_checksum_ok"] = checksums.checksum_ok
            click.echo(json.dumps(document, indent=2))
        else:
            click.echo(format_header(rom))
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Header")


# =============================================================================
# Disassemble Command
# =============================================================================

@main.command("disasm")
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-a", "--address",
    type=ADDRESS,
    default=None,
    help="Offset to start at (hex with 0x prefix or decimal). Default: entry point",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of instructions (default: until decoding stops)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only the instruction)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on undefined opcodes or truncated instructions",
)
@click.option(
    "--symbols/--no-symbols",
    default=True,
    help="Annotate interrupt vectors and the entry point (default: enabled)",
)
@pass_context
def cmd_disasm(
    ctx: Context,
    rom_file: Path,
    address: Optional[int],
    count: Optional[int],
    output: Optional[Path],
    no_bytes: bool,
    strict: bool,
    symbols: bool,
) -> None:
    """
    Disassemble SM83 machine code in ROM_FILE.

    Decoding stops at the end of the file, after COUNT instructions, or at
    the first undefined opcode (an error with --strict).

    \b
    Examples:
      gbrom disasm tetris.gb
      gbrom disasm tetris.gb -a 0x150 -c 20 -o listing.asm
    """
    try:
        rom = load_rom(rom_file)
        offset = ctx.config.entry_point if address is None else address
        if count is None:
            count = ctx.config.max_instructions

        if offset >= len(rom):
            raise click.BadParameter(
                f"Offset ${offset:04X} is beyond the end of {rom_file.name} "
                f"({len(rom)} bytes)"
            )

        disasm = create_gameboy_disassembler() if symbols else SM83Disassembler()
        instructions = disasm.disassemble(rom.data, offset, count, strict=strict)

        output_lines = [
            f"; Disassembly of {rom_file.name}",
            f"; Size: {len(rom)} bytes",
            f"; Start: ${offset:04X}",
            "",
        ]
        for instr in instructions:
            if no_bytes:
                line = f"${instr.address:04X}: {instr.instruction}"
                if instr.comment:
                    line += f"  ; {instr.comment}"
                output_lines.append(line)
            else:
                output_lines.append(str(instr))

        result = "\n".join(output_lines) + "\n"
        if output:
            output.write_text(result, encoding="utf-8")
            logger.info(f"Output written to: {output}")
        else:
            click.echo(result, nl=False)

        logger.debug(f"Instructions disassembled: {len(instructions)}")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Disassembly")


# =============================================================================
# Statistics Command
# =============================================================================

@main.command("stats")
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--top",
    type=click.IntRange(min=1),
    default=None,
    help="Rows per table (default: 10)",
)
@click.option(
    "-e", "--entry",
    type=ADDRESS,
    default=None,
    help="Address to start scanning from (default: entry point)",
)
@pass_context
def cmd_stats(ctx: Context, rom_file: Path, top: Optional[int], entry: Optional[int]) -> None:
    """
    Count instructions reachable from the entry point of ROM_FILE.

    Absolute JP and CALL targets are followed; relative jumps and ROM
    banks are not, so the counts are a rough profile.

    \b
    Examples:
      gbrom stats tetris.gb
      gbrom stats tetris.gb -n 5
    """
    try:
        rom = load_rom(rom_file)
        top = ctx.config.top_n if top is None else top
        entry = ctx.config.entry_point if entry is None else entry

        stats = count_reachable_instructions(rom, entry)
        logger.debug(
            f"Scanned {len(stats.visited)} start addresses, "
            f"{stats.total} instructions, {len(stats.counts)} distinct"
        )

        if not stats.counts:
            click.echo("No instructions were reachable.")
            return

        click.echo(f"The top {top} most common instructions were:")
        for i, (instruction, n) in enumerate(stats.most_common(top), start=1):
            click.echo(f"{i:>2}. {instruction} appearing {n} times")

        click.echo("")
        click.echo(f"The top {top} least common instructions were:")
        for i, (instruction, n) in enumerate(stats.least_common(top), start=1):
            click.echo(f"{i:>2}. {instruction} appearing {n} times")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Statistics")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
