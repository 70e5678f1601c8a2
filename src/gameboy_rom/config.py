"""
Tool Configuration
==================

Defaults used by the gbrom command-line tool. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (which always win)

Environment variables (all optional):
    GBROM_ENTRY_POINT: Default disassembly/scan start (hex with 0x or decimal)
    GBROM_MAX_INSTRUCTIONS: Default instruction limit for listings
    GBROM_TOP_N: How many entries the statistics command prints
    GBROM_LOG_LEVEL: Logging level name when --verbose is not given
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_int(text: str) -> int:
    """Parse decimal, 0x-prefixed or $-prefixed hexadecimal text."""
    text = text.strip()
    if text.lower().startswith("0x"):
        return int(text, 16)
    if text.startswith("$"):
        return int(text[1:], 16)
    return int(text)


@dataclass
class RomToolConfig:
    """
    Configuration for the ROM tools.

    Attributes:
        entry_point: Where listings and scans start (default: $0100)
        max_instructions: Default listing length (None = until decoding stops)
        top_n: Rows shown in each statistics table
        log_level: Logging level name used without --verbose
    """
    entry_point: int = 0x100
    max_instructions: Optional[int] = None
    top_n: int = 10
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "RomToolConfig":
        """
        Create RomToolConfig from environment variables.

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if entry := os.environ.get("GBROM_ENTRY_POINT"):
            try:
                config.entry_point = parse_int(entry)
            except ValueError:
                pass  # Ignore invalid values

        if limit := os.environ.get("GBROM_MAX_INSTRUCTIONS"):
            try:
                config.max_instructions = int(limit)
            except ValueError:
                pass

        if top_n := os.environ.get("GBROM_TOP_N"):
            try:
                config.top_n = int(top_n)
            except ValueError:
                pass

        if level := os.environ.get("GBROM_LOG_LEVEL"):
            if level.upper() in LOG_LEVELS:
                config.log_level = level.upper()

        return config

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


# Global default configuration
_default_config: Optional[RomToolConfig] = None


def get_default_config() -> RomToolConfig:
    """
    Get the default configuration.

    Creates configuration from environment variables on first call.
    """
    global _default_config
    if _default_config is None:
        _default_config = RomToolConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RomToolConfig]) -> None:
    """Set (or with None, reset) the default configuration."""
    global _default_config
    _default_config = config
