"""
Command-line interface for the Game Boy ROM tools.

- **gbrom**: header inspection, disassembly listings and instruction statistics
"""
