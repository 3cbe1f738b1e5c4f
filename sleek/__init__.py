"""
cargo-sleek - track and optimize cargo usage.

Wraps cargo: built-in subcommands report usage statistics, check for
unused dependencies and profile builds; everything else is forwarded to
cargo and counted.

Subpackages:
- sleek_utils: Shared utilities (logging, file I/O, process spawning)
- tests: Unit tests
"""

__version__ = "1.1.0"
