"""CLI package for octopat

Command-line interface that dispenses GitHub personal access tokens.
"""

from cli.cli_app import TokenDispenserCLI
from cli.main import main

__all__ = [
    "TokenDispenserCLI",
    "main",
]
