"""CLI entry point - wrapper for running from a checkout

Allows ``python cli.py`` next to the modular cli package.
"""

import sys

from cli.main import main

if __name__ == "__main__":
    sys.exit(main())
