"""
Run a CHIP-8 / SCHIP ROM: python main.py ROM
"""

import sys

from cupax.cli import main

if __name__ == "__main__":
    sys.exit(main())
