"""
Main entry point for running the package as a module.

Usage:
    python -m mediavariants probe
    python -m mediavariants generate page-12.png --local-root ./storage
    python -m mediavariants regenerate --manifest media.json
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
