"""
Allow running the package as a module.

This module enables running the package with:
    python -m go_mirage

It simply delegates to the main() function from go_mirage.py.
"""

import sys

from .go_mirage import main

if __name__ == "__main__":
    sys.exit(main())
