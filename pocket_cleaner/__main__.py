#!/usr/bin/env python3
"""
Package entry point for the Pocket Cleaner.

This allows the package to be executed with: python -m pocket_cleaner
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
