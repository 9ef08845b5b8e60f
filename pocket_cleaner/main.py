#!/usr/bin/env python3
"""
Main entry point for the Pocket Cleaner.
"""

import sys
from pocket_cleaner.cli import main


if __name__ == "__main__":
    sys.exit(main())
