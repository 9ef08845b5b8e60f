"""
Pocket Cleaner.

Normalizes and deduplicates Pocket CSV bookmark exports.
"""

__version__ = "1.0.0"
