"""
Utility modules for the Pocket Cleaner.

This package contains the exception hierarchy and logging setup.
"""
