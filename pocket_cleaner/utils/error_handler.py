"""
Exception hierarchy for the Pocket Cleaner.

Every failure in the cleaning pipeline is terminal for the run. The CLI
catches ``PocketCleanerError`` subclasses, prints a readable message and
exits with status 1.
"""

from typing import List, Optional, Sequence


# ============================================================================
# Unified Exception Hierarchy for Pocket Cleaner
# ============================================================================
# All custom exceptions for the project are defined here.
# Import these exceptions from pocket_cleaner.utils.error_handler
# ============================================================================


class PocketCleanerError(Exception):
    """Base exception for all pocket cleaner errors."""

    pass


# ============================================================================
# Usage Errors
# ============================================================================


class UsageError(PocketCleanerError):
    """Command line was missing a required argument."""

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(PocketCleanerError):
    """Configuration-related errors."""

    pass


# ============================================================================
# Input Resolution Errors
# ============================================================================


class InputResolutionError(PocketCleanerError):
    """Base class for errors turning a path into source files."""

    pass


class UnsupportedInputError(InputResolutionError):
    """Path is neither a matching file nor a directory."""

    def __init__(self, path, extension: str = "csv"):
        self.path = path
        self.extension = extension
        super().__init__(
            f"Unsupported input: {path}. Please provide a {extension.upper()} "
            f"file or directory containing {extension.upper()} files."
        )


class NoFilesFoundError(InputResolutionError):
    """Input resolved to zero source files."""

    def __init__(self, path, extension: str = "csv"):
        self.path = path
        self.extension = extension
        super().__init__(f"No {extension.upper()} files found!")


# ============================================================================
# Schema Errors
# ============================================================================


class SchemaMismatchError(PocketCleanerError):
    """Header lines differ across source files."""

    def __init__(self, headers: Sequence[str]):
        self.headers: List[str] = list(headers)
        super().__init__(
            f"CSV headers do not match across files "
            f"({len(self.headers)} distinct headers)"
        )

    def describe(self) -> str:
        """Multi-line report listing every distinct header with its index."""
        lines = ["CSV headers do not match across files:"]
        lines.extend(
            f"Header #{idx}: {header}" for idx, header in enumerate(self.headers)
        )
        return "\n".join(lines)


# ============================================================================
# Data Errors
# ============================================================================


class EmptyDatasetError(PocketCleanerError):
    """No records survived parsing."""

    def __init__(self, message: str = "No data to process!"):
        super().__init__(message)


class CSVError(PocketCleanerError):
    """CSV file handling errors."""

    def __init__(self, message: str, path=None, original_error: Optional[Exception] = None):
        self.path = path
        self.original_error = original_error
        super().__init__(message)


class CSVReadError(CSVError):
    """A source file could not be opened or decoded."""

    pass


class OutputWriteError(CSVError):
    """The cleaned CSV could not be written."""

    pass


class DatabaseError(PocketCleanerError):
    """Keyed table sink failures."""

    pass
