"""
Source file discovery.

Turns the path given on the command line into the ordered list of export
files to read: either the file itself or every matching file directly inside
a directory.
"""

import logging
from pathlib import Path
from typing import List, Union

from ..utils.error_handler import NoFilesFoundError, UnsupportedInputError


class InputResolver:
    """Resolves a file or directory path into source files."""

    def __init__(self, extension: str = "csv"):
        """
        Initialize the resolver.

        Args:
            extension: Expected file extension, matched case-insensitively
        """
        self.extension = extension.lstrip(".").lower()
        self.logger = logging.getLogger(__name__)

    def matches(self, path: Path) -> bool:
        """Check whether a path has the expected extension."""
        return path.suffix.lower() == f".{self.extension}"

    def files_in_directory(self, directory: Path) -> List[Path]:
        """Matching files directly inside a directory, sorted by file name."""
        files = [p for p in directory.iterdir() if p.is_file() and self.matches(p)]
        return sorted(files, key=lambda p: p.name)

    def resolve(self, path: Union[str, Path]) -> List[Path]:
        """
        Resolve a path into the list of source files.

        Args:
            path: A single export file or a directory of exports

        Returns:
            Non-empty list of files in processing order

        Raises:
            UnsupportedInputError: If the path is not a matching file or a directory
            NoFilesFoundError: If nothing matched
        """
        path = Path(path)

        if path.is_dir():
            files = self.files_in_directory(path)
            self.logger.info(f"Found {len(files)} .{self.extension} files in {path}")
        elif path.is_file() and self.matches(path):
            files = [path]
        else:
            raise UnsupportedInputError(path, self.extension)

        if not files:
            raise NoFilesFoundError(path, self.extension)

        for file_path in files:
            self.logger.debug(f"Source file: {file_path}")

        return files
