"""
CSV handling module for Pocket export files.

This module reads Pocket CSV exports (header line followed by
title,url,added,tags rows), checks that several exports share one header,
and writes the cleaned ``title,url,added_iso,alive,tags`` CSV.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import chardet

from .data_models import (
    DEFAULT_TAG_SEPARATOR,
    DEFAULT_TITLE_PLACEHOLDER,
    PocketItem,
    parse_row,
)
from ..utils.error_handler import CSVReadError, OutputWriteError, SchemaMismatchError

# Encodings chardet reports for plain UTF-8 input; read them as utf-8-sig so a
# byte order mark never ends up in the header text
_UTF8_ALIASES = {"utf-8", "utf8", "ascii"}


class PocketCSVHandler:
    """Handles Pocket export CSV input and cleaned CSV output."""

    OUTPUT_COLUMNS = ["title", "url", "added_iso", "alive", "tags"]

    def __init__(
        self,
        encoding: Optional[str] = None,
        title_placeholder: str = DEFAULT_TITLE_PLACEHOLDER,
        tag_separator: str = DEFAULT_TAG_SEPARATOR,
    ):
        """
        Initialize the CSV handler.

        Args:
            encoding: Force this encoding instead of detecting one per file
            title_placeholder: Title for rows with a blank title
            tag_separator: Separator between tags, on input and output
        """
        self.encoding = encoding
        self.title_placeholder = title_placeholder
        self.tag_separator = tag_separator
        self.logger = logging.getLogger(__name__)
        self._detected: Dict[Path, str] = {}

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def detect_encoding(self, file_path: Union[str, Path]) -> str:
        """
        Detect the encoding of a CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            Encoding name usable with ``open``
        """
        path = Path(file_path)
        if path in self._detected:
            return self._detected[path]

        try:
            with open(path, "rb") as f:
                # Read first 64KB for detection
                sample = f.read(65536)
        except OSError as e:
            raise CSVReadError(f"Could not read {path}: {e}", path, e)

        result = chardet.detect(sample)
        encoding = result.get("encoding") or "utf-8"
        confidence = result.get("confidence") or 0.0

        self.logger.debug(
            f"Detected encoding for {path.name}: {encoding} (confidence: {confidence:.2f})"
        )

        # If confidence is low, fallback to utf-8
        if confidence < 0.7:
            if sample:
                self.logger.warning(
                    f"Low encoding confidence ({confidence:.2f}) for {path.name}, using utf-8"
                )
            encoding = "utf-8"

        if encoding.lower() in _UTF8_ALIASES:
            encoding = "utf-8-sig"

        self._detected[path] = encoding
        return encoding

    def _read_text(self, path: Path) -> str:
        """
        Read a whole file.

        A forced encoding is the only one tried. A detected encoding falls
        back to utf-8-sig, cp1252 and finally latin1.
        """
        if self.encoding:
            encoding = self.encoding
            encodings_to_try = [encoding]
        else:
            encoding = self.detect_encoding(path)
            encodings_to_try = [encoding]
            for fallback in ("utf-8-sig", "cp1252", "latin1"):
                if fallback not in encodings_to_try:
                    encodings_to_try.append(fallback)

        last_error: Optional[Exception] = None
        for enc in encodings_to_try:
            try:
                with open(path, "r", encoding=enc, newline="") as f:
                    text = f.read()
            except UnicodeDecodeError as e:
                last_error = e
                self.logger.debug(f"Encoding {enc} failed for {path.name}: {e}")
                continue
            except LookupError as e:
                raise CSVReadError(f"Unknown encoding '{enc}' for {path}", path, e)
            except OSError as e:
                raise CSVReadError(f"Could not read {path}: {e}", path, e)

            if enc != encoding:
                self.logger.warning(f"Read {path.name} with fallback encoding {enc}")
            return text

        raise CSVReadError(
            f"Could not decode '{path}' with any encoding. "
            f"Tried encodings: {', '.join(encodings_to_try)}. "
            f"Last error: {last_error}",
            path,
            last_error,
        )

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def read_header(self, file_path: Union[str, Path]) -> str:
        """
        Read the header line of a file.

        The line is compared as text, so only its terminator and surrounding
        whitespace are removed. An empty file has an empty header.
        """
        text = self._read_text(Path(file_path))
        first_line = io.StringIO(text, newline="").readline()
        return first_line.strip()

    def validate_headers(self, file_paths: Sequence[Union[str, Path]]) -> str:
        """
        Check that every file starts with the same header line.

        Args:
            file_paths: Source files in processing order

        Returns:
            The shared header

        Raises:
            SchemaMismatchError: If more than one distinct header exists
        """
        distinct: List[str] = []
        for file_path in file_paths:
            header = self.read_header(file_path)
            if header not in distinct:
                distinct.append(header)

        if len(distinct) > 1:
            raise SchemaMismatchError(distinct)

        self.logger.debug(f"Shared header: {distinct[0] if distinct else ''!r}")
        return distinct[0] if distinct else ""

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def read_records(self, file_path: Union[str, Path]) -> List[PocketItem]:
        """
        Parse one export file into records.

        The first line is skipped as the header. Rows that do not map to a
        record are dropped without error.
        """
        path = Path(file_path)
        handle = io.StringIO(self._read_text(path), newline="")
        handle.readline()

        records: List[PocketItem] = []
        skipped = 0
        try:
            for row in csv.reader(handle):
                item = parse_row(row, self.title_placeholder, self.tag_separator)
                if item is None:
                    skipped += 1
                    continue
                records.append(item)
        except csv.Error as e:
            raise CSVReadError(f"CSV parsing error in file {path}: {e}", path, e)

        self.logger.info(
            f"Read {len(records)} records from {path.name} ({skipped} rows skipped)"
        )
        return records

    def read_all(self, file_paths: Iterable[Union[str, Path]]) -> List[PocketItem]:
        """Concatenate the records of several files, file order preserved."""
        records: List[PocketItem] = []
        for file_path in file_paths:
            records.extend(self.read_records(file_path))
        return records

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def format_row(self, item: PocketItem, alive: bool) -> str:
        """
        Format one output line.

        Only the title is quoted. Commas inside tags become spaces so the
        unquoted tag field stays a single column.
        """
        title = item.title.replace('"', '""')
        tags = self.tag_separator.join(tag.replace(",", " ") for tag in item.tags)
        alive_text = "true" if alive else "false"
        return f'"{title}",{item.url},{item.added},{alive_text},{tags}'

    def write_cleaned_csv(
        self,
        rows: Sequence[Tuple[PocketItem, bool]],
        output_path: Union[str, Path],
    ) -> Path:
        """
        Write the cleaned CSV.

        Args:
            rows: (record, alive) pairs in output order
            output_path: Destination file; parent directories are created

        Returns:
            Path that was written

        Raises:
            OutputWriteError: If the file cannot be written
        """
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(",".join(self.OUTPUT_COLUMNS) + "\n")
                for item, alive in rows:
                    f.write(self.format_row(item, alive) + "\n")
        except OSError as e:
            raise OutputWriteError(f"Error saving results: {e}", path, e)

        self.logger.info(f"Wrote {len(rows)} rows to {path}")
        return path
