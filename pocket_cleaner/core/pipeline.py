"""
Cleaning pipeline.

Runs the stages in order: resolve source files, check their headers, parse
records, deduplicate by normalized URL, check links, then write the cleaned
CSV and upsert into the optional table sink. Any stage failure raises and
ends the run.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .csv_handler import PocketCSVHandler
from .data_models import PocketItem
from .database import NullTableSink, TableSink, create_table_sink
from .duplicate_detector import DuplicateDetectionResult, DuplicateDetector
from .input_resolver import InputResolver
from .link_checker import AlwaysAliveChecker, LinkChecker, check_links
from ..config.configuration import Configuration
from ..utils.error_handler import EmptyDatasetError


@dataclass
class PipelineResult:
    """Outcome of one cleaning run."""

    source_files: List[Path]
    loaded_count: int
    items: List[PocketItem]
    output_path: Path
    upserted_count: int = 0
    duplicates: Optional[DuplicateDetectionResult] = None
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def kept_count(self) -> int:
        return len(self.items)


class CleaningPipeline:
    """
    Sequential Pocket export cleaning pipeline.

    Collaborators are injected so tests and callers can swap the link
    checker or the table sink without touching the stages.
    """

    def __init__(
        self,
        resolver: Optional[InputResolver] = None,
        csv_handler: Optional[PocketCSVHandler] = None,
        detector: Optional[DuplicateDetector] = None,
        link_checker: Optional[LinkChecker] = None,
        table_sink: Optional[TableSink] = None,
        progress: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            resolver: Source file resolver
            csv_handler: Reader/writer for CSV files
            detector: Duplicate detector
            link_checker: Liveness checker (defaults to always alive)
            table_sink: Optional keyed table sink (defaults to no-op)
            progress: Callback receiving user-facing progress lines
        """
        self.resolver = resolver or InputResolver()
        self.csv_handler = csv_handler or PocketCSVHandler()
        self.detector = detector or DuplicateDetector()
        self.link_checker = link_checker or AlwaysAliveChecker()
        self.table_sink = table_sink or NullTableSink()
        self.progress = progress
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_configuration(
        cls,
        config: Configuration,
        destination: Optional[Union[str, Path]] = None,
        progress: Optional[Callable[[str], None]] = None,
    ) -> "CleaningPipeline":
        """Build a pipeline from loaded configuration and an optional table destination."""
        return cls(
            resolver=InputResolver(config.get_input_extension()),
            csv_handler=PocketCSVHandler(
                encoding=config.get_input_encoding(),
                title_placeholder=config.get_title_placeholder(),
                tag_separator=config.get_tag_separator(),
            ),
            table_sink=create_table_sink(
                destination, config.get_table_name(), config.get_tag_separator()
            ),
            progress=progress,
        )

    def _report(self, message: str) -> None:
        self.logger.info(message)
        if self.progress:
            self.progress(message)

    def run(self, input_path: Union[str, Path], output_path: Union[str, Path]) -> PipelineResult:
        """
        Run the whole pipeline.

        Args:
            input_path: Export file or directory of exports
            output_path: Destination of the cleaned CSV

        Returns:
            PipelineResult describing the run

        Raises:
            InputResolutionError: If no usable source files were found
            SchemaMismatchError: If the files disagree on their header
            EmptyDatasetError: If no records survive parsing
            CSVError: If a source cannot be read or the output written
            DatabaseError: If the table sink fails
        """
        files = self.resolver.resolve(input_path)
        self.csv_handler.validate_headers(files)
        raw_items = self.csv_handler.read_all(files)

        self._report(f"Loaded: {len(raw_items)} records…")
        if not raw_items:
            raise EmptyDatasetError()

        items, duplicates = self.detector.deduplicate(raw_items)
        self._report(f"After deduplication: {len(items)}")
        self.logger.debug(duplicates.get_summary())

        rows = check_links(items, self.link_checker)
        written = self.csv_handler.write_cleaned_csv(rows, output_path)
        self._report(f"Results saved to '{written}'")

        upserted = self.table_sink.upsert_batch(items)

        return PipelineResult(
            source_files=files,
            loaded_count=len(raw_items),
            items=items,
            output_path=written,
            upserted_count=upserted,
            duplicates=duplicates,
            stats={
                "files": len(files),
                "loaded": len(raw_items),
                "kept": len(items),
                "removed": duplicates.removed_count,
                "dead_links": sum(1 for _, alive in rows if not alive),
            },
        )
