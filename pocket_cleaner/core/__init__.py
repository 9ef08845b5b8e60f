"""
Core cleaning modules.

This package contains input resolution, CSV handling, URL normalization and
deduplication, link checking, the SQLite table sink, and the pipeline that
ties them together.
"""

from .data_models import PocketItem, parse_row, split_tags
from .duplicate_detector import DuplicateDetector, normalize_url
from .pipeline import CleaningPipeline, PipelineResult

__all__ = [
    "PocketItem",
    "parse_row",
    "split_tags",
    "DuplicateDetector",
    "normalize_url",
    "CleaningPipeline",
    "PipelineResult",
]
