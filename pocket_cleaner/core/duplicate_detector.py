"""
Duplicate URL Detection and Removal Module

Detects duplicate URLs in a list of Pocket records and keeps the first
record seen for every normalized URL.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Tuple

from .data_models import PocketItem

_HTTP_SCHEME = re.compile(re.escape("http://"), re.IGNORECASE)


def normalize_url(url: str) -> str:
    """
    Normalize a URL into its dedup key.

    Trims whitespace, rewrites the first ``http://`` to ``https://``, drops
    one trailing slash and lower-cases the result. Nothing else is
    canonicalised: ports, query strings, ``www.`` and repeated trailing
    slashes are left alone.

    Args:
        url: URL as found in the export

    Returns:
        Dedup key for the URL
    """
    normalized = url.strip()
    normalized = _HTTP_SCHEME.sub("https://", normalized, count=1)
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized.lower()


@dataclass
class DuplicateGroup:
    """Records sharing one normalized URL; the first one is kept"""

    normalized_url: str
    items: List[PocketItem] = field(default_factory=list)

    def add_item(self, item: PocketItem):
        self.items.append(item)

    def get_kept_item(self) -> PocketItem:
        return self.items[0]

    def get_removed_items(self) -> List[PocketItem]:
        return self.items[1:]


@dataclass
class DuplicateDetectionResult:
    """Result of duplicate detection process"""

    total_items: int
    unique_urls: int
    duplicate_groups: List[DuplicateGroup]
    removed_count: int
    processing_time: float
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "total_items": self.total_items,
            "unique_urls": self.unique_urls,
            "duplicate_groups_count": len(self.duplicate_groups),
            "removed_count": self.removed_count,
            "processing_time": self.processing_time,
            "timestamp": self.timestamp.isoformat(),
        }

    def get_summary(self) -> str:
        """Get human-readable summary"""
        return (
            f"Duplicate Detection Summary:\n"
            f"  Total records: {self.total_items}\n"
            f"  Unique URLs: {self.unique_urls}\n"
            f"  Duplicate groups: {len(self.duplicate_groups)}\n"
            f"  Removed: {self.removed_count}\n"
            f"  Processing time: {self.processing_time:.2f}s"
        )


class DuplicateDetector:
    """Detects and removes duplicate URLs in Pocket records"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def normalize_url(self, url: str) -> str:
        return normalize_url(url)

    def detect_duplicates(self, items: List[PocketItem]) -> Dict[str, DuplicateGroup]:
        """
        Group records by normalized URL.

        Args:
            items: Records in input order

        Returns:
            Groups keyed by normalized URL, in first-seen order. Each group
            lists its records in input order.
        """
        groups: Dict[str, DuplicateGroup] = {}

        for item in items:
            key = self.normalize_url(item.url)
            if key not in groups:
                groups[key] = DuplicateGroup(normalized_url=key)
            groups[key].add_item(item)

        return groups

    def deduplicate(
        self, items: List[PocketItem]
    ) -> Tuple[List[PocketItem], DuplicateDetectionResult]:
        """
        Keep the first record for every normalized URL.

        Args:
            items: Records in input order

        Returns:
            Tuple of (surviving records in input order, detection result)
        """
        start_time = time.time()

        groups = self.detect_duplicates(items)
        kept = [group.get_kept_item() for group in groups.values()]
        duplicate_groups = [g for g in groups.values() if len(g.items) > 1]

        for group in duplicate_groups:
            self.logger.debug(
                f"Duplicate URL {group.normalized_url}: kept "
                f"{group.get_kept_item().url}, removed {len(group.get_removed_items())}"
            )

        result = DuplicateDetectionResult(
            total_items=len(items),
            unique_urls=len(groups),
            duplicate_groups=duplicate_groups,
            removed_count=len(items) - len(kept),
            processing_time=time.time() - start_time,
        )

        self.logger.info(
            f"Deduplicated {result.total_items} records to {len(kept)} "
            f"({result.removed_count} removed)"
        )
        return kept, result
