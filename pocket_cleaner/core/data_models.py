"""
Data models for the Pocket Cleaner.

This module defines the record shape used throughout the cleaning pipeline
and the mapping from a raw CSV row to that shape.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

DEFAULT_TITLE_PLACEHOLDER = "<no-title>"
DEFAULT_TAG_SEPARATOR = "|"

# Rows shorter than this are not bookmark rows
MIN_ROW_FIELDS = 4


@dataclass
class PocketItem:
    """
    One bookmark from a Pocket export.

    ``added`` is kept as the exporter wrote it; it is never parsed.
    """

    title: str
    url: str
    added: str = ""
    tags: List[str] = field(default_factory=list)

    def tags_string(self, separator: str = DEFAULT_TAG_SEPARATOR) -> str:
        """Join tags back into a single field."""
        return separator.join(self.tags)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "title": self.title,
            "url": self.url,
            "added": self.added,
            "tags": list(self.tags),
        }


def split_tags(tag_field: str, separator: str = DEFAULT_TAG_SEPARATOR) -> List[str]:
    """
    Split a raw tag field into tags.

    A blank field means no tags, not one empty tag.
    """
    if not tag_field or not tag_field.strip():
        return []
    return tag_field.split(separator)


def parse_row(
    row: Sequence[str],
    title_placeholder: str = DEFAULT_TITLE_PLACEHOLDER,
    tag_separator: str = DEFAULT_TAG_SEPARATOR,
) -> Optional[PocketItem]:
    """
    Map one CSV row to a PocketItem.

    Layout is title, url, added, then the tag field. Exports that carry an
    extra column keep the tags in the fifth field instead of the fourth.

    Args:
        row: Fields of the row, already split by the CSV reader
        title_placeholder: Title to use when the title field is blank
        tag_separator: Separator between tags

    Returns:
        The parsed item, or None when the row has too few fields
    """
    if len(row) < MIN_ROW_FIELDS:
        return None

    title = row[0] if row[0].strip() else title_placeholder
    tag_field = row[4] if len(row) > MIN_ROW_FIELDS else row[3]

    return PocketItem(
        title=title,
        url=row[1],
        added=row[2],
        tags=split_tags(tag_field, tag_separator),
    )
