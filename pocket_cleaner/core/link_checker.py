"""
Link liveness checking.

The cleaned CSV carries an ``alive`` column. Network checking is switched
off in this tool, so the only checker reports every link as alive; the
protocol is where a real checker would plug in.
"""

from typing import List, Protocol, Sequence, Tuple, runtime_checkable

from .data_models import PocketItem


@runtime_checkable
class LinkChecker(Protocol):
    """Decides whether a record's URL is still reachable."""

    def is_alive(self, item: PocketItem) -> bool:
        ...


class AlwaysAliveChecker:
    """Reports every link as alive without touching the network."""

    def is_alive(self, item: PocketItem) -> bool:
        return True


def check_links(
    items: Sequence[PocketItem], checker: LinkChecker
) -> List[Tuple[PocketItem, bool]]:
    """Pair every record with the checker's verdict, order preserved."""
    return [(item, checker.is_alive(item)) for item in items]
