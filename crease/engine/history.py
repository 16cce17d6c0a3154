from typing import Optional

from crease.engine.scorecard import Match


class HistoryLog:
    """
    Undo stack of earlier match snapshots.

    Snapshots are immutable, so the stack holds references, not copies.
    There is no redo.
    """

    def __init__(self):
        self._snapshots: list[Match] = []

    def push(self, match: Match):
        self._snapshots.append(match)

    def undo(self) -> Optional[Match]:
        """Pop the most recent snapshot, or None when there is nothing to undo"""
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def __len__(self) -> int:
        return len(self._snapshots)
