"""Internal pygit2 constants - keeps trivia out of public modules."""

from __future__ import annotations

from pygit2.enums import SortMode

# Commit walking: children before parents, ties broken by commit time
SORT_NEWEST_FIRST = SortMode.TOPOLOGICAL | SortMode.TIME
