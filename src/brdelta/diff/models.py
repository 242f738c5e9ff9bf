"""Diff result between two package collections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Literal

from brdelta.git.models import HistoryRecord
from brdelta.packages.models import Package

ChangeKind = Literal["added", "removed", "changed"]


def _package_dict(package: Package) -> dict[str, Any]:
    return {
        "name": package.name,
        "version": package.version,
        "sources": [{"kind": str(s.kind), "uri": s.uri} for s in package.sources],
        "location": package.location,
    }


@dataclass(frozen=True, slots=True)
class Added:
    """Package only present in the second collection."""

    package: Package
    kind: ClassVar[ChangeKind] = "added"

    @property
    def name(self) -> str:
        return self.package.name

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "package": _package_dict(self.package)}


@dataclass(frozen=True, slots=True)
class Removed:
    """Package only present in the first collection."""

    package: Package
    kind: ClassVar[ChangeKind] = "removed"

    @property
    def name(self) -> str:
        return self.package.name

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "package": _package_dict(self.package)}


@dataclass(slots=True)
class Changed:
    """Package present in both collections with a different version.

    ``history`` stays None until the enrichment pass attaches commits; it
    remains None when the package has no git source or reconciliation failed.
    An empty list means both versions name the same commit.
    """

    first: Package
    second: Package
    history: list[HistoryRecord] | None = None
    kind: ClassVar[ChangeKind] = "changed"

    @property
    def name(self) -> str:
        return self.second.name

    @property
    def version_changed(self) -> bool:
        return self.first.version != self.second.version

    @property
    def sources_changed(self) -> bool:
        return self.first.sources_differ(self.second)

    def extend_history(self, records: list[HistoryRecord]) -> None:
        if self.history is None:
            self.history = []
        self.history.extend(records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "first": _package_dict(self.first),
            "second": _package_dict(self.second),
            "sources_changed": self.sources_changed,
            "history": (
                None if self.history is None else [record.to_dict() for record in self.history]
            ),
        }


DiffEntry = Added | Removed | Changed

PackagesDiff = dict[str, DiffEntry]


def changed_entries(diff: PackagesDiff) -> list[Changed]:
    """Changed entries ordered by package name."""
    entries = (diff[name] for name in sorted(diff))
    return [entry for entry in entries if isinstance(entry, Changed)]
