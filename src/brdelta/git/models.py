"""Serializable data models for git history."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

import pygit2

from brdelta.git._internal.parsing import first_line


def author_display(sig: pygit2.Signature) -> str:
    """``Name <email>``, the way git prints a signature."""
    return f"{sig.name} <{sig.email}>"


@dataclass(frozen=True, slots=True)
class HistoryRecord:
    """One commit between two package versions.

    ``reversed`` is True when the commit was found walking from the new
    version back to the old one, i.e. the versions were given in the opposite
    order of the repository's own history.
    """

    summary: str | None = None
    author: str | None = None
    commit_id: str | None = None
    reversed: bool | None = None

    @classmethod
    def from_pygit2(cls, commit: pygit2.Commit) -> HistoryRecord:
        return cls(
            summary=first_line(commit.message) or None,
            author=author_display(commit.author),
            commit_id=str(commit.id),
        )

    def as_reversed(self) -> HistoryRecord:
        return dataclasses.replace(self, reversed=True)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)
