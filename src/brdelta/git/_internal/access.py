"""Repository access layer - owns pygit2.Repository and exposes computed facts."""

from __future__ import annotations

from pathlib import Path

import pygit2
from pygit2.enums import RepositoryOpenFlag

from brdelta.git._internal.constants import SORT_NEWEST_FIRST
from brdelta.git.errors import OpenError, RangeWalkError, ReferenceNotFoundError

# Abbreviations shorter than this are never unique enough for libgit2
_MIN_ABBREV = 4
_FULL_HEX = 40


class RepoAccess:
    """Owns pygit2.Repository and provides normalized access to repo state."""

    def __init__(self, repo_path: Path | str) -> None:
        self._path = Path(repo_path)
        try:
            self._repo = pygit2.Repository(str(self._path), RepositoryOpenFlag.NO_SEARCH)
        except pygit2.GitError as e:
            raise OpenError(str(self._path)) from e

    @property
    def repo(self) -> pygit2.Repository:
        return self._repo

    @property
    def path(self) -> Path:
        return self._path

    def free(self) -> None:
        """Release libgit2 resources held by the handle."""
        self._repo.free()

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def resolve_commit(self, ref: str) -> pygit2.Commit:
        """Resolve a tag, branch or (abbreviated) commit id to a commit.

        Annotated tags are peeled to the commit they point at.
        """
        try:
            obj = self._repo.revparse_single(ref)
            commit = obj.peel(pygit2.Commit)
        except (KeyError, ValueError, pygit2.GitError) as e:
            raise ReferenceNotFoundError(ref) from e
        if not isinstance(commit, pygit2.Commit):
            raise ReferenceNotFoundError(ref)
        return commit

    def shortest_unique_id(self, oid: pygit2.Oid, min_length: int) -> str:
        """Shortest prefix of ``oid`` of at least ``min_length`` chars naming one object."""
        sha = str(oid)
        length = max(min_length, _MIN_ABBREV)
        while length < _FULL_HEX:
            prefix = sha[:length]
            try:
                if self._repo.revparse_single(prefix).id == oid:
                    return prefix
            except (KeyError, ValueError, pygit2.GitError):
                # Ambiguous prefix, try a longer one
                pass
            length += 1
        return sha

    # =========================================================================
    # Commit Walking
    # =========================================================================

    def walk_range(
        self, hide: pygit2.Oid, push: pygit2.Oid, *, first_parent: bool = False
    ) -> list[pygit2.Commit]:
        """Commits reachable from ``push`` but not from ``hide``, newest first."""
        commit_range = f"{hide}..{push}"
        try:
            walker = self._repo.walk(push, SORT_NEWEST_FIRST)
            walker.hide(hide)
            if first_parent:
                walker.simplify_first_parent()
            return list(walker)
        except (KeyError, ValueError, pygit2.GitError) as e:
            raise RangeWalkError(commit_range, str(e)) from e
