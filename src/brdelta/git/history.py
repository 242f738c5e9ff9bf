"""Commit history between two versions of one package."""

from __future__ import annotations

import pygit2

from brdelta.core.logging import get_logger
from brdelta.git._internal import RepoAccess
from brdelta.git.models import HistoryRecord

log = get_logger("git.history")


class HistoryReconciler:
    """Lists the commits separating two version references of a repository.

    Which of the two versions is older is not known up front: a package can
    be downgraded, or moved to a branch that does not contain the old
    version. The reconciler therefore walks ``first..second`` and, if that is
    empty, ``second..first``. Records found in the second walk are marked
    ``reversed``. Commit timestamps are not consulted.

    With ``short`` set only first parents are followed, so a merged topic
    branch shows up as its merge commit.
    """

    def __init__(self, repo: RepoAccess, *, short: bool = True) -> None:
        self._repo = repo
        self._short = short

    @property
    def short(self) -> bool:
        return self._short

    def history(self, first: str, second: str) -> list[HistoryRecord]:
        """Commits between ``first`` and ``second``, newest first.

        Raises:
            ReferenceNotFoundError: If either version does not resolve to a commit.
            RangeWalkError: If a commit walk cannot be set up.
        """
        log.debug("history_build", first=first, second=second, short=self._short)
        first_oid = self._repo.resolve_commit(first).id
        second_oid = self._repo.resolve_commit(second).id

        forward = self._walk(first_oid, second_oid)
        if forward:
            return forward

        backward = self._walk(second_oid, first_oid)
        if backward:
            log.debug("history_reversed", first=first, second=second, commits=len(backward))
        return [record.as_reversed() for record in backward]

    def _walk(self, hide: pygit2.Oid, push: pygit2.Oid) -> list[HistoryRecord]:
        commits = self._repo.walk_range(hide, push, first_parent=self._short)
        return [HistoryRecord.from_pygit2(commit) for commit in commits]
