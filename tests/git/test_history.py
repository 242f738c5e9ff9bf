"""Tests for HistoryReconciler.

Direction policy: ``first..second`` is walked first; only when that range is
empty is ``second..first`` walked, and its records are marked reversed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from brdelta.git import HistoryReconciler, ReferenceNotFoundError
from brdelta.git._internal import RepoAccess

if TYPE_CHECKING:
    from conftest import LinearRepo, MergeRepo


@pytest.fixture
def linear_access(linear_repo: LinearRepo) -> RepoAccess:
    return RepoAccess(linear_repo.path)


@pytest.fixture
def merge_access(merge_repo: MergeRepo) -> RepoAccess:
    return RepoAccess(merge_repo.path)


class TestLinearHistory:
    """c1 -> c2 -> c3 tagged v1, v2, v3."""

    def test_forward_range_newest_first(self, linear_access: RepoAccess, linear_repo: LinearRepo) -> None:
        records = HistoryReconciler(linear_access).history("v1", "v3")

        assert [r.commit_id for r in records] == [str(linear_repo.commits[2]), str(linear_repo.commits[1])]
        assert [r.summary for r in records] == ["Commit 3", "Commit 2"]
        assert all(r.author == "Test User <test@example.com>" for r in records)
        assert all(r.reversed is None for r in records)

    def test_direction_fallback(self, linear_access: RepoAccess, linear_repo: LinearRepo) -> None:
        """first=v3, second=v1 returns c3 and c2 marked reversed, not an empty list."""
        records = HistoryReconciler(linear_access).history("v3", "v1")

        assert [r.commit_id for r in records] == [str(linear_repo.commits[2]), str(linear_repo.commits[1])]
        assert all(r.reversed is True for r in records)

    def test_same_version_is_empty(self, linear_access: RepoAccess) -> None:
        assert HistoryReconciler(linear_access).history("v2", "v2") == []

    def test_different_names_same_commit_is_empty(
        self, linear_access: RepoAccess, linear_repo: LinearRepo
    ) -> None:
        assert HistoryReconciler(linear_access).history("v2", str(linear_repo.commits[1])) == []

    def test_commit_ids_accepted(self, linear_access: RepoAccess, linear_repo: LinearRepo) -> None:
        first = str(linear_repo.commits[0])[:10]
        records = HistoryReconciler(linear_access).history(first, "main")
        assert len(records) == 2

    def test_annotated_tag_is_peeled(self, linear_access: RepoAccess, linear_repo: LinearRepo) -> None:
        records = HistoryReconciler(linear_access).history("release-2", "v3")
        assert [r.commit_id for r in records] == [str(linear_repo.commits[2])]

    def test_unknown_first(self, linear_access: RepoAccess) -> None:
        with pytest.raises(ReferenceNotFoundError) as exc_info:
            HistoryReconciler(linear_access).history("nope", "v1")
        assert exc_info.value.ref == "nope"
        assert exc_info.value.reason == "reference-not-found"

    def test_unknown_second(self, linear_access: RepoAccess) -> None:
        with pytest.raises(ReferenceNotFoundError) as exc_info:
            HistoryReconciler(linear_access).history("v1", "nope")
        assert exc_info.value.ref == "nope"


class TestMergeHistory:
    """Merged topic branch: short mode follows first parents only."""

    def test_short_collapses_merged_branch(self, merge_access: RepoAccess, merge_repo: MergeRepo) -> None:
        records = HistoryReconciler(merge_access, short=True).history("base", "merged")

        assert [r.commit_id for r in records] == [str(merge_repo.merge), str(merge_repo.m1)]

    def test_full_includes_topic_commits(self, merge_access: RepoAccess, merge_repo: MergeRepo) -> None:
        records = HistoryReconciler(merge_access, short=False).history("base", "merged")

        ids = [r.commit_id for r in records]
        assert ids[0] == str(merge_repo.merge)
        assert set(ids) == {
            str(merge_repo.merge),
            str(merge_repo.m1),
            str(merge_repo.topic[0]),
            str(merge_repo.topic[1]),
        }
        # Parents never listed before their children
        assert ids.index(str(merge_repo.topic[1])) < ids.index(str(merge_repo.topic[0]))

    def test_diverged_branches_use_forward_range(self, merge_access: RepoAccess, merge_repo: MergeRepo) -> None:
        """topic..m1 is non-empty, so no reversal happens even though topic is not an ancestor."""
        records = HistoryReconciler(merge_access).history("topic", str(merge_repo.m1))

        assert [r.commit_id for r in records] == [str(merge_repo.m1)]
        assert records[0].reversed is None

    def test_short_property(self, merge_access: RepoAccess) -> None:
        assert HistoryReconciler(merge_access).short is True
        assert HistoryReconciler(merge_access, short=False).short is False
