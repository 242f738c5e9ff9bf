"""Resolve the version a package should be forwarded to."""

from __future__ import annotations

import pygit2

from brdelta.git._internal import RepoAccess, make_tag_ref


def format_commit_id(repo: RepoAccess, commit: pygit2.Commit, abbrev: int) -> str:
    if abbrev > 0:
        return repo.shortest_unique_id(commit.id, abbrev)
    return str(commit.id)


def resolve_tag(repo: RepoAccess, tag: str, abbrev: int = 0) -> str:
    """Commit id a tag points at (annotated tags are peeled).

    Raises:
        ReferenceNotFoundError: If the tag does not exist.
    """
    return format_commit_id(repo, repo.resolve_commit(make_tag_ref(tag)), abbrev)


def resolve_branch_tip(repo: RepoAccess, branch: str, abbrev: int = 0) -> str:
    """Commit id at the tip of ``branch`` (``origin/master`` in a fresh clone).

    Raises:
        ReferenceNotFoundError: If the branch does not exist.
    """
    return format_commit_id(repo, repo.resolve_commit(branch), abbrev)
