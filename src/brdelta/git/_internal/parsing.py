"""String parsing helpers for git ref names, messages and remote URLs."""

from __future__ import annotations

_REFS_TAGS_PREFIX = "refs/tags/"
_GIT_SUFFIX = ".git"


def first_line(text: str) -> str:
    """Get first line of text."""
    return text.splitlines()[0].strip() if text else ""


def make_tag_ref(name: str) -> str:
    """Create full tag ref from name."""
    if name.startswith(_REFS_TAGS_PREFIX):
        return name
    return f"{_REFS_TAGS_PREFIX}{name}"


def repo_name_from_uri(uri: str) -> str | None:
    """Last path segment of a ``.git`` URL without the suffix.

    ``git@host:org/repo.git`` -> ``repo``; ``https://host/org/repo.git`` -> ``repo``.
    Returns None unless the URL ends in ``.git`` and has at least two
    ``/``-separated segments.
    """
    if len(uri) <= len(_GIT_SUFFIX) or not uri.endswith(_GIT_SUFFIX):
        return None
    parts = uri.split("/")
    if len(parts) < 2:
        return None
    name = parts[-1][: -len(_GIT_SUFFIX)]
    return name or None
