"""Internal components for git operations - not part of public API."""

from brdelta.git._internal.access import RepoAccess
from brdelta.git._internal.errors import ErrorMapper
from brdelta.git._internal.parsing import first_line, make_tag_ref, repo_name_from_uri

__all__ = [
    "ErrorMapper",
    "RepoAccess",
    "first_line",
    "make_tag_ref",
    "repo_name_from_uri",
]
