"""Forward recipe versions to upstream tags or branch tips."""

from brdelta.forward.replace import replace_version
from brdelta.forward.runner import (
    ForwardOutcome,
    ForwardReport,
    ForwardStatus,
    forward_package,
    forward_packages,
)
from brdelta.forward.selection import PackageFilter, split_names
from brdelta.forward.versions import resolve_branch_tip, resolve_tag

__all__ = [
    "ForwardOutcome",
    "ForwardReport",
    "ForwardStatus",
    "PackageFilter",
    "forward_package",
    "forward_packages",
    "replace_version",
    "resolve_branch_tip",
    "resolve_tag",
    "split_names",
]
