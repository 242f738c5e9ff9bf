"""Structural diff of two package collections."""

from __future__ import annotations

from brdelta.diff.models import Added, Changed, PackagesDiff, Removed
from brdelta.packages.models import PackageCollection


def build_diff(first: PackageCollection, second: PackageCollection) -> PackagesDiff:
    """Compare ``first`` (before) with ``second`` (after).

    Names whose packages compare equal (same name and version) produce no
    entry, even when their source lists differ.
    """
    result: PackagesDiff = {}

    for name, package in first.items():
        other = second.get(name)
        if other is None:
            result[name] = Removed(package)
        elif package != other:
            result[name] = Changed(package, other)

    for name, package in second.items():
        if name not in first:
            result[name] = Added(package)

    return result
