"""Which packages a forward run may touch."""

from __future__ import annotations

from collections.abc import Iterable

from brdelta.core.errors import ConfigError
from brdelta.packages.models import Package

REASON_DENIED = "denied"
REASON_NOT_ALLOWED = "not-allowed"
REASON_NO_GIT_SOURCE = "no-git-source"
REASON_NO_VERSION = "no-version"
REASON_NO_LOCATION = "no-location"


def split_names(value: str | None) -> list[str]:
    """``"a,b,,c"`` -> ``["a", "b", "c"]``."""
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


class PackageFilter:
    """Allow-list or deny-list of package names, never both."""

    def __init__(self, allow: Iterable[str] = (), deny: Iterable[str] = ()) -> None:
        self._allow = frozenset(allow)
        self._deny = frozenset(deny)
        if self._allow and self._deny:
            raise ConfigError.invalid_value(
                "forward.allow",
                sorted(self._allow),
                "allow and deny lists cannot be used at the same time",
            )

    @property
    def allow(self) -> frozenset[str]:
        return self._allow

    @property
    def deny(self) -> frozenset[str]:
        return self._deny

    def rejection(self, package: Package) -> str | None:
        """Reason ``package`` must not be forwarded, or None if it may be."""
        if package.name in self._deny:
            return REASON_DENIED
        if self._allow and package.name not in self._allow:
            return REASON_NOT_ALLOWED
        if package.git_source() is None:
            return REASON_NO_GIT_SOURCE
        if not package.version:
            return REASON_NO_VERSION
        if not package.location:
            return REASON_NO_LOCATION
        return None

    def accepts(self, package: Package) -> bool:
        return self.rejection(package) is None
