"""Package identity, version and declared sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class SourceKind(StrEnum):
    """How a package's source is fetched."""

    VERSION_CONTROL = "git"
    ARCHIVE = "https"
    OTHER = "other"


# First match wins, so https+ is checked before git+
_SOURCE_PREFIXES: tuple[tuple[str, SourceKind], ...] = (
    ("https+", SourceKind.ARCHIVE),
    ("git+", SourceKind.VERSION_CONTROL),
)


@dataclass(frozen=True, slots=True)
class PackageSource:
    """One declared source location of a package."""

    kind: SourceKind
    uri: str

    @classmethod
    def parse(cls, value: str) -> PackageSource:
        """Parse a scheme-prefixed download URI.

        ``git+git@host:org/repo.git`` is a version-control source with the
        prefix stripped, ``https+https://...`` an archive. Anything else is
        kept verbatim as an opaque source.
        """
        for prefix, kind in _SOURCE_PREFIXES:
            if value.startswith(prefix):
                return cls(kind, value[len(prefix) :])
        return cls(SourceKind.OTHER, value)

    @property
    def is_version_control(self) -> bool:
        return self.kind is SourceKind.VERSION_CONTROL


def parse_source(value: str) -> PackageSource:
    return PackageSource.parse(value)


@dataclass(frozen=True, slots=True)
class Package:
    """Read-only snapshot of one package.

    Two packages compare equal when name and version match. Sources and
    location are deliberately left out: a changed download list alone is not
    a change worth a diff entry, see ``sources_differ``.
    """

    name: str
    version: str | None = None
    sources: tuple[PackageSource, ...] = field(default=(), compare=False)
    location: str | None = field(default=None, compare=False)

    def git_source(self) -> str | None:
        """URI of the first version-control source, if any."""
        for source in self.sources:
            if source.is_version_control:
                return source.uri
        return None

    def sources_differ(self, other: Package) -> bool:
        return self.sources != other.sources


PackageCollection = dict[str, Package]
