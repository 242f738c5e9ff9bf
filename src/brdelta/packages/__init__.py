"""Package model and manifest readers."""

from brdelta.packages.models import (
    Package,
    PackageCollection,
    PackageSource,
    SourceKind,
    parse_source,
)
from brdelta.packages.readers import (
    MkFileDirReader,
    MkFileReader,
    PackageReader,
    ShowInfoReader,
    guess_reader,
)

__all__ = [
    # Models
    "Package",
    "PackageCollection",
    "PackageSource",
    "SourceKind",
    "parse_source",
    # Readers
    "PackageReader",
    "MkFileReader",
    "MkFileDirReader",
    "ShowInfoReader",
    "guess_reader",
]
