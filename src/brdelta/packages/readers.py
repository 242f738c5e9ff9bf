"""Manifest readers producing a PackageCollection.

Three formats are understood:

- a single Buildroot-style recipe (``foo.mk``)
- a directory tree of recipes
- the JSON export of ``make show-info``
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, TypeAdapter, ValidationError

from brdelta.core.errors import ManifestError
from brdelta.core.logging import get_logger
from brdelta.packages.models import Package, PackageCollection, PackageSource, SourceKind

log = get_logger("packages.readers")

_MK_SUFFIX = ".mk"
_VERSION_SUFFIX = "_VERSION"
_SITE_SUFFIX = "_SITE"


class PackageReader(Protocol):
    """Anything that can produce a collection of packages."""

    def read(self) -> PackageCollection:
        """Read the manifest.

        Raises:
            ManifestError: If the manifest cannot be read at all.
        """
        ...


# =============================================================================
# Recipe (.mk) parsing helpers
# =============================================================================


def package_name_from_path(path: str) -> str | None:
    """``/pkgs/boost/boost.mk`` -> ``boost``."""
    name = Path(path.strip()).name
    if name.endswith(_MK_SUFFIX) and len(name) > len(_MK_SUFFIX):
        return name[: -len(_MK_SUFFIX)]
    return None


def is_commented(line: str) -> bool:
    return line.strip().startswith("#")


def command_part(line: str) -> str | None:
    """Strip leading whitespace and a trailing ``#`` comment; None if nothing is left."""
    start = len(line) - len(line.lstrip())
    end = line.find("#")
    if end == -1:
        end = len(line)
    if start < end:
        return line[start:end]
    return None


def split_assignment(line: str) -> tuple[str, str] | None:
    """Split ``KEY = value`` at the first ``=``; None when no value follows it."""
    idx = line.find("=")
    if idx == -1 or idx + 1 >= len(line):
        return None
    return line[:idx].strip(), line[idx + 1 :].strip()


def package_name_from_key(key: str) -> str | None:
    """``MAGIC_PACKAGE_VERSION`` -> ``magic-package``."""
    key = key.strip()
    if not key.endswith(_VERSION_SUFFIX):
        return None
    return key[: -len(_VERSION_SUFFIX)].lower().replace("_", "-")


def version_from_assignment(key: str, value: str) -> str | None:
    if key.strip().endswith(_VERSION_SUFFIX):
        return value
    return None


def git_site_from_assignment(key: str, value: str) -> str | None:
    key, value = key.strip(), value.strip()
    if key.endswith(_SITE_SUFFIX) and value.endswith(".git"):
        return value
    return None


def read_recipe(path: Path) -> Package:
    """Read name, version and git site out of one recipe file.

    The file name is authoritative for the package name; a differing
    ``*_VERSION`` variable prefix is only logged.

    Raises:
        ManifestError: If the file is not a ``.mk`` recipe or cannot be read.
    """
    name = package_name_from_path(str(path))
    if name is None:
        raise ManifestError.parse_error(str(path), "not a .mk recipe")

    try:
        text = path.read_text(errors="replace")
    except FileNotFoundError as e:
        raise ManifestError.not_found(str(path)) from e
    except OSError as e:
        raise ManifestError.parse_error(str(path), str(e)) from e

    declared_name: str | None = None
    version: str | None = None
    git_site: str | None = None

    for line in text.splitlines():
        cmd = command_part(line)
        assignment = split_assignment(cmd) if cmd else None
        if assignment is None:
            continue
        key, value = assignment
        if declared_name is None:
            declared_name = package_name_from_key(key)
        if version is None:
            version = version_from_assignment(key, value)
        if git_site is None:
            git_site = git_site_from_assignment(key, value)

    if declared_name is not None and declared_name != name:
        log.warning("recipe_name_mismatch", path=str(path), declared=declared_name, file=name)

    sources = (PackageSource(SourceKind.VERSION_CONTROL, git_site),) if git_site else ()
    return Package(name=name, version=version, sources=sources, location=str(path))


class MkFileReader:
    """Reads a single recipe file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def read(self) -> PackageCollection:
        package = read_recipe(self._path)
        return {package.name: package}


class MkFileDirReader:
    """Reads every ``*.mk`` below a directory.

    Unreadable recipes are skipped. The read only fails when not a single
    recipe could be read and at least one failed.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def read(self) -> PackageCollection:
        if not self._path.is_dir():
            raise ManifestError.not_found(str(self._path))

        result: PackageCollection = {}
        failed = 0
        for recipe in sorted(self._path.rglob(f"*{_MK_SUFFIX}")):
            if not recipe.is_file():
                continue
            log.info("recipe_read", path=str(recipe))
            try:
                package = read_recipe(recipe)
            except ManifestError as e:
                log.warning("recipe_failed", path=str(recipe), error=e.message)
                failed += 1
                continue
            result[package.name] = package

        if not result and failed:
            raise ManifestError.empty(str(self._path), failed)
        return result


# =============================================================================
# show-info JSON export
# =============================================================================


class _Download(BaseModel):
    source: str | None = None
    uris: list[str] = []


class _ShowInfoPackage(BaseModel):
    name: str | None = None
    version: str | None = None
    downloads: list[_Download] | None = None


_SHOW_INFO_ADAPTER = TypeAdapter(dict[str, _ShowInfoPackage])


class ShowInfoReader:
    """Reads a ``make show-info`` JSON export.

    Entries without a name, a version or at least one download are dropped:
    virtual and host-only helper entries carry none of those.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def read(self) -> PackageCollection:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError as e:
            raise ManifestError.not_found(str(self._path)) from e
        except OSError as e:
            raise ManifestError.parse_error(str(self._path), str(e)) from e

        try:
            entries = _SHOW_INFO_ADAPTER.validate_json(raw)
        except ValidationError as e:
            raise ManifestError.parse_error(str(self._path), str(e.errors()[0]["msg"])) from e

        result: PackageCollection = {}
        for key, entry in entries.items():
            if not entry.name or entry.version is None or not entry.downloads:
                continue
            sources = tuple(
                PackageSource.parse(uri) for download in entry.downloads for uri in download.uris
            )
            result[key] = Package(name=entry.name, version=entry.version, sources=sources)

        log.debug("show_info_read", path=str(self._path), packages=len(result))
        return result


def guess_reader(path: Path | str) -> PackageReader:
    """Pick a reader from the shape of ``path``."""
    p = Path(path)
    if p.is_dir():
        log.info("reader_selected", reader="directory", path=str(p))
        return MkFileDirReader(p)
    if p.suffix == ".json":
        log.info("reader_selected", reader="show-info", path=str(p))
        return ShowInfoReader(p)
    log.info("reader_selected", reader="recipe", path=str(p))
    return MkFileReader(p)
