"""On-disk cache of upstream clones, one directory per repository name."""

from __future__ import annotations

import shutil
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType

import pygit2

from brdelta.config.models import WorkspaceConfig
from brdelta.core.errors import WorkspaceInitError
from brdelta.core.logging import get_logger
from brdelta.git._internal import ErrorMapper, RepoAccess, repo_name_from_uri
from brdelta.git.credentials import make_callbacks
from brdelta.git.errors import NameResolutionError

log = get_logger("git.workspace")


def repo_dir_name(uri: str) -> str:
    """Local directory name for an upstream URL.

    Raises:
        NameResolutionError: If the URL does not end in ``.git`` or has a single path segment.
    """
    name = repo_name_from_uri(uri)
    if name is None:
        raise NameResolutionError(uri)
    return name


class RepositoryWorkspace:
    """Clones upstream repositories into a working directory and hands out handles.

    A repository is cloned on first use and opened from disk afterwards. Existing
    clones are never fetched, so a clone older than the versions being compared
    will fail reference lookups until the workspace is cleaned.

    Handles are cached for the lifetime of the workspace object. ``session()``
    serializes all work on one local directory, which makes clone-or-open and
    the history walk safe when packages are processed from a thread pool.
    """

    def __init__(self, config: WorkspaceConfig) -> None:
        self._config = config
        self._handles: dict[Path, RepoAccess] = {}
        self._locks: dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def workdir(self) -> Path:
        return self._config.workdir

    @property
    def config(self) -> WorkspaceConfig:
        return self._config

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self) -> None:
        """Create the working directory, removing it first when ``clean`` is set.

        Raises:
            WorkspaceInitError: If the directory cannot be removed or created.
        """
        path = self.workdir
        if self._config.clean and path.exists():
            log.debug("workspace_clean", path=str(path))
            self.close()
            try:
                shutil.rmtree(path)
            except OSError as e:
                raise WorkspaceInitError.clean_failed(str(path), str(e)) from e

        if not path.is_dir():
            log.debug("workspace_create", path=str(path))
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise WorkspaceInitError.create_failed(str(path), str(e)) from e

    def close(self) -> None:
        """Release every cached repository handle."""
        for handle in self._handles.values():
            handle.free()
        self._handles.clear()

    def __enter__(self) -> RepositoryWorkspace:
        self.initialize()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # =========================================================================
    # Repositories
    # =========================================================================

    def path_for(self, uri: str) -> Path:
        return self.workdir / repo_dir_name(uri)

    def obtain(self, uri: str) -> RepoAccess:
        """Open the local clone of ``uri``, cloning it first if needed.

        Raises:
            NameResolutionError: If no directory name can be derived from ``uri``.
            CloneError: If the clone fails.
            OpenError: If the directory exists but is not a repository.
        """
        path = self.path_for(uri)
        with self._lock_for(path):
            return self._obtain_locked(uri, path)

    @contextmanager
    def session(self, uri: str) -> Iterator[RepoAccess]:
        """Hold the directory lock of ``uri`` while working with its repository."""
        path = self.path_for(uri)
        with self._lock_for(path):
            yield self._obtain_locked(uri, path)

    def _obtain_locked(self, uri: str, path: Path) -> RepoAccess:
        cached = self._handles.get(path)
        if cached is not None:
            return cached

        if not path.exists():
            self._clone(uri, path)

        log.info("repo_open", path=str(path))
        handle = RepoAccess(path)
        self._handles[path] = handle
        return handle

    def _clone(self, uri: str, path: Path) -> None:
        log.info("repo_clone", uri=uri, path=str(path))
        try:
            with ErrorMapper.clone_guard(uri):
                pygit2.clone_repository(uri, str(path), callbacks=make_callbacks(self._config.key))
        except Exception:
            # Leave no half-written clone behind; it would be opened as-is next run
            if path.exists():
                shutil.rmtree(path, ignore_errors=True)
            raise

    def _lock_for(self, path: Path) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(path)
            if lock is None:
                lock = self._locks[path] = threading.Lock()
            return lock
