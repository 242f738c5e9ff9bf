"""Centralized error mapping for pygit2 exceptions raised while cloning."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import pygit2

from brdelta.git.errors import CloneError


class ErrorMapper:
    """Maps pygit2 exceptions to domain errors."""

    @staticmethod
    @contextmanager
    def clone_guard(uri: str) -> Iterator[None]:
        """Translate transport and filesystem failures of a clone into CloneError."""
        try:
            yield
        except (pygit2.GitError, ValueError, OSError) as e:
            raise CloneError(uri, str(e)) from e
