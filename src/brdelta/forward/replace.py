"""Atomic in-place version replacement inside recipe files."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from brdelta.core.logging import get_logger

log = get_logger("forward.replace")

_TMP_SUFFIX = ".tmp"


def replace_version(path: Path | str, old: str, new: str) -> int:
    """Replace every ``old`` with ``new`` in ``path``.

    The new content is written to ``<path>.tmp``, synced, and renamed over the
    original, so an interrupted write leaves the original file intact.

    Returns:
        Number of replacements made. Nothing is written when it is 0.

    Raises:
        OSError: If the file cannot be read, written or renamed.
    """
    target = Path(path)
    text = target.read_text()
    count = text.count(old) if old else 0
    if count == 0:
        return 0

    tmp = target.with_name(target.name + _TMP_SUFFIX)
    try:
        with tmp.open("w") as out:
            out.write(text.replace(old, new))
            out.flush()
            os.fsync(out.fileno())
        shutil.copymode(target, tmp)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise

    log.debug("version_replaced", path=str(target), old=old, new=new, count=count)
    return count
