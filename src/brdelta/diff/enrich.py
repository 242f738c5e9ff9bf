"""Attach upstream commit history to the changed entries of a diff."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from brdelta.core.logging import get_logger
from brdelta.core.progress import progress
from brdelta.diff.models import Changed, PackagesDiff, changed_entries
from brdelta.git.errors import GitError
from brdelta.git.history import HistoryReconciler
from brdelta.git.workspace import RepositoryWorkspace

log = get_logger("diff.enrich")

REASON_NO_GIT_SOURCE = "no-git-source"
REASON_MISSING_VERSION = "missing-version"


class OutcomeStatus(StrEnum):
    ENRICHED = "enriched"
    SKIPPED = "skipped"  # no history possible for this package
    FAILED = "failed"  # history expected but could not be built


@dataclass(frozen=True, slots=True)
class EnrichmentOutcome:
    """What happened to one changed package."""

    name: str
    status: OutcomeStatus
    reason: str | None = None
    message: str | None = None
    commits: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": str(self.status),
            "reason": self.reason,
            "message": self.message,
            "commits": self.commits,
        }


@dataclass(slots=True)
class EnrichmentReport:
    """Per-package outcomes of one enrichment pass, ordered by package name."""

    outcomes: list[EnrichmentOutcome] = field(default_factory=list)

    def _with_status(self, status: OutcomeStatus) -> list[EnrichmentOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def enriched(self) -> list[EnrichmentOutcome]:
        return self._with_status(OutcomeStatus.ENRICHED)

    @property
    def skipped(self) -> list[EnrichmentOutcome]:
        return self._with_status(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> list[EnrichmentOutcome]:
        return self._with_status(OutcomeStatus.FAILED)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    def summary(self) -> dict[str, int]:
        return {
            "total": self.total,
            "enriched": len(self.enriched),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary(),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


def enrich_entry(
    entry: Changed, workspace: RepositoryWorkspace, *, short_history: bool = True
) -> EnrichmentOutcome:
    """Attach history to one changed entry; never raises for git failures."""
    name = entry.name
    uri = entry.second.git_source()
    if uri is None:
        log.debug("history_skipped", package=name, reason=REASON_NO_GIT_SOURCE)
        return EnrichmentOutcome(name, OutcomeStatus.SKIPPED, REASON_NO_GIT_SOURCE)

    first, second = entry.first.version, entry.second.version
    if first is None or second is None:
        log.debug("history_skipped", package=name, reason=REASON_MISSING_VERSION)
        return EnrichmentOutcome(name, OutcomeStatus.SKIPPED, REASON_MISSING_VERSION)

    try:
        with workspace.session(uri) as repo:
            records = HistoryReconciler(repo, short=short_history).history(first, second)
    except GitError as e:
        log.warning("history_failed", package=name, uri=uri, reason=e.reason, error=str(e))
        return EnrichmentOutcome(name, OutcomeStatus.FAILED, e.reason, str(e))

    entry.extend_history(records)
    log.debug("history_added", package=name, commits=len(records))
    return EnrichmentOutcome(name, OutcomeStatus.ENRICHED, commits=len(records))


def enrich_diff(
    diff: PackagesDiff,
    workspace: RepositoryWorkspace,
    *,
    short_history: bool = True,
    max_workers: int = 1,
) -> EnrichmentReport:
    """Attach commit history to every changed entry of ``diff`` in place.

    Each package is independent: a failing clone or an unknown version leaves
    that entry's history unset and is recorded in the returned report.
    """
    entries = changed_entries(diff)
    outcomes: list[EnrichmentOutcome] = []

    if max_workers <= 1 or len(entries) <= 1:
        for entry in progress(entries, desc="Reconciling history"):
            outcomes.append(enrich_entry(entry, workspace, short_history=short_history))
    else:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="brdelta") as pool:
            futures = [
                pool.submit(enrich_entry, entry, workspace, short_history=short_history)
                for entry in entries
            ]
            for future in progress(
                as_completed(futures), desc="Reconciling history", total=len(futures)
            ):
                outcomes.append(future.result())

    outcomes.sort(key=lambda o: o.name)
    report = EnrichmentReport(outcomes)
    log.info("enrichment_done", **report.summary())
    return report
