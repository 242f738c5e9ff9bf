"""Forward recipe versions to the newest upstream tag or branch tip."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from brdelta.config.models import ForwardConfig
from brdelta.core.logging import get_logger
from brdelta.forward.replace import replace_version
from brdelta.forward.selection import PackageFilter
from brdelta.forward.versions import resolve_branch_tip, resolve_tag
from brdelta.git.errors import GitError
from brdelta.git.workspace import RepositoryWorkspace
from brdelta.packages.models import Package, PackageCollection

log = get_logger("forward.runner")

REASON_UP_TO_DATE = "up-to-date"
REASON_VERSION_NOT_IN_RECIPE = "version-not-in-recipe"
REASON_WRITE_FAILED = "write-failed"


class ForwardStatus(StrEnum):
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ForwardOutcome:
    name: str
    status: ForwardStatus
    old_version: str | None = None
    new_version: str | None = None
    reason: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": str(self.status),
            "old_version": self.old_version,
            "new_version": self.new_version,
            "reason": self.reason,
            "message": self.message,
        }


@dataclass(slots=True)
class ForwardReport:
    outcomes: list[ForwardOutcome] = field(default_factory=list)
    limit_reached: bool = False

    def _with_status(self, status: ForwardStatus) -> list[ForwardOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def updated(self) -> list[ForwardOutcome]:
        return self._with_status(ForwardStatus.UPDATED)

    @property
    def skipped(self) -> list[ForwardOutcome]:
        return self._with_status(ForwardStatus.SKIPPED)

    @property
    def failed(self) -> list[ForwardOutcome]:
        return self._with_status(ForwardStatus.FAILED)

    def summary(self) -> dict[str, int]:
        return {
            "updated": len(self.updated),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }


def _new_version(workspace: RepositoryWorkspace, uri: str, config: ForwardConfig) -> str:
    with workspace.session(uri) as repo:
        if config.tag:
            log.info("forward_switch", uri=uri, tag=config.tag)
            return resolve_tag(repo, config.tag, config.abbrev)
        log.info("forward_switch", uri=uri, branch=config.branch)
        return resolve_branch_tip(repo, config.branch, config.abbrev)


def forward_package(
    package: Package, workspace: RepositoryWorkspace, config: ForwardConfig
) -> ForwardOutcome:
    """Rewrite one recipe to the resolved version. The package must pass the filter."""
    name = package.name
    uri = package.git_source()
    old = package.version
    if uri is None or not old or not package.location:
        raise ValueError(f"{name} cannot be forwarded: needs git source, version and location")

    try:
        new = _new_version(workspace, uri, config)
    except GitError as e:
        log.warning("forward_failed", package=name, uri=uri, reason=e.reason, error=str(e))
        return ForwardOutcome(name, ForwardStatus.FAILED, old, None, e.reason, str(e))

    if new == old:
        return ForwardOutcome(name, ForwardStatus.SKIPPED, old, new, REASON_UP_TO_DATE)

    try:
        count = replace_version(package.location, old, new)
    except OSError as e:
        log.warning("forward_write_failed", package=name, path=package.location, error=str(e))
        return ForwardOutcome(name, ForwardStatus.FAILED, old, new, REASON_WRITE_FAILED, str(e))

    if count == 0:
        log.warning("forward_version_missing", package=name, path=package.location, version=old)
        return ForwardOutcome(name, ForwardStatus.FAILED, old, new, REASON_VERSION_NOT_IN_RECIPE)

    log.info("forward_updated", package=name, old=old, new=new)
    return ForwardOutcome(name, ForwardStatus.UPDATED, old, new)


def forward_packages(
    packages: PackageCollection, workspace: RepositoryWorkspace, config: ForwardConfig
) -> ForwardReport:
    """Forward every accepted package, stopping after ``config.limit`` updates (0 = all)."""
    package_filter = PackageFilter(config.allow, config.deny)
    report = ForwardReport()

    for name in sorted(packages):
        package = packages[name]
        rejection = package_filter.rejection(package)
        if rejection is not None:
            log.debug("forward_skipped", package=name, reason=rejection)
            report.outcomes.append(
                ForwardOutcome(name, ForwardStatus.SKIPPED, package.version, reason=rejection)
            )
            continue

        outcome = forward_package(package, workspace, config)
        report.outcomes.append(outcome)
        if config.limit and len(report.updated) >= config.limit:
            log.info("forward_limit_reached", limit=config.limit)
            report.limit_reached = True
            break

    return report
