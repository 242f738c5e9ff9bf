"""Human-readable and JSON forms of a diff."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from brdelta.diff.models import Added, Changed, DiffEntry, PackagesDiff, Removed
from brdelta.git.models import HistoryRecord

if TYPE_CHECKING:
    from brdelta.diff.enrich import EnrichmentReport

_DETAIL = " " * 6
_RECORD = " " * 7
_RECORD_DETAIL = " " * 11


def render_record(record: HistoryRecord) -> list[str]:
    lines: list[str] = []
    if record.summary is not None:
        lines.append(f"{_RECORD}- {record.summary}")
    if record.commit_id is not None:
        lines.append(f"{_RECORD_DETAIL}- id: {record.commit_id}")
    if record.author is not None:
        lines.append(f"{_RECORD_DETAIL}- author: {record.author}")
    if record.reversed is not None:
        direction = "reversed" if record.reversed else "direct"
        lines.append(f"{_RECORD_DETAIL}- direction: {direction}")
    return lines


def render_entry(entry: DiffEntry) -> str:
    """One block per entry, e.g.::

        [*] zlib [modified]
              version: v1.2.11 -> v1.2.13
               - Fix deflateBound() overflow
                   - id: 0123...
                   - author: Jane Doe <jane@example.org>
    """
    lines: list[str] = []
    match entry:
        case Added(package=package):
            lines.append(f"[+] {package.name} [added]")
            if package.version is not None:
                lines.append(f"{_DETAIL}version: {package.version}")
        case Removed(package=package):
            lines.append(f"[-] {package.name} [removed]")
        case Changed(first=first, second=second, history=history):
            lines.append(f"[*] {first.name} [modified]")
            if first.version is not None and second.version is not None and entry.version_changed:
                lines.append(f"{_DETAIL}version: {first.version} -> {second.version}")
            if entry.sources_changed:
                lines.append(f"{_DETAIL}sources: changed")
            for record in history or []:
                lines.extend(render_record(record))
    return "\n".join(lines) + "\n"


def render_diff(diff: PackagesDiff) -> str:
    """All entries, ordered by package name, separated by blank lines."""
    return "\n".join(render_entry(diff[name]) for name in sorted(diff))


def diff_to_dict(diff: PackagesDiff, report: EnrichmentReport | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {"packages": {name: diff[name].to_dict() for name in sorted(diff)}}
    if report is not None:
        data["enrichment"] = report.to_dict()
    return data


def write_json_report(
    diff: PackagesDiff, path: Path, report: EnrichmentReport | None = None
) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(diff_to_dict(diff, report), indent=2) + "\n")


def write_text_report(diff: PackagesDiff, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_diff(diff))
