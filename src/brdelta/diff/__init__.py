"""Package diff engine, history enrichment and report rendering."""

from brdelta.diff.engine import build_diff
from brdelta.diff.enrich import (
    EnrichmentOutcome,
    EnrichmentReport,
    OutcomeStatus,
    enrich_diff,
    enrich_entry,
)
from brdelta.diff.models import (
    Added,
    Changed,
    DiffEntry,
    PackagesDiff,
    Removed,
    changed_entries,
)
from brdelta.diff.render import (
    diff_to_dict,
    render_diff,
    render_entry,
    write_json_report,
    write_text_report,
)

__all__ = [
    # Engine
    "build_diff",
    # Models
    "Added",
    "Changed",
    "DiffEntry",
    "PackagesDiff",
    "Removed",
    "changed_entries",
    # Enrichment
    "EnrichmentOutcome",
    "EnrichmentReport",
    "OutcomeStatus",
    "enrich_diff",
    "enrich_entry",
    # Rendering
    "diff_to_dict",
    "render_diff",
    "render_entry",
    "write_json_report",
    "write_text_report",
]
