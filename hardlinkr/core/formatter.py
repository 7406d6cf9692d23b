"""Human-readable rendering of dedup outcomes."""

from .models import DedupReport, FileOutcome, OutcomeStatus

STATUS_LABELS = {
    OutcomeStatus.REGISTERED: "[INDEXED]",
    OutcomeStatus.LINKED: "[LINKED]",
    OutcomeStatus.WOULD_LINK: "[WOULD LINK]",
    OutcomeStatus.ALREADY_LINKED: "[ALREADY LINKED]",
    OutcomeStatus.DISTINCT: "[DISTINCT]",
    OutcomeStatus.SKIPPED: "[SKIPPED]",
    OutcomeStatus.FAILED: "[FAILED]",
}


def format_size(bytes_count: int) -> str:
    """Format bytes as human-readable size."""
    size = float(bytes_count)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} PB"


def format_outcome(outcome: FileOutcome) -> str:
    """One-line description of a file outcome."""
    label = STATUS_LABELS.get(outcome.status, f"[{outcome.status.value.upper()}]")
    line = f"{label} {outcome.path}"
    if outcome.target is not None and outcome.status in (
        OutcomeStatus.LINKED,
        OutcomeStatus.WOULD_LINK,
        OutcomeStatus.ALREADY_LINKED,
    ):
        line += f" -> {outcome.target}"
    if outcome.error_message:
        line += f" ({outcome.error_message})"
    return line


def report_to_dict(report: DedupReport) -> dict:
    """JSON-serializable view of a report."""
    return {
        "summary": report.summary(),
        "outcomes": [
            {
                "path": str(o.path),
                "status": o.status.value,
                "target": str(o.target) if o.target is not None else None,
                "size": o.size,
                "error": o.error_message,
            }
            for o in report.outcomes
        ],
    }
