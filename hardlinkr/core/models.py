"""Per-file outcomes and run reports."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class OutcomeStatus(Enum):
    """What happened to a visited file."""

    REGISTERED = "registered"
    LINKED = "linked"
    WOULD_LINK = "would_link"
    ALREADY_LINKED = "already_linked"
    DISTINCT = "distinct"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class FileOutcome:
    """Result of visiting a single file."""

    path: Path
    status: OutcomeStatus
    target: Path | None = None  # representative linked (or to be linked) to
    size: int = 0
    error_message: str | None = None


@dataclass
class DedupReport:
    """Outcomes of every file visited by an engine, in visit order."""

    outcomes: list[FileOutcome] = field(default_factory=list)

    def add(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)

    def by_status(self, status: OutcomeStatus) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.status == status]

    def count(self, status: OutcomeStatus) -> int:
        return len(self.by_status(status))

    @property
    def linked(self) -> list[FileOutcome]:
        return self.by_status(OutcomeStatus.LINKED)

    @property
    def failures(self) -> list[FileOutcome]:
        return self.by_status(OutcomeStatus.FAILED)

    @property
    def has_failures(self) -> bool:
        return any(o.status == OutcomeStatus.FAILED for o in self.outcomes)

    @property
    def space_reclaimed(self) -> int:
        """Bytes freed by replacements (or that would be, in a dry run)."""
        return sum(
            o.size
            for o in self.outcomes
            if o.status in (OutcomeStatus.LINKED, OutcomeStatus.WOULD_LINK)
        )

    def summary(self) -> dict[str, int]:
        """Count outcomes per status, plus totals."""
        summary = {status.value: self.count(status) for status in OutcomeStatus}
        summary["total_files"] = len(self.outcomes)
        summary["space_reclaimed"] = self.space_reclaimed
        return summary
