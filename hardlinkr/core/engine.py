"""Deduplication engine: per-file lookup-or-link decisions over directory trees."""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from ..config.settings import HardlinkrConfig
from .descriptor import FileDescriptor, describe_file
from .equivalence import Equivalence, compare
from .errors import HardlinkrError, ListingError
from .index import CandidateIndex
from .linker import replace_with_hardlink
from .models import DedupReport, FileOutcome, OutcomeStatus
from .scanner import FileScanner

logger = logging.getLogger(__name__)

Walker = Callable[[Path], Iterable[Path]]


class DedupEngine:
    """
    Replaces duplicate files with hardlinks to the first equivalent file seen.

    Read-only directories are indexed first with ``index_readonly``; files
    under them become link targets but are never modified. ``dedup`` then
    walks the target directory and replaces every file that is equivalent to
    an indexed representative.

    Each engine owns its candidate index, so independent engines never share
    state.
    """

    def __init__(self, config: HardlinkrConfig | None = None, walker: Walker | None = None):
        """Initialize engine with configuration and an optional directory walker."""
        self.config = config or HardlinkrConfig()
        self.walker = walker or FileScanner(
            self.config.scan, on_error=self._listing_failed
        ).iter_files
        self.index = CandidateIndex(multiple=self.config.bucket_policy == "multiple")
        self.report = DedupReport()
        self.readonly_roots: list[Path] = []
        # Representative digests, keyed by FileDescriptor.identity
        self._digests: dict[tuple[int, int, int, int], bytes] = {}
        self._pending_failures: list[FileOutcome] = []

    def index_readonly(self, paths: list[Path]) -> DedupReport:
        """Register every regular file under ``paths`` without modifying any."""
        report = DedupReport()
        for root in paths:
            logger.info("Indexing read-only directory %s", root)
            self.readonly_roots.append(root.resolve())
            self._walk(root, mutable=False, report=report)
        return report

    def dedup(self, path: Path) -> DedupReport:
        """Walk ``path`` and replace duplicates under it with hardlinks."""
        report = DedupReport()
        logger.info("Deduplicating %s", path)
        self._walk(path, mutable=True, report=report)
        return report

    def _walk(self, root: Path, mutable: bool, report: DedupReport) -> None:
        for file_path in self.walker(root):
            self._collect_listing_failures(report)
            report.add(self.visit(file_path, mutable))
        self._collect_listing_failures(report)

    def _listing_failed(self, error: OSError) -> None:
        """Record a directory the walker could not list as a failed outcome."""
        directory = Path(error.filename) if error.filename else Path()
        failure = ListingError(directory, f"Cannot list directory ({error.strerror or error})")
        outcome = self._record_failure(directory, failure)
        self._pending_failures.append(outcome)
        if not self.config.continue_on_error:
            raise failure from error

    def _collect_listing_failures(self, report: DedupReport) -> None:
        for outcome in self._pending_failures:
            report.add(outcome)
        self._pending_failures.clear()

    def visit(self, path: Path, mutable: bool) -> FileOutcome:
        """
        Process a single file.

        Failures are contained to the file being visited: they are logged and
        recorded as a FAILED outcome, and the visited file is not registered.
        Representatives that vanished or cannot be read are dropped instead
        of failing the visit. With ``continue_on_error`` disabled the error is
        re-raised after recording.
        """
        try:
            outcome = self._decide(path, mutable)
        except HardlinkrError as e:
            outcome = self._record_failure(path, e)
            if not self.config.continue_on_error:
                raise
            return outcome

        self.report.add(outcome)
        return outcome

    def _record_failure(self, path: Path, error: HardlinkrError) -> FileOutcome:
        logger.error("Failed to process %s: %s", path, error)
        outcome = FileOutcome(path=path, status=OutcomeStatus.FAILED, error_message=str(error))
        self.report.add(outcome)
        return outcome

    def _decide(self, path: Path, mutable: bool) -> FileOutcome:
        # Walkers are expected to filter symlinks, but do not rely on it
        if path.is_symlink():
            logger.debug("Skipping symlink %s", path)
            return FileOutcome(path=path, status=OutcomeStatus.SKIPPED)

        descriptor = describe_file(path, self.config.hash_chunk_size)
        if descriptor.size < self.config.scan.min_file_size:
            return FileOutcome(
                path=path, status=OutcomeStatus.SKIPPED, size=descriptor.size
            )

        key = descriptor.key
        candidates = self.index.candidates(key)
        if not candidates:
            self.index.register(key, path)
            return FileOutcome(
                path=path, status=OutcomeStatus.REGISTERED, size=descriptor.size
            )

        for candidate in candidates:
            try:
                result = self._compare_with(descriptor, candidate)
            except HardlinkrError as e:
                if e.path != candidate:
                    raise
                # The representative vanished or became unreadable
                logger.warning("Dropping representative %s: %s", candidate, e)
                self.index.discard(key, candidate)
                continue
            if result == Equivalence.SAME_FILE:
                return FileOutcome(
                    path=path,
                    status=OutcomeStatus.ALREADY_LINKED,
                    target=candidate,
                    size=descriptor.size,
                )
            if result == Equivalence.SAME_CONTENT:
                return self._link(descriptor, candidate, mutable)

        # Same key, different content, or every representative was dropped
        status = OutcomeStatus.DISTINCT if key in self.index else OutcomeStatus.REGISTERED
        if self.index.register(key, path):
            logger.debug("Added %s as another representative", path)
            self._remember_digest(descriptor)
        return FileOutcome(path=path, status=status, size=descriptor.size)

    def _compare_with(self, descriptor: FileDescriptor, candidate: Path) -> Equivalence:
        """
        Compare a visited file against one representative.

        The representative is described afresh; only its digest is reused,
        and only while its identity (device, inode, size, mtime) is unchanged.
        """
        representative = describe_file(candidate, self.config.hash_chunk_size)
        identity = representative.identity
        if identity is not None:
            representative.content_digest = self._digests.get(identity)
        result = compare(descriptor, representative)
        self._remember_digest(representative)
        return result

    def _remember_digest(self, descriptor: FileDescriptor) -> None:
        identity = descriptor.identity
        if identity is not None and descriptor.content_digest is not None:
            self._digests[identity] = descriptor.content_digest

    def _link(self, descriptor: FileDescriptor, candidate: Path, mutable: bool) -> FileOutcome:
        path = descriptor.path

        if not mutable or self._is_protected(path):
            logger.debug("Leaving read-only duplicate %s of %s", path, candidate)
            return FileOutcome(
                path=path,
                status=OutcomeStatus.SKIPPED,
                target=candidate,
                size=descriptor.size,
            )

        if self.config.linking.dry_run:
            logger.info("Would replace %s with hardlink to %s", path, candidate)
            return FileOutcome(
                path=path,
                status=OutcomeStatus.WOULD_LINK,
                target=candidate,
                size=descriptor.size,
            )

        logger.info("Replacing %s with hardlink to %s", path, candidate)
        replace_with_hardlink(path, candidate, self.config.linking.temp_marker)
        return FileOutcome(
            path=path,
            status=OutcomeStatus.LINKED,
            target=candidate,
            size=descriptor.size,
        )

    def _is_protected(self, path: Path) -> bool:
        """Check whether a path lies inside one of the read-only roots."""
        if not self.readonly_roots:
            return False
        resolved = path.resolve()
        return any(resolved.is_relative_to(root) for root in self.readonly_roots)
