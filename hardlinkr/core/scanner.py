"""Directory walking: yields the regular files under a root."""

import fnmatch
import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from ..config.settings import ScanConfig

logger = logging.getLogger(__name__)


class FileScanner:
    """Walks directory trees in a stable order, never following symlinks."""

    def __init__(
        self,
        config: ScanConfig | None = None,
        on_error: Callable[[OSError], None] | None = None,
    ):
        """
        Initialize scanner.

        Args:
            config: Scan configuration (exclude patterns)
            on_error: Called with the OSError for every directory that cannot
                be listed. The walk goes on with the remaining directories
                unless the callback raises.
        """
        self.config = config or ScanConfig()
        self.on_error = on_error

    def iter_files(self, directory: Path) -> Iterator[Path]:
        """
        Yield every regular file under ``directory``.

        Directories and files are visited in sorted name order. Symbolic
        links, to files or directories, are skipped, as is anything matching
        an exclude pattern.
        """
        def on_error(error: OSError) -> None:
            logger.warning("Cannot list %s: %s", error.filename, error)
            if self.on_error is not None:
                self.on_error(error)

        for dirpath, dirnames, filenames in os.walk(
            directory, followlinks=False, onerror=on_error
        ):
            dirnames[:] = sorted(d for d in dirnames if not self._is_excluded(d))

            for filename in sorted(filenames):
                if self._is_excluded(filename):
                    continue
                file_path = Path(dirpath) / filename
                if self._is_regular_file(file_path):
                    yield file_path

    def scan_directory(self, directory: Path) -> list[Path]:
        """Collect regular files under ``directory`` into a list."""
        return list(self.iter_files(directory))

    def _is_excluded(self, name: str) -> bool:
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.config.exclude_patterns)

    def _is_regular_file(self, file_path: Path) -> bool:
        """Check that the path is a regular file and not a symlink to one."""
        return not file_path.is_symlink() and file_path.is_file()
