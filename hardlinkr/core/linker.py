"""Replace a duplicate file with a hardlink without risking its data."""

import logging
import os
import re
import secrets
from collections.abc import Iterator
from pathlib import Path

from .errors import HardlinkError, RestoreError, TempFileError

logger = logging.getLogger(__name__)

DEFAULT_TEMP_MARKER = "aside"
_SUFFIX_BYTES = 4  # 8 hex characters


def temp_path_for(duplicate: Path, marker: str = DEFAULT_TEMP_MARKER) -> Path:
    """Pick an unused sibling path to park ``duplicate`` on while linking."""
    while True:
        suffix = secrets.token_hex(_SUFFIX_BYTES)
        candidate = duplicate.with_name(f"{duplicate.name}.{suffix}.{marker}")
        if not os.path.lexists(candidate):
            return candidate


def replace_with_hardlink(
    duplicate: Path, representative: Path, marker: str = DEFAULT_TEMP_MARKER
) -> None:
    """
    Replace ``duplicate`` with a hardlink to ``representative``.

    The duplicate is renamed to a temporary sibling, the link is created at
    its original path, and only then is the parked copy removed. If linking
    fails the parked copy is renamed back before the error is raised, so the
    original bytes always live at either the original or the temporary path.

    Args:
        duplicate: File to replace; must be equivalent to the representative
        representative: File the new link will point to
        marker: Fixed trailing component of the temporary file name

    Raises:
        TempFileError: The duplicate could not be moved aside, or the parked
            copy could not be deleted after linking (``stranded`` tells which)
        HardlinkError: Linking failed; the duplicate has been restored
        RestoreError: Linking failed and the restore failed too; the original
            bytes are at ``temp_path``
    """
    temp_path = temp_path_for(duplicate, marker)

    try:
        os.rename(duplicate, temp_path)
    except OSError as e:
        raise TempFileError(
            duplicate, temp_path, f"Cannot move file aside ({e})", stranded=False
        ) from e

    try:
        os.link(representative, duplicate)
    except OSError as link_error:
        try:
            os.rename(temp_path, duplicate)
        except OSError as e:
            logger.critical(
                "Original contents of %s left at %s: %s", duplicate, temp_path, e
            )
            raise RestoreError(
                duplicate,
                temp_path,
                f"Cannot restore file after failed link ({link_error}; {e})",
            ) from e
        raise HardlinkError(
            duplicate,
            representative,
            f"Cannot link to {representative} ({link_error})",
        ) from link_error

    try:
        os.unlink(temp_path)
    except OSError as e:
        raise TempFileError(
            duplicate,
            temp_path,
            f"Linked, but cannot delete parked copy {temp_path} ({e})",
            stranded=True,
        ) from e


def find_stranded_temps(
    root: Path, marker: str = DEFAULT_TEMP_MARKER
) -> Iterator[tuple[Path, Path]]:
    """
    Find parked copies left behind by an interrupted replacement.

    Yields:
        (temp_path, original_path) pairs; the original may or may not exist
    """
    pattern = re.compile(
        rf"^(?P<original>.+)\.[0-9a-f]{{{_SUFFIX_BYTES * 2}}}\.{re.escape(marker)}$"
    )
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            match = pattern.match(filename)
            if match:
                yield (
                    Path(dirpath) / filename,
                    Path(dirpath) / match.group("original"),
                )
