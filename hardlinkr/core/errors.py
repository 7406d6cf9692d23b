"""Exceptions raised while describing, comparing and linking files."""

from pathlib import Path


class HardlinkrError(Exception):
    """Base class for failures tied to a single file."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class MetadataError(HardlinkrError):
    """File metadata (size, permissions, attributes) could not be read."""


class DigestError(HardlinkrError):
    """File content could not be read in full for hashing."""


class HardlinkError(HardlinkrError):
    """Hardlink creation failed; the original file was restored first."""

    def __init__(self, path: Path, representative: Path, message: str):
        super().__init__(path, message)
        self.representative = representative


class TempFileError(HardlinkrError):
    """Moving the duplicate aside, or cleaning up afterwards, failed.

    ``stranded`` is True when ``temp_path`` still exists on disk and needs
    manual reconciliation.
    """

    def __init__(self, path: Path, temp_path: Path, message: str, stranded: bool):
        super().__init__(path, message)
        self.temp_path = temp_path
        self.stranded = stranded


class RestoreError(TempFileError):
    """Linking failed and the parked original could not be moved back."""

    def __init__(self, path: Path, temp_path: Path, message: str):
        super().__init__(path, temp_path, message, stranded=True)


class ListingError(HardlinkrError):
    """A directory could not be listed; nothing beneath it was visited."""
