"""File metadata snapshots and the equivalence key used to bucket them."""

import hashlib
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from .errors import DigestError, MetadataError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1 MiB read blocks for hashing
POSIX_PERMISSIONS = os.name != "nt"


@dataclass(frozen=True)
class EquivalenceKey:
    """Cheap, content-independent attributes shared by candidate duplicates."""

    size: int
    readable: bool
    writable: bool
    executable: bool
    hidden: bool
    permission_bits: int


@dataclass
class FileDescriptor:
    """Metadata for one visited file.

    Descriptors are built fresh for every visit and thrown away once the
    duplicate decision is made. The content digest starts out empty and is
    filled in by ``digest()`` the first time a comparison needs it.
    """

    path: Path
    size: int
    readable: bool
    writable: bool
    executable: bool
    hidden: bool
    permission_bits: int
    device: int = 0
    inode: int = 0
    modified_ns: int = 0
    chunk_size: int = DEFAULT_CHUNK_SIZE
    content_digest: bytes | None = None

    @property
    def key(self) -> EquivalenceKey:
        """Bucket key made of the cheap attributes only."""
        return EquivalenceKey(
            size=self.size,
            readable=self.readable,
            writable=self.writable,
            executable=self.executable,
            hidden=self.hidden,
            permission_bits=self.permission_bits,
        )

    def digest(self) -> bytes:
        """Return the SHA-1 of the file contents, computing it on first use."""
        if self.content_digest is None:
            self.content_digest = compute_digest(self.path, self.chunk_size)
        return self.content_digest

    @property
    def identity(self) -> tuple[int, int, int, int] | None:
        """(device, inode, size, mtime) of this file version, or None without inode numbers."""
        if not self.inode:
            return None
        return (self.device, self.inode, self.size, self.modified_ns)

    def is_same_file(self, other: "FileDescriptor") -> bool:
        """Check whether both descriptors point at the same underlying file."""
        if self.inode and other.inode:
            return self.device == other.device and self.inode == other.inode

        # Some filesystems report no inode number; ask the OS instead.
        try:
            return os.path.samefile(self.path, other.path)
        except OSError as e:
            raise MetadataError(self.path, f"Cannot compare file identity ({e})") from e

    def __str__(self) -> str:
        digest = self.content_digest.hex() if self.content_digest is not None else None
        mode = f"0{self.permission_bits:o}" if self.permission_bits else "0"
        return (
            f"FileDescriptor [size={self.size}, digest={digest}, "
            f"readable={self.readable}, writable={self.writable}, "
            f"executable={self.executable}, hidden={self.hidden}, "
            f"permission_bits={mode}]"
        )


def describe_file(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> FileDescriptor:
    """
    Read the metadata of a file into a FileDescriptor.

    Symlinks are followed, so a link to a file describes its target.

    Args:
        path: File to inspect
        chunk_size: Read block size used if the digest is ever computed

    Returns:
        FileDescriptor without a content digest

    Raises:
        MetadataError: The file vanished or its metadata cannot be read
    """
    try:
        st = os.stat(path)
    except OSError as e:
        raise MetadataError(path, f"Cannot read metadata ({e.strerror or e})") from e

    descriptor = FileDescriptor(
        path=path,
        size=st.st_size,
        readable=os.access(path, os.R_OK),
        writable=os.access(path, os.W_OK),
        executable=os.access(path, os.X_OK),
        hidden=_is_hidden(path, st),
        permission_bits=permission_bits(st.st_mode),
        device=st.st_dev,
        inode=st.st_ino,
        modified_ns=st.st_mtime_ns,
        chunk_size=chunk_size,
    )
    logger.debug("%s: %s", path, descriptor)
    return descriptor


def compute_digest(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Calculate the SHA-1 digest of a file.

    The file is streamed through the hash in chunks rather than read into
    memory at once.

    Args:
        path: File to hash
        chunk_size: Size of chunks to read

    Returns:
        20-byte SHA-1 digest

    Raises:
        DigestError: The file could not be read in full
    """
    sha1 = hashlib.sha1()
    try:
        with open(path, "rb") as f:
            while chunk := f.read(chunk_size):
                sha1.update(chunk)
    except OSError as e:
        raise DigestError(path, f"Cannot hash file ({e.strerror or e})") from e
    return sha1.digest()


def permission_bits(mode: int) -> int:
    """Owner/group/other rwx bits of a st_mode, or 0 without POSIX permissions."""
    if not POSIX_PERMISSIONS:
        return 0
    return stat.S_IMODE(mode) & 0o777


def _is_hidden(path: Path, st: os.stat_result) -> bool:
    if path.name.startswith("."):
        return True
    attributes = getattr(st, "st_file_attributes", 0)
    return bool(attributes & stat.FILE_ATTRIBUTE_HIDDEN)
