"""Decide whether one file may be replaced by a hardlink to another."""

from enum import Enum
from pathlib import Path

from .descriptor import DEFAULT_CHUNK_SIZE, FileDescriptor, describe_file


class Equivalence(Enum):
    """Result of comparing two file descriptors."""

    DIFFERENT_ATTRIBUTES = "different_attributes"
    SAME_FILE = "same_file"
    SAME_CONTENT = "same_content"
    DIFFERENT_CONTENT = "different_content"

    @property
    def is_equivalent(self) -> bool:
        """True for the two results that allow hardlinking."""
        return self in (Equivalence.SAME_FILE, Equivalence.SAME_CONTENT)


def compare(a: FileDescriptor, b: FileDescriptor) -> Equivalence:
    """
    Compare two descriptors from cheapest to most expensive check.

    Cheap attributes gate everything: if any of them differ no content is
    read. Matching attributes are then checked for same-file identity, and
    only distinct files with matching attributes get hashed. Digests are
    memoized on the descriptors, so comparing one descriptor against several
    others hashes it once.

    Raises:
        MetadataError: File identity could not be determined
        DigestError: One of the files could not be read for hashing
    """
    if a.key != b.key:
        return Equivalence.DIFFERENT_ATTRIBUTES
    if a.is_same_file(b):
        return Equivalence.SAME_FILE
    if a.digest() == b.digest():
        return Equivalence.SAME_CONTENT
    return Equivalence.DIFFERENT_CONTENT


def are_equivalent(a: FileDescriptor, b: FileDescriptor) -> bool:
    """True if ``a`` and ``b`` are the same file or have identical content."""
    return compare(a, b).is_equivalent


def are_equivalent_paths(
    path1: Path, path2: Path, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> bool:
    """Describe two paths and compare them."""
    return are_equivalent(
        describe_file(path1, chunk_size), describe_file(path2, chunk_size)
    )
