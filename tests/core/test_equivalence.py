"""Tests for equivalence comparison."""

import os
from unittest.mock import patch

import pytest

from hardlinkr.core import descriptor as descriptor_module
from hardlinkr.core.descriptor import compute_digest, describe_file
from hardlinkr.core.equivalence import (
    Equivalence,
    are_equivalent,
    are_equivalent_paths,
    compare,
)


@pytest.fixture
def digest_spy():
    """Record every digest computation."""
    with patch.object(
        descriptor_module, "compute_digest", wraps=compute_digest
    ) as spy:
        yield spy


class TestCheapAttributes:
    """Attribute mismatches reject without reading content."""

    def test_different_size(self, make_file, digest_spy):
        a = describe_file(make_file("a.txt", "hello"))
        b = describe_file(make_file("b.txt", "hello!"))

        assert compare(a, b) == Equivalence.DIFFERENT_ATTRIBUTES
        digest_spy.assert_not_called()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_same_content_different_permissions(self, make_file, digest_spy):
        """Permissions gate equivalence regardless of content."""
        a = describe_file(make_file("a.txt", "hello", mode=0o644))
        b = describe_file(make_file("b.txt", "hello", mode=0o600))

        assert not are_equivalent(a, b)
        assert compare(a, b) == Equivalence.DIFFERENT_ATTRIBUTES
        digest_spy.assert_not_called()

    def test_hidden_versus_visible(self, make_file, digest_spy):
        a = describe_file(make_file(".a", "hello"))
        b = describe_file(make_file("b", "hello"))

        assert compare(a, b) == Equivalence.DIFFERENT_ATTRIBUTES
        digest_spy.assert_not_called()


class TestSameFile:
    """Paths that resolve to one file are equivalent without hashing."""

    def test_file_compared_with_itself(self, make_file, digest_spy):
        path = make_file("a.txt", "hello")

        result = compare(describe_file(path), describe_file(path))

        assert result == Equivalence.SAME_FILE
        digest_spy.assert_not_called()

    def test_existing_hardlink(self, make_file, temp_dir, digest_spy):
        original = make_file("a.txt", "hello")
        alias = temp_dir / "b.txt"
        os.link(original, alias)

        assert compare(describe_file(original), describe_file(alias)) == Equivalence.SAME_FILE
        digest_spy.assert_not_called()

    def test_symlink_to_file(self, make_file, temp_dir, digest_spy):
        original = make_file("a.txt", "hello")
        link = temp_dir / "link.txt"
        try:
            link.symlink_to(original)
        except OSError:
            pytest.skip("symlinks not supported")

        assert compare(describe_file(original), describe_file(link)) == Equivalence.SAME_FILE
        digest_spy.assert_not_called()


class TestContent:
    """Distinct files with matching attributes are compared by digest."""

    def test_identical_content(self, make_file):
        a = describe_file(make_file("a.txt", "hello"))
        b = describe_file(make_file("b.txt", "hello"))

        assert compare(a, b) == Equivalence.SAME_CONTENT
        assert are_equivalent(a, b)
        assert a.content_digest == b.content_digest

    def test_same_size_different_content(self, make_file):
        a = describe_file(make_file("a.txt", "hello"))
        b = describe_file(make_file("b.txt", "world"))

        assert compare(a, b) == Equivalence.DIFFERENT_CONTENT
        assert not are_equivalent(a, b)

    def test_digest_reused_across_comparisons(self, make_file, digest_spy):
        """One descriptor compared against several others is hashed once."""
        a = describe_file(make_file("a.txt", "hello"))
        b = describe_file(make_file("b.txt", "world"))
        c = describe_file(make_file("c.txt", "hello"))

        assert compare(a, b) == Equivalence.DIFFERENT_CONTENT
        assert compare(a, c) == Equivalence.SAME_CONTENT
        assert digest_spy.call_count == 3

    def test_comparison_is_deterministic(self, make_file):
        a_path = make_file("a.txt", "hello")
        b_path = make_file("b.txt", "hello")

        results = {
            compare(describe_file(a_path), describe_file(b_path)) for _ in range(3)
        }

        assert results == {Equivalence.SAME_CONTENT}

    def test_are_equivalent_paths(self, make_file):
        a = make_file("a.txt", "hello")
        b = make_file("b.txt", "hello")
        c = make_file("c.txt", "world")

        assert are_equivalent_paths(a, b)
        assert not are_equivalent_paths(a, c)

    def test_only_same_file_and_same_content_allow_linking(self):
        assert {e for e in Equivalence if e.is_equivalent} == {
            Equivalence.SAME_FILE,
            Equivalence.SAME_CONTENT,
        }
