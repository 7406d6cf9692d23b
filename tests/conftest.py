"""Pytest configuration and fixtures."""

import errno
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from hardlinkr.config.settings import HardlinkrConfig


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config():
    """Create a test configuration."""
    return HardlinkrConfig()


@pytest.fixture
def make_file(temp_dir):
    """Factory writing a file under temp_dir with the given content and mode."""

    def _make(relative: str, content: bytes | str = b"", mode: int = 0o644) -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        path.write_bytes(content)
        path.chmod(mode)
        return path

    return _make


@pytest.fixture
def deny_listing(monkeypatch):
    """Make os.scandir fail with EACCES for the given directories."""
    real_scandir = os.scandir

    def _deny(*directories: Path) -> None:
        blocked = {os.fspath(d) for d in directories}

        def _scandir(path="."):
            if os.fspath(path) in blocked:
                raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", _scandir)

    return _deny
