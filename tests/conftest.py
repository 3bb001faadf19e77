"""Pytest configuration and shared fixtures for Mactime Forensic tests."""

import tempfile
from pathlib import Path

import pytest

from mactime_forensic.core.config import ENV_VAR_FILTER, ENV_VAR_SORT
from mactime_forensic.models import MetadataRecord


# atime=mtime=crtime=2021-01-01T00:00:00Z, ctime=2021-01-01T00:01:00Z
README_LINE = "|readme.txt|12|r/rrw-r--r--|1000|1000|512|1609459200|1609459200|1609459260|1609459200"

SAMPLE_LINES = [
    "# bodyfile generated for tests",
    "0|c:/$MFT|0-128-6|r/rrwxrwxrwx|0|0|1835008|1595291898|1595291898|1595291898|1595291898",
    README_LINE,
    "d41d8cd98f00b204e9800998ecf8427e|/home/user/notes.txt|42|r/rrw-------|1000|1000|64|1609545600|1609459100|1609459100|",
    "this|line|is|malformed",
    "",
    "0|/var/log/syslog|7|r/rrw-r-----|0|4|2048|1609459200||not-a-time|1609372800",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep configuration environment variables from leaking into tests."""
    monkeypatch.delenv(ENV_VAR_FILTER, raising=False)
    monkeypatch.delenv(ENV_VAR_SORT, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def readme_line():
    """Bodyfile line whose atime, mtime and crtime coincide."""
    return README_LINE


@pytest.fixture
def sample_lines():
    """Mixed bodyfile lines: comment, valid, malformed, blank."""
    return list(SAMPLE_LINES)


@pytest.fixture
def sample_bodyfile(temp_dir):
    """Write the sample lines to a bodyfile on disk."""
    file_path = temp_dir / "sample.body"
    file_path.write_text("\n".join(SAMPLE_LINES) + "\n", encoding="utf-8")
    return file_path


@pytest.fixture
def readme_bodyfile(temp_dir):
    """Bodyfile holding only the readme.txt record."""
    file_path = temp_dir / "readme.body"
    file_path.write_text(README_LINE + "\n", encoding="utf-8")
    return file_path


@pytest.fixture
def make_record():
    """Factory for MetadataRecord objects with sensible defaults."""

    def _make(**overrides):
        values = {
            "content_hash": "0",
            "name": "/file.txt",
            "inode": "1",
            "mode_as_string": "r/rrw-r--r--",
            "uid": "0",
            "gid": "0",
            "size": 100,
        }
        values.update(overrides)
        return MetadataRecord(**values)

    return _make
