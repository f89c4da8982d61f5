"""Root conftest — shared fixtures for archive tests."""

import os
import zipfile

import pytest

# Plain log lines in test output
os.environ.setdefault("ZIP_MCP_LOG_COLOR", "false")


@pytest.fixture
def sample_file(tmp_path):
    """A single small text file."""
    path = tmp_path / "notes.txt"
    path.write_text("hello archive\n")
    return path


@pytest.fixture
def sample_tree(tmp_path):
    """A directory with a nested sub-directory and an empty sub-directory.

    project/
        README.md
        src/
            main.py
            data.bin
        empty/
    """
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "README.md").write_text("# project\n")
    (root / "src" / "main.py").write_text("print('hi')\n" * 50)
    (root / "src" / "data.bin").write_bytes(bytes(range(256)) * 8)
    return root


@pytest.fixture
def plain_zip(tmp_path):
    """A ZIP written with the standard library, with a comment."""
    path = tmp_path / "plain.zip"
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("docs/", "")
        zf.writestr("docs/a.txt", "alpha\n")
        zf.writestr("b.txt", "bravo\n" * 100)
        zf.comment = b"fixture archive"
    return path


@pytest.fixture
def relative_files():
    """Return a function mapping relative POSIX path -> size for files under a root."""
    return _relative_files


def _relative_files(root):
    found = {}
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            full = os.path.join(dirpath, filename)
            rel = os.path.relpath(full, root).replace(os.sep, "/")
            found[rel] = os.path.getsize(full)
    return found
