"""Archive backend — pyzipper create / read / extract.

Tests cover:
    - create_archive writes entries in order, applies comment and level
    - AES archives need the right password to extract
    - A failed write leaves an existing output untouched and no temp file
    - read_archive reports metadata and rejects non-ZIP files
    - Files dated before 1980 are clamped, not rejected
    - A failed write removes the parent directories it created
    - extract_archive never writes outside the destination, symlinks included
    - Collision policy: skip when overwrite is false, replace when true
"""

import os
import zipfile

import pytest

from zip_mcp.core import backend
from zip_mcp.core.errors import BackendError


def _part_files(directory):
    return [name for name in os.listdir(directory) if name.endswith(".part")]


def test_create_archive_writes_entries_in_order(tmp_path, sample_file):
    other = tmp_path / "other.txt"
    other.write_text("second\n")
    output = tmp_path / "out.zip"

    count = backend.create_archive(
        [(str(sample_file), "notes.txt"), (str(other), "other.txt")],
        str(output),
        comment="two files",
    )

    assert count == 2
    with zipfile.ZipFile(output) as zf:
        assert zf.namelist() == ["notes.txt", "other.txt"]
        assert zf.comment == b"two files"
        assert zf.read("notes.txt") == b"hello archive\n"


def test_level_zero_stores_entries(tmp_path, sample_file):
    output = tmp_path / "stored.zip"
    backend.create_archive([(str(sample_file), "notes.txt")], str(output), level=0)
    with zipfile.ZipFile(output) as zf:
        assert zf.getinfo("notes.txt").compress_type == zipfile.ZIP_STORED


def test_default_level_deflates(tmp_path, sample_file):
    output = tmp_path / "deflated.zip"
    backend.create_archive([(str(sample_file), "notes.txt")], str(output))
    with zipfile.ZipFile(output) as zf:
        assert zf.getinfo("notes.txt").compress_type == zipfile.ZIP_DEFLATED


def test_create_archive_makes_missing_parent_directories(tmp_path, sample_file):
    output = tmp_path / "nested" / "deeper" / "out.zip"
    backend.create_archive([(str(sample_file), "notes.txt")], str(output))
    assert output.is_file()


def test_failed_write_keeps_existing_output(tmp_path, sample_file):
    output = tmp_path / "out.zip"
    output.write_bytes(b"previous archive bytes")

    with pytest.raises(BackendError):
        backend.create_archive(
            [(str(sample_file), "notes.txt"), (str(tmp_path / "vanished.txt"), "vanished.txt")],
            str(output),
        )

    assert output.read_bytes() == b"previous archive bytes"
    assert _part_files(tmp_path) == []


def test_failed_write_removes_created_parent_directories(tmp_path, sample_file):
    output = tmp_path / "new" / "deeper" / "out.zip"

    with pytest.raises(BackendError):
        backend.create_archive(
            [(str(sample_file), "notes.txt"), (str(tmp_path / "vanished.txt"), "vanished.txt")],
            str(output),
        )

    assert not (tmp_path / "new").exists()


def test_pre_1980_mtime_is_clamped(tmp_path, sample_file):
    os.utime(sample_file, (0, 0))
    output = tmp_path / "epoch.zip"

    backend.create_archive([(str(sample_file), "notes.txt")], str(output))

    entry = backend.read_archive(str(output)).entries[0]
    assert entry.modified_time.year == 1980


def test_encrypted_archive_round_trip(tmp_path, sample_file):
    output = tmp_path / "secret.zip"
    backend.create_archive(
        [(str(sample_file), "notes.txt")], str(output), password="hunter2", aes_bits=128,
    )

    listing = backend.read_archive(str(output))
    assert listing.entries[0].encrypted is True

    dest = tmp_path / "out"
    dest.mkdir()
    report = backend.extract_archive(str(output), str(dest), password="hunter2")
    assert report.extracted == ["notes.txt"]
    assert (dest / "notes.txt").read_text() == "hello archive\n"


def test_wrong_password_is_a_backend_error(tmp_path, sample_file):
    output = tmp_path / "secret.zip"
    backend.create_archive(
        [(str(sample_file), "notes.txt")], str(output), password="right", aes_bits=256,
    )
    dest = tmp_path / "out"
    dest.mkdir()

    with pytest.raises(BackendError):
        backend.extract_archive(str(output), str(dest), password="wrong")
    assert not (dest / "notes.txt").exists()


def test_missing_password_is_a_backend_error(tmp_path, sample_file):
    output = tmp_path / "secret.zip"
    backend.create_archive(
        [(str(sample_file), "notes.txt")], str(output), password="right", aes_bits=192,
    )
    dest = tmp_path / "out"
    dest.mkdir()

    with pytest.raises(BackendError):
        backend.extract_archive(str(output), str(dest))


def test_read_archive_reports_metadata(plain_zip):
    listing = backend.read_archive(str(plain_zip))

    assert listing.comment == "fixture archive"
    assert [e.name for e in listing.entries] == ["docs/", "docs/a.txt", "b.txt"]
    docs, a_txt, b_txt = listing.entries
    assert docs.is_directory is True
    assert a_txt.is_directory is False
    assert a_txt.size == len("alpha\n")
    assert b_txt.size == len("bravo\n") * 100
    assert b_txt.compressed_size < b_txt.size
    assert b_txt.encrypted is False


def test_read_archive_rejects_non_zip(tmp_path):
    bogus = tmp_path / "bogus.zip"
    bogus.write_text("this is not an archive")
    with pytest.raises(BackendError, match="Cannot read ZIP file"):
        backend.read_archive(str(bogus))


@pytest.mark.parametrize("name, expected", [
    ("a/b.txt", ("a", "b.txt")),
    ("../evil.txt", ("evil.txt",)),
    ("/etc/passwd", ("etc", "passwd")),
    ("C:/windows/x.dll", ("windows", "x.dll")),
    ("a\\..\\b.txt", ("a", "b.txt")),
    ("./x/./y", ("x", "y")),
])
def test_safe_target_stays_under_root(tmp_path, name, expected):
    assert backend.safe_target(str(tmp_path), name) == os.path.join(str(tmp_path), *expected)


def test_safe_target_returns_none_for_empty_names(tmp_path):
    assert backend.safe_target(str(tmp_path), "../") is None


def test_extract_never_escapes_destination(tmp_path):
    archive_path = tmp_path / "slip.zip"
    with zipfile.ZipFile(archive_path, "w") as zf:
        zf.writestr("../escape.txt", "gotcha")
    dest = tmp_path / "dest"
    dest.mkdir()

    report = backend.extract_archive(str(archive_path), str(dest))

    assert report.extracted == ["../escape.txt"]
    assert not (tmp_path / "escape.txt").exists()
    assert (dest / "escape.txt").read_text() == "gotcha"


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlink support")
def test_extract_does_not_follow_directory_symlinks(tmp_path, plain_zip):
    outside = tmp_path / "outside"
    outside.mkdir()
    dest = tmp_path / "dest"
    dest.mkdir()
    os.symlink(outside, dest / "docs")

    report = backend.extract_archive(str(plain_zip), str(dest), overwrite=True)

    assert report.skipped == ["docs/", "docs/a.txt"]
    assert report.extracted == ["b.txt"]
    assert os.listdir(outside) == []


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlink support")
def test_overwrite_replaces_symlink_instead_of_its_target(tmp_path, plain_zip):
    outside = tmp_path / "outside.txt"
    outside.write_text("untouched")
    dest = tmp_path / "dest"
    dest.mkdir()
    os.symlink(outside, dest / "b.txt")

    report = backend.extract_archive(str(plain_zip), str(dest), overwrite=True)

    assert "b.txt" in report.extracted
    assert outside.read_text() == "untouched"
    assert not (dest / "b.txt").is_symlink()
    assert (dest / "b.txt").read_text() == "bravo\n" * 100


def test_extract_skips_existing_files_without_overwrite(tmp_path, plain_zip):
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "b.txt").write_text("keep me")

    report = backend.extract_archive(str(plain_zip), str(dest), overwrite=False)

    assert report.skipped == ["b.txt"]
    assert report.extracted == ["docs/", "docs/a.txt"]
    assert (dest / "b.txt").read_text() == "keep me"


def test_extract_replaces_existing_files_with_overwrite(tmp_path, plain_zip):
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "b.txt").write_text("old")

    report = backend.extract_archive(str(plain_zip), str(dest), overwrite=True)

    assert report.skipped == []
    assert (dest / "b.txt").read_text() == "bravo\n" * 100
