# =============================================================================
# core/backend.py  —  Archive Backend (the only module that touches pyzipper)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wraps the ZIP library behind three plain functions:
#     create_archive()   →  write (source path, archive name) pairs to a file
#     read_archive()     →  list entries + comment without extracting
#     extract_archive()  →  write every entry under a destination directory
#
# WHY PYZIPPER?
#   pyzipper is a fork of the standard library's zipfile with the same API,
#   plus WinZip AES encryption on WRITE (zipfile can only decrypt legacy
#   ZipCrypto).  Reading plain, ZipCrypto and AES archives all goes through
#   the same AESZipFile class.
#
# ERROR CONTRACT:
#   Every library failure (corrupt archive, bad password, I/O error) leaves
#   this module as a BackendError.  Handlers never see a raw BadZipFile.
# =============================================================================

import logging
import os
import shutil
import tempfile
import zlib
from datetime import datetime
from typing import Iterable, Optional

import pyzipper

from zip_mcp.core.errors import BackendError
from zip_mcp.core.models import ArchiveEntry, ArchiveListing, ExtractionReport

logger = logging.getLogger(__name__)

# Library failures that become BackendError.  RuntimeError is what
# (py)zipfile raises for a missing or wrong password.
_ARCHIVE_ERRORS = (
    pyzipper.BadZipFile,
    pyzipper.LargeZipFile,
    RuntimeError,
    NotImplementedError,
    ValueError,
    EOFError,
    OSError,
    zlib.error,
)

_ENCRYPTED_FLAG = 0x1
_EPOCH_1980 = datetime(1980, 1, 1)


def _password_bytes(password: Optional[str]) -> Optional[bytes]:
    return password.encode("utf-8") if password else None


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


# =============================================================================
# CREATE
# =============================================================================
def _missing_directories(path: str) -> list[str]:
    """Ancestors of ``path`` (itself included) that do not exist yet, deepest first."""
    missing = []
    while not os.path.exists(path):
        missing.append(path)
        parent = os.path.dirname(path)
        if parent == path:
            break
        path = parent
    return missing


def _remove_empty_directories(directories: list[str]) -> None:
    for directory in directories:
        if os.path.isdir(directory) and not os.listdir(directory):
            os.rmdir(directory)


def _open_for_write(
    path: str,
    level: Optional[int],
    password: Optional[str],
    aes_bits: Optional[int],
) -> pyzipper.AESZipFile:
    """Open a new archive for writing with the requested compression/encryption.

    level 0 stores entries uncompressed; 1-9 deflates at that level;
    None deflates at zlib's default.
    """
    compression = pyzipper.ZIP_STORED if level == 0 else pyzipper.ZIP_DEFLATED
    zf = pyzipper.AESZipFile(
        path,
        "w",
        compression=compression,
        compresslevel=level or None,
        # Clamp mtimes outside 1980-2107 instead of refusing the file.
        strict_timestamps=False,
    )
    if password and aes_bits:
        zf.setencryption(pyzipper.WZ_AES, nbits=aes_bits)
        zf.setpassword(_password_bytes(password))
    return zf


def create_archive(
    sources: Iterable[tuple[str, str]],
    output: str,
    *,
    comment: Optional[str] = None,
    level: Optional[int] = None,
    password: Optional[str] = None,
    aes_bits: Optional[int] = None,
) -> int:
    """Write an archive containing every (source_path, archive_name) pair.

    The archive is built in a temporary file next to ``output`` and moved
    into place only once every entry has been written, so a failure never
    leaves a half-written archive behind and never clobbers an existing one.

    Args:
        sources: (path on disk, name inside the archive) pairs, in order.
            Directory paths produce directory entries.
        output: Destination archive path.  Missing parent directories
            are created, and removed again if the write fails.
        comment: Archive-level comment.
        level: Compression level 0-9, or None for the library default.
        password: Encrypts every file entry when set.
        aes_bits: AES key size (128, 192 or 256); required with a password.

    Returns:
        The number of entries written.

    Raises:
        BackendError: if the archive could not be written.
    """
    parent = os.path.dirname(os.path.abspath(output))
    created = _missing_directories(parent)
    try:
        os.makedirs(parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".zip-mcp-", suffix=".part", dir=parent)
        os.close(fd)
    except OSError as exc:
        _remove_empty_directories(created)
        raise BackendError(f"Cannot write ZIP file {output}: {exc}") from exc

    try:
        with _open_for_write(tmp_path, level, password, aes_bits) as zf:
            for source, arcname in sources:
                zf.write(source, arcname)
            if comment:
                zf.comment = comment.encode("utf-8")
            count = len(zf.infolist())
        # mkstemp creates 0600 files; give the archive the usual mode.
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, output)
    except _ARCHIVE_ERRORS as exc:
        raise BackendError(f"Failed to write ZIP file {output}: {exc}") from exc
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
            _remove_empty_directories(created)

    logger.debug("Wrote %d entries to %s", count, output)
    return count


# =============================================================================
# READ
# =============================================================================
def _open_for_read(path: str, password: Optional[str]) -> pyzipper.AESZipFile:
    zf = pyzipper.AESZipFile(path, "r")
    pwd = _password_bytes(password)
    if pwd:
        zf.setpassword(pwd)
    return zf


def _entry_from_info(info: pyzipper.ZipInfo) -> ArchiveEntry:
    try:
        modified = datetime(*info.date_time)
    except ValueError:
        # Some writers leave the DOS date fields zeroed.
        modified = _EPOCH_1980
    return ArchiveEntry(
        name=info.filename,
        size=info.file_size,
        compressed_size=info.compress_size,
        is_directory=info.is_dir(),
        modified_time=modified,
        encrypted=bool(info.flag_bits & _ENCRYPTED_FLAG),
    )


def read_archive(path: str, password: Optional[str] = None) -> ArchiveListing:
    """Read the central directory: entries in archive order plus the comment.

    Raises:
        BackendError: if the file is not a readable ZIP archive.
    """
    try:
        with _open_for_read(path, password) as zf:
            entries = [_entry_from_info(info) for info in zf.infolist()]
            comment = zf.comment.decode("utf-8", errors="replace")
    except _ARCHIVE_ERRORS as exc:
        raise BackendError(f"Cannot read ZIP file {path}: {exc}") from exc
    return ArchiveListing(entries=entries, comment=comment)


# =============================================================================
# EXTRACT
# =============================================================================
def safe_target(root: str, name: str) -> Optional[str]:
    """Map an archive entry name to a path under ``root``.

    Absolute prefixes, drive letters, "." and ".." components are dropped,
    so the result is always inside ``root``.  Returns None when nothing of
    the name is left (e.g. "../").
    """
    parts = [
        part for part in name.replace("\\", "/").split("/")
        if part not in ("", ".", "..")
    ]
    if parts and parts[0].endswith(":"):
        parts = parts[1:]
    if not parts:
        return None
    return os.path.join(root, *parts)


def _resolves_inside(root: str, path: str) -> bool:
    """True when ``path``, with symlinks already on disk resolved, is under ``root``."""
    real_root = os.path.realpath(root)
    return os.path.commonpath([real_root, os.path.realpath(path)]) == real_root


def _extract_member(zf: pyzipper.AESZipFile, info: pyzipper.ZipInfo, target: str) -> None:
    os.makedirs(os.path.dirname(target), exist_ok=True)
    # Opening the member first means a bad password fails before the
    # destination file is touched.
    with zf.open(info) as source:
        # Replace a symlink itself, never the file it points to.
        if os.path.islink(target):
            os.remove(target)
        try:
            with open(target, "wb") as dest:
                shutil.copyfileobj(source, dest)
        except BaseException:
            if os.path.exists(target):
                os.remove(target)
            raise


def extract_archive(
    path: str,
    destination: str,
    password: Optional[str] = None,
    overwrite: bool = False,
) -> ExtractionReport:
    """Extract every entry of ``path`` under ``destination`` in archive order.

    Files that already exist at their target are replaced when ``overwrite``
    is true and skipped otherwise.  Directory entries are always created.
    Entries whose target would resolve outside ``destination`` through a
    symlink already on disk are skipped.

    Raises:
        BackendError: corrupt archive, wrong or missing password, I/O error.
    """
    root = os.path.abspath(destination)
    extracted: list[str] = []
    skipped: list[str] = []
    try:
        with _open_for_read(path, password) as zf:
            for info in zf.infolist():
                target = safe_target(root, info.filename)
                if target is None:
                    logger.warning("Skipping entry with unusable name: %r", info.filename)
                    skipped.append(info.filename)
                    continue
                checked = target if info.is_dir() else os.path.dirname(target)
                if not _resolves_inside(root, checked):
                    logger.warning("Skipping entry that resolves outside %s: %r", root, info.filename)
                    skipped.append(info.filename)
                    continue
                if info.is_dir():
                    os.makedirs(target, exist_ok=True)
                    extracted.append(info.filename)
                    continue
                if os.path.lexists(target) and not overwrite:
                    skipped.append(info.filename)
                    continue
                _extract_member(zf, info, target)
                extracted.append(info.filename)
    except _ARCHIVE_ERRORS as exc:
        raise BackendError(f"Failed to extract ZIP file {path}: {exc}") from exc
    return ExtractionReport(extracted=extracted, skipped=skipped)
