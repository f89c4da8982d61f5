# =============================================================================
# core/archive.py  —  Operation Handlers (echo, compress, decompress, info)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One function per tool.  Each one:
#     1. Checks its preconditions IN ORDER, raising on the first failure
#     2. Calls core/backend.py to do the archive work
#     3. Returns a result dataclass (never a raw dict, never JSON)
#
# FAIL-FAST:
#   compress() stages and validates every input before the backend opens
#   an output file.  A missing input or a duplicate entry name means no
#   archive is written and an existing output keeps its bytes.
#
#   decompress() checks the archive path before creating any directory,
#   so a bad input never leaves an empty output directory behind.
# =============================================================================

import logging
import os
from typing import Any, Union

from zip_mcp.core import backend
from zip_mcp.core.errors import BackendError, PreconditionError, ValidationError
from zip_mcp.core.models import (
    CompressOptions,
    CompressResult,
    DecompressOptions,
    DecompressResult,
    InfoOptions,
    ZipInfoResult,
)

logger = logging.getLogger(__name__)


def _require_path(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field_name} must be a non-empty string")
    return value


# -----------------------------------------------------------------------------
# echo — connectivity check
# -----------------------------------------------------------------------------
def echo(message: Any) -> str:
    """Return the message prefixed with "Echo: "."""
    if message is None:
        raise ValidationError("message is required")
    return f"Echo: {message}"


# -----------------------------------------------------------------------------
# compress
# -----------------------------------------------------------------------------
def normalize_inputs(value: Union[str, list[str]]) -> list[str]:
    """Turn the "input" argument into a non-empty list of path strings."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not value:
        raise ValidationError("input must be a path or a non-empty list of paths")
    return [_require_path(item, "input") for item in value]


def _archive_base_name(path: str) -> str:
    # normpath drops a trailing separator so "docs/" still yields "docs"
    return os.path.basename(os.path.normpath(os.path.abspath(path)))


def _walk_directory(path: str, base: str) -> list[tuple[str, str]]:
    """Stage a directory: its own entry, then every sub-directory and file."""
    staged = [(path, f"{base}/")]
    for dirpath, dirnames, filenames in os.walk(path):
        dirnames.sort()
        rel_dir = os.path.relpath(dirpath, path)
        prefix = base if rel_dir == os.curdir else f"{base}/{rel_dir.replace(os.sep, '/')}"
        for dirname in dirnames:
            staged.append((os.path.join(dirpath, dirname), f"{prefix}/{dirname}/"))
        for filename in sorted(filenames):
            staged.append((os.path.join(dirpath, filename), f"{prefix}/{filename}"))
    return staged


def stage_entries(paths: list[str]) -> list[tuple[str, str]]:
    """Resolve input paths into (source path, archive name) pairs.

    Files land at the archive root under their base name.  Directories land
    under a top-level entry named after the directory, with their full
    recursive contents.

    Raises:
        PreconditionError: an input is missing, or two inputs would produce
            the same archive entry name.
    """
    staged: list[tuple[str, str]] = []
    seen: set[str] = set()
    for path in paths:
        if not os.path.exists(path):
            raise PreconditionError(f"Input path does not exist: {path}")
        base = _archive_base_name(path)
        if os.path.isdir(path):
            pairs = _walk_directory(path, base)
        else:
            pairs = [(path, base)]
        for source, arcname in pairs:
            if arcname in seen:
                raise PreconditionError(f"Duplicate entry name in archive: {arcname}")
            seen.add(arcname)
            staged.append((source, arcname))
    return staged


def compress(
    input_paths: Union[str, list[str]],
    output: str,
    options: CompressOptions = CompressOptions(),
) -> CompressResult:
    """Compress files and/or directories into a new ZIP archive.

    Args:
        input_paths: One path or a list of paths, archived in order.
        output: Archive path to write.
        options: Overwrite policy, level, password, comment, AES strength.

    Returns:
        A CompressResult with the absolute output path, its size on disk
        and the number of entries written.
    """
    output = _require_path(output, "output")
    if os.path.exists(output) and not options.overwrite:
        raise PreconditionError(f"Output file already exists: {output}")
    if os.path.isdir(output):
        raise PreconditionError(f"Output path is a directory: {output}")

    paths = normalize_inputs(input_paths)
    staged = stage_entries(paths)
    logger.debug("Staged %d entries from %d inputs", len(staged), len(paths))

    if options.encryption_strength and not options.password:
        logger.info("encryptionStrength ignored: no password given")

    count = backend.create_archive(
        staged,
        output,
        comment=options.comment,
        level=options.level,
        password=options.password,
        aes_bits=options.aes_bits,
    )
    resolved = os.path.abspath(output)
    return CompressResult(output=resolved, size=os.path.getsize(resolved), files=count)


# -----------------------------------------------------------------------------
# decompress
# -----------------------------------------------------------------------------
def decompress(
    input_path: str,
    output: str,
    options: DecompressOptions = DecompressOptions(),
) -> DecompressResult:
    """Extract every entry of a ZIP archive into a directory.

    Existing files are kept (and reported as skipped) unless
    options.overwrite is true.
    """
    input_path = _require_path(input_path, "input")
    output = _require_path(output, "output")
    if not os.path.exists(input_path):
        raise PreconditionError(f"ZIP file does not exist: {input_path}")

    if options.create_directories and not os.path.exists(output):
        try:
            os.makedirs(output, exist_ok=True)
        except OSError as exc:
            raise BackendError(f"Cannot create output directory {output}: {exc}") from exc
    if not os.path.exists(output):
        raise PreconditionError(f"Output directory does not exist: {output}")
    if not os.path.isdir(output):
        raise PreconditionError(f"Output path is not a directory: {output}")

    report = backend.extract_archive(
        input_path, output, password=options.password, overwrite=options.overwrite,
    )
    if report.skipped:
        logger.info("Skipped %d existing entries in %s", len(report.skipped), output)
    return DecompressResult(output=output, files=report.extracted, skipped=report.skipped)


# -----------------------------------------------------------------------------
# get_zip_info
# -----------------------------------------------------------------------------
def get_zip_info(input_path: str, options: InfoOptions = InfoOptions()) -> ZipInfoResult:
    """Read archive metadata (size, comment, per-entry details) without extracting."""
    input_path = _require_path(input_path, "input")
    if not os.path.exists(input_path):
        raise PreconditionError(f"ZIP file does not exist: {input_path}")

    listing = backend.read_archive(input_path, password=options.password)
    return ZipInfoResult(
        path=input_path,
        size=os.path.getsize(input_path),
        comment=listing.comment,
        entries=listing.entries,
    )
