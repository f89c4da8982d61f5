# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that
# flows between the dispatcher, the handlers and the archive backend.
#
# THREE KINDS OF MODEL:
#   1. Option records   →  CompressOptions / DecompressOptions / InfoOptions
#                          parsed from the request's "options" mapping, with
#                          named fields and documented defaults.
#   2. Backend views    →  ArchiveEntry / ArchiveListing / ExtractionReport
#                          produced by core/backend.py, read-only.
#   3. Tool results     →  CompressResult / DecompressResult / ZipInfoResult
#                          what a handler returns; to_dict() gives the JSON
#                          shape the calling agent sees (camelCase keys).
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from zip_mcp.core.errors import ValidationError

# WinZip AES key sizes, keyed by the "encryptionStrength" option.
ENCRYPTION_STRENGTH_BITS: dict[int, int] = {1: 128, 2: 192, 3: 256}
DEFAULT_ENCRYPTION_STRENGTH = 3

# The ZIP end-of-central-directory comment length field is 16 bits.
MAX_COMMENT_BYTES = 0xFFFF


# -----------------------------------------------------------------------------
# Option parsing helpers
# -----------------------------------------------------------------------------
# The calling agent sends JSON, so numbers may arrive as floats (3.0) and
# anything may arrive as null.  None always means "use the default".
# -----------------------------------------------------------------------------
def _options_mapping(data: Optional[dict[str, Any]]) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("options must be an object")
    return data


def _opt_bool(data: dict[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"options.{key} must be a boolean")
    return value


def _opt_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"options.{key} must be a string")
    return value


def _opt_int(data: dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; "true" is not a compression level
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"options.{key} must be a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"options.{key} must be a whole number")
        value = int(value)
    return value


# -----------------------------------------------------------------------------
# CompressOptions — archive-level settings for the compress tool
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CompressOptions:
    """Settings applied to a new archive.

    Defaults: never overwrite, library-default deflate level, no password,
    no comment.  encryption_strength only matters when a password is set.
    """

    overwrite: bool = False
    level: Optional[int] = None            # 0 = stored, 1-9 = deflate level
    password: Optional[str] = None         # enables WinZip AES encryption
    comment: Optional[str] = None          # archive-level comment
    encryption_strength: Optional[int] = None  # 1=AES-128, 2=AES-192, 3=AES-256

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "CompressOptions":
        data = _options_mapping(data)
        level = _opt_int(data, "level")
        if level is not None and not 0 <= level <= 9:
            raise ValidationError(
                f"options.level must be between 0 and 9, got {level}"
            )
        strength = _opt_int(data, "encryptionStrength")
        if strength is not None and strength not in ENCRYPTION_STRENGTH_BITS:
            raise ValidationError(
                f"options.encryptionStrength must be 1, 2 or 3, got {strength}"
            )
        comment = _opt_str(data, "comment")
        if comment is not None and len(comment.encode("utf-8")) > MAX_COMMENT_BYTES:
            raise ValidationError(
                f"options.comment is longer than {MAX_COMMENT_BYTES} bytes"
            )
        return cls(
            overwrite=_opt_bool(data, "overwrite"),
            level=level,
            password=_opt_str(data, "password") or None,
            comment=comment,
            encryption_strength=strength,
        )

    @property
    def aes_bits(self) -> Optional[int]:
        """AES key size to encrypt with, or None for an unencrypted archive."""
        if self.password is None:
            return None
        strength = self.encryption_strength or DEFAULT_ENCRYPTION_STRENGTH
        return ENCRYPTION_STRENGTH_BITS[strength]


# -----------------------------------------------------------------------------
# DecompressOptions — extraction settings for the decompress tool
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class DecompressOptions:
    """Settings for extracting an archive.

    overwrite=False means files that already exist at the destination are
    left alone and reported as skipped.
    """

    overwrite: bool = False
    password: Optional[str] = None
    create_directories: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "DecompressOptions":
        data = _options_mapping(data)
        return cls(
            overwrite=_opt_bool(data, "overwrite"),
            password=_opt_str(data, "password") or None,
            create_directories=_opt_bool(data, "createDirectories"),
        )


@dataclass(frozen=True)
class InfoOptions:
    """Settings for reading archive metadata."""

    password: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "InfoOptions":
        data = _options_mapping(data)
        return cls(password=_opt_str(data, "password") or None)


# -----------------------------------------------------------------------------
# ArchiveEntry — one file or directory inside an archive
# -----------------------------------------------------------------------------
# Built by the backend from the central directory.  The handlers never
# construct these themselves; they only serialize them.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ArchiveEntry:
    """Metadata for one archive member."""

    name: str                          # Relative path, "/" separated
    size: int                          # Uncompressed size in bytes
    compressed_size: int               # Stored size in bytes
    is_directory: bool
    modified_time: datetime            # From the DOS date/time fields
    encrypted: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "compressedSize": self.compressed_size,
            "isDirectory": self.is_directory,
            "date": self.modified_time.isoformat(),
            "encrypted": self.encrypted,
        }


@dataclass(frozen=True)
class ArchiveListing:
    """Everything the backend reads from an archive without extracting it."""

    entries: list[ArchiveEntry] = field(default_factory=list)
    comment: str = ""


@dataclass(frozen=True)
class ExtractionReport:
    """Which entries were written and which were left alone."""

    extracted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Tool results — what each handler returns
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CompressResult:
    output: str                        # Absolute path of the written archive
    size: int                          # Archive size on disk
    files: int                         # Number of entries written
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "output": self.output,
            "size": self.size,
            "files": self.files,
        }


@dataclass(frozen=True)
class DecompressResult:
    output: str
    files: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "output": self.output,
            "filesExtracted": len(self.files),
            "files": list(self.files),
            "skipped": list(self.skipped),
        }


@dataclass(frozen=True)
class ZipInfoResult:
    path: str
    size: int
    comment: str = ""
    entries: list[ArchiveEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "size": self.size,
            "totalEntries": len(self.entries),
            "comment": self.comment,
            "entries": [entry.to_dict() for entry in self.entries],
        }
