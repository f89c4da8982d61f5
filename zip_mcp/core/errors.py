# =============================================================================
# core/errors.py  —  Tagged error types for every failure category
# =============================================================================
#
# THREE CATEGORIES:
#   ValidationError    →  the request itself is malformed (missing arguments,
#                         unknown tool, option out of range)
#   PreconditionError  →  the request is well-formed but the file system says
#                         no (missing input, output already exists)
#   BackendError       →  the archive library failed (corrupt archive, wrong
#                         password, I/O error while reading or writing)
#
# Handlers raise the first failing check immediately.  The dispatcher
# (tools/dispatcher.py) is the single place that turns these into error
# responses, so callers can branch on the type instead of the message text.
# =============================================================================

from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories, one per exception subclass."""
    VALIDATION = "validation"
    PRECONDITION = "precondition"
    BACKEND = "backend"


class ArchiveToolError(Exception):
    """Base exception for every failure a tool call can report."""

    category: ErrorCategory = ErrorCategory.BACKEND

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(ArchiveToolError):
    """Missing or malformed request arguments."""

    category = ErrorCategory.VALIDATION


class PreconditionError(ArchiveToolError):
    """A path-existence or overwrite check failed."""

    category = ErrorCategory.PRECONDITION


class BackendError(ArchiveToolError):
    """The archive library could not read or write the archive."""

    category = ErrorCategory.BACKEND
