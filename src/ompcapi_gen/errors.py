"""Domain-specific errors for ompcapi-gen."""

from __future__ import annotations


class OmpCapiGenError(Exception):
    """Base error for ompcapi-gen."""


class ScanError(OmpCapiGenError):
    """Raised when the source tree cannot be scanned."""


class AnnotationSyntaxError(OmpCapiGenError):
    """Raised when an annotation line is too malformed to yield a record."""

    def __init__(self, message: str, *, path: str | None = None, lineno: int | None = None):
        self.path = path
        self.lineno = lineno
        if path is not None:
            where = f"{path}:{lineno}" if lineno is not None else path
            message = f"{where}: {message}"
        super().__init__(message)


class DuplicateSymbolError(OmpCapiGenError):
    """Raised in strict mode when two annotations export the same symbol."""


class EventSchemaError(OmpCapiGenError):
    """Raised when the event schema document is missing or malformed."""


class HeaderError(OmpCapiGenError):
    """Raised when the scanned surface cannot be assembled into a header."""


class EmitError(OmpCapiGenError):
    """Raised when a generated artifact cannot be written."""


class LoadError(OmpCapiGenError):
    """Raised when the C API shared library cannot be loaded."""
