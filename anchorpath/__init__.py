"""anchorpath: resolve paths relative to a source file at build time."""

from .core import resolve_path
from .exceptions import (
    CanonicalizationError,
    EnvExpansionError,
    NoParentDirectoryError,
    NonUtf8PathError,
    ResolutionError,
    SourceLocation,
    SuspiciousPathError,
    format_diagnostic,
)

__all__ = [
    "CanonicalizationError",
    "EnvExpansionError",
    "NoParentDirectoryError",
    "NonUtf8PathError",
    "ResolutionError",
    "SourceLocation",
    "SuspiciousPathError",
    "format_diagnostic",
    "resolve_path",
]
