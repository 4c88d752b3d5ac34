"""Resolution error taxonomy and diagnostic formatting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SourceLocation:
    """Position of the invocation that requested a path."""

    file: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        rendered = self.file
        if self.line is not None:
            rendered = f"{rendered}:{self.line}"
            if self.column is not None:
                rendered = f"{rendered}:{self.column}"
        return rendered


class ResolutionError(ValueError):
    """Base class for every failure of the resolution pipeline."""

    kind = "ResolutionError"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context
        self.location: Optional[SourceLocation] = None

    def with_location(self, location: Optional[SourceLocation]) -> "ResolutionError":
        """Attach *location* unless one is already recorded and return ``self``."""

        if location is not None and self.location is None:
            self.location = location
        return self


class EnvExpansionError(ResolutionError):
    """Raised when a referenced environment variable is unset or not text."""

    kind = "EnvExpansionError"

    def __init__(self, variable: str, spec: str, *, reason: str = "is not set") -> None:
        super().__init__(
            f"environment variable ${variable} {reason} (in path {spec!r})",
            variable=variable,
            spec=spec,
        )
        self.variable = variable
        self.spec = spec


class SuspiciousPathError(ResolutionError):
    """Raised when a path climbs too far upward to be trusted."""

    kind = "SuspiciousPathError"

    def __init__(self, spec: str, up: int, total: int) -> None:
        super().__init__(
            f"path {spec!r} looks suspicious: {up} parent segments out of {total} components",
            spec=spec,
            up=up,
            total=total,
        )
        self.spec = spec
        self.up = up
        self.total = total


class NoParentDirectoryError(ResolutionError):
    """Raised when the caller file has no directory to anchor against."""

    kind = "NoParentDirectoryError"

    def __init__(self, caller_file: str) -> None:
        super().__init__(
            f"failed to get parent of the caller path: {caller_file!r}",
            caller_file=caller_file,
        )
        self.caller_file = caller_file


class CanonicalizationError(ResolutionError):
    """Raised when the filesystem cannot canonicalize the anchored path."""

    kind = "CanonicalizationError"

    def __init__(self, raw_path: str, os_error: str, cwd: str) -> None:
        super().__init__(
            f"failed to canonicalize path {raw_path!r}: {os_error} (cwd: {cwd})",
            raw_path=raw_path,
            os_error=os_error,
            cwd=cwd,
        )
        self.raw_path = raw_path
        self.os_error = os_error
        self.cwd = cwd


class NonUtf8PathError(ResolutionError):
    """Raised when the canonical path cannot be represented as UTF-8 text."""

    kind = "NonUtf8PathError"

    def __init__(self, display: str) -> None:
        super().__init__(f"canonical path is not valid UTF-8: {display}", display=display)
        self.display = display


def format_diagnostic(error: ResolutionError) -> str:
    """Render *error* as a single ``location: error[kind]: message`` line."""

    prefix = f"{error.location}: " if error.location is not None else ""
    return f"{prefix}error[{error.kind}]: {error.message}"


__all__ = [
    "CanonicalizationError",
    "EnvExpansionError",
    "NoParentDirectoryError",
    "NonUtf8PathError",
    "ResolutionError",
    "SourceLocation",
    "SuspiciousPathError",
    "format_diagnostic",
]
