"""Build-time path resolution anchored at the caller's source file.

The pipeline runs four stages in order and stops at the first failure:

1. :func:`expand_env` substitutes ``$NAME`` / ``${NAME}`` references.
2. :func:`check_traversal` rejects paths that climb too far upward.
3. :func:`anchor_path` joins relative paths onto the caller's directory.
4. :func:`canonicalize` resolves the result against the real filesystem.

The traversal check is a coarse component-counting heuristic. It does not pin
paths under a trusted root and should be read as best-effort filtering only.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path, PurePath
from typing import List, Mapping, Optional, Union

from anchorpath.exceptions import (
    CanonicalizationError,
    EnvExpansionError,
    NoParentDirectoryError,
    NonUtf8PathError,
    ResolutionError,
    SourceLocation,
    SuspiciousPathError,
)

PathLike = Union[str, os.PathLike]

_LOGGER = logging.getLogger("anchorpath.core")

_ENV_PATTERN = re.compile(r"\$(?:(\$)|\{([^}]+)\}|([A-Za-z0-9_]+))")
_SEPARATORS = {sep for sep in (os.sep, os.altsep) if sep}

MAX_PARENT_SEGMENTS = 3


def expand_env(spec: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Return *spec* with every ``$NAME`` and ``${NAME}`` replaced from *environ*.

    A bare ``$NAME`` takes the longest run of ``[A-Za-z0-9_]``; a braced name is
    everything up to the closing brace.

    ``$$`` yields a literal ``$``. Any other ``$`` that does not introduce a
    variable name is kept as-is. An unset variable, or one whose value holds
    bytes that are not valid UTF-8, raises :class:`EnvExpansionError`.
    """

    env = os.environ if environ is None else environ

    def _substitute(match: "re.Match[str]") -> str:
        if match.group(1):
            return "$"
        name = match.group(2) or match.group(3)
        value = env.get(name)
        if value is None:
            raise EnvExpansionError(name, spec)
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EnvExpansionError(name, spec, reason="is not valid unicode") from exc
        return value

    return _ENV_PATTERN.sub(_substitute, spec)


def path_components(spec: str) -> List[str]:
    """Split *spec* into root, current-dir, parent-dir and named components.

    Repeated separators and inner ``.`` segments are normalised away; a single
    leading ``.`` is kept as a current-directory marker.
    """

    parts = list(PurePath(spec).parts)
    if spec == os.curdir or (spec[:1] == os.curdir and spec[1:2] in _SEPARATORS):
        parts.insert(0, os.curdir)
    return parts


def check_traversal(spec: str) -> None:
    """Raise :class:`SuspiciousPathError` when *spec* traverses too far upward."""

    components = path_components(spec)
    total = len(components)
    up = sum(1 for part in components if part == os.pardir)
    if up > MAX_PARENT_SEGMENTS or (total > 0 and up > total // 2):
        raise SuspiciousPathError(spec, up, total)


def anchor_path(spec: str, caller_file: PathLike) -> Path:
    """Make *spec* absolute by joining it onto the parent of *caller_file*.

    Absolute specs are returned unchanged. No normalisation is applied and the
    filesystem is not consulted.
    """

    candidate = Path(spec)
    if candidate.is_absolute():
        return candidate

    raw_caller = os.fspath(caller_file)
    caller = Path(raw_caller)
    parent = caller.parent
    if not raw_caller or parent == caller:
        raise NoParentDirectoryError(raw_caller)
    return parent / candidate


def _current_directory() -> str:
    try:
        return os.getcwd()
    except OSError as exc:
        return f"<unavailable: {exc.strerror or exc}>"


def canonicalize(raw_path: PathLike) -> str:
    """Resolve symlinks and ``.``/``..`` in *raw_path*, requiring it to exist."""

    path = Path(raw_path)
    try:
        resolved = path.resolve(strict=True)
    except (OSError, RuntimeError, ValueError) as exc:
        # RuntimeError: symlink loops on older interpreters. ValueError: embedded NUL.
        reason = getattr(exc, "strerror", None) or str(exc)
        raise CanonicalizationError(str(path), reason, _current_directory()) from exc

    text = str(resolved)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        display = os.fsencode(resolved).decode("utf-8", errors="replace")
        raise NonUtf8PathError(display) from exc
    return text


def resolve_path(
    spec: str,
    caller_file: PathLike,
    *,
    environ: Optional[Mapping[str, str]] = None,
    location: Optional[SourceLocation] = None,
) -> str:
    """Resolve *spec* relative to *caller_file* into a canonical absolute path.

    Failures propagate as :class:`~anchorpath.exceptions.ResolutionError`
    subclasses tagged with *location* when one is supplied.
    """

    try:
        expanded = expand_env(spec, environ)
        check_traversal(expanded)
        raw_path = anchor_path(expanded, caller_file)
        _LOGGER.debug("Anchored %r at %s -> %s", spec, os.fspath(caller_file), raw_path)
        resolved = canonicalize(raw_path)
    except ResolutionError as exc:
        raise exc.with_location(location)

    _LOGGER.debug("Resolved %r -> %s", spec, resolved)
    return resolved


__all__ = [
    "MAX_PARENT_SEGMENTS",
    "anchor_path",
    "canonicalize",
    "check_traversal",
    "expand_env",
    "path_components",
    "resolve_path",
]
