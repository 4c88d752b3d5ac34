"""Render resolved manifest entries as a generated Python module."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from anchorpath.core import resolve_path
from anchorpath.exceptions import ResolutionError
from anchorpath.manifest import Manifest

_LOGGER = logging.getLogger("anchorpath.codegen")

_HEADER = '"""Absolute paths resolved at build time. Generated by anchorpath; do not edit."""'


def resolve_manifest(
    manifest: Manifest,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[Dict[str, str], List[ResolutionError]]:
    """Resolve every entry of *manifest*.

    Each entry is resolved independently so that one broken path does not hide
    the others. Returns the successful results and the collected failures.
    """

    resolved: Dict[str, str] = {}
    failures: List[ResolutionError] = []
    for entry in manifest.entries:
        try:
            resolved[entry.name] = resolve_path(
                entry.spec,
                entry.caller,
                environ=environ,
                location=entry.location,
            )
        except ResolutionError as exc:
            _LOGGER.debug("Entry %s failed: %s", entry.name, exc)
            failures.append(exc)
    return resolved, failures


def render_module(resolved: Mapping[str, str], *, source: Optional[str] = None) -> str:
    """Return Python source defining one string constant per resolved path."""

    lines = [_HEADER]
    if source:
        lines.append(f"# Source manifest: {source}")
    lines.append("")
    names = sorted(resolved)
    for name in names:
        lines.append(f"{name} = {resolved[name]!r}")
    if names:
        lines.append("")
    exported = ", ".join(repr(name) for name in names)
    lines.append(f"__all__ = [{exported}]")
    return "\n".join(lines) + "\n"


def write_module(path: Union[Path, str], text: str) -> str:
    """Write *text* to *path*, creating parent directories as needed."""

    target = os.fspath(path)
    directory = os.path.dirname(target)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(target, "w", encoding="utf-8") as handle:
        handle.write(text)
    return target


__all__ = ["render_module", "resolve_manifest", "write_module"]
