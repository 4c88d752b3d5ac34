"""Build manifest describing the path constants a project wants baked in."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from jsonschema import Draft202012Validator, ValidationError

from anchorpath.exceptions import SourceLocation

JsonDict = Dict[str, Any]

MANIFEST_SCHEMA: JsonDict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["constants"],
    "additionalProperties": False,
    "properties": {
        "output": {"type": "string", "minLength": 1},
        "constants": {
            "type": "object",
            "propertyNames": {"pattern": "^[A-Z_][A-Z0-9_]*$"},
            "additionalProperties": {
                "oneOf": [
                    {"type": "string"},
                    {
                        "type": "object",
                        "required": ["path"],
                        "additionalProperties": False,
                        "properties": {
                            "path": {"type": "string"},
                            "caller": {"type": "string", "minLength": 1},
                        },
                    },
                ]
            },
        },
    },
}


class ManifestError(RuntimeError):
    """Raised when a manifest cannot be read or fails schema validation."""

    def __init__(self, path: str, message: str, errors: Optional[List[JsonDict]] = None) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.errors: List[JsonDict] = list(errors or [])


@dataclass(frozen=True)
class ManifestEntry:
    """A single invocation site: constant name, path spec and anchor file."""

    name: str
    spec: str
    caller: Path
    location: SourceLocation


@dataclass
class Manifest:
    path: Path
    output: Optional[Path] = None
    entries: List[ManifestEntry] = field(default_factory=list)


def _collect_errors(raw_errors: Iterable[ValidationError]):
    for error in sorted(raw_errors, key=lambda item: list(map(str, item.absolute_path))):
        yield {
            "message": error.message,
            "path": list(error.absolute_path),
        }


def validate_manifest(payload: Any) -> List[JsonDict]:
    """Return the schema violations found in *payload* (empty when valid)."""

    validator = Draft202012Validator(MANIFEST_SCHEMA)
    return list(_collect_errors(validator.iter_errors(payload)))


_CONSTANTS_KEY = re.compile(r'(?<!\\)"constants"\s*:\s*\{')


def _locate_key(text: str, name: str) -> Tuple[Optional[int], Optional[int]]:
    """Return the 1-based line and column of *name*'s key in the constants object."""

    anchor = _CONSTANTS_KEY.search(text)
    offset = anchor.end() if anchor is not None else 0
    pattern = re.compile(r'(?<!\\)"%s"\s*:' % re.escape(name))
    # Duplicate keys: json.loads keeps the last one.
    match = None
    for match in pattern.finditer(text, offset):
        pass
    if match is None:
        return None, None
    start = match.start()
    line = text.count("\n", 0, start) + 1
    column = start - (text.rfind("\n", 0, start) + 1) + 1
    return line, column


def _entry_from(
    name: str,
    value: Any,
    *,
    manifest_path: Path,
    text: str,
) -> ManifestEntry:
    anchor = Path(os.path.abspath(manifest_path))
    if isinstance(value, Mapping):
        spec = value["path"]
        raw_caller = value.get("caller")
        caller = anchor.parent / raw_caller if raw_caller else anchor
    else:
        spec = value
        caller = anchor
    line, column = _locate_key(text, name)
    return ManifestEntry(
        name=name,
        spec=spec,
        caller=caller,
        location=SourceLocation(str(manifest_path), line, column),
    )


def parse_manifest(text: str, path: Union[Path, str]) -> Manifest:
    """Parse and validate manifest *text* that was read from *path*."""

    manifest_path = Path(path)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(str(manifest_path), f"invalid JSON: {exc}") from exc

    errors = validate_manifest(payload)
    if errors:
        raise ManifestError(str(manifest_path), "manifest failed validation", errors)

    entries = [
        _entry_from(name, value, manifest_path=manifest_path, text=text)
        for name, value in payload["constants"].items()
    ]
    output = payload.get("output")
    if output is not None:
        output = Path(os.path.abspath(manifest_path)).parent / output
    return Manifest(path=manifest_path, output=output, entries=entries)


def load_manifest(path: Union[Path, str]) -> Manifest:
    """Read the manifest at *path*."""

    manifest_path = Path(path)
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(str(manifest_path), f"unable to read manifest: {exc}") from exc
    return parse_manifest(text, manifest_path)


__all__ = [
    "MANIFEST_SCHEMA",
    "Manifest",
    "ManifestEntry",
    "ManifestError",
    "load_manifest",
    "parse_manifest",
    "validate_manifest",
]
