"""Command line entry point for anchorpath."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from anchorpath.codegen import render_module, resolve_manifest, write_module
from anchorpath.core import resolve_path
from anchorpath.exceptions import ResolutionError, SourceLocation, format_diagnostic
from anchorpath.logging import log_resolution
from anchorpath.manifest import ManifestError, load_manifest

_LOGGER = logging.getLogger("anchorpath.cli")

_ENV_FILE_ENV = "ANCHORPATH_ENV_FILE"
_DEFAULT_ENV_FILE = ".env"


def _configure_logging() -> None:
    log_level = os.getenv("ANCHORPATH_LOG_LEVEL", "INFO")
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _load_env_file(path: Optional[str]) -> None:
    """Seed the environment from a dotenv file without overriding set variables."""

    env_path = path or os.getenv(_ENV_FILE_ENV, _DEFAULT_ENV_FILE)
    if path and not os.path.isfile(env_path):
        _LOGGER.warning("Env file %s not found; using process environment only", env_path)
        return
    if load_dotenv(dotenv_path=env_path, override=False):
        _LOGGER.debug("Loaded environment from %s", env_path)


def _report(error: ResolutionError) -> None:
    print(format_diagnostic(error), file=sys.stderr)


def _run_resolve(args: argparse.Namespace) -> int:
    location = SourceLocation(args.caller, args.line, args.column)
    try:
        resolved = resolve_path(args.spec, args.caller, location=location)
    except ResolutionError as exc:
        _report(exc)
        log_resolution({"event": "resolve.failed", "spec": args.spec, "caller": args.caller, "kind": exc.kind})
        return 1

    log_resolution({"event": "resolve", "spec": args.spec, "caller": args.caller, "path": resolved})
    if args.json:
        print(json.dumps({"spec": args.spec, "caller": args.caller, "path": resolved}, indent=2))
    else:
        print(resolved)
    return 0


def _run_generate(args: argparse.Namespace) -> int:
    try:
        manifest = load_manifest(args.manifest)
    except ManifestError as exc:
        print(f"error[ManifestError]: {exc}", file=sys.stderr)
        for detail in exc.errors:
            pointer = "/".join(str(part) for part in detail["path"])
            print(f"  - /{pointer}: {detail['message']}", file=sys.stderr)
        return 1

    resolved, failures = resolve_manifest(manifest)
    if failures:
        for failure in failures:
            _report(failure)
        _LOGGER.error("%d of %d path constants failed to resolve", len(failures), len(manifest.entries))
        log_resolution(
            {"event": "generate.failed", "manifest": str(manifest.path), "failures": [f.kind for f in failures]}
        )
        return 1

    text = render_module(resolved, source=os.path.basename(manifest.path))
    output = args.output or manifest.output
    if output is None:
        sys.stdout.write(text)
    else:
        target = write_module(output, text)
        _LOGGER.info("Wrote %d path constants to %s", len(resolved), target)
    log_resolution({"event": "generate", "manifest": str(manifest.path), "constants": resolved})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anchorpath",
        description="Resolve paths relative to a source file and bake them into generated code",
    )
    parser.add_argument("--env-file", dest="env_file", help="dotenv file to load before expanding variables")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a single path spec")
    resolve_parser.add_argument("spec", help="Path spec, relative to the caller file or absolute")
    resolve_parser.add_argument("--caller", required=True, help="File the path spec is relative to")
    resolve_parser.add_argument("--line", type=int, help="Line of the invocation, for diagnostics")
    resolve_parser.add_argument("--column", type=int, help="Column of the invocation, for diagnostics")
    resolve_parser.add_argument("--json", action="store_true", help="Emit a JSON object instead of the bare path")

    generate_parser = subparsers.add_parser("generate", help="Generate a module of path constants from a manifest")
    generate_parser.add_argument("manifest", help="JSON manifest listing the path constants")
    generate_parser.add_argument("-o", "--output", help="Destination module (default: manifest 'output' or stdout)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the anchorpath CLI."""

    _configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    _load_env_file(args.env_file)

    if args.command == "resolve":
        return _run_resolve(args)
    if args.command == "generate":
        return _run_generate(args)

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
