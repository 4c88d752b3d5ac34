"""Tests for the upward-traversal heuristic and path decomposition."""

from __future__ import annotations

import pytest

from anchorpath.core import check_traversal, path_components
from anchorpath.exceptions import SuspiciousPathError


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("", []),
        ("config.toml", ["config.toml"]),
        ("./a//b/./c", [".", "a", "b", "c"]),
        (".", ["."]),
        ("../x", ["..", "x"]),
        ("/etc/hosts", ["/", "etc", "hosts"]),
        ("/a/../b", ["/", "a", "..", "b"]),
        (".hidden/file", [".hidden", "file"]),
    ],
)
def test_path_components(spec: str, expected: list) -> None:
    assert path_components(spec) == expected


@pytest.mark.parametrize(
    "spec",
    [
        "",
        "config.toml",
        "../config.toml",
        "../../../a/b/c/d",
        "../../../a/b/c",
        "./../x",
        "/a/../b",
        "/etc/hosts",
    ],
)
def test_accepted_paths(spec: str) -> None:
    check_traversal(spec)


@pytest.mark.parametrize(
    ("spec", "up", "total"),
    [
        ("../../../..", 4, 4),
        ("../../../a/b", 3, 5),
        ("../../../../a/b/c/d/e/f", 4, 10),
        ("..", 1, 1),
        ("../../x", 2, 3),
        ("/../../../../etc/passwd", 4, 7),
    ],
)
def test_rejected_paths(spec: str, up: int, total: int) -> None:
    with pytest.raises(SuspiciousPathError) as excinfo:
        check_traversal(spec)

    assert excinfo.value.up == up
    assert excinfo.value.total == total
    assert excinfo.value.spec == spec
