"""Shared fixtures for the anchorpath suite."""

from __future__ import annotations

import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest


@pytest.fixture
def project(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create ``proj/src/main.ext`` next to ``proj/config.toml`` and return ``proj``."""

    root = tmp_path / "proj"
    (root / "src").mkdir(parents=True)
    (root / "src" / "main.ext").write_text("// caller\n", encoding="utf-8")
    (root / "config.toml").write_text("name = 'demo'\n", encoding="utf-8")
    (root / "assets").mkdir()
    return root
