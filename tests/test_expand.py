"""Tests for environment variable expansion."""

from __future__ import annotations

import pytest

from anchorpath.core import expand_env
from anchorpath.exceptions import EnvExpansionError

ENV = {"HOME": "/home/alice", "PROJ": "/srv/proj", "A_B": "ab", "EMPTY": ""}


@pytest.mark.parametrize("spec", ["", "config.toml", "../a/b", "/etc/hosts", "C:/data"])
def test_spec_without_tokens_is_unchanged(spec: str) -> None:
    assert expand_env(spec, ENV) == spec


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("$HOME", "/home/alice"),
        ("${HOME}", "/home/alice"),
        ("$HOME/.config", "/home/alice/.config"),
        ("${PROJ}suffix", "/srv/projsuffix"),
        ("$A_B/x", "ab/x"),
        ("$PROJ/$A_B", "/srv/proj/ab"),
        ("pre$EMPTY/post", "pre/post"),
    ],
)
def test_variables_are_substituted(spec: str, expected: str) -> None:
    assert expand_env(spec, ENV) == expected


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("cost$", "cost$"),
        ("a$-b", "a$-b"),
        ("${unterminated", "${unterminated"),
        ("${}", "${}"),
        ("$$HOME", "$HOME"),
        ("$${HOME}", "${HOME}"),
    ],
)
def test_non_variable_dollars_are_literal(spec: str, expected: str) -> None:
    assert expand_env(spec, ENV) == expected


def test_value_is_not_expanded_again() -> None:
    assert expand_env("$NESTED", {"NESTED": "$HOME"}) == "$HOME"


@pytest.mark.parametrize("spec", ["$MISSING", "${MISSING}/x", "$HOME/$MISSING"])
def test_missing_variable_raises(spec: str) -> None:
    with pytest.raises(EnvExpansionError) as excinfo:
        expand_env(spec, ENV)

    assert excinfo.value.variable == "MISSING"
    assert excinfo.value.spec == spec
    assert "MISSING" in str(excinfo.value)


def test_non_text_value_raises() -> None:
    with pytest.raises(EnvExpansionError) as excinfo:
        expand_env("$BAD/x", {"BAD": "caf\udce9"})

    assert excinfo.value.variable == "BAD"
    assert "not valid unicode" in str(excinfo.value)


def test_process_environment_is_default(monkeypatch) -> None:
    monkeypatch.setenv("ANCHORPATH_TEST_DIR", "/data/fixtures")

    assert expand_env("$ANCHORPATH_TEST_DIR/one.json") == "/data/fixtures/one.json"


def test_braced_name_extends_to_closing_brace() -> None:
    assert expand_env("${A-B}/x", {"A-B": "v"}) == "v/x"
    assert expand_env("${HOME}-${PROJ}", ENV) == "/home/alice-/srv/proj"


def test_braced_name_with_other_characters_must_be_set() -> None:
    with pytest.raises(EnvExpansionError) as excinfo:
        expand_env("${A-B}/x", ENV)

    assert excinfo.value.variable == "A-B"
