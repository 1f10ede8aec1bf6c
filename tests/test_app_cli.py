from __future__ import annotations

import pytest

from edit_engine.adapters.textual.app import _parse_args


def test_unknown_preset_in_environment_is_ignored(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("EDIT_ENGINE_PRESET", "verbose")

    args = _parse_args([])

    assert args.preset is None


def test_preset_from_environment_is_normalized(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("EDIT_ENGINE_PRESET", " Production ")

    args = _parse_args(["--file", "notes.txt"])

    assert args.preset == "production"
    assert args.file == "notes.txt"


def test_command_line_preset_overrides_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("EDIT_ENGINE_PRESET", "production")

    assert _parse_args(["--preset", "development"]).preset == "development"
