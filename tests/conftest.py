"""Shared pytest fixtures and test helpers for inmask tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from inmask.config.settings import InmaskSettings
from inmask.domain.definition import MaskDefinition
from inmask.domain.edits import EditIntent, KeyEvent, classify
from inmask.engine import EditOutcome, FieldMaskState, apply
from inmask.infrastructure.memory_input import InMemoryInput
from inmask.services.controller import MaskController


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Generator[None]:
    """Undo configure_logging() so later tests still see records via caplog."""
    pkg = logging.getLogger("inmask")
    handlers, level, propagate = pkg.handlers[:], pkg.level, pkg.propagate
    yield
    pkg.handlers = handlers
    pkg.setLevel(level)
    pkg.propagate = propagate


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> InmaskSettings:
    """Settings rooted in an empty temp directory (no inmask.toml)."""
    monkeypatch.delenv("INMASK_CONFIG", raising=False)
    return InmaskSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to an empty temp directory so the CLI sees no config file.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    monkeypatch.delenv("INMASK_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def controller() -> MaskController:
    return MaskController()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def masked_field(
    definition: MaskDefinition,
    text: str = "",
    controller: MaskController | None = None,
) -> tuple[InMemoryInput, MaskController]:
    """An in-memory field with *definition* attached."""
    ctrl = controller or MaskController()
    field = InMemoryInput(text=text)
    ctrl.set_mask(field, definition)
    return field, ctrl


def press(
    state: FieldMaskState,
    key: str,
    sel: tuple[int, int] | int | None = None,
    *,
    commit: bool = True,
) -> EditOutcome:
    """Apply one key to *state* at *sel* (defaults to the stored caret)."""
    if sel is None:
        sel = state.caret
    start, end = (sel, sel) if isinstance(sel, int) else sel
    intent: EditIntent = classify(KeyEvent(key), start, end)
    outcome = apply(state, intent)
    if commit:
        state.commit(outcome)
    return outcome


def type_text(state: FieldMaskState, text: str) -> EditOutcome:
    """Type *text* at the running caret, committing each keystroke."""
    outcome = EditOutcome(text=state.last_valid_value, caret=state.caret)
    for char in text:
        outcome = press(state, char)
    return outcome
