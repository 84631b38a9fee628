"""Tests for engine dispatch."""

from __future__ import annotations

import pytest

from inmask.domain.definition import InvalidMaskDefinition, MaskDefinition
from inmask.domain.edits import EditIntent
from inmask.domain.types import EditKind, MaskKind
from inmask.engine import FieldMaskState, apply
from inmask.engine.core import FORMATTERS


class TestDispatch:
    def test_every_kind_has_a_formatter(self) -> None:
        assert set(FORMATTERS) == set(MaskKind)

    def test_unknown_kind_is_a_definition_error(self) -> None:
        state = FieldMaskState(MaskDefinition(kind="currency"))  # type: ignore[arg-type]
        with pytest.raises(InvalidMaskDefinition):
            apply(state, EditIntent(EditKind.INSERT, 0, 0, "1"))

    def test_ignore_never_reaches_a_formatter(self) -> None:
        state = FieldMaskState(MaskDefinition(kind="currency"))  # type: ignore[arg-type]
        outcome = apply(state, EditIntent(EditKind.IGNORE, 0, 0))
        assert outcome.accepted
