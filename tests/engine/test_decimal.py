"""Tests for the decimal formatter and grouped caret reconciliation."""

from __future__ import annotations

import pytest

from inmask.domain.definition import decimal_mask
from inmask.domain.edits import BACKSPACE, DELETE
from inmask.domain.locale import LocaleFormat
from inmask.domain.types import EditKind
from inmask.engine import FieldMaskState
from inmask.engine.caret import reconcile_caret, separators_left_of
from inmask.engine.numeric import count_digits, group_digits
from tests.conftest import press, type_text


@pytest.fixture
def state() -> FieldMaskState:
    return FieldMaskState(decimal_mask(9, 2, allow_negative=True))


def _state_with(text: str, **kwargs: object) -> FieldMaskState:
    definition = decimal_mask(9, 2, allow_negative=True, **kwargs)  # type: ignore[arg-type]
    return FieldMaskState(definition, last_valid_value=text, caret=len(text))


class TestGrouping:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("", ""),
            ("-", "-"),
            ("1", "1"),
            ("1234", "1,234"),
            ("1234567.89", "1,234,567.89"),
            ("-1234.5", "-1,234.5"),
            ("12,34,5", "12,345"),
            ("1234.", "1,234."),
        ],
    )
    def test_group_digits(self, value: str, expected: str) -> None:
        assert group_digits(value, ".", ",") == expected

    def test_grouping_is_idempotent(self) -> None:
        once = group_digits("-9876543.21", ".", ",")
        assert group_digits(once, ".", ",") == once

    def test_fraction_is_never_grouped(self) -> None:
        assert group_digits("1.2345", ".", ",") == "1.2345"

    def test_count_digits(self) -> None:
        assert count_digits("-1,234.56") == 6


class TestTyping:
    def test_typing_groups_as_you_go(self, state: FieldMaskState) -> None:
        expected = ["1", "12", "123", "1,234", "12,345", "123,456", "1,234,567"]
        for char, text in zip("1234567", expected, strict=True):
            outcome = press(state, char)
            assert outcome.text == text
            assert outcome.caret == len(text)

    def test_fraction(self, state: FieldMaskState) -> None:
        outcome = type_text(state, "1234.56")
        assert (outcome.text, outcome.caret) == ("1,234.56", 8)

    def test_max_decimals(self, state: FieldMaskState) -> None:
        type_text(state, "1.25")
        outcome = press(state, "9")
        assert not outcome.accepted
        assert outcome.reason == "max_decimals"
        assert (outcome.text, outcome.caret) == ("1.25", 4)

    def test_max_digits(self, state: FieldMaskState) -> None:
        type_text(state, "123456789")
        outcome = press(state, "0")
        assert outcome.reason == "max_digits"
        assert outcome.text == "123,456,789"

    def test_fraction_counts_toward_max_digits(self, state: FieldMaskState) -> None:
        type_text(state, "1234567.8")
        assert press(state, "9").accepted
        assert not press(state, "1", 0).accepted

    @pytest.mark.parametrize("char", ["a", "+", " ", "\u0663"])
    def test_foreign_characters(self, state: FieldMaskState, char: str) -> None:
        outcome = press(state, char)
        assert not outcome.accepted
        assert outcome.reason == "character"

    def test_second_separator_rejected(self, state: FieldMaskState) -> None:
        type_text(state, "1.5")
        assert press(state, ".", 1).reason == "pattern"

    def test_leading_separator_rejected(self, state: FieldMaskState) -> None:
        assert press(state, ".").reason == "pattern"

    def test_separator_needs_decimals(self) -> None:
        state = FieldMaskState(decimal_mask(5, 0))
        type_text(state, "12")
        assert press(state, ".").reason == "max_decimals"

    def test_negative(self, state: FieldMaskState) -> None:
        outcome = type_text(state, "-1234")
        assert (outcome.text, outcome.caret) == ("-1,234", 6)

    def test_negative_not_allowed(self) -> None:
        state = FieldMaskState(decimal_mask(5, 2))
        assert press(state, "-").reason == "negative"

    def test_group_separator_cannot_be_typed(self, state: FieldMaskState) -> None:
        type_text(state, "12")
        assert not press(state, ",").accepted

    def test_insert_before_groups(self) -> None:
        state = _state_with("999")
        outcome = press(state, "1", 0)
        assert (outcome.text, outcome.caret) == ("1,999", 1)

    def test_comma_decimal_locale(self) -> None:
        locale = LocaleFormat(decimal_sep=",", group_sep=".")
        state = FieldMaskState(decimal_mask(9, 2, locale=locale))
        outcome = type_text(state, "12345,6")
        assert (outcome.text, outcome.caret) == ("12.345,6", 8)
        assert not press(state, ".").accepted


class TestDeleting:
    def test_backspace_drops_group(self) -> None:
        state = _state_with("1,234")
        outcome = press(state, BACKSPACE, 5)
        assert (outcome.text, outcome.caret) == ("123", 3)

    def test_backspace_over_separator_only_moves_caret(self) -> None:
        state = _state_with("1,234")
        outcome = press(state, BACKSPACE, 2)
        assert (outcome.text, outcome.caret) == ("1,234", 1)

    def test_delete_steps_over_separator(self) -> None:
        state = _state_with("1,234")
        outcome = press(state, DELETE, 1)
        assert (outcome.text, outcome.caret) == ("1,234", 2)

    def test_delete_after_separator(self) -> None:
        state = _state_with("1,234")
        outcome = press(state, DELETE, 2)
        assert (outcome.text, outcome.caret) == ("134", 1)

    def test_delete_at_start(self) -> None:
        state = _state_with("12,345")
        outcome = press(state, DELETE, 0)
        assert (outcome.text, outcome.caret) == ("2,345", 0)

    def test_deleting_separator_leaves_integer(self) -> None:
        state = _state_with("1,234.5")
        outcome = press(state, BACKSPACE, 6)
        assert (outcome.text, outcome.caret) == ("12,345", 5)

    def test_delete_selection(self) -> None:
        state = _state_with("1,234,567")
        outcome = press(state, BACKSPACE, (0, 6))
        assert (outcome.text, outcome.caret) == ("567", 0)


class TestCaretReconciliation:
    def test_separators_left_of(self) -> None:
        assert separators_left_of("1,234,567", 6, ",") == 1
        assert separators_left_of("1,234,567", -1, ",") == 0

    def test_insert_adds_separator(self) -> None:
        assert reconcile_caret("123", "1,234", 4, EditKind.INSERT, ",") == 5

    def test_backspace_removes_separator(self) -> None:
        assert reconcile_caret("1,234", "123", 4, EditKind.DELETE_BACKWARD, ",") == 3

    def test_result_is_clamped(self) -> None:
        assert reconcile_caret("1", "", 9, EditKind.DELETE_FORWARD, ",") == 0

    def test_caret_never_leaves_the_text(self, state: FieldMaskState) -> None:
        keys = ["1", "2", "3", "4", "5", BACKSPACE, "6", "7", ".", "5", DELETE, BACKSPACE]
        for position, key in enumerate(keys):
            caret = min(position % 4, len(state.last_valid_value))
            outcome = press(state, key, caret)
            assert 0 <= outcome.caret <= len(outcome.text)


class TestScenario:
    """Six digits, two of them decimals, default locale."""

    @pytest.fixture
    def state(self) -> FieldMaskState:
        return FieldMaskState(decimal_mask(6, 2))

    def test_typing_a_full_value(self, state: FieldMaskState) -> None:
        outcome = type_text(state, "1234.56")
        assert (outcome.text, outcome.caret) == ("1,234.56", 8)

    def test_seventh_digit_rejected(self, state: FieldMaskState) -> None:
        type_text(state, "1234.56")
        outcome = press(state, "7", 0)
        assert not outcome.accepted
        assert outcome.reason == "max_digits"
        assert state.last_valid_value == "1,234.56"

    def test_appending_always_moves_the_caret_forward(self, state: FieldMaskState) -> None:
        carets = []
        for char in "1234.56":
            outcome = press(state, char, len(state.last_valid_value))
            assert outcome.accepted
            assert outcome.caret == len(outcome.text)
            carets.append(outcome.caret)
        assert carets == sorted(set(carets))
        assert carets == [1, 2, 3, 5, 6, 7, 8]


_KEY_MIX = list("1234.5") + [BACKSPACE, "6", "7", "8", "-", "9", DELETE, "0", BACKSPACE]
_KEY_MIX += [",", "x", "4", DELETE, "2", "."]


class TestRoundTrip:
    def test_deleting_can_leave_a_bare_fraction(self) -> None:
        state = _state_with("1.5")
        outcome = press(state, BACKSPACE, 1)
        assert outcome.accepted
        assert (outcome.text, outcome.caret) == (".5", 0)

    @pytest.mark.parametrize("stride", [1, 3, 7])
    def test_accepted_values_regroup_to_themselves(self, stride: int) -> None:
        state = FieldMaskState(decimal_mask(9, 2, allow_negative=True))
        seen = 0
        for step, key in enumerate(_KEY_MIX * 2):
            length = len(state.last_valid_value)
            if step % 6 == 5:
                sel: tuple[int, int] | int = ((step * stride) % (length + 1), length)
            else:
                sel = (step * stride) % (length + 1)
            outcome = press(state, key, sel)
            if not outcome.accepted:
                assert outcome.text == state.last_valid_value
                continue
            seen += 1
            assert 0 <= outcome.caret <= len(outcome.text)
            stripped = outcome.text.replace(",", "")
            assert group_digits(stripped, ".", ",") == outcome.text
        assert seen
