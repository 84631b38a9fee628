"""Tests for mask definitions and builders."""

from __future__ import annotations

import pytest

from inmask.domain.classes import DEFAULT_REGISTRY, KeyHandler, Validator
from inmask.domain.definition import (
    REMOVAL_SENTINEL,
    InvalidMaskDefinition,
    MaskDefinition,
    custom_mask,
    date_mask,
    decimal_mask,
    integer_mask,
)
from inmask.domain.locale import LocaleFormat
from inmask.domain.types import DateOrder, MaskKind


class TestNumericBuilders:
    def test_integer_mask(self) -> None:
        definition = integer_mask(5, allow_negative=True)
        assert definition.kind is MaskKind.INTEGER
        assert definition.max_digits == 5
        assert definition.allow_negative is True
        assert definition.template == ""
        assert definition.align == "right"
        assert definition.is_numeric

    def test_integer_needs_positive_digits(self) -> None:
        with pytest.raises(InvalidMaskDefinition, match="max_digits"):
            integer_mask(0)

    def test_decimal_mask_captures_locale(self) -> None:
        locale = LocaleFormat(decimal_sep=",", group_sep=".")
        definition = decimal_mask(8, 2, locale=locale)
        assert definition.decimal_separator == ","
        assert definition.group_separator == "."
        assert definition.max_decimals == 2

    @pytest.mark.parametrize("max_decimals", [-1, 9])
    def test_decimal_limits(self, max_decimals: int) -> None:
        with pytest.raises(InvalidMaskDefinition, match="max_decimals"):
            decimal_mask(8, max_decimals)

    @pytest.mark.parametrize(
        "decimal_sep,group_sep",
        [(".", "."), ("5", ","), (".", "-"), ("..", ",")],
    )
    def test_decimal_separator_clash(self, decimal_sep: str, group_sep: str) -> None:
        locale = LocaleFormat(decimal_sep=decimal_sep, group_sep=group_sep)
        with pytest.raises(InvalidMaskDefinition):
            decimal_mask(8, 2, locale=locale)

    def test_numeric_kinds_take_no_template(self) -> None:
        definition = MaskDefinition(kind=MaskKind.INTEGER, template="00", max_digits=3)
        with pytest.raises(InvalidMaskDefinition, match="no template"):
            definition.validate()


class TestDateMask:
    @pytest.mark.parametrize(
        "order,sep,expected",
        [
            (DateOrder.MDY, "/", "00/00/0000"),
            (DateOrder.DMY, ".", "00.00.0000"),
            (DateOrder.YMD, "-", "0000-00-00"),
        ],
    )
    def test_template_follows_locale(self, order: DateOrder, sep: str, expected: str) -> None:
        definition = date_mask(locale=LocaleFormat(date_order=order, date_sep=sep))
        assert definition.kind is MaskKind.DATE
        assert definition.template == expected
        assert definition.align == "left"

    def test_date_uses_digit_class_only(self) -> None:
        definition = date_mask()
        assert list(definition.registry) == ["0"]
        assert definition.dynamic_positions() == [0, 1, 3, 4, 6, 7, 8, 9]


class TestCustomMask:
    def test_defaults(self) -> None:
        definition = custom_mask("(000) 000-0000")
        assert definition.kind is MaskKind.CUSTOM
        assert definition.registry is DEFAULT_REGISTRY
        assert definition.dynamic_positions() == [1, 2, 3, 6, 7, 8, 10, 11, 12, 13]

    def test_overrides_extend_registry(self) -> None:
        definition = custom_mask("XX-00", {"X": "[A-F]"})
        assert definition.dynamic_positions() == [0, 1, 3, 4]
        assert isinstance(definition.registry.resolve("X"), Validator)
        assert not DEFAULT_REGISTRY.is_dynamic("X")

    def test_callable_override_is_key_handler(self) -> None:
        definition = custom_mask("H000", {"H": lambda partial, last, template: partial})
        assert isinstance(definition.registry.resolve("H"), KeyHandler)

    def test_equal_definitions_compare_equal(self) -> None:
        assert custom_mask("00-00") == custom_mask("00-00")
        assert custom_mask("00-00") != custom_mask("00/00")

    @pytest.mark.parametrize(
        "template,overrides,match",
        [
            ("", None, "non-empty"),
            ("--/--", None, "no editable position"),
            (f"00{REMOVAL_SENTINEL}00", None, "reserved"),
            ("00", {"XY": "[a]"}, "single characters"),
            ("00", {"X": 42}, "Invalid character class"),
            ("00", {"X": "["}, "Invalid character class"),
        ],
    )
    def test_invalid(self, template: str, overrides: dict | None, match: str) -> None:
        with pytest.raises(InvalidMaskDefinition, match=match):
            custom_mask(template, overrides)


class TestValidate:
    def test_unknown_kind(self) -> None:
        with pytest.raises(InvalidMaskDefinition, match="Unrecognized"):
            MaskDefinition(kind="currency").validate()  # type: ignore[arg-type]

    def test_validate_returns_self(self) -> None:
        definition = MaskDefinition(kind=MaskKind.CUSTOM, template="00")
        assert definition.validate() is definition

    def test_is_an_error_value(self) -> None:
        assert issubclass(InvalidMaskDefinition, ValueError)
