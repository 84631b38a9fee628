"""Tests for the locale contract."""

from __future__ import annotations

from inmask.domain.definition import date_mask, decimal_mask
from inmask.domain.locale import DEFAULT_LOCALE, LocaleFormat, LocaleProvider, date_template
from inmask.domain.types import DateOrder


class GermanLocale:
    """A duck-typed provider, as an embedding application would supply."""

    def date_field_order(self) -> DateOrder:
        return DateOrder.DMY

    def date_separator(self) -> str:
        return "."

    def decimal_separator(self) -> str:
        return ","

    def group_separator(self) -> str:
        return "."


class TestLocaleFormat:
    def test_default_is_us(self) -> None:
        assert DEFAULT_LOCALE.date_field_order() is DateOrder.MDY
        assert DEFAULT_LOCALE.date_separator() == "/"
        assert DEFAULT_LOCALE.decimal_separator() == "."
        assert DEFAULT_LOCALE.group_separator() == ","

    def test_satisfies_protocol(self) -> None:
        assert isinstance(LocaleFormat(), LocaleProvider)
        assert isinstance(GermanLocale(), LocaleProvider)


class TestDuckTypedProvider:
    def test_date_template(self) -> None:
        assert date_template(GermanLocale()) == "00.00.0000"

    def test_builders_accept_any_provider(self) -> None:
        assert date_mask(locale=GermanLocale()).template == "00.00.0000"
        definition = decimal_mask(9, 2, locale=GermanLocale())
        assert (definition.decimal_separator, definition.group_separator) == (",", ".")
