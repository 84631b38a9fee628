"""Locale contract consumed by numeric and date masks.

The locale is never negotiated here: callers hand in any object that
satisfies :class:`LocaleProvider`.  :class:`LocaleFormat` is a plain
immutable implementation used as the default (US conventions).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from inmask.domain.types import DateOrder

# Field widths for the date template, keyed by the letter in DateOrder.
DATE_FIELD_WIDTHS: dict[str, int] = {"D": 2, "M": 2, "Y": 4}


@runtime_checkable
class LocaleProvider(Protocol):
    """Source of the separators and date order a mask is built against."""

    def date_field_order(self) -> DateOrder: ...

    def date_separator(self) -> str: ...

    def decimal_separator(self) -> str: ...

    def group_separator(self) -> str: ...


@dataclass(frozen=True)
class LocaleFormat:
    """Immutable locale snapshot."""

    date_order: DateOrder = DateOrder.MDY
    date_sep: str = "/"
    decimal_sep: str = "."
    group_sep: str = ","

    def date_field_order(self) -> DateOrder:
        return self.date_order

    def date_separator(self) -> str:
        return self.date_sep

    def decimal_separator(self) -> str:
        return self.decimal_sep

    def group_separator(self) -> str:
        return self.group_sep


DEFAULT_LOCALE = LocaleFormat()


def date_template(locale: LocaleProvider) -> str:
    """Build the digit template for a date, e.g. ``"00/00/0000"`` for MDY."""
    order = DateOrder(locale.date_field_order())
    fields = ["0" * DATE_FIELD_WIDTHS[letter] for letter in order.value]
    return locale.date_separator().join(fields)
