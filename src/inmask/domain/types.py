"""Mask kinds, locale date orders and edit kinds."""

from __future__ import annotations

from enum import StrEnum


class MaskKind(StrEnum):
    """The four families of masks a field can carry."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"
    CUSTOM = "custom"


class DateOrder(StrEnum):
    """Order of the day/month/year fields in a formatted date."""

    MDY = "MDY"
    DMY = "DMY"
    YMD = "YMD"


class EditKind(StrEnum):
    """What a single keystroke asks the engine to do."""

    INSERT = "insert"
    DELETE_BACKWARD = "delete_backward"
    DELETE_FORWARD = "delete_forward"
    IGNORE = "ignore"


NUMERIC_KINDS: frozenset[MaskKind] = frozenset({MaskKind.INTEGER, MaskKind.DECIMAL})
TEMPLATE_KINDS: frozenset[MaskKind] = frozenset({MaskKind.DATE, MaskKind.CUSTOM})
