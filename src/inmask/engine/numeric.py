"""Integer and decimal formatters.

Both build a candidate by splicing the edit into the current text and
validate it.  Decimal values are then re-grouped with the locale group
separator and the caret is reconciled against the moved separators.
"""

from __future__ import annotations

import functools
import re

from inmask.domain.definition import MaskDefinition
from inmask.domain.edits import EditIntent, splice
from inmask.domain.types import EditKind
from inmask.engine.caret import reconcile_caret
from inmask.engine.state import EditOutcome, FieldMaskState, reject


INTEGER_PATTERN = re.compile(r"-?[0-9]*")
_DIGIT = re.compile(r"[0-9]")


@functools.lru_cache(maxsize=16)
def decimal_pattern(decimal_separator: str) -> re.Pattern[str]:
    """Pattern for an ungrouped decimal candidate using *decimal_separator*."""
    sep = re.escape(decimal_separator)
    return re.compile(rf"-?([0-9]*|[0-9]+{sep}[0-9]*)")


def count_digits(text: str) -> int:
    return len(_DIGIT.findall(text))


def group_digits(value: str, decimal_separator: str, group_separator: str) -> str:
    """Regroup the integer part of *value* into right-aligned groups of three.

    Existing group separators are dropped first, so the function is
    idempotent.  The sign and the fractional part pass through unchanged.
    """
    if not value:
        return ""
    stripped = value.replace(group_separator, "")
    sign = "-" if stripped.startswith("-") else ""
    integer, sep, fraction = stripped[len(sign) :].partition(decimal_separator)
    head = len(integer) % 3 or 3
    groups = [integer[:head]] + [integer[i : i + 3] for i in range(head, len(integer), 3)]
    return sign + group_separator.join(g for g in groups if g) + sep + fraction


def format_integer(state: FieldMaskState, intent: EditIntent, text: str) -> EditOutcome:
    definition = state.definition
    candidate, caret = splice(text, intent)

    if INTEGER_PATTERN.fullmatch(candidate) is None:
        return reject(state, intent.sel_end, "pattern")
    if "-" in candidate and not definition.allow_negative:
        return reject(state, intent.sel_end, "negative")
    if count_digits(candidate) > definition.max_digits:
        return reject(state, intent.sel_end, "max_digits")
    return EditOutcome(text=candidate, caret=caret)


def _decimal_insert_error(definition: MaskDefinition, char: str, candidate: str) -> str:
    """Return a rejection reason for an inserted character, or ``""``."""
    dec = definition.decimal_separator
    if not (char.isascii() and char.isdigit()) and char not in ("-", dec):
        return "character"
    if char == "-" and not definition.allow_negative:
        return "negative"
    if char == dec and definition.max_decimals == 0:
        return "max_decimals"

    stripped = candidate.replace(definition.group_separator, "")
    if decimal_pattern(dec).fullmatch(stripped) is None:
        return "pattern"
    if count_digits(stripped) > definition.max_digits:
        return "max_digits"
    _, sep, fraction = stripped.partition(dec)
    if sep and len(fraction) > definition.max_decimals:
        return "max_decimals"
    return ""


def format_decimal(state: FieldMaskState, intent: EditIntent, text: str) -> EditOutcome:
    definition = state.definition
    candidate, caret = splice(text, intent)

    # Deletions are never re-validated, so a value such as ".5" can survive
    # until the next insert.
    if intent.kind is EditKind.INSERT:
        reason = _decimal_insert_error(definition, intent.char, candidate)
        if reason:
            return reject(state, intent.sel_end, reason)

    value = group_digits(candidate, definition.decimal_separator, definition.group_separator)
    caret = reconcile_caret(text, value, caret, intent.kind, definition.group_separator)
    return EditOutcome(text=value, caret=caret)
