"""Caret reconciliation for grouped numbers.

When a decimal value is re-grouped, group separators appear and disappear
around the caret.  The caret is corrected by comparing how many separators
sit left of it before and after the edit.  ``caret`` is always the position
after the naive splice.
"""

from __future__ import annotations

from inmask.domain.types import EditKind


def separators_left_of(text: str, pos: int, separator: str) -> int:
    """Count *separator* occurrences in ``text[:pos]``."""
    return text[: max(pos, 0)].count(separator)


def reconcile_caret(old: str, new: str, caret: int, kind: EditKind, separator: str) -> int:
    """Return the caret for *new* given the splice caret computed against *old*."""
    if kind is EditKind.INSERT:
        before = separators_left_of(old, caret - 1 if caret > 0 else caret, separator)
        after = separators_left_of(new, caret, separator)
        if after > before:
            caret += 1
    elif kind is EditKind.DELETE_BACKWARD:
        before = separators_left_of(old, caret, separator)
        after = separators_left_of(new, caret - 1 if caret > 0 else caret, separator)
        if before > after:
            caret -= 1
    elif kind is EditKind.DELETE_FORWARD:
        before = separators_left_of(old, caret, separator)
        after = separators_left_of(new, caret + 1 if caret < len(new) - 1 else caret, separator)
        # Step over a separator sitting right at the caret before the usual correction.
        if caret < len(new) and new[caret] == separator:
            caret += 1
        if before > after:
            caret -= 1
    return max(0, min(caret, len(new)))
