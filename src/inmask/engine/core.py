"""Engine entry point: dispatch an edit intent to the right formatter."""

from __future__ import annotations

import logging
from collections.abc import Callable

from inmask.domain.definition import InvalidMaskDefinition
from inmask.domain.edits import EditIntent
from inmask.domain.types import EditKind, MaskKind
from inmask.engine.numeric import format_decimal, format_integer
from inmask.engine.state import EditOutcome, FieldMaskState, reject
from inmask.engine.template import KeyHandlerFailure, format_template

logger = logging.getLogger(__name__)

Formatter = Callable[[FieldMaskState, EditIntent, str], EditOutcome]

FORMATTERS: dict[MaskKind, Formatter] = {
    MaskKind.INTEGER: format_integer,
    MaskKind.DECIMAL: format_decimal,
    MaskKind.DATE: format_template,
    MaskKind.CUSTOM: format_template,
}


def apply(state: FieldMaskState, intent: EditIntent, text: str | None = None) -> EditOutcome:
    """Apply *intent* to the field described by *state*.

    *text* is the field's current text and defaults to the last valid value.
    The state is not mutated; callers commit accepted outcomes with
    :meth:`FieldMaskState.commit`.  Never raises for a bad keystroke.
    """
    if text is None:
        text = state.last_valid_value
    if intent.kind is EditKind.IGNORE:
        return EditOutcome(text=text, caret=intent.sel_end, reason="ignored")

    formatter = FORMATTERS.get(state.definition.kind)
    if formatter is None:
        msg = f"Unrecognized mask kind: {state.definition.kind!r}"
        raise InvalidMaskDefinition(msg)

    try:
        outcome = formatter(state, intent, text)
    except KeyHandlerFailure:
        logger.warning("Key handler failed; edit rejected", exc_info=True)
        outcome = reject(state, intent.sel_end, "key_handler")
    except InvalidMaskDefinition as exc:
        logger.warning("Replacement mask rejected, keeping current mask: %s", exc)
        outcome = reject(state, intent.sel_end, "replacement_mask")

    if not outcome.accepted:
        logger.debug(
            "Rejected %s on %s mask (%s)",
            intent.kind,
            state.definition.kind,
            outcome.reason,
        )
    return outcome
