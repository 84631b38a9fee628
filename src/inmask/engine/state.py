"""Per-field mask state and edit outcomes."""

from __future__ import annotations

from dataclasses import dataclass

from inmask.domain.definition import MaskDefinition


@dataclass
class FieldMaskState:
    """Mutable state owned by exactly one masked field.

    Mutated in place on every accepted keystroke, untouched on rejection.
    """

    definition: MaskDefinition
    last_valid_value: str = ""
    caret: int = 0

    def commit(self, outcome: EditOutcome) -> None:
        """Adopt an accepted outcome."""
        if not outcome.accepted:
            return
        self.last_valid_value = outcome.text
        self.caret = outcome.caret
        if outcome.definition is not None:
            self.definition = outcome.definition


@dataclass(frozen=True)
class EditOutcome:
    """Result of applying one edit intent.

    Attributes:
        text: Text the field must show.
        caret: Caret offset the field must show.
        accepted: False when the edit was reverted to the last valid value.
        definition: Replacement definition requested by a key handler.
        reason: Short machine-readable rejection reason.
    """

    text: str
    caret: int
    accepted: bool = True
    definition: MaskDefinition | None = None
    reason: str = ""


def reject(state: FieldMaskState, caret: int, reason: str) -> EditOutcome:
    """Revert to the last valid value at the pre-edit caret."""
    return EditOutcome(
        text=state.last_valid_value,
        caret=max(0, min(caret, len(state.last_valid_value))),
        accepted=False,
        reason=reason,
    )
