"""Keystroke classification into edit intents.

The classifier knows nothing about masks: it only decides whether a key
inserts a character, deletes backward, deletes forward, or should be left
to the host (navigation, shortcuts).  :func:`splice` applies an intent to a
string naively, which is the starting point of every formatter.
"""

from __future__ import annotations

from dataclasses import dataclass

from inmask.domain.types import EditKind

BACKSPACE = "Backspace"
DELETE = "Delete"


@dataclass(frozen=True)
class KeyEvent:
    """A normalized host key event.

    ``key`` is either a single printable character or a key name such as
    ``"Backspace"``, ``"Delete"`` or ``"ArrowLeft"``.  Delete always arrives
    under its own name, never as a Backspace variant.
    """

    key: str
    ctrl: bool = False
    alt: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def has_command_modifier(self) -> bool:
        return self.ctrl or self.alt or self.meta

    @property
    def is_printable(self) -> bool:
        return len(self.key) == 1 and self.key.isprintable()


@dataclass(frozen=True)
class EditIntent:
    """What one keystroke asks for, with the selection it applies to."""

    kind: EditKind
    sel_start: int
    sel_end: int
    char: str = ""

    def __post_init__(self) -> None:
        if self.sel_start > self.sel_end:
            start, end = self.sel_end, self.sel_start
            object.__setattr__(self, "sel_start", start)
            object.__setattr__(self, "sel_end", end)

    @property
    def has_selection(self) -> bool:
        return self.sel_start != self.sel_end

    @property
    def selection_length(self) -> int:
        return self.sel_end - self.sel_start


def classify(event: KeyEvent, sel_start: int, sel_end: int) -> EditIntent:
    """Turn a key event plus the current selection into an edit intent."""
    if event.key == BACKSPACE and not event.has_command_modifier:
        return EditIntent(EditKind.DELETE_BACKWARD, sel_start, sel_end)
    if event.key == DELETE and not event.has_command_modifier:
        return EditIntent(EditKind.DELETE_FORWARD, sel_start, sel_end)
    if event.is_printable and not event.has_command_modifier:
        return EditIntent(EditKind.INSERT, sel_start, sel_end, char=event.key)
    return EditIntent(EditKind.IGNORE, sel_start, sel_end)


def splice(text: str, intent: EditIntent) -> tuple[str, int]:
    """Apply *intent* to *text* with no mask rules.

    Returns ``(candidate, caret)``.  A selection is always removed first;
    an insert then adds one character, a delete consumes nothing more.
    Backspace at offset 0 with no selection leaves the text unchanged.
    """
    start, end = intent.sel_start, intent.sel_end

    if intent.kind is EditKind.INSERT:
        return text[:start] + intent.char + text[end:], start + 1
    if intent.has_selection:
        return text[:start] + text[end:], start
    if intent.kind is EditKind.DELETE_BACKWARD:
        if start == 0:
            return text, 0
        return text[: start - 1] + text[start:], start - 1
    if intent.kind is EditKind.DELETE_FORWARD:
        return text[:start] + text[start + 1 :], start
    return text, end
