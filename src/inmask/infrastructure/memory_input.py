"""InMemoryInput: a headless text field with browser-like key dispatch.

Used by the replay service, the CLI and the test suite.  ``press()`` mirrors
what a browser does with one physical keystroke:

1. key-down listeners run;
2. for a printable key without command modifiers, key-press listeners run;
3. unless a listener consumed the event, the default action is performed
   (insert, delete or caret navigation).

A listener that consumes the event stops dispatch, so at most one listener
handles any keystroke.
"""

from __future__ import annotations

from inmask.domain.edits import BACKSPACE, DELETE, KeyEvent
from inmask.domain.host import Detach, KeyListener

ARROW_LEFT = "ArrowLeft"
ARROW_RIGHT = "ArrowRight"
HOME = "Home"
END = "End"


class InMemoryInput:
    """A text field held entirely in memory.

    Satisfies :class:`~inmask.domain.host.HostInput`.  The caret is the
    selection end; a collapsed selection has ``start == end``.
    """

    def __init__(self, field_id: str = "field", text: str = "", caret: int | None = None) -> None:
        self._field_id = field_id
        self._text = text
        pos = len(text) if caret is None else self._clamp_to(text, caret)
        self._sel_start = pos
        self._sel_end = pos
        self._key_down: list[KeyListener] = []
        self._key_press: list[KeyListener] = []

    def __repr__(self) -> str:
        return f"InMemoryInput({self._field_id!r}, text={self._text!r}, sel={self.get_selection()})"

    # --- HostInput ---

    @property
    def field_id(self) -> str:
        return self._field_id

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text
        self._sel_start = self._clamp(self._sel_start)
        self._sel_end = self._clamp(self._sel_end)

    def get_caret(self) -> int:
        return self._sel_end

    def set_caret(self, pos: int) -> None:
        pos = self._clamp(pos)
        self._sel_start = pos
        self._sel_end = pos

    def get_selection(self) -> tuple[int, int]:
        return min(self._sel_start, self._sel_end), max(self._sel_start, self._sel_end)

    def on_key_down(self, handler: KeyListener) -> Detach:
        return self._subscribe(self._key_down, handler)

    def on_key_press(self, handler: KeyListener) -> Detach:
        return self._subscribe(self._key_press, handler)

    # --- Driving the field ---

    @property
    def listener_count(self) -> int:
        return len(self._key_down) + len(self._key_press)

    def select(self, start: int, end: int) -> None:
        """Select ``text[start:end]``; the caret sits at *end*."""
        self._sel_start = self._clamp(start)
        self._sel_end = self._clamp(end)

    def press(self, key: str | KeyEvent) -> bool:
        """Simulate one keystroke. Returns True if a listener consumed it."""
        event = key if isinstance(key, KeyEvent) else KeyEvent(key)

        if self._fire(self._key_down, event):
            return True
        if event.is_printable and not event.has_command_modifier:
            if self._fire(self._key_press, event):
                return True
        self._default_action(event)
        return False

    def type(self, text: str) -> None:
        """Press every character of *text* in turn."""
        for char in text:
            self.press(char)

    # --- Internals ---

    @staticmethod
    def _subscribe(listeners: list[KeyListener], handler: KeyListener) -> Detach:
        listeners.append(handler)

        def detach() -> None:
            if handler in listeners:
                listeners.remove(handler)

        return detach

    @staticmethod
    def _fire(listeners: list[KeyListener], event: KeyEvent) -> bool:
        # Listeners may detach (and re-attach) while the event is in flight.
        return any(handler(event) for handler in list(listeners))

    def _default_action(self, event: KeyEvent) -> None:
        start, end = self.get_selection()
        text = self._text

        if event.has_command_modifier:
            if event.ctrl and event.key.lower() == "a":
                self.select(0, len(text))
            return

        if event.is_printable:
            self._text = text[:start] + event.key + text[end:]
            self.set_caret(start + 1)
        elif event.key == BACKSPACE:
            if start != end:
                self._text = text[:start] + text[end:]
                self.set_caret(start)
            elif start > 0:
                self._text = text[: start - 1] + text[start:]
                self.set_caret(start - 1)
        elif event.key == DELETE:
            self._text = text[:start] + text[max(end, start + 1) :] if start < len(text) else text
            self.set_caret(start)
        elif event.key == ARROW_LEFT:
            self.set_caret(start if start != end else start - 1)
        elif event.key == ARROW_RIGHT:
            self.set_caret(end if start != end else end + 1)
        elif event.key == HOME:
            self.set_caret(0)
        elif event.key == END:
            self.set_caret(len(text))

    def _clamp(self, pos: int) -> int:
        return self._clamp_to(self._text, pos)

    @staticmethod
    def _clamp_to(text: str, pos: int) -> int:
        return max(0, min(pos, len(text)))
