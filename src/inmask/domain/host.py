"""Host text-input contract.

Anything that exposes a text value, a caret/selection and keystroke
notifications can carry a mask.  ``on_key_down``/``on_key_press`` return a
callable that detaches the handler again.  Handlers return True when they
consumed the event, in which case the host must skip its default action.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from inmask.domain.edits import KeyEvent

KeyListener = Callable[[KeyEvent], bool]
Detach = Callable[[], None]


@runtime_checkable
class HostInput(Protocol):
    """Text field seen from the mask controller."""

    @property
    def field_id(self) -> str: ...

    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...

    def get_caret(self) -> int: ...

    def set_caret(self, pos: int) -> None: ...

    def get_selection(self) -> tuple[int, int]: ...

    def on_key_down(self, handler: KeyListener) -> Detach: ...

    def on_key_press(self, handler: KeyListener) -> Detach: ...
