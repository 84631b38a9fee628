"""Pluggy hook specifications for field events and setup extensions.

Three field events are dispatched synchronously after each keystroke is
resolved.  One setup-time hook lets plugins contribute character classes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from inmask.domain.classes import CharacterClass

hookspec = pluggy.HookspecMarker("inmask")
hookimpl = pluggy.HookimplMarker("inmask")


class InmaskHookSpec:
    """Hook specifications for the inmask plugin system."""

    @hookspec
    def post_field_change(self, field_id: str, value: str, caret: int) -> None:
        """Called after an accepted edit changed a field's text."""

    @hookspec
    def post_edit_rejected(self, field_id: str, value: str, caret: int, reason: str) -> None:
        """Called after an edit was reverted to the last valid value."""

    @hookspec
    def post_mask_swap(self, field_id: str, old_kind: str, new_kind: str, template: str) -> None:
        """Called after a key handler replaced a field's mask mid-edit."""

    @hookspec
    def register_character_classes(self) -> dict[str, CharacterClass] | None:
        """Return template char -> CharacterClass mappings to extend the registry."""
