"""MaskController: binds mask definitions to host text inputs.

The controller owns one :class:`FieldMaskState` per masked field, keyed by
``field_id``.  Each keystroke is classified, run through the engine, and
the outcome written back to the field: the new text and caret on accept,
the last valid value and pre-edit caret on reject.  Either way the event
is consumed so the host never applies its own default edit.

A key handler may replace the field's definition mid-edit.  The swap is
atomic for the caller: old listeners are detached and the state replaced
before the new listeners are attached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from inmask.domain.edits import BACKSPACE, DELETE, KeyEvent, classify
from inmask.domain.types import EditKind
from inmask.engine import EditOutcome, FieldMaskState, apply

if TYPE_CHECKING:
    from inmask.domain.definition import MaskDefinition
    from inmask.domain.host import Detach, HostInput
    from inmask.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


@dataclass
class _Binding:
    """A field, its mask state and the detach callables of its listeners."""

    host: HostInput
    state: FieldMaskState
    detachers: list[Detach] = field(default_factory=list)
    last_outcome: EditOutcome | None = None

    def detach(self) -> None:
        for detach in self.detachers:
            detach()
        self.detachers.clear()


class MaskController:
    """Attach and detach masks on host inputs.

    Parameters:
        event_bus: Optional bus receiving ``post_field_change``,
            ``post_edit_rejected`` and ``post_mask_swap`` events.
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._event_bus = event_bus
        self._bindings: dict[str, _Binding] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_mask(self, host: HostInput, definition: MaskDefinition) -> None:
        """Mask *host* with *definition*, replacing any existing mask.

        The definition is validated before anything is detached, so an
        invalid definition raises :class:`InvalidMaskDefinition` and leaves
        the current mask in place.
        """
        definition.validate()
        self.remove_mask(host)
        state = FieldMaskState(
            definition=definition,
            last_valid_value=host.get_text(),
            caret=host.get_caret(),
        )
        self._attach(host, state)
        logger.debug("Mask %s attached to %s", definition.kind, host.field_id)

    def remove_mask(self, host: HostInput) -> None:
        """Detach the mask from *host*. No-op when the field is unmasked."""
        binding = self._bindings.pop(host.field_id, None)
        if binding is None:
            return
        binding.detach()
        logger.debug("Mask removed from %s", host.field_id)

    def is_masked(self, host: HostInput) -> bool:
        return host.field_id in self._bindings

    def state_for(self, host: HostInput) -> FieldMaskState | None:
        """The live mask state of *host*, or None when unmasked."""
        binding = self._bindings.get(host.field_id)
        return binding.state if binding else None

    def last_outcome(self, host: HostInput) -> EditOutcome | None:
        """Outcome of the most recent keystroke the mask handled on *host*."""
        binding = self._bindings.get(host.field_id)
        return binding.last_outcome if binding else None

    # ------------------------------------------------------------------
    # Listener plumbing
    # ------------------------------------------------------------------

    def _attach(self, host: HostInput, state: FieldMaskState) -> None:
        binding = _Binding(host=host, state=state)
        self._bindings[host.field_id] = binding
        binding.detachers.append(host.on_key_down(lambda event: self._on_key_down(host, event)))
        binding.detachers.append(host.on_key_press(lambda event: self._on_key_press(host, event)))

    def _on_key_down(self, host: HostInput, event: KeyEvent) -> bool:
        # Deletions never produce a key press, so they are handled here.
        if event.key not in (BACKSPACE, DELETE):
            return False
        return self._handle(host, event)

    def _on_key_press(self, host: HostInput, event: KeyEvent) -> bool:
        if not event.is_printable:
            return False
        return self._handle(host, event)

    # ------------------------------------------------------------------
    # Keystroke handling
    # ------------------------------------------------------------------

    def _handle(self, host: HostInput, event: KeyEvent) -> bool:
        binding = self._bindings.get(host.field_id)
        if binding is None:
            return False
        with structlog.contextvars.bound_contextvars(field_id=host.field_id):
            return self._process(binding, event)

    def _process(self, binding: _Binding, event: KeyEvent) -> bool:
        host = binding.host
        sel_start, sel_end = host.get_selection()
        intent = classify(event, sel_start, sel_end)
        if intent.kind is EditKind.IGNORE:
            return False

        state = binding.state
        previous_text = host.get_text()
        outcome = apply(state, intent, previous_text)
        binding.last_outcome = outcome
        self._write_back(host, outcome)

        if not outcome.accepted:
            self._dispatch(
                "post_edit_rejected",
                field_id=host.field_id,
                value=outcome.text,
                caret=outcome.caret,
                reason=outcome.reason,
            )
            return True

        old_definition = state.definition
        state.commit(outcome)
        if outcome.definition is not None:
            self._swap(binding, old_definition)
        if outcome.text != previous_text:
            self._dispatch(
                "post_field_change",
                field_id=host.field_id,
                value=outcome.text,
                caret=outcome.caret,
            )
        return True

    def _swap(self, binding: _Binding, old_definition: MaskDefinition) -> None:
        """Rebind the field after a key handler replaced its definition."""
        host = binding.host
        binding.detach()
        new_state = FieldMaskState(
            definition=binding.state.definition,
            last_valid_value=binding.state.last_valid_value,
            caret=binding.state.caret,
        )
        self._attach(host, new_state)
        self._bindings[host.field_id].last_outcome = binding.last_outcome
        logger.debug(
            "Mask on %s swapped from %s to %s",
            host.field_id,
            old_definition.kind,
            new_state.definition.kind,
        )
        self._dispatch(
            "post_mask_swap",
            field_id=host.field_id,
            old_kind=str(old_definition.kind),
            new_kind=str(new_state.definition.kind),
            template=new_state.definition.template,
        )

    @staticmethod
    def _write_back(host: HostInput, outcome: EditOutcome) -> None:
        if host.get_text() != outcome.text:
            host.set_text(outcome.text)
        host.set_caret(outcome.caret)

    def _dispatch(self, hook_name: str, **payload: object) -> None:
        """Dispatch a field event. No-op without an event bus.

        Plugin failures are logged as warnings and never raised.
        """
        if self._event_bus is None:
            return
        self._event_bus.dispatch(hook_name, payload)
