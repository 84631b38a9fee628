"""Template formatter for custom and date masks.

Template masks type in overwrite mode.  One edit runs in four passes:

1. Splice the edit into the previous formatted value.  Removed characters
   become :data:`REMOVAL_SENTINEL` so offsets stay aligned with the template.
2. On insert, walk from the caret: literals are auto-emitted, and the typed
   character goes into the first dynamic slot that takes it.  A filled slot
   whose validator refuses the character is skipped; an open one ends the
   walk and the edit is rejected.
3. Reduce the working value to the raw characters sitting at dynamic
   positions.
4. Re-render the raw characters over the template.  Key handlers may swap
   in a new definition mid-render; the value built so far is then conformed
   to the new template before rendering resumes.

The caret lands right after the last character the edit touched.
"""

from __future__ import annotations

from dataclasses import dataclass

from inmask.domain.classes import KeyHandler, KeyHandlerResult, Validator
from inmask.domain.definition import REMOVAL_SENTINEL, InvalidMaskDefinition, MaskDefinition
from inmask.domain.edits import EditIntent
from inmask.domain.types import EditKind
from inmask.engine.state import EditOutcome, FieldMaskState, reject


class KeyHandlerFailure(RuntimeError):
    """A key handler raised or returned an unusable result; the edit is rejected."""

    def __init__(self, template_char: str, position: int, detail: str = "") -> None:
        message = f"Key handler for {template_char!r} failed at position {position}"
        super().__init__(f"{message}: {detail}" if detail else message)
        self.template_char = template_char
        self.position = position


@dataclass(frozen=True)
class Rendered:
    """Outcome of a render pass."""

    value: str
    definition: MaskDefinition
    swapped: bool = False
    pinned: bool = False


def working_value(text: str, intent: EditIntent) -> tuple[str, int]:
    """Splice *intent* into *text*, keeping removed offsets as sentinels.

    Returns ``(working, caret)``; for an insert the caret is where the scan
    for a slot starts.
    """
    start, end = intent.sel_start, intent.sel_end
    if intent.has_selection:
        return text[:start] + REMOVAL_SENTINEL * (end - start) + text[end:], start
    if intent.kind is EditKind.DELETE_BACKWARD:
        if start == 0:
            return text, 0
        return text[: start - 1] + REMOVAL_SENTINEL + text[start:], start - 1
    if intent.kind is EditKind.DELETE_FORWARD and start < len(text):
        return text[:start] + REMOVAL_SENTINEL + text[start + 1 :], start
    return text, start


def place_character(
    working: str,
    char: str,
    pos: int,
    definition: MaskDefinition,
) -> tuple[str, int] | None:
    """Put the typed *char* into the first slot at or after *pos* that takes it.

    Returns ``(working, caret)`` or None when no slot is available.
    """
    template = definition.template
    registry = definition.registry
    while pos < len(template):
        template_char = template[pos]
        char_class = registry.resolve(template_char)

        if char_class is None:
            if pos >= len(working):
                working += template_char
            if char == template_char:
                # Typing the literal itself just steps over it.
                return working, pos + 1
            pos += 1
            continue

        if isinstance(char_class, Validator) and not char_class.accepts(char):
            filled = pos < len(working) and working[pos] != REMOVAL_SENTINEL
            if not filled:
                return None
            pos += 1
            continue

        if pos >= len(working):
            working += char
        else:
            working = working[:pos] + char + working[pos + 1 :]
        return working, pos + 1
    return None


def raw_characters(working: str, definition: MaskDefinition) -> str:
    """Characters at dynamic template positions, sentinels dropped."""
    template = definition.template
    return "".join(
        ch
        for ch, template_char in zip(working, template)
        if ch != REMOVAL_SENTINEL and definition.registry.is_dynamic(template_char)
    )


def conform(value: str, definition: MaskDefinition) -> str:
    """Longest prefix of *value* that is valid under *definition*'s template."""
    template = definition.template
    end = 0
    for ch, template_char in zip(value, template):
        char_class = definition.registry.resolve(template_char)
        if char_class is None and ch != template_char:
            break
        if isinstance(char_class, Validator) and not char_class.accepts(ch):
            break
        end += 1
    return value[:end]


def render(
    definition: MaskDefinition,
    raw: str,
    last_valid_value: str,
    *,
    built: str = "",
) -> Rendered:
    """Lay *raw* over the template, continuing after the *built* prefix."""
    template = definition.template
    value = built
    j = 0
    while len(value) < len(template) and j < len(raw):
        pos = len(value)
        template_char = template[pos]
        char_class = definition.registry.resolve(template_char)

        if char_class is None:
            value += template_char
            continue

        if isinstance(char_class, Validator):
            ch = raw[j]
            j += 1
            if char_class.accepts(ch):
                value += ch
            continue

        result = _call_handler(
            char_class, template_char, pos, value + raw[j], last_valid_value, template
        )
        j += 1
        value = result.value
        if result.definition is None:
            continue

        replacement = result.definition.validate()
        prefix = conform(value, replacement)
        if prefix != value:
            return Rendered(prefix, replacement, swapped=True, pinned=True)
        rest = render(replacement, raw[j:], last_valid_value, built=prefix)
        return Rendered(rest.value, rest.definition, swapped=True, pinned=rest.pinned)

    return Rendered(value, definition)


def _call_handler(
    handler: KeyHandler,
    template_char: str,
    pos: int,
    partial: str,
    last_valid_value: str,
    template: str,
) -> KeyHandlerResult:
    try:
        result = handler(partial, last_valid_value, template)
    except Exception as exc:
        raise KeyHandlerFailure(template_char, pos) from exc

    if not isinstance(result, KeyHandlerResult) or not isinstance(result.value, str):
        raise KeyHandlerFailure(template_char, pos, f"returned {type(result).__name__}")
    if result.definition is not None and not isinstance(result.definition, MaskDefinition):
        msg = (
            f"Key handler for {template_char!r} returned a "
            f"{type(result.definition).__name__} instead of a MaskDefinition"
        )
        raise InvalidMaskDefinition(msg)
    return result


def _settle_caret(value: str, caret: int, definition: MaskDefinition) -> tuple[str, int]:
    """Render literals up to the caret and skip trailing literals on insert."""
    template = definition.template
    registry = definition.registry
    while len(value) < min(caret, len(template)) and not registry.is_dynamic(template[len(value)]):
        value += template[len(value)]
    caret = min(caret, len(value))
    if caret < len(template) and not any(registry.is_dynamic(ch) for ch in template[caret:]):
        value += template[len(value) :]
        caret = len(value)
    return value, caret


def format_template(state: FieldMaskState, intent: EditIntent, text: str) -> EditOutcome:
    definition = state.definition
    working, caret = working_value(text, intent)

    if intent.kind is EditKind.INSERT:
        placed = place_character(working, intent.char, caret, definition)
        if placed is None:
            return reject(state, intent.sel_end, "no_slot")
        working, caret = placed

    rendered = render(definition, raw_characters(working, definition), state.last_valid_value)
    value = rendered.value

    if rendered.pinned:
        caret = len(value)
    elif intent.kind is EditKind.INSERT:
        value, caret = _settle_caret(value, caret, rendered.definition)
    else:
        caret = min(caret, len(value))

    return EditOutcome(
        text=value,
        caret=caret,
        definition=rendered.definition if rendered.swapped else None,
    )
