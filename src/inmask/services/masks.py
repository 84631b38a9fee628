"""MaskService: build, describe and replay masks.

Mask options come from named presets (built-ins overlaid with
``[masks.<name>]`` sections of ``inmask.toml``) and/or explicit options;
explicit options win.  ``replay()`` drives an :class:`InMemoryInput`
through a :class:`MaskController` with a key script, which is how the CLI
exercises a mask without a GUI.

Key scripts are plain text where every character is typed, except for
brace tokens:

======================  ==========================================
``{BS}``                Backspace
``{DEL}``               Delete
``{LEFT}`` ``{RIGHT}``  Move the caret one position
``{HOME}`` ``{END}``    Move the caret to either end
``{SEL a-b}``           Select ``text[a:b]``
``{{``                  A literal ``{``
======================  ==========================================
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from inmask.config.models import MaskPreset
from inmask.domain.classes import DEFAULT_REGISTRY, ClassRegistry, KeyHandler
from inmask.domain.definition import (
    InvalidMaskDefinition,
    MaskDefinition,
    custom_mask,
    date_mask,
    decimal_mask,
    integer_mask,
)
from inmask.domain.edits import BACKSPACE, DELETE
from inmask.domain.types import MaskKind
from inmask.infrastructure.memory_input import ARROW_LEFT, ARROW_RIGHT, END, HOME, InMemoryInput
from inmask.services.controller import MaskController
from inmask.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from inmask.config.settings import InmaskSettings
    from inmask.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)

_NAMED_KEYS: dict[str, str] = {
    "BS": BACKSPACE,
    "DEL": DELETE,
    "LEFT": ARROW_LEFT,
    "RIGHT": ARROW_RIGHT,
    "HOME": HOME,
    "END": END,
}

_SELECT_RE = re.compile(r"SEL\s+(\d+)\s*-\s*(\d+)")


class UnknownPreset(KeyError):
    """Raised when a preset name is neither built in nor configured."""


class InvalidKeyScript(ValueError):
    """Raised when a key script contains a malformed brace token."""


@dataclass(frozen=True)
class KeyStep:
    """One parsed key script step: a key to press or a selection to make."""

    key: str = ""
    selection: tuple[int, int] | None = None

    @property
    def label(self) -> str:
        if self.selection is not None:
            return f"{{SEL {self.selection[0]}-{self.selection[1]}}}"
        return self.key


def parse_key_script(script: str) -> list[KeyStep]:
    """Split *script* into key steps."""
    steps: list[KeyStep] = []
    i = 0
    while i < len(script):
        char = script[i]
        if char != "{":
            steps.append(KeyStep(key=char))
            i += 1
            continue
        if script.startswith("{{", i):
            steps.append(KeyStep(key="{"))
            i += 2
            continue
        close = script.find("}", i)
        if close == -1:
            raise InvalidKeyScript(f"Unterminated token at offset {i}")
        token = script[i + 1 : close].strip()
        if token.upper() in _NAMED_KEYS:
            steps.append(KeyStep(key=_NAMED_KEYS[token.upper()]))
        elif match := _SELECT_RE.fullmatch(token):
            steps.append(KeyStep(selection=(int(match.group(1)), int(match.group(2)))))
        else:
            raise InvalidKeyScript(f"Unknown token {{{token}}} at offset {i}")
        i = close + 1
    return steps


class MaskService:
    """Mask operations behind the CLI.

    Parameters:
        settings: Resolved settings (locale and presets).
        event_bus: Optional bus handed to the replay controller.
        registry: Character classes for custom masks, typically the default
            registry extended by plugins.
    """

    def __init__(
        self,
        settings: InmaskSettings,
        *,
        event_bus: EventBus | None = None,
        registry: ClassRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self._settings = settings
        self._event_bus = event_bus
        self._registry = registry

    # ------------------------------------------------------------------
    # Definition resolution
    # ------------------------------------------------------------------

    def resolve(self, preset: str | None = None, **options: Any) -> MaskDefinition:
        """Build a definition from *preset* with *options* layered on top.

        ``None`` options are ignored.  Raises :class:`UnknownPreset` or
        :class:`InvalidMaskDefinition`.
        """
        fields: dict[str, Any] = {}
        if preset is not None:
            presets = self._settings.presets()
            if preset not in presets:
                raise UnknownPreset(preset)
            fields = presets[preset].model_dump(exclude={"description"})
        fields.update({key: value for key, value in options.items() if value is not None})

        try:
            mask_preset = MaskPreset.model_validate(fields)
        except ValidationError as exc:
            raise InvalidMaskDefinition(_validation_summary(exc)) from exc
        return self.definition_for(mask_preset)

    def definition_for(self, preset: MaskPreset) -> MaskDefinition:
        """Turn a preset into a validated definition under the configured locale."""
        locale = self._settings.locale.to_locale()
        if preset.kind in (MaskKind.INTEGER, MaskKind.DECIMAL) and preset.template:
            raise InvalidMaskDefinition(f"{preset.kind} masks take no template")
        if preset.kind is not MaskKind.CUSTOM and preset.classes:
            raise InvalidMaskDefinition("Character classes only apply to custom masks")

        if preset.kind is MaskKind.INTEGER:
            return integer_mask(preset.max_digits, preset.allow_negative)
        if preset.kind is MaskKind.DECIMAL:
            return decimal_mask(
                preset.max_digits,
                preset.max_decimals,
                preset.allow_negative,
                locale=locale,
            )
        if preset.kind is MaskKind.DATE:
            return date_mask(locale=locale)
        return custom_mask(preset.template, preset.classes, registry=self._registry)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def build(self, preset: str | None = None, **options: Any) -> ServiceResult:
        """Resolve and validate a mask, returning its description."""
        op = "build_mask"
        definition = self._resolve_for(op, preset, options)
        if isinstance(definition, ServiceResult):
            return definition
        return ServiceResult(
            ok=True,
            op=op,
            data={"preset": preset, **self._description(definition)},
        )

    def describe(self, definition: MaskDefinition) -> ServiceResult:
        """Describe the positions and limits of *definition*."""
        op = "describe_mask"
        try:
            definition.validate()
        except InvalidMaskDefinition as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_MASK, str(exc))
        return ServiceResult(ok=True, op=op, data=self._description(definition))

    def describe_preset(self, preset: str | None = None, **options: Any) -> ServiceResult:
        """Resolve a mask from *preset*/*options* and describe it."""
        definition = self._resolve_for("describe_mask", preset, options)
        if isinstance(definition, ServiceResult):
            return definition
        return self.describe(definition)

    def replay_preset(
        self,
        keys: str,
        *,
        preset: str | None = None,
        initial_text: str = "",
        **options: Any,
    ) -> ServiceResult:
        """Resolve a mask from *preset*/*options* and replay *keys* on it."""
        definition = self._resolve_for("replay", preset, options)
        if isinstance(definition, ServiceResult):
            return definition
        return self.replay(definition, keys, initial_text)

    def list_presets(self) -> ServiceResult:
        """List built-in and configured presets."""
        configured = set(self._settings.masks)
        items = [
            {
                "name": name,
                "kind": str(preset.kind),
                "template": preset.template,
                "description": preset.description,
                "source": "config" if name in configured else "builtin",
            }
            for name, preset in sorted(self._settings.presets().items())
        ]
        return ServiceResult(ok=True, op="list_presets", data={"count": len(items), "items": items})

    def replay(
        self,
        definition: MaskDefinition,
        keys: str,
        initial_text: str = "",
    ) -> ServiceResult:
        """Type *keys* into a masked in-memory field and trace every step."""
        op = "replay"
        try:
            steps = parse_key_script(keys)
        except InvalidKeyScript as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_KEYS, str(exc), keys=keys)

        field = InMemoryInput(field_id="replay", text=initial_text)
        controller = MaskController(event_bus=self._event_bus)
        try:
            controller.set_mask(field, definition)
        except InvalidMaskDefinition as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_MASK, str(exc))

        trace: list[dict[str, Any]] = []
        rejected = 0
        for step in steps:
            if step.selection is not None:
                field.select(*step.selection)
                trace.append(self._trace_entry(step, field, handled=False))
                continue

            before = controller.last_outcome(field)
            field.press(step.key)
            outcome = controller.last_outcome(field)
            if outcome is None or outcome is before:
                trace.append(self._trace_entry(step, field, handled=False))
                continue
            if not outcome.accepted:
                rejected += 1
            trace.append(
                self._trace_entry(
                    step,
                    field,
                    handled=True,
                    accepted=outcome.accepted,
                    reason=outcome.reason,
                )
            )

        state = controller.state_for(field)
        final_kind = str(state.definition.kind) if state else str(definition.kind)
        final_template = state.definition.template if state else definition.template
        logger.debug("Replayed %d steps, %d rejected", len(steps), rejected)

        warnings: list[str] = []
        if self._event_bus is not None:
            warnings.extend(
                f"Plugin hook {failure['hook_name']} failed: {failure['error']}"
                for failure in self._event_bus.failures
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "value": field.get_text(),
                "caret": field.get_caret(),
                "kind": final_kind,
                "template": final_template,
                "steps": trace,
            },
            warnings=warnings,
            meta={"step_count": len(steps), "rejected": rejected},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _trace_entry(
        step: KeyStep,
        field: InMemoryInput,
        *,
        handled: bool,
        accepted: bool = True,
        reason: str = "",
    ) -> dict[str, Any]:
        return {
            "key": step.label,
            "value": field.get_text(),
            "caret": field.get_caret(),
            "handled": handled,
            "accepted": accepted,
            "reason": reason,
        }

    @staticmethod
    def _description(definition: MaskDefinition) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": str(definition.kind), "align": definition.align}
        if definition.is_numeric:
            data["max_digits"] = definition.max_digits
            data["allow_negative"] = definition.allow_negative
            if definition.kind is MaskKind.DECIMAL:
                data["max_decimals"] = definition.max_decimals
                data["decimal_separator"] = definition.decimal_separator
                data["group_separator"] = definition.group_separator
            return data

        positions = []
        for index, template_char in enumerate(definition.template):
            char_class = definition.registry.resolve(template_char)
            if char_class is None:
                role = "static"
            elif isinstance(char_class, KeyHandler):
                role = "handler"
            else:
                role = "validator"
            positions.append({"index": index, "char": template_char, "role": role})

        data["template"] = definition.template
        data["length"] = len(definition.template)
        data["dynamic_positions"] = definition.dynamic_positions()
        data["positions"] = positions
        return data

    def _resolve_for(
        self, op: str, preset: str | None, options: dict[str, Any]
    ) -> MaskDefinition | ServiceResult:
        """Resolve a definition, or the failed result for *op*."""
        try:
            return self.resolve(preset, **options)
        except UnknownPreset as exc:
            return ServiceResult.failure(
                op,
                ErrorCode.UNKNOWN_PRESET,
                f"No preset named '{exc.args[0]}'",
                available=sorted(self._settings.presets()),
            )
        except InvalidMaskDefinition as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_MASK, str(exc))


def _validation_summary(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "mask"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
