"""Mask definitions and their builders.

A :class:`MaskDefinition` is an immutable description of one of four kinds
of mask.  Numeric kinds (integer, decimal) carry digit limits and no
template; template kinds (date, custom) carry a fixed-length template and a
character class registry.

Builders validate eagerly and raise :class:`InvalidMaskDefinition`.  The
controller validates again before attaching, so a hand-built definition can
never leave a field half-masked.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from inmask.domain.classes import DEFAULT_REGISTRY, DIGIT_REGISTRY, ClassRegistry
from inmask.domain.locale import DEFAULT_LOCALE, LocaleProvider, date_template
from inmask.domain.types import NUMERIC_KINDS, TEMPLATE_KINDS, MaskKind

# Marks removed characters while a template edit is in flight.
REMOVAL_SENTINEL = "\x01"


class InvalidMaskDefinition(ValueError):
    """Raised when a mask definition is unrecognized or inconsistent."""


@dataclass(frozen=True)
class MaskDefinition:
    """Immutable description of a mask.

    Attributes:
        kind: Mask family.
        template: Template characters (date/custom only).
        max_digits: Total significant digits (integer/decimal only).
        max_decimals: Fractional digits (decimal only).
        allow_negative: Whether a leading ``-`` is allowed (integer/decimal).
        registry: Character classes resolving dynamic template positions.
        decimal_separator: Decimal separator captured from the locale.
        group_separator: Group separator captured from the locale.
    """

    kind: MaskKind
    template: str = ""
    max_digits: int = 0
    max_decimals: int = 0
    allow_negative: bool = False
    registry: ClassRegistry = field(default_factory=lambda: DEFAULT_REGISTRY, compare=False)
    decimal_separator: str = "."
    group_separator: str = ","

    @property
    def align(self) -> str:
        """Presentation hint: numbers read right-aligned."""
        return "right" if self.kind in NUMERIC_KINDS else "left"

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    def dynamic_positions(self) -> list[int]:
        """Template offsets the user can type into."""
        return [i for i, ch in enumerate(self.template) if self.registry.is_dynamic(ch)]

    def validate(self) -> MaskDefinition:
        """Check internal consistency; return self or raise InvalidMaskDefinition."""
        try:
            kind = MaskKind(self.kind)
        except ValueError as exc:
            raise InvalidMaskDefinition(f"Unrecognized mask kind: {self.kind!r}") from exc

        if kind in NUMERIC_KINDS:
            _check_numeric(self, kind)
        elif kind in TEMPLATE_KINDS:
            _check_template(self)
        return self


def _check_numeric(definition: MaskDefinition, kind: MaskKind) -> None:
    if definition.template:
        raise InvalidMaskDefinition(f"{kind} masks take no template")
    if definition.max_digits < 1:
        raise InvalidMaskDefinition(f"max_digits must be positive, got {definition.max_digits}")
    if kind is MaskKind.INTEGER:
        return
    if not 0 <= definition.max_decimals <= definition.max_digits:
        raise InvalidMaskDefinition(
            f"max_decimals must be between 0 and max_digits ({definition.max_digits}), "
            f"got {definition.max_decimals}"
        )
    dec, grp = definition.decimal_separator, definition.group_separator
    if len(dec) != 1 or len(grp) != 1:
        raise InvalidMaskDefinition("Decimal and group separators must be single characters")
    if dec == grp:
        raise InvalidMaskDefinition(f"Decimal and group separators clash: {dec!r}")
    if dec.isdigit() or grp.isdigit() or "-" in (dec, grp):
        raise InvalidMaskDefinition("Separators cannot be digits or '-'")


def _check_template(definition: MaskDefinition) -> None:
    if not definition.template:
        raise InvalidMaskDefinition("Template masks need a non-empty template")
    if REMOVAL_SENTINEL in definition.template:
        raise InvalidMaskDefinition("Template contains a reserved control character")
    if not definition.dynamic_positions():
        raise InvalidMaskDefinition(
            f"Template {definition.template!r} has no editable position "
            f"(registered classes: {''.join(sorted(definition.registry))})"
        )


# --- Builders ---


def integer_mask(max_digits: int, allow_negative: bool = False) -> MaskDefinition:
    """Integer mask with at most *max_digits* digits."""
    return MaskDefinition(
        kind=MaskKind.INTEGER,
        max_digits=max_digits,
        allow_negative=allow_negative,
    ).validate()


def decimal_mask(
    max_digits: int,
    max_decimals: int,
    allow_negative: bool = False,
    *,
    locale: LocaleProvider = DEFAULT_LOCALE,
) -> MaskDefinition:
    """Decimal mask grouped and separated per *locale*."""
    return MaskDefinition(
        kind=MaskKind.DECIMAL,
        max_digits=max_digits,
        max_decimals=max_decimals,
        allow_negative=allow_negative,
        decimal_separator=locale.decimal_separator(),
        group_separator=locale.group_separator(),
    ).validate()


def date_mask(*, locale: LocaleProvider = DEFAULT_LOCALE) -> MaskDefinition:
    """Date mask whose template follows the locale field order and separator."""
    template = date_template(locale)
    return MaskDefinition(kind=MaskKind.DATE, template=template, registry=DIGIT_REGISTRY).validate()


def custom_mask(
    template: str,
    class_overrides: Mapping[str, Any] | None = None,
    *,
    registry: ClassRegistry = DEFAULT_REGISTRY,
) -> MaskDefinition:
    """Custom template mask.

    *class_overrides* maps single template characters to a character class,
    a regex string or a key handler callable, layered over *registry*.
    """
    if class_overrides:
        for key in class_overrides:
            if not isinstance(key, str) or len(key) != 1:
                raise InvalidMaskDefinition(f"Class keys must be single characters, got {key!r}")
        try:
            registry = registry.with_overrides(class_overrides)
        except (TypeError, re.error) as exc:
            raise InvalidMaskDefinition(f"Invalid character class override: {exc}") from exc
    return MaskDefinition(kind=MaskKind.CUSTOM, template=template, registry=registry).validate()
