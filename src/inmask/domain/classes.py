"""Character class registry for template masks.

A template character is either *dynamic* (it resolves to a
:class:`CharacterClass` in the registry) or *static* (anything unregistered,
rendered verbatim and never user-editable).

Two class shapes exist:

- :class:`Validator`: a per-character predicate.
- :class:`KeyHandler`: a stateful transform that receives the value built so
  far plus the next raw character and returns the new partial value, and
  optionally a replacement mask definition.

Registries are immutable.  ``with_overrides()`` returns a new registry and
leaves the receiver untouched, so a single registry can be shared freely
between definitions.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from inmask.domain.definition import MaskDefinition


@dataclass(frozen=True)
class KeyHandlerResult:
    """Return value of a key handler.

    Attributes:
        value: The new partial value, replacing everything built so far.
        definition: Optional mask definition to swap in mid-edit.
    """

    value: str
    definition: MaskDefinition | None = None


KeyHandlerFn = Callable[[str, str, str], KeyHandlerResult]


@dataclass(frozen=True)
class Validator:
    """Accepts or rejects a single character."""

    predicate: Callable[[str], bool]
    name: str = ""

    @classmethod
    def from_pattern(cls, pattern: str) -> Validator:
        """Build a validator that fully matches one character against *pattern*."""
        compiled = re.compile(pattern)
        return cls(predicate=lambda ch: compiled.fullmatch(ch) is not None, name=pattern)

    def accepts(self, char: str) -> bool:
        return len(char) == 1 and bool(self.predicate(char))


@dataclass(frozen=True)
class KeyHandler:
    """Transforms the partial value when its template position is rendered."""

    handler: KeyHandlerFn
    name: str = ""

    def __call__(
        self, partial_value: str, last_valid_value: str, template: str
    ) -> KeyHandlerResult:
        result = self.handler(partial_value, last_valid_value, template)
        if isinstance(result, str):
            return KeyHandlerResult(value=result)
        return result


CharacterClass = Validator | KeyHandler


def coerce_class(value: Any) -> CharacterClass:
    """Turn an override value into a CharacterClass.

    Accepts an existing class, a regex string (-> Validator) or a plain
    callable (-> KeyHandler).  Raises ``TypeError`` or ``re.error`` otherwise.
    """
    if isinstance(value, (Validator, KeyHandler)):
        return value
    if isinstance(value, str):
        return Validator.from_pattern(value)
    if callable(value):
        return KeyHandler(handler=value, name=getattr(value, "__name__", ""))
    msg = f"Cannot build a character class from {type(value).__name__}"
    raise TypeError(msg)


class ClassRegistry(Mapping[str, CharacterClass]):
    """Immutable mapping of template characters to character classes."""

    __slots__ = ("_classes",)

    def __init__(self, classes: Mapping[str, CharacterClass] | None = None) -> None:
        self._classes: Mapping[str, CharacterClass] = MappingProxyType(dict(classes or {}))

    def __getitem__(self, key: str) -> CharacterClass:
        return self._classes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._classes)

    def __len__(self) -> int:
        return len(self._classes)

    def __repr__(self) -> str:
        return f"ClassRegistry({sorted(self._classes)!r})"

    def resolve(self, template_char: str) -> CharacterClass | None:
        """Return the class for *template_char*, or None if it is static."""
        return self._classes.get(template_char)

    def is_dynamic(self, template_char: str) -> bool:
        return template_char in self._classes

    def with_overrides(self, overrides: Mapping[str, Any]) -> ClassRegistry:
        """Return a new registry with *overrides* layered on top."""
        merged = dict(self._classes)
        for key, value in overrides.items():
            merged[key] = coerce_class(value)
        return ClassRegistry(merged)


DEFAULT_CLASSES: dict[str, CharacterClass] = {
    "A": Validator.from_pattern(r"[A-Za-z]"),
    "S": Validator.from_pattern(r"[A-Z]"),
    "s": Validator.from_pattern(r"[a-z]"),
    "0": Validator.from_pattern(r"[0-9]"),
    "*": Validator.from_pattern(r"[A-Za-z0-9]"),
}

DEFAULT_REGISTRY = ClassRegistry(DEFAULT_CLASSES)

# Date masks only ever use the digit class.
DIGIT_REGISTRY = ClassRegistry({"0": DEFAULT_CLASSES["0"]})
