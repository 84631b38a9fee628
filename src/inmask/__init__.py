"""inmask: keystroke-level input masks for text fields."""

from inmask.domain.classes import DEFAULT_REGISTRY, ClassRegistry, KeyHandler, Validator
from inmask.domain.definition import (
    InvalidMaskDefinition,
    MaskDefinition,
    custom_mask,
    date_mask,
    decimal_mask,
    integer_mask,
)
from inmask.services.controller import MaskController

__version__ = "0.3.0"

__all__ = [
    "DEFAULT_REGISTRY",
    "ClassRegistry",
    "InvalidMaskDefinition",
    "KeyHandler",
    "MaskController",
    "MaskDefinition",
    "Validator",
    "__version__",
    "custom_mask",
    "date_mask",
    "decimal_mask",
    "integer_mask",
]
