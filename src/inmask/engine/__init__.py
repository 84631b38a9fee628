"""Mask engine: per-field state and the three formatting algorithms.

Engine modules depend on the domain layer only.  Every entry point is
synchronous and never raises for a bad keystroke: a rejected edit is an
:class:`~inmask.engine.state.EditOutcome` with ``accepted=False``.
"""

from inmask.engine.core import apply
from inmask.engine.state import EditOutcome, FieldMaskState

__all__ = ["EditOutcome", "FieldMaskState", "apply"]
