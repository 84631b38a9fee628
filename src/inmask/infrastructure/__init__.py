"""Infrastructure layer: concrete host inputs.

This layer depends on the domain layer only.
It must never import from engine, services, commands, or output.
"""

from inmask.infrastructure.memory_input import InMemoryInput

__all__ = ["InMemoryInput"]
