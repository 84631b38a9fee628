"""Synchronous event dispatch via pluggy.

Keystrokes are handled one at a time, so events are delivered inline: by
the time ``dispatch()`` returns every hook implementation has run.

Plugin failures are logged as warnings and never raised.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from inmask.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Dispatch field events to registered plugins.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
    """

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager
        self._failures: list[dict[str, Any]] = []

    @property
    def failures(self) -> list[dict[str, Any]]:
        """``{hook_name, error}`` records for every failed dispatch so far."""
        return list(self._failures)

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> bool:
        """Call *hook_name* with *payload*. Returns False if a plugin raised."""
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            logger.debug("No hook named %s; event dropped", hook_name)
            return True

        try:
            hook_fn(**payload)
        except Exception as exc:
            logger.warning("Hook %s failed: %s", hook_name, exc, exc_info=True)
            self._failures.append({"hook_name": hook_name, "error": str(exc)})
            return False
        return True
