"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from a local directory.
Plugin failures are logged as warnings and never raised.
"""

from inmask.plugins.event_bus import EventBus
from inmask.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager"]
