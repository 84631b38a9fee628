"""Plugin discovery and loading.

Plugins come from two places:

- distributions exposing an ``inmask.plugins`` entry point;
- single ``*.py`` files in the project's local plugin directory
  (``.inmask/plugins`` unless ``[plugins] local_dir`` says otherwise).

A plugin is any object with ``@hookimpl`` methods.  Plugins can observe
field events and contribute character classes for custom masks.  Loading
problems are logged and the plugin skipped; they never stop the CLI.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import re
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

import pluggy

from inmask.plugins.hookspecs import InmaskHookSpec

if TYPE_CHECKING:
    from inmask.domain.classes import CharacterClass, ClassRegistry

PROJECT_NAME = "inmask"
ENTRY_POINT_GROUP = "inmask.plugins"
LOCAL_MODULE_PREFIX = "inmask_local_plugin_"

# pluggy marks decorated methods with "<project>_impl".
_IMPL_ATTR = f"{PROJECT_NAME}_impl"

logger = logging.getLogger(__name__)


def has_hook_impls(obj: object) -> bool:
    """Whether *obj* (a class or instance) has public ``@hookimpl`` methods."""
    return any(
        getattr(member, _IMPL_ATTR, None)
        for name, member in inspect.getmembers(obj, callable)
        if not name.startswith("_")
    )


def _import_file(py_file: Path) -> ModuleType | None:
    """Execute *py_file* as a fresh module, or return None if that fails."""
    module_name = LOCAL_MODULE_PREFIX + py_file.stem
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("Could not create module spec for %s", py_file)
        return None

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
        del sys.modules[module_name]
        return None
    return module


def _declared_plugin_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined (not imported) in *module* that implement hooks."""
    for _name, cls in inspect.getmembers(module, inspect.isclass):
        if cls.__module__ == module.__name__ and has_hook_impls(cls):
            yield cls


class PluginManager:
    """Owns the pluggy manager for the ``inmask`` project."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(InmaskHookSpec)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """True once :meth:`discover_and_load` has run."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then the files in *local_dir*.

        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_registered_classes()
        if local_dir is not None and local_dir.is_dir():
            for py_file in sorted(local_dir.glob("*.py")):
                if not py_file.name.startswith("_"):
                    self._load_local_file(py_file)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved_name = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._name_of(plugin) for plugin in self._pm.get_plugins()]

    def extend_registry(self, registry: ClassRegistry) -> ClassRegistry:
        """*registry* plus every character class the plugins contribute.

        Later plugins win on conflicting template characters.  Returns
        *registry* itself when no plugin contributes anything.
        """
        extra: dict[str, CharacterClass] = {}
        for plugin in self._pm.get_plugins():
            extra.update(self._classes_from(plugin))
        return registry.with_overrides(extra) if extra else registry

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _name_of(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or type(plugin).__name__

    def _load_local_file(self, py_file: Path) -> None:
        module = _import_file(py_file)
        if module is None:
            return
        for cls in _declared_plugin_classes(module):
            try:
                instance = cls()
            except Exception:
                logger.warning(
                    "Failed to instantiate plugin class %s from %s",
                    cls.__name__,
                    py_file,
                    exc_info=True,
                )
                continue
            self.register_plugin(instance, name=module.__name__)

    def _instantiate_registered_classes(self) -> None:
        """Swap plugin *classes* registered by entry points for instances.

        pluggy would otherwise call the hooks with ``self`` unbound.
        """
        pending = [
            plugin
            for plugin in self._pm.get_plugins()
            if inspect.isclass(plugin) and has_hook_impls(plugin)
        ]
        for cls in pending:
            name = self._name_of(cls)
            self._pm.unregister(cls)
            try:
                self._pm.register(cls(), name=name)
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)

    def _classes_from(self, plugin: object) -> dict[str, CharacterClass]:
        """Validated ``register_character_classes()`` output of one plugin."""
        from inmask.domain.classes import coerce_class

        name = self._name_of(plugin)
        hook = getattr(plugin, "register_character_classes", None)
        if hook is None:
            return {}
        try:
            class_map = hook()
        except Exception:
            logger.warning(
                "Failed to collect character classes from plugin %s", name, exc_info=True
            )
            return {}
        if class_map is None:
            return {}
        if not isinstance(class_map, dict):
            logger.warning("Plugin %s returned non-dict character classes", name)
            return {}

        collected: dict[str, CharacterClass] = {}
        for template_char, value in class_map.items():
            if not isinstance(template_char, str) or len(template_char) != 1:
                logger.warning(
                    "Plugin %s: class key %r must be a single character", name, template_char
                )
                continue
            try:
                collected[template_char] = coerce_class(value)
            except (TypeError, re.error) as exc:
                logger.warning("Plugin %s: class %r skipped (%s)", name, template_char, exc)
        return collected
