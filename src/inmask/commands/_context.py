"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from inmask.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from inmask.config.settings import InmaskSettings
    from inmask.plugins.event_bus import EventBus
    from inmask.plugins.manager import PluginManager
    from inmask.services.masks import MaskService
    from inmask.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  Plugins are discovered
    on first use so ``--help`` and ``--version`` never import plugin code.
    """

    def __init__(self, settings: InmaskSettings) -> None:
        self.settings = settings
        self._plugin_manager: PluginManager | None = None
        self._event_bus: EventBus | None = None

        from inmask.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugin_manager(self) -> PluginManager:
        """The plugin manager (discovered lazily on first access)."""
        if self._plugin_manager is None:
            from inmask.plugins.manager import PluginManager

            self._plugin_manager = PluginManager()
            if self.settings.plugins.enabled:
                self._plugin_manager.discover_and_load(local_dir=self.settings.plugin_dir)
        return self._plugin_manager

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from inmask.plugins.event_bus import EventBus

            self._event_bus = EventBus(self.plugin_manager)
        return self._event_bus

    def mask_service(self) -> MaskService:
        """A MaskService wired to the configured presets and plugins."""
        from inmask.domain.classes import DEFAULT_REGISTRY
        from inmask.services.masks import MaskService

        registry = self.plugin_manager.extend_registry(DEFAULT_REGISTRY)
        return MaskService(self.settings, event_bus=self.event_bus, registry=registry)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Successful results go to stdout.  Their warnings go to stderr,
        except in JSON mode where they are part of the payload.  Failed
        results go to stderr and exit with status 1.
        """
        output = self.output_settings
        rendered = format_result(result, settings=output)
        if not result.ok:
            click.echo(rendered, err=True)
            raise SystemExit(1)

        click.echo(rendered)
        if output.json_output:
            return
        for warning in result.warnings:
            click.secho(f"WARNING: {warning}", fg="yellow", err=True)
