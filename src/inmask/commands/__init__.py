"""Subcommand modules for inmask.

Provides register_commands() which uses deferred imports to keep
``inmask --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from inmask.commands.describe import describe
    from inmask.commands.presets import presets
    from inmask.commands.replay import replay

    cli.add_command(replay)
    cli.add_command(describe)
    cli.add_command(presets)
