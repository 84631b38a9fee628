"""Command: list built-in and configured mask presets."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from inmask.commands._base import InmaskCommand

if TYPE_CHECKING:
    from inmask.commands._context import AppContext


@click.command(
    cls=InmaskCommand,
    examples="""\
  inmask presets
  inmask -v presets
  inmask -q presets
  inmask --json presets""",
)
@click.pass_obj
def presets(app: AppContext) -> None:
    """List mask presets (built-in and from inmask.toml)."""
    from inmask.services.masks import MaskService

    app.emit(MaskService(app.settings).list_presets())
