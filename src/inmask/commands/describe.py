"""Command: show a mask's template positions and limits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from inmask.commands._base import InmaskCommand, mask_options

if TYPE_CHECKING:
    from inmask.commands._context import AppContext


@click.command(
    cls=InmaskCommand,
    examples="""\
  inmask describe --preset phone
  inmask describe --kind custom --template "SS-0000"
  inmask describe -p money --max-decimals 3
  inmask --json describe -p date""",
)
@mask_options
@click.pass_obj
def describe(app: AppContext, **options: Any) -> None:
    """Describe a mask built from a preset and/or explicit options."""
    svc = app.mask_service()
    app.emit(svc.describe_preset(**options))
