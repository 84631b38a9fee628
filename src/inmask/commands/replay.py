"""Command: type a key script into a masked in-memory field."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from inmask.commands._base import InmaskCommand, mask_options

if TYPE_CHECKING:
    from inmask.commands._context import AppContext


@click.command(
    cls=InmaskCommand,
    examples="""\
  inmask replay 01022024 --preset date
  inmask replay "5551234567" -p phone
  inmask replay "1234.5" --kind decimal --max-digits 8 --max-decimals 2
  inmask replay "{SEL 0-2}9" -p date --initial 01/02/2024
  inmask replay "AB12" --kind custom -t "SS-00" --class "S=[A-F]"
  inmask -v replay "12{BS}{BS}3" -p integer""",
)
@click.argument("keys")
@mask_options
@click.option("--initial", "initial_text", default="", help="Text the field starts with.")
@click.pass_obj
def replay(app: AppContext, keys: str, initial_text: str, **options: Any) -> None:
    """Replay KEYS against a mask and show the resulting value.

    KEYS is typed character by character; {BS}, {DEL}, {LEFT}, {RIGHT},
    {HOME}, {END} and {SEL a-b} stand for editing keys and selections.
    """
    svc = app.mask_service()
    app.emit(svc.replay_preset(keys, initial_text=initial_text, **options))
