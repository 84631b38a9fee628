"""Click base classes and shared options for inmask commands.

Every command and group accepts an ``examples=`` string.  When it is set an
eager ``--examples`` flag prints it and exits, which keeps ``--help`` short
while sample invocations stay one flag away.

:func:`mask_options` adds the flags shared by every command that builds a
mask.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

import click

from inmask.domain.types import MaskKind


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


class _ExamplesMixin:
    """Adds the ``examples`` keyword and the ``--examples`` flag."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_print_examples,
                    help="Show usage examples.",
                )
            )


class InmaskCommand(_ExamplesMixin, click.Command):
    """A click Command taking ``examples=``."""


class InmaskGroup(_ExamplesMixin, click.Group):
    """A click Group taking ``examples=``; its subcommands do too."""

    command_class = InmaskCommand


# --- Shared mask options ---


def _parse_classes(
    _ctx: click.Context, _param: click.Parameter, value: tuple[str, ...]
) -> dict[str, str] | None:
    """Turn repeated ``X=REGEX`` values into a class override mapping."""
    if not value:
        return None
    classes: dict[str, str] = {}
    for item in value:
        key, sep, pattern = item.partition("=")
        if not sep or len(key) != 1 or not pattern:
            raise click.BadParameter(f"expected CHAR=REGEX, got {item!r}")
        classes[key] = pattern
    return classes


P = ParamSpec("P")
R = TypeVar("R")


def mask_options(func: Callable[P, R]) -> Callable[P, R]:
    """Apply the flags that select and tune a mask to a command."""
    func = click.option(
        "--class",
        "classes",
        multiple=True,
        callback=_parse_classes,
        help="Custom character class CHAR=REGEX (repeatable).",
    )(func)
    func = click.option(
        "--allow-negative/--no-negative",
        default=None,
        help="Allow a leading minus sign (numeric masks).",
    )(func)
    func = click.option("--max-decimals", type=int, default=None, help="Fractional digits.")(func)
    func = click.option("--max-digits", type=int, default=None, help="Total digits.")(func)
    func = click.option("-t", "--template", default=None, help="Template for custom masks.")(func)
    func = click.option(
        "--kind",
        type=click.Choice([kind.value for kind in MaskKind]),
        default=None,
        help="Mask kind (overrides the preset's).",
    )(func)
    func = click.option("-p", "--preset", default=None, help="Named preset to start from.")(func)
    return func
