"""The ``inmask`` command: global flags, settings and subcommands."""

from __future__ import annotations

from pathlib import Path

import click

from inmask import __version__
from inmask.commands import register_commands
from inmask.commands._base import InmaskGroup
from inmask.commands._context import AppContext
from inmask.config.settings import InmaskSettings


@click.group(
    cls=InmaskGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    examples="""\
  inmask presets
  inmask replay 01022024 --preset date
  inmask --json replay 5551234567 -p phone
  inmask -c ./inmask.toml describe -p money
  inmask -C ../checkout replay 12345 -p zip""",
)
@click.version_option(version=__version__, prog_name="inmask")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the essential value.")
@click.option("-v", "--verbose", is_flag=True, help="Step traces and debug logging.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Use this inmask.toml.")
@click.option(
    "-C",
    "--project",
    "project_root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project directory (config discovery and local plugins).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    project_root: Path | None,
) -> None:
    """Keystroke-level input masks, driven from the command line."""
    settings = InmaskSettings.from_cli(
        config_path=config_path,
        project_root=project_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
