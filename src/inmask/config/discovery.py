"""Locating and reading ``inmask.toml``.

The file is looked up the way git looks for ``.git/``: the starting
directory first, then each parent up to the filesystem root.  The
``INMASK_CONFIG`` env var pins an exact file instead, and ``--config`` on
the command line bypasses discovery altogether.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "inmask.toml"
CONFIG_ENV_VAR = "INMASK_CONFIG"


def search_path(start: Path | None = None) -> Iterator[Path]:
    """Yield candidate config paths from *start* (default: cwd) upwards."""
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        yield directory / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start*, or None.

    When ``INMASK_CONFIG`` is set it wins outright: the named file is
    returned if it exists and nothing is searched otherwise.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None
    return next((candidate for candidate in search_path(start) if candidate.is_file()), None)


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    A syntax error becomes a :class:`click.ClickException` so the CLI
    reports it as a one-line error rather than a traceback.
    """
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
