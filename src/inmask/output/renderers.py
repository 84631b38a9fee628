"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from inmask.output.console import caret_text, create_console, get_output, style_for_role

if TYPE_CHECKING:
    from rich.console import Console

    from inmask.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "replay":
        return str(result.data.get("value", ""))

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("name", "")) for item in items if isinstance(item, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="inmask.ok")
    op = Text(f"  {result.op}", style="inmask.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="inmask.key")
    if key in ("value", "template"):
        v = Text(repr(value) if value == "" else str(value), style="inmask.value")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="inmask.error")
    op = Text(f"  {result.op}", style="inmask.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mask renderers ────────────────────────────────────────────────────


def _render_mask(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render build_mask / describe_mask results."""
    _status_line(console, result)
    d = result.data
    mask_keys = (
        "preset",
        "kind",
        "align",
        "template",
        "length",
        "max_digits",
        "max_decimals",
        "allow_negative",
        "decimal_separator",
        "group_separator",
    )
    for key in mask_keys:
        if d.get(key) is not None:
            _field(console, key, d[key])

    positions = d.get("positions", [])
    if positions:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Char")
        table.add_column("Role")
        for pos in positions:
            role = str(pos.get("role", ""))
            style = style_for_role(role)
            table.add_row(str(pos["index"]), str(pos["char"]), Text(role, style=style))
        console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_replay(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render replay results: final value, then the step trace when verbose."""
    _status_line(console, result)
    d = result.data
    value = str(d.get("value", ""))
    caret = int(d.get("caret", 0))
    console.print(Text("  value: ", style="inmask.key"), caret_text(value, caret), end="")
    console.print()
    _field(console, "caret", caret)
    _field(console, "kind", d.get("kind", ""))
    if d.get("template"):
        _field(console, "template", d["template"])

    steps = d.get("steps", [])
    if verbose and steps:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Key")
        table.add_column("Value")
        table.add_column("Caret", justify="right")
        table.add_column("Result")
        for index, step in enumerate(steps, start=1):
            if not step.get("handled"):
                status = Text("host", style="dim")
            elif step.get("accepted"):
                status = Text("accepted", style="inmask.ok")
            else:
                status = Text(f"rejected ({step.get('reason', '')})", style="inmask.rejected")
            table.add_row(
                str(index),
                repr(step.get("key", "")),
                str(step.get("value", "")),
                str(step.get("caret", "")),
                status,
            )
        console.print(table)
        _render_meta(console, result)


def _render_presets(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_presets as a table."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Template")
    table.add_column("Source", style="dim")
    if verbose:
        table.add_column("Description")
    for item in items:
        row = [
            str(item.get("name", "")),
            str(item.get("kind", "")),
            str(item.get("template", "")),
            str(item.get("source", "")),
        ]
        if verbose:
            row.append(str(item.get("description", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} presets")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "build_mask": _render_mask,
    "describe_mask": _render_mask,
    "replay": _render_replay,
    "list_presets": _render_presets,
}
