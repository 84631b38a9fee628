"""Rich console plumbing for inmask output.

Renderers draw on a Console that writes into a StringIO; the text is pulled
back out with :func:`get_output` so ``format_result()`` stays a plain
``-> str`` function.  Rich leaves out colour codes on its own when the
output is not a terminal, which covers tests and pipes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

# Template position roles as reported by MaskService.describe().
ROLE_STYLES: dict[str, str] = {
    "static": "dim",
    "validator": "green",
    "handler": "magenta",
}

INMASK_THEME = Theme(
    {
        "inmask.ok": "bold green",
        "inmask.error": "bold red",
        "inmask.warning": "bold yellow",
        "inmask.op": "bold cyan",
        "inmask.key": "dim",
        "inmask.value": "bold",
        "inmask.caret": "reverse",
        "inmask.rejected": "red",
        **{f"inmask.role.{role}": style for role, style in ROLE_STYLES.items()},
    }
)


def create_console(*, width: int = 120) -> Console:
    """A themed Console writing into a fresh StringIO buffer."""
    return Console(file=StringIO(), theme=INMASK_THEME, highlight=False, width=width)


def get_output(console: Console) -> str:
    """Everything rendered on *console* so far."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "Console was not created by create_console()"
        raise TypeError(msg)
    return buffer.getvalue()


def style_for_role(role: str) -> str:
    return f"inmask.role.{role}" if role in ROLE_STYLES else ""


def caret_text(value: str, caret: int) -> Text:
    """*value* with the cell under the caret in reverse video.

    A caret at the end of the value gets a blank cell so it stays visible.
    """
    text = Text(value[:caret])
    text.append(value[caret : caret + 1] or " ", style="inmask.caret")
    text.append(value[caret + 1 :])
    return text
