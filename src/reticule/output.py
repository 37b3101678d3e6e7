"""User-facing output for the ``reticule`` commands.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- the profile listing only, so it can be piped and parsed.
* **stderr** -- command outcomes: success lines, warnings, errors and
  next-step suggestions.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and the
  ``--no-color`` flag. Without colour every message is printed verbatim.

Progress and debug traces from the library modules are not printed here;
they go through :mod:`logging` and the Rich handler installed by
:func:`reticule.app.main_callback`.

One :class:`OutputManager` is installed per invocation with
:func:`set_output`; the module-level helpers delegate to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """Listing formats. ``AUTO`` picks ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Formats listings for stdout and status messages for stderr.

    Args:
        format: Listing format; ``AUTO`` resolves from TTY detection.
        no_color: Disable colour and Rich markup.
        quiet: Suppress success lines and suggestions. Warnings and
            errors are always shown.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet

        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows to stdout in the active format.

        JSON mode prints an array of objects keyed by *headers*; plain mode
        prints tab-separated lines with a header line; Rich mode prints a
        :class:`~rich.table.Table` with *title*.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self._emit(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self._emit("\t".join(line))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._status(message, style="green")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._status(f"→ {message}", style="dim")

    def warning(self, message: str) -> None:
        self._labelled("Warning", "yellow", message)

    def error(self, message: str) -> None:
        self._labelled("Error", "bold red", message)

    def _emit(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def _status(self, message: str, style: str) -> None:
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, style=style, markup=False)

    def _labelled(self, label: str, style: str, message: str) -> None:
        if self._no_color:
            print(f"{label}: {message}", file=sys.stderr, flush=True)
        else:
            # Profile names and paths may contain square brackets.
            self._stderr.print(f"[{style}]{label}:[/{style}] {escape(message)}")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- Global instance (installed by the root callback) ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager so the next call builds a fresh one."""
    global _output
    _output = None


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)
