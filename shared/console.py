"""
AirScope Console Interface
===========================

Rich-powered console abstraction giving every AirScope command the same
look: section rules, severity-coloured status lines, tables, and status
spinners.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator, Sequence

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

_SCOPE_THEME = Theme(
    {
        "scope.section": "bold bright_magenta",
        "scope.success": "bold green",
        "scope.warning": "bold yellow",
        "scope.error": "bold red",
        "scope.info": "bold bright_blue",
        "scope.dim": "dim white",
        "scope.highlight": "bold bright_white",
    }
)


class ScopeConsole:
    """Unified console interface for AirScope output.

    Usage::

        con = ScopeConsole()
        con.section("Connected Network")
        con.table("Nearby", ["SSID", "BSSID"], rows)
        con.success("Snapshot complete")
    """

    def __init__(self, *, quiet: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
        """
        self._console = Console(
            theme=_SCOPE_THEME,
            quiet=quiet,
            highlight=False,
        )

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(f"  {title}  ", style="scope.section", characters="─")

    def success(self, message: str) -> None:
        self._console.print(f"[scope.success][✔][/scope.success] {message}")

    def warning(self, message: str) -> None:
        self._console.print(f"[scope.warning][⚠][/scope.warning] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[scope.error][✘][/scope.error] {message}")

    def info(self, message: str) -> None:
        self._console.print(f"[scope.info][ℹ][/scope.info] {message}")

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Row sequences; each cell is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    def key_values(self, title: str, pairs: Sequence[tuple[str, Any]]) -> None:
        """Render a two-column label/value grid."""
        tbl = Table(title=title, show_header=False, border_style="bright_cyan")
        tbl.add_column("Field", style="scope.dim")
        tbl.add_column("Value", style="scope.highlight")
        for label, value in pairs:
            tbl.add_row(label, str(value))
        self._console.print(tbl)

    @contextmanager
    def status(self, message: str = "Working...") -> Generator[Any, None, None]:
        """Context-manager showing a spinner with a status message."""
        with self._console.status(
            f"[scope.info]{message}[/scope.info]",
            spinner="dots",
            spinner_style="bright_cyan",
        ) as status_obj:
            yield status_obj
