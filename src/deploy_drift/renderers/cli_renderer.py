"""CLI renderer using Rich library.

This renderer interprets semantic styles from OutputDescriptor and renders
them to terminal using the Rich library with appropriate colors and formatting.
"""

from typing import Any

from rich.console import Console
from rich.markup import escape

from ..protocol import OutputDescriptor, OutputRow, VerbosityLevel
from .base import BaseRenderer


class CLIRenderer(BaseRenderer):
    """
    Renders output to CLI using Rich library.

    Maps semantic style classes to Rich markup:
    - success -> green
    - error -> red
    - warning -> magenta (env var findings stand out from errors)
    - info -> blue
    - highlight -> bold
    - muted -> dim
    - neutral -> default
    """

    STYLE_MAP = {
        "success": "green",
        "error": "red",
        "warning": "magenta",
        "info": "blue",
        "highlight": "bold",
        "muted": "dim",
        "neutral": "",
    }

    ICON_MAP = {
        "check": "✓",
        "cross": "✗",
        "warning": "⚠",
        "info": "ℹ",
        "arrow": "→",
        "bullet": "•",
    }

    INDENT = "  "

    def __init__(
        self,
        verbosity: VerbosityLevel = VerbosityLevel.NORMAL,
        color: bool = True,
        console: Console | None = None,
    ):
        """
        Initialize CLI renderer.

        Args:
            verbosity: Output verbosity level
            color: Enable colored output
            console: Console to print to (defaults to stdout)
        """
        super().__init__(verbosity)
        self.console = console or Console(color_system="auto" if color else None)

    def render(self, descriptor: OutputDescriptor, result: Any, result_id: str) -> None:
        """
        Render output to CLI.

        Args:
            descriptor: Output structure description
            result: Raw result (passed to the quiet summary)
            result_id: Result ID
        """
        self.collect_findings(result)

        if self.verbosity == VerbosityLevel.QUIET:
            if descriptor.quiet_summary:
                self.console.print(descriptor.quiet_summary(result))
            return

        self.console.print(f"\n[bold blue]{escape(descriptor.title)}[/bold blue]")
        self.console.print()

        rows = descriptor.filter_by_verbosity(self.verbosity)

        if not rows:
            self.console.print(f"{self.INDENT}[dim]No data to display[/dim]")
            return

        # Group by section, keeping first-seen order
        sections: dict[str, list[OutputRow]] = {}
        for row in rows:
            sections.setdefault(row.section_name or "_default", []).append(row)

        for section_name, section_rows in sections.items():
            if section_name != "_default":
                self.console.print()
                self.console.print(f"{self.INDENT}[cyan]{escape(section_name)}[/cyan]")

            for row in section_rows:
                self._render_row(row)

    def _render_row(self, row: OutputRow) -> None:
        """
        Render a single output row.

        Args:
            row: OutputRow to render
        """
        indent = self.INDENT * (row.indent + 1)
        style = self.STYLE_MAP.get(row.style_class, "")
        icon = self.ICON_MAP.get(row.icon or "", "")
        icon_str = f"{icon} " if icon else ""

        if row.section_type == "heading":
            text = escape(str(row.value or row.label))
            self.console.print(f"{indent}[{style} bold]{text}[/{style} bold]")
            self.console.print()
            return

        if row.section_type == "text":
            msg = escape(str(row.value) if row.value else str(row.label))
            if style:
                self.console.print(f"{indent}[{style}]{icon_str}{msg}[/{style}]")
            else:
                self.console.print(f"{indent}{icon_str}{msg}")
            return

        if row.section_type == "list":
            items = row.value if isinstance(row.value, list) else [row.value]
            if not items and not row.show_if_empty:
                return
            if row.label:
                self.console.print(f"{indent}{escape(row.label)}:")
            bullet = self.ICON_MAP["bullet"]
            for item in items:
                self.console.print(f"{indent}  {bullet} {escape(str(item))}")
            return

        # key_value
        if not row.show_if_empty and not row.value:
            return

        formatted_value = self._format_value(row)
        if style:
            formatted_value = f"[{style}]{formatted_value}[/{style}]"

        if row.label:
            self.console.print(f"{indent}{escape(row.label)}: {icon_str}{formatted_value}")
        else:
            self.console.print(f"{indent}{icon_str}{formatted_value}")

    @staticmethod
    def _format_value(row: OutputRow) -> str:
        """
        Format row value for display.

        Args:
            row: OutputRow

        Returns:
            Formatted (markup-escaped) string
        """
        if row.value is None:
            return "[dim]none[/dim]"

        if isinstance(row.value, bool):
            return "Yes" if row.value else "No"

        if isinstance(row.value, (list, tuple)):
            return escape(", ".join(str(v) for v in row.value))

        return escape(str(row.value))

    def render_summary(self) -> None:
        """Render summary of all errors and warnings."""
        if self.verbosity == VerbosityLevel.QUIET:
            return

        self.console.print()
        self.console.print("[bold blue]═══ Summary ═══[/bold blue]")
        self.console.print()

        total_errors = len(self.all_errors)
        total_warnings = len(self.all_warnings)

        if total_errors == 0 and total_warnings == 0:
            self.console.print("[green]✓ No drift found![/green]")
        else:
            if total_errors > 0:
                self.console.print(f"[red]✗ {total_errors} error(s) found[/red]")
            if total_warnings > 0:
                self.console.print(f"[magenta]⚠ {total_warnings} warning(s) found[/magenta]")

            if self.verbosity >= VerbosityLevel.VERBOSE:
                self.console.print()
                for _, error in self.all_errors:
                    self.console.print(f"  [red]• {escape(error)}[/red]")
                for _, warning in self.all_warnings:
                    self.console.print(f"  [magenta]• {escape(warning)}[/magenta]")

        self.console.print()
