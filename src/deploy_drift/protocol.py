"""Renderer-agnostic output model.

The drift report is described as a list of semantic rows; renderers decide
how each style class, icon and section is actually displayed.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class VerbosityLevel(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"
    DEBUG = "debug"

    def _rank(self) -> int:
        return list(VerbosityLevel).index(self)

    def __ge__(self, other):
        """Allow >= comparison for verbosity filtering."""
        if not isinstance(other, VerbosityLevel):
            return NotImplemented
        return self._rank() >= other._rank()

    def __gt__(self, other):
        """Allow > comparison for verbosity filtering."""
        if not isinstance(other, VerbosityLevel):
            return NotImplemented
        return self._rank() > other._rank()


@dataclass
class OutputRow:
    """
    One row of output.

    Describes WHAT to display, not HOW. Uses semantic styling that
    renderers interpret based on their theme.

    Example:
        OutputRow(
            label="payments-api",
            value="in sync (1.4.2)",
            style_class="success",
            severity="info",
            icon="check",
        )
    """

    # Content
    label: str | None = None
    value: Any = None

    # Semantic presentation hints
    style_class: str = "neutral"  # success, error, warning, info, highlight, muted, neutral
    severity: str = "info"  # error, warning, info

    # Structure
    section_type: str = "key_value"  # key_value, list, heading, text
    section_name: str | None = None
    indent: int = 0

    # Verbosity control
    verbosity: VerbosityLevel = VerbosityLevel.NORMAL

    show_if_empty: bool = True
    icon: str | None = None


@dataclass
class OutputDescriptor:
    """
    Describes how to render a result at different verbosity levels.

    Decouples the drift logic from renderers: the report is described once,
    renderers interpret it.
    """

    rows: list[OutputRow] = field(default_factory=list)

    title: str = ""
    category: str = "drift"

    # Summary for quiet mode
    quiet_summary: Callable[[Any], str] | None = None

    def add_row(self, label: str | None = None, value: Any = None, **kwargs) -> "OutputDescriptor":
        """
        Builder pattern for adding rows.

        Args:
            label: Row label
            value: Row value
            **kwargs: Additional OutputRow parameters

        Returns:
            Self for chaining
        """
        self.rows.append(OutputRow(label=label, value=value, **kwargs))
        return self

    def filter_by_verbosity(self, verbosity: VerbosityLevel) -> list[OutputRow]:
        """Return only rows that should be shown at this verbosity level."""
        return [row for row in self.rows if verbosity >= row.verbosity]
