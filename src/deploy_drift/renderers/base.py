"""Base renderer protocol."""

from abc import ABC, abstractmethod
from typing import Any

from ..drift import DriftReport
from ..protocol import OutputDescriptor, VerbosityLevel


class BaseRenderer(ABC):
    """
    Base class for all output renderers.

    Renderers interpret OutputDescriptor semantic styles and render them
    according to their output format (CLI, JSON).
    """

    def __init__(self, verbosity: VerbosityLevel = VerbosityLevel.NORMAL):
        """
        Initialize renderer.

        Args:
            verbosity: Output verbosity level
        """
        self.verbosity = verbosity
        self.all_errors: list[tuple[str, str]] = []  # (component, message)
        self.all_warnings: list[tuple[str, str]] = []  # (component, message)

    @abstractmethod
    def render(self, descriptor: OutputDescriptor, result: Any, result_id: str) -> None:
        """
        Render one result.

        Args:
            descriptor: Output structure description
            result: Raw result (report or record list)
            result_id: Key identifying the result in structured output
        """
        ...

    @abstractmethod
    def render_summary(self) -> None:
        """Render summary of all errors and warnings."""
        ...

    def collect_findings(self, result: Any) -> None:
        """
        Collect drift errors and warnings for the summary.

        Only drift findings count; informational rows such as an empty
        environment and record listings from ``scan`` contribute nothing.

        Args:
            result: Raw result passed to render()
        """
        if not isinstance(result, DriftReport):
            return
        self.all_errors.extend((f.component, f.message) for f in result.errors)
        self.all_warnings.extend((f.component, f.message) for f in result.warnings)
