"""Debug statistics for directory scans.

A process-wide tracker that the scanner reports into when debug mode is
enabled. The CLI prints the summary to stderr at the end of a run.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import ClassVar

logger = logging.getLogger(__name__)


@dataclass
class EnvironmentScanStats:
    """Counters for one environment root."""

    # Regular files handed to the parser
    files_parsed: int = 0

    # Entries skipped because their name starts with "."
    hidden_skipped: int = 0

    # Files without app_name or container_version
    not_components: int = 0

    # Files that could not be read
    unreadable: int = 0

    # Records collected
    components: int = 0


class ScanStatsTracker:
    """
    Global statistics tracker for debug mode.

    Thread-safe singleton keyed by environment label ("prod", "stage", ...).
    """

    _instance: ClassVar["ScanStatsTracker | None"] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        """Initialize statistics."""
        self.environments: dict[str, EnvironmentScanStats] = defaultdict(EnvironmentScanStats)
        self._enabled = False
        self._data_lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "ScanStatsTracker":
        """Get singleton instance (thread-safe)."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def enable(self) -> None:
        """Enable statistics tracking."""
        self._enabled = True
        logger.debug("Scan statistics tracking enabled")

    def disable(self) -> None:
        """Disable statistics tracking."""
        self._enabled = False

    def is_enabled(self) -> bool:
        """Check if statistics tracking is enabled."""
        return self._enabled

    def reset(self) -> None:
        """Reset all statistics."""
        with self._data_lock:
            self.environments = defaultdict(EnvironmentScanStats)
        logger.debug("Scan statistics reset")

    def record(self, environment: str, counter: str) -> None:
        """
        Increment one counter for an environment.

        Args:
            environment: Environment label
            counter: Name of an EnvironmentScanStats field
        """
        if not self._enabled:
            return

        with self._data_lock:
            stats = self.environments[environment]
            setattr(stats, counter, getattr(stats, counter) + 1)

    def get_summary(self) -> str:
        """
        Get formatted summary of statistics.

        Returns:
            Formatted string with statistics
        """
        if not self._enabled:
            return "Scan statistics tracking disabled"

        with self._data_lock:
            lines = []
            lines.append("\n" + "=" * 70)
            lines.append("SCAN STATISTICS SUMMARY")
            lines.append("=" * 70)

            if not self.environments:
                lines.append("\nNo files scanned")

            for environment in sorted(self.environments):
                stats = self.environments[environment]
                lines.append(f"\n{environment}:")
                lines.append(f"  Files parsed:   {stats.files_parsed}")
                lines.append(f"  Components:     {stats.components}")
                lines.append(f"  Not components: {stats.not_components}")
                lines.append(f"  Hidden skipped: {stats.hidden_skipped}")
                lines.append(f"  Unreadable:     {stats.unreadable}")

            lines.append("=" * 70)
            return "\n".join(lines)


# Global instance accessor
def get_stats_tracker() -> ScanStatsTracker:
    """Get the global statistics tracker instance."""
    return ScanStatsTracker.get_instance()
