"""Utility functions and helpers."""

from .logger import setup_logger
from .scan_stats import ScanStatsTracker, get_stats_tracker

__all__ = ["ScanStatsTracker", "get_stats_tracker", "setup_logger"]
