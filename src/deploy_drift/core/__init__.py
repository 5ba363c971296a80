"""Core infrastructure: configuration loading."""

from .config_manager import ConfigManager, GlobalConfig, ReportConfig, ScanConfig

__all__ = ["ConfigManager", "GlobalConfig", "ReportConfig", "ScanConfig"]
