"""deploy-drift: compare production and staging deployment declarations."""

from .drift import DriftFinding, DriftReport, FindingKind, compare_environments
from .parser import ParsedDeclaration, parse_declaration
from .scanner import ComponentRecord, ScanError, scan_environment

__all__ = [
    "ComponentRecord",
    "DriftFinding",
    "DriftReport",
    "FindingKind",
    "ParsedDeclaration",
    "ScanError",
    "compare_environments",
    "parse_declaration",
    "scan_environment",
]
