"""Scan an environment directory into component records."""

import logging
import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from .constants import DEFAULT_LAYOUT
from .parser import ParsedDeclaration, parse_declaration
from .utils.scan_stats import get_stats_tracker

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """Raised when an environment root cannot be scanned."""


@dataclass(frozen=True)
class ComponentRecord:
    """
    One deployable component as declared in one file.

    ``env_vars`` is stored as a read-only copy of the mapping passed in.
    """

    component: str
    version: str
    env_vars: Mapping[str, str] = field(default_factory=dict, hash=False)
    source: Path | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "env_vars", MappingProxyType(dict(self.env_vars)))


def environment_root(base: Path, environment: str, layout: str = DEFAULT_LAYOUT) -> Path:
    """
    Resolve the workload directory of one environment.

    Args:
        base: Root passed on the command line
        environment: Environment name substituted for ``{env}``
        layout: Relative path template

    Returns:
        Path such as ``<base>/Terraform/Environments/prod/workload``
    """
    return Path(base) / layout.format(env=environment)


def iter_declaration_files(
    root: Path, skip_hidden: bool = True, label: str | None = None
) -> Iterator[Path]:
    """
    Lazily yield every regular file below ``root``.

    Directories are walked in sorted order so results are deterministic.
    With ``skip_hidden`` any entry whose name starts with ``.`` is skipped,
    and hidden directories are not descended into. This is stricter than a
    per-entry name check: files below ``.terraform/`` or ``.git/`` are never
    read, even when their own names are not hidden.

    Args:
        root: Directory to walk
        skip_hidden: Skip dot-files and dot-directories
        label: Environment label for scan statistics
    """
    stats = get_stats_tracker()
    label = label or str(root)

    for dirpath, dirnames, filenames in os.walk(root):
        if skip_hidden:
            hidden_dirs = [d for d in dirnames if d.startswith(".")]
            for _ in hidden_dirs:
                stats.record(label, "hidden_skipped")
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        dirnames.sort()

        for filename in sorted(filenames):
            if skip_hidden and filename.startswith("."):
                stats.record(label, "hidden_skipped")
                continue
            yield Path(dirpath) / filename


def read_declaration(path: Path) -> ParsedDeclaration:
    """
    Read and parse one declaration file.

    Args:
        path: File to read

    Returns:
        ParsedDeclaration

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, encoding="utf-8", errors="replace") as f:
        text = f.read()
    return parse_declaration(text)


def scan_environment(
    root: Path, skip_hidden: bool = True, label: str | None = None
) -> list[ComponentRecord]:
    """
    Build component records for every declaration file below ``root``.

    Files without both a name and a version are not components and are
    skipped silently. Duplicate component names are kept in walk order.

    Args:
        root: Environment workload directory
        skip_hidden: Skip dot-files and dot-directories
        label: Environment label for logging and statistics

    Returns:
        Records in walk order

    Raises:
        ScanError: If ``root`` does not exist or is not a directory
    """
    root = Path(root)
    label = label or str(root)

    if not root.is_dir():
        raise ScanError(f"Environment directory not found: {root}")

    stats = get_stats_tracker()
    records: list[ComponentRecord] = []

    for path in iter_declaration_files(root, skip_hidden=skip_hidden, label=label):
        try:
            parsed = read_declaration(path)
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            stats.record(label, "unreadable")
            continue

        stats.record(label, "files_parsed")

        if not parsed.is_component:
            logger.debug(f"Skipping {path}: no app_name or container_version")
            stats.record(label, "not_components")
            continue

        assert parsed.component is not None and parsed.version is not None
        records.append(
            ComponentRecord(
                component=parsed.component,
                version=parsed.version,
                env_vars=parsed.env_vars,
                source=path,
            )
        )
        stats.record(label, "components")
        logger.debug(f"[{label}] {parsed.component} {parsed.version} ({path})")

    logger.info(f"[{label}] Found {len(records)} component(s) in {root}")
    return records
