"""Drift comparison between production and staging records.

The comparison is a single pass driven by the production collection:

1. Look up the stage record with the same component name (first match).
   No match is reported as MISSING_IN_STAGE and nothing else is checked
   for that component.
2. Equal version strings are IN_SYNC, anything else is VERSION_MISMATCH.
3. Env var keys are compared by presence in both directions. Values of
   keys present on both sides are not compared.

Components that exist only in stage are reported as MISSING_IN_PROD when
``include_stage_only`` is set.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from .scanner import ComponentRecord

logger = logging.getLogger(__name__)


class FindingKind(Enum):
    """Kinds of drift finding."""

    IN_SYNC = "in_sync"
    VERSION_MISMATCH = "version_mismatch"
    MISSING_IN_STAGE = "missing_in_stage"
    MISSING_IN_PROD = "missing_in_prod"
    ENV_VAR_MISSING_IN_PROD = "env_var_missing_in_prod"
    ENV_VAR_MISSING_IN_STAGE = "env_var_missing_in_stage"


_SEVERITY = {
    FindingKind.IN_SYNC: "info",
    FindingKind.VERSION_MISMATCH: "error",
    FindingKind.MISSING_IN_STAGE: "error",
    FindingKind.MISSING_IN_PROD: "error",
    FindingKind.ENV_VAR_MISSING_IN_PROD: "warning",
    FindingKind.ENV_VAR_MISSING_IN_STAGE: "warning",
}


@dataclass(frozen=True)
class DriftFinding:
    """A single discrepancy (or confirmation) for one component."""

    kind: FindingKind
    component: str
    prod_version: str | None = None
    stage_version: str | None = None
    key: str | None = None
    value: str | None = None

    @property
    def severity(self) -> str:
        """Severity: info, warning or error."""
        return _SEVERITY[self.kind]

    @property
    def is_env_var(self) -> bool:
        return self.kind in (
            FindingKind.ENV_VAR_MISSING_IN_PROD,
            FindingKind.ENV_VAR_MISSING_IN_STAGE,
        )

    @property
    def message(self) -> str:
        """Human-readable description."""
        if self.kind is FindingKind.IN_SYNC:
            return (
                f"{self.component} is in sync in prod ({self.prod_version}) "
                f"and stage ({self.stage_version})"
            )
        if self.kind is FindingKind.VERSION_MISMATCH:
            return (
                f"{self.component} has different version in prod ({self.prod_version}) "
                f"and stage ({self.stage_version})"
            )
        if self.kind is FindingKind.MISSING_IN_STAGE:
            return f"Component {self.component} is missing in stage"
        if self.kind is FindingKind.MISSING_IN_PROD:
            return f"Component {self.component} is missing in prod"
        if self.kind is FindingKind.ENV_VAR_MISSING_IN_PROD:
            return (
                f"Environment variable {self.key} is missing in prod "
                f"(value in stage: {self.value})"
            )
        return (
            f"Environment variable {self.key} is missing in stage "
            f"(value in prod: {self.value})"
        )

    def to_dict(self) -> dict[str, str | None]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "kind": self.kind.value,
            "severity": self.severity,
            "component": self.component,
            "prod_version": self.prod_version,
            "stage_version": self.stage_version,
            "key": self.key,
            "value": self.value,
            "message": self.message,
        }


@dataclass
class DriftReport:
    """Ordered findings of one comparison."""

    findings: list[DriftFinding] = field(default_factory=list)
    prod_count: int = 0
    stage_count: int = 0

    def by_kind(self, kind: FindingKind) -> list[DriftFinding]:
        return [f for f in self.findings if f.kind is kind]

    @property
    def errors(self) -> list[DriftFinding]:
        return [f for f in self.findings if f.severity == "error"]

    @property
    def warnings(self) -> list[DriftFinding]:
        return [f for f in self.findings if f.severity == "warning"]

    @property
    def has_drift(self) -> bool:
        """True when any finding is not IN_SYNC."""
        return any(f.kind is not FindingKind.IN_SYNC for f in self.findings)

    def to_dict(self) -> dict:
        return {
            "prod_components": self.prod_count,
            "stage_components": self.stage_count,
            "findings": [f.to_dict() for f in self.findings],
        }


def find_component(records: Sequence[ComponentRecord], name: str) -> ComponentRecord | None:
    """
    Return the first record with the given component name.

    Args:
        records: Records to search, in scan order
        name: Component name

    Returns:
        First matching record, or None
    """
    for record in records:
        if record.component == name:
            return record
    return None


def compare_env_vars(prod: ComponentRecord, stage: ComponentRecord) -> list[DriftFinding]:
    """
    Compare env var key sets of two records.

    Keys present only in stage are listed first, then keys present only in
    prod, each in declaration order.

    Args:
        prod: Production record
        stage: Stage record

    Returns:
        ENV_VAR_MISSING_IN_PROD / ENV_VAR_MISSING_IN_STAGE findings
    """
    findings: list[DriftFinding] = []

    for key, value in stage.env_vars.items():
        if key not in prod.env_vars:
            findings.append(
                DriftFinding(
                    kind=FindingKind.ENV_VAR_MISSING_IN_PROD,
                    component=prod.component,
                    key=key,
                    value=value,
                )
            )

    for key, value in prod.env_vars.items():
        if key not in stage.env_vars:
            findings.append(
                DriftFinding(
                    kind=FindingKind.ENV_VAR_MISSING_IN_STAGE,
                    component=prod.component,
                    key=key,
                    value=value,
                )
            )

    return findings


def compare_environments(
    prod_records: Sequence[ComponentRecord],
    stage_records: Sequence[ComponentRecord],
    include_stage_only: bool = False,
) -> DriftReport:
    """
    Compare production records against stage records.

    Args:
        prod_records: Production records in scan order
        stage_records: Stage records in scan order
        include_stage_only: Also report stage components absent from prod

    Returns:
        DriftReport with findings in production order
    """
    report = DriftReport(prod_count=len(prod_records), stage_count=len(stage_records))

    for prod in prod_records:
        stage = find_component(stage_records, prod.component)
        if stage is None:
            logger.debug(f"{prod.component}: missing in stage")
            report.findings.append(
                DriftFinding(
                    kind=FindingKind.MISSING_IN_STAGE,
                    component=prod.component,
                    prod_version=prod.version,
                )
            )
            continue

        kind = (
            FindingKind.IN_SYNC if prod.version == stage.version else FindingKind.VERSION_MISMATCH
        )
        report.findings.append(
            DriftFinding(
                kind=kind,
                component=prod.component,
                prod_version=prod.version,
                stage_version=stage.version,
            )
        )
        report.findings.extend(compare_env_vars(prod, stage))

    if include_stage_only:
        prod_names = {record.component for record in prod_records}
        reported: set[str] = set()
        for stage in stage_records:
            if stage.component in prod_names or stage.component in reported:
                continue
            reported.add(stage.component)
            report.findings.append(
                DriftFinding(
                    kind=FindingKind.MISSING_IN_PROD,
                    component=stage.component,
                    stage_version=stage.version,
                )
            )

    logger.info(
        f"Compared {report.prod_count} prod and {report.stage_count} stage component(s): "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    return report
