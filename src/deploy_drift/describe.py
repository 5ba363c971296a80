"""Describe drift reports and scans as renderer-agnostic output."""

from collections.abc import Sequence

from .drift import DriftReport, FindingKind
from .protocol import OutputDescriptor, VerbosityLevel
from .scanner import ComponentRecord

# Finding kind -> (style class, icon)
_PRESENTATION = {
    FindingKind.IN_SYNC: ("success", "check"),
    FindingKind.VERSION_MISMATCH: ("error", "cross"),
    FindingKind.MISSING_IN_STAGE: ("error", "cross"),
    FindingKind.MISSING_IN_PROD: ("error", "cross"),
    FindingKind.ENV_VAR_MISSING_IN_PROD: ("warning", "warning"),
    FindingKind.ENV_VAR_MISSING_IN_STAGE: ("warning", "warning"),
}


def _quiet_summary(report: DriftReport) -> str:
    if not report.findings:
        return "[yellow]⚠ No components found in prod[/yellow]"
    if not report.has_drift:
        return f"[green]✓ {report.prod_count} component(s) in sync[/green]"
    return (
        f"[red]✗ {len(report.errors)} error(s)[/red], "
        f"[yellow]{len(report.warnings)} warning(s)[/yellow] "
        f"across {report.prod_count} prod component(s)"
    )


def describe_report(report: DriftReport, show_in_sync: bool = True) -> OutputDescriptor:
    """
    Describe a drift report.

    Component-level findings are top-level rows; env var findings are
    indented below the component they belong to. In-sync rows move to
    VERBOSE when ``show_in_sync`` is off.

    Args:
        report: Comparison result
        show_in_sync: Show IN_SYNC rows at normal verbosity

    Returns:
        OutputDescriptor
    """
    descriptor = OutputDescriptor(
        title="Deployment Drift (prod vs stage)",
        category="drift",
        quiet_summary=_quiet_summary,
    )

    descriptor.add_row(
        label="Components",
        value=f"{report.prod_count} in prod, {report.stage_count} in stage",
        style_class="muted",
        verbosity=VerbosityLevel.VERBOSE,
    )

    if not report.findings:
        descriptor.add_row(
            value="No components found in prod",
            section_type="text",
            style_class="warning",
            severity="info",
            icon="warning",
        )
        return descriptor

    for finding in report.findings:
        style_class, icon = _PRESENTATION[finding.kind]
        verbosity = VerbosityLevel.NORMAL
        if finding.kind is FindingKind.IN_SYNC and not show_in_sync:
            verbosity = VerbosityLevel.VERBOSE

        descriptor.add_row(
            label=finding.component,
            value=finding.message,
            section_type="text",
            style_class=style_class,
            severity=finding.severity,
            icon=icon,
            indent=1 if finding.is_env_var else 0,
            verbosity=verbosity,
        )

    return descriptor


def describe_components(environment: str, records: Sequence[ComponentRecord]) -> OutputDescriptor:
    """
    Describe the records found in one environment.

    Args:
        environment: Environment label
        records: Scanned records

    Returns:
        OutputDescriptor with one section per component
    """
    descriptor = OutputDescriptor(
        title=f"Components in {environment}",
        category="scan",
        quiet_summary=lambda recs: f"{len(recs)} component(s) in {environment}",
    )

    if not records:
        descriptor.add_row(
            value=f"No components found in {environment}",
            section_type="text",
            style_class="warning",
            severity="info",
            icon="warning",
        )
        return descriptor

    for record in records:
        section = record.component
        descriptor.add_row(
            label="Version",
            value=record.version,
            style_class="highlight",
            section_name=section,
        )
        descriptor.add_row(
            label="Environment variables",
            value=[f"{key} = {value}" for key, value in record.env_vars.items()],
            section_type="list",
            section_name=section,
            show_if_empty=False,
        )
        descriptor.add_row(
            label="Source",
            value=str(record.source) if record.source else None,
            style_class="muted",
            section_name=section,
            verbosity=VerbosityLevel.VERBOSE,
        )

    return descriptor
