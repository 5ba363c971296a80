"""Command-line interface for deploy-drift.

Scans the production and staging workload declarations below a repository
root and reports version and environment variable drift between them.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from .core.config_manager import VERBOSITY_LEVELS, ConfigManager
from .describe import describe_components, describe_report
from .drift import compare_environments
from .protocol import VerbosityLevel
from .renderers import BaseRenderer, CLIRenderer, JSONRenderer
from .scanner import ScanError, environment_root, scan_environment
from .utils.logger import setup_logger
from .utils.scan_stats import get_stats_tracker

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="deploy-drift",
    help="Compare production and staging deployment declarations",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

OUTPUT_FORMATS = ("cli", "json")


# ============================================================================
# Validation Functions
# ============================================================================


def validate_verbosity(value: str | None) -> str | None:
    """
    Validate verbosity level.

    Args:
        value: Verbosity level string (None means "use config")

    Returns:
        Validated verbosity level

    Raises:
        typer.BadParameter: If verbosity is invalid
    """
    if value is None:
        return None
    if value.lower() not in VERBOSITY_LEVELS:
        raise typer.BadParameter(
            f"Invalid verbosity: {value}. Must be one of: {', '.join(VERBOSITY_LEVELS)}"
        )
    return value.lower()


def validate_format(value: str) -> str:
    """
    Validate output format.

    Raises:
        typer.BadParameter: If format is unknown
    """
    if value.lower() not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"Unknown output format: {value}. Available formats: {', '.join(OUTPUT_FORMATS)}"
        )
    return value.lower()


# ============================================================================
# Helper Functions
# ============================================================================


def _load_config(config_file: Path | None) -> ConfigManager:
    """Load configuration files, falling back to defaults on failure."""
    config_manager = ConfigManager()
    try:
        config_manager.load_from_files(extra_paths=[config_file] if config_file else None)
    except Exception as e:
        logger.warning(f"Failed to load configuration: {e}")
    return config_manager


def _setup_logging(verbosity: str) -> VerbosityLevel:
    """Configure logging and debug statistics for a run."""
    level = VerbosityLevel[verbosity.upper()]
    setup_logger(level=level)

    stats_tracker = get_stats_tracker()
    stats_tracker.reset()
    if level == VerbosityLevel.DEBUG:
        stats_tracker.enable()
    else:
        stats_tracker.disable()

    return level


def _resolve_root(root: Path | None, config_manager: ConfigManager) -> Path:
    """
    Resolve the repository root from the argument or the configured default.

    Raises:
        typer.Exit: If neither is available
    """
    if root is None and config_manager.global_config.default_root:
        root = Path(config_manager.global_config.default_root)
        logger.info(f"Using default_root from configuration: {root}")

    if root is None:
        console.print(
            "[red]Error: Please provide the path to the repository root "
            "(the directory containing Terraform/Environments).[/red]"
        )
        raise typer.Exit(1)

    return root.expanduser()


def _create_renderer(output_format: str, verbosity: VerbosityLevel, color: bool) -> BaseRenderer:
    if output_format == "json":
        return JSONRenderer(verbosity=verbosity)
    return CLIRenderer(verbosity=verbosity, color=color)


def _print_debug_stats(level: VerbosityLevel) -> None:
    stats_tracker = get_stats_tracker()
    if level == VerbosityLevel.DEBUG and stats_tracker.is_enabled():
        # stderr, so it doesn't interfere with JSON output
        sys.stderr.write(stats_tracker.get_summary() + "\n")


# ============================================================================
# CLI Commands
# ============================================================================

RootArgument = Annotated[
    Path | None,
    typer.Argument(
        help="Repository root containing Terraform/Environments/{prod,stage}/workload",
        show_default=False,
    ),
]
VerbosityOption = Annotated[
    str | None,
    typer.Option(
        "--verbosity",
        "-v",
        help="Output verbosity: quiet, normal, verbose, debug",
        callback=validate_verbosity,
        show_default=False,
    ),
]
FormatOption = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format: cli, json", callback=validate_format),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
]


@app.command()
def check(
    root: RootArgument = None,
    verbosity: VerbosityOption = None,
    output_format: FormatOption = "cli",
    config_file: ConfigOption = None,
    include_stage_only: Annotated[
        bool,
        typer.Option(
            "--include-stage-only",
            help="Also report components that exist only in stage",
        ),
    ] = False,
    fail_on_drift: Annotated[
        bool,
        typer.Option(
            "--fail-on-drift",
            help="Exit with status 1 when version or component drift is found",
        ),
    ] = False,
    pause: Annotated[
        bool,
        typer.Option("--pause", help="Wait for a key press before exiting"),
    ] = False,
) -> None:
    """
    Compare prod and stage declarations below ROOT.

    Reports components missing in stage, version mismatches and environment
    variables declared on only one side.

    Examples:
        deploy-drift check ~/src/integration-services
        deploy-drift check . --format json --fail-on-drift
        deploy-drift check . --include-stage-only --verbosity verbose
    """
    config_manager = _load_config(config_file)
    global_config = config_manager.global_config
    scan_config = config_manager.scan_config
    report_config = config_manager.report_config

    level = _setup_logging(verbosity or global_config.verbosity)
    base = _resolve_root(root, config_manager)

    prod_root = environment_root(base, scan_config.prod_env, scan_config.layout)
    stage_root = environment_root(base, scan_config.stage_env, scan_config.layout)

    try:
        prod_records = scan_environment(
            prod_root, skip_hidden=scan_config.skip_hidden, label=scan_config.prod_env
        )
        stage_records = scan_environment(
            stage_root, skip_hidden=scan_config.skip_hidden, label=scan_config.stage_env
        )
    except ScanError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    report = compare_environments(
        prod_records,
        stage_records,
        include_stage_only=include_stage_only or report_config.include_stage_only,
    )

    renderer = _create_renderer(output_format, level, global_config.color)

    if output_format == "cli" and level != VerbosityLevel.QUIET:
        console.print(f"[bold blue]Comparing deployments in: {escape(str(base))}[/bold blue]")
        console.print(
            f"[dim]{len(prod_records)} {scan_config.prod_env} / "
            f"{len(stage_records)} {scan_config.stage_env} component(s)[/dim]"
        )

    renderer.render(describe_report(report, show_in_sync=report_config.show_in_sync), report, "drift")
    renderer.render_summary()

    _print_debug_stats(level)

    if pause:
        typer.pause("Press any key to exit.")

    if (fail_on_drift or global_config.fail_on_drift) and report.errors:
        raise typer.Exit(1)


@app.command()
def scan(
    root: RootArgument = None,
    env: Annotated[
        str | None,
        typer.Option("--env", "-e", help="Environment to scan (default: the prod environment)"),
    ] = None,
    verbosity: VerbosityOption = None,
    output_format: FormatOption = "cli",
    config_file: ConfigOption = None,
) -> None:
    """
    List the components declared for one environment.

    Example:
        deploy-drift scan . --env stage
    """
    config_manager = _load_config(config_file)
    global_config = config_manager.global_config
    scan_config = config_manager.scan_config

    level = _setup_logging(verbosity or global_config.verbosity)
    base = _resolve_root(root, config_manager)

    environment = env or scan_config.prod_env
    env_root = environment_root(base, environment, scan_config.layout)

    try:
        records = scan_environment(env_root, skip_hidden=scan_config.skip_hidden, label=environment)
    except ScanError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    renderer = _create_renderer(output_format, level, global_config.color)
    renderer.render(describe_components(environment, records), records, environment)
    if output_format == "json":
        renderer.render_summary()

    _print_debug_stats(level)


@app.command()
def create_config(
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output file path",
        ),
    ] = Path(".deploy-drift.toml"),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing file",
        ),
    ] = False,
) -> None:
    """
    Create a default configuration file.

    Example:
        deploy-drift create-config
        deploy-drift create-config --output ~/.config/deploy-drift/config.toml
    """
    if output.exists() and not force:
        console.print(f"[yellow]File already exists: {escape(str(output))}[/yellow]")
        console.print("Use --force to overwrite")
        raise typer.Exit(1)

    config_manager = ConfigManager()

    try:
        config_manager.create_default_config_file(output)
        console.print(f"[green]✓ Created configuration file: {escape(str(output))}[/green]")
    except OSError as e:
        console.print(f"[red]✗ Failed to create config: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    import importlib.metadata

    try:
        version = importlib.metadata.version("deploy-drift")
        console.print(f"deploy-drift version {version}")
    except importlib.metadata.PackageNotFoundError:
        console.print("deploy-drift (version unknown)")


# ============================================================================
# Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
