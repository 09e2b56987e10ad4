"""Command-line interface for SuiteRunner."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from suiterunner import __version__
from suiterunner.config import SuiteRunnerConfig, create_example_config
from suiterunner.core.runner import TestRunner
from suiterunner.exceptions import DiscoveryError
from suiterunner.models import TestResult
from suiterunner.report.generator import ReportGenerator, group_results


console = Console()


def print_banner() -> None:
    """Print the SuiteRunner banner."""
    console.print(
        Panel.fit(
            "[bold blue]SuiteRunner[/bold blue] - marker-driven test runner",
            subtitle=f"v{__version__}",
        )
    )


def configure_logging(level: str) -> None:
    """Send the package's log records to stderr through rich."""
    logger = logging.getLogger("suiterunner")
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates across invocations
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)


def _load_config(ctx: click.Context) -> SuiteRunnerConfig:
    config_path = ctx.obj.get("config_path")
    try:
        config = SuiteRunnerConfig.load_or_default(config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)

    if ctx.obj.get("verbose"):
        config.log_level = "DEBUG"
    configure_logging(config.log_level)
    return config


def _print_progress(result: TestResult) -> None:
    if result.passed:
        console.print(f"  [green]✓[/green] {escape(result.name)}", highlight=False)
    else:
        console.print(f"  [red]✗[/red] {escape(result.name)}", highlight=False)


@click.group()
@click.version_option(version=__version__, prog_name="suiterunner")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: suiterunner.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """SuiteRunner - run marker-declared test suites and report the results.

    Discovers suites declared with @test_class, runs their lifecycle hooks
    and tests in order, and writes a grouped, timed report.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="suiterunner.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new SuiteRunner configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(
            f"[yellow]Configuration file already exists:[/yellow] {output_path}"
        )
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument("targets", nargs=-1, required=True)
@click.option(
    "--category",
    "-k",
    "categories",
    multiple=True,
    help="Only run suites in this category (repeatable)",
)
@click.option(
    "--report/--no-report",
    default=True,
    help="Write the text report file after the run",
)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def run(
    ctx: click.Context,
    targets: tuple[str, ...],
    categories: tuple[str, ...],
    report: bool,
    no_color: bool,
) -> None:
    """Run the suites in TARGETS (files or dotted module names)."""
    print_banner()
    config = _load_config(ctx)

    if categories:
        config.run.categories = list(categories)
    if not report:
        config.report.write_file = False
    if no_color:
        config.report.color = False
        console.no_color = True

    runner = TestRunner(config=config, on_result=_print_progress)
    results: list[TestResult] = []
    skipped: list[tuple[str, str]] = []
    load_errors = 0

    for target in targets:
        console.print(f"\n[bold]Running[/bold] {escape(target)}")
        try:
            results.extend(runner.run(target))
            skipped.extend(runner.skipped)
        except DiscoveryError as e:
            load_errors += 1
            console.print(f"[red]Error loading tests:[/red] {escape(str(e))}")

    console.print()
    report_path = _report(config, results, skipped)
    if report_path is not None:
        console.print(f"[green]Report saved:[/green] {report_path}")

    if load_errors or any(not r.passed for r in results):
        sys.exit(1)


@main.command()
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def interactive(ctx: click.Context, no_color: bool) -> None:
    """Read module locations from stdin and run each until an empty line."""
    print_banner()
    config = _load_config(ctx)
    if no_color:
        config.report.color = False
        console.no_color = True

    runner = TestRunner(config=config, on_result=_print_progress)

    while True:
        location = click.prompt(
            "Module location (empty line to exit)",
            default="",
            show_default=False,
            prompt_suffix=": ",
        ).strip()
        if not location:
            break

        try:
            results = runner.run(location)
        except DiscoveryError as e:
            console.print(f"[red]Error loading tests:[/red] {escape(str(e))}")
            continue

        console.print()
        report_path = _report(config, results, runner.skipped)
        if report_path is not None:
            console.print(f"[green]Report saved:[/green] {report_path}")
        _display_category_totals(results)


def _report(
    config: SuiteRunnerConfig,
    results: list[TestResult],
    skipped: list[tuple[str, str]],
) -> Optional[Path]:
    generator = ReportGenerator(config, Path.cwd())
    try:
        return generator.generate(results, skipped)
    except OSError as e:
        console.print(f"[red]Error writing report:[/red] {e}")
        return None


def _display_category_totals(results: list[TestResult]) -> None:
    """Display a per-category count table."""
    groups = group_results(results)
    if not groups:
        return

    table = Table(title="Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Tests", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")

    for group in groups:
        stats = group.summary
        table.add_row(group.category, str(stats.total), str(stats.passed), str(stats.failed))

    console.print(table)


if __name__ == "__main__":
    main()
