"""Report generation using Jinja2 templates."""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from suiterunner.config import SuiteRunnerConfig
from suiterunner.models import CategoryGroup, RunSummary, TestResult, normalize_category

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def sort_key(result: TestResult) -> tuple:
    """Failed before passed, then higher priority, then name."""
    return (result.passed, -result.priority, result.name.casefold())


def group_results(results: Iterable[TestResult]) -> list[CategoryGroup]:
    """Group results by normalized category, sorted for display."""
    groups: dict[str, CategoryGroup] = {}
    for result in results:
        category = normalize_category(result.category)
        groups.setdefault(category, CategoryGroup(category=category)).results.append(result)

    ordered = sorted(groups.values(), key=lambda g: g.category.casefold())
    for group in ordered:
        group.results.sort(key=sort_key)
    return ordered


class ReportGenerator:
    """Renders the grouped run report for the console and as a text file."""

    def __init__(self, config: Optional[SuiteRunnerConfig] = None, base_dir: Optional[Path] = None):
        """Initialize the report generator.

        Args:
            config: SuiteRunner configuration
            base_dir: Directory the report output path is relative to
        """
        self.config = config or SuiteRunnerConfig()
        self.base_dir = base_dir or Path.cwd()

        template_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self.env.filters["duration_format"] = format_duration
        self.env.filters["time_format"] = self._format_time
        self.env.filters["percentage"] = self._format_percentage
        self.env.filters["status_marker"] = self._status_marker
        self.env.filters["esc"] = escape

    def render_markup(
        self,
        results: list[TestResult],
        skipped: Optional[list[tuple[str, str]]] = None,
    ) -> str:
        """Render the report as rich console markup."""
        skipped = skipped or []
        title = self.config.report.title
        template = self.env.get_template("report.txt.j2")
        return template.render(
            title=title,
            rule="=" * max(10, len(title) + 8),
            summary=RunSummary.from_results(results, skipped=len(skipped)),
            groups=group_results(results),
            skipped=skipped,
        )

    def render_text(
        self,
        results: list[TestResult],
        skipped: Optional[list[tuple[str, str]]] = None,
    ) -> str:
        """Render the report as plain text without styling."""
        return Text.from_markup(self.render_markup(results, skipped)).plain

    def print(
        self,
        results: list[TestResult],
        skipped: Optional[list[tuple[str, str]]] = None,
        console: Optional[Console] = None,
    ) -> None:
        """Print the report, colorized when the console supports it."""
        console = console or self._make_console()
        console.print(self.render_markup(results, skipped), highlight=False, soft_wrap=True, end="")

    def write(
        self,
        results: list[TestResult],
        skipped: Optional[list[tuple[str, str]]] = None,
        timestamp: Optional[datetime] = None,
    ) -> Path:
        """Write the plain-text report to ``<prefix>_<yyyyMMdd_HHmmss>.txt``.

        Returns:
            Path to the generated report file
        """
        timestamp = timestamp or datetime.now()
        output_dir = self.config.get_report_dir(self.base_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        filename = f"{self.config.report.file_prefix}_{timestamp.strftime(TIMESTAMP_FORMAT)}.txt"
        report_path = output_dir / filename
        report_path.write_text(self.render_text(results, skipped), encoding="utf-8")

        logger.info("Report written to %s", report_path)
        return report_path

    def generate(
        self,
        results: list[TestResult],
        skipped: Optional[list[tuple[str, str]]] = None,
        console: Optional[Console] = None,
    ) -> Optional[Path]:
        """Print the report and persist it when configured to."""
        self.print(results, skipped, console=console)
        if not self.config.report.write_file:
            return None
        return self.write(results, skipped)

    def _make_console(self) -> Console:
        color = self.config.report.color
        if color is None:
            return Console()
        if color:
            return Console(force_terminal=True)
        return Console(color_system=None)

    @staticmethod
    def _format_time(dt: datetime) -> str:
        return dt.strftime("%H:%M:%S")

    @staticmethod
    def _format_percentage(value: float) -> str:
        """Format a percentage value."""
        return f"{value:.1f}%"

    @staticmethod
    def _status_marker(result: TestResult) -> str:
        if result.passed:
            return "[green]\\[PASS][/green]"
        return "[red]\\[FAIL][/red]"


def format_duration(duration: timedelta) -> str:
    """Format a duration as ``12ms``, ``1.23s``, ``MM:SS.mmm`` or ``HH:MM:SS.mmm``."""
    total_ms = duration.total_seconds() * 1000
    if total_ms < 1000:
        return f"{total_ms:.0f}ms"
    if total_ms < 60_000:
        return f"{total_ms / 1000:.2f}s"

    whole_ms = duration // timedelta(milliseconds=1)
    hours, rem = divmod(whole_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    seconds, millis = divmod(rem, 1000)
    if hours == 0:
        return f"{minutes:02d}:{seconds:02d}.{millis:03d}"
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"
