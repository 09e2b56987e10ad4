"""Tests for report rendering."""

import io
from datetime import datetime, timedelta

import pytest
from rich.console import Console

from suiterunner.config import ReportConfig, SuiteRunnerConfig
from suiterunner.models import TestResult
from suiterunner.report.generator import ReportGenerator, format_duration, group_results

START = datetime(2026, 10, 19, 14, 3, 5)


def make_result(name, passed=True, category="", priority=0, ms=10, error="", critical=False):
    return TestResult(
        name=name,
        passed=passed,
        start_time=START,
        end_time=START + timedelta(milliseconds=ms),
        error_message=error,
        category=category,
        priority=priority,
        critical=critical,
    )


@pytest.fixture
def results():
    return [
        make_result("Bishop.center", category="BishopMoves", priority=1),
        make_result(
            "Bishop.corner",
            passed=False,
            category="BishopMoves",
            priority=1,
            error="Assert.are_equal failed: Expected 7, Actual 6\nsecond line",
        ),
        make_result("Misc.loose", category="  "),
    ]


class TestGroupResults:
    """Tests for group_results."""

    def test_groups_sorted_and_failed_first(self):
        """Test blank categories are grouped as Uncategorized and failures lead."""
        grouped = group_results(
            [
                make_result("a1", category="A"),
                make_result("u", passed=False, category=""),
                make_result("a2", passed=False, category="A"),
            ]
        )

        assert [g.category for g in grouped] == ["A", "Uncategorized"]
        assert [r.name for r in grouped[0].results] == ["a2", "a1"]

    def test_priority_then_name(self):
        """Test descending priority, then case-insensitive name."""
        grouped = group_results(
            [
                make_result("beta", priority=1),
                make_result("Alpha", priority=1),
                make_result("gamma", priority=5),
            ]
        )

        assert [r.name for r in grouped[0].results] == ["gamma", "Alpha", "beta"]

    def test_group_summary(self, results):
        """Test per-category subtotals."""
        bishop = group_results(results)[0]

        assert bishop.category == "BishopMoves"
        assert bishop.summary.total == 2
        assert bishop.summary.failed == 1
        assert bishop.summary.duration == timedelta(milliseconds=20)

    def test_empty(self):
        assert group_results([]) == []


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        "duration,expected",
        [
            (timedelta(0), "0ms"),
            (timedelta(milliseconds=12), "12ms"),
            (timedelta(milliseconds=1500), "1.50s"),
            (timedelta(minutes=2, seconds=3, milliseconds=500), "02:03.500"),
            (timedelta(hours=1, minutes=1, seconds=1, milliseconds=250), "01:01:01.250"),
        ],
    )
    def test_format(self, duration, expected):
        assert format_duration(duration) == expected


class TestReportGenerator:
    """Tests for ReportGenerator."""

    def test_render_text_has_no_markup(self, results):
        """Test the plain rendering keeps content but drops styling."""
        text = ReportGenerator().render_text(results)

        assert "[green]" not in text
        assert "[/red]" not in text
        assert "=== TEST RUN SUMMARY ===" in text
        assert "Total: 3" in text
        assert "Passed: 2" in text
        assert "Failed: 1" in text
        assert "Category: BishopMoves" in text
        assert "Category: Uncategorized" in text

    def test_result_lines(self, results):
        """Test status, name, priority, duration and timestamps are rendered."""
        text = ReportGenerator().render_text(results)

        assert "[FAIL] Bishop.corner  (P1)  10ms  14:03:05-14:03:05" in text
        assert "[PASS] Bishop.center  (P1)" in text

    def test_error_indented_beneath(self, results):
        """Test every line of a failure message is indented under its result."""
        lines = ReportGenerator().render_text(results).splitlines()
        index = next(i for i, line in enumerate(lines) if "Bishop.corner" in line)

        assert lines[index + 1] == "      Assert.are_equal failed: Expected 7, Actual 6"
        assert lines[index + 2] == "      second line"

    def test_failed_listed_before_passed(self, results):
        text = ReportGenerator().render_text(results)
        assert text.index("Bishop.corner") < text.index("Bishop.center")

    def test_brackets_in_names_survive(self):
        """Test parameter labels are not eaten as markup."""
        text = ReportGenerator().render_text([make_result("Bishop.moves[center]")])
        assert "Bishop.moves[center]" in text

    def test_critical_flag(self):
        text = ReportGenerator().render_text([make_result("King.safe", critical=True)])
        assert "(P0) critical" in text

    def test_description_on_result_line(self):
        """Test the test description follows the timestamps."""
        result = TestResult(
            name="Bishop.center",
            passed=True,
            start_time=START,
            end_time=START,
            description="Bishop in the center has [13] moves",
        )

        text = ReportGenerator().render_text([result])

        assert "14:03:05-14:03:05  Bishop in the center has [13] moves" in text

    def test_skipped_section(self, results):
        text = ReportGenerator().render_text(results, [("Bishop.pinned", "engine not ready")])

        assert "Skipped: 1" in text
        assert "[SKIP] Bishop.pinned - engine not ready" in text

    def test_no_results(self):
        assert ReportGenerator().render_text([]).strip() == "No test results."

    def test_custom_title(self, results):
        config = SuiteRunnerConfig(report=ReportConfig(title="Chess Engine"))
        assert "=== Chess Engine ===" in ReportGenerator(config).render_text(results)

    def test_write_file(self, tmp_path, results):
        """Test the artifact name follows the timestamp pattern."""
        generator = ReportGenerator(base_dir=tmp_path)

        path = generator.write(results, timestamp=datetime(2026, 10, 19, 9, 5, 7))

        assert path == tmp_path / "reports" / "test_results_20261019_090507.txt"
        content = path.read_text(encoding="utf-8")
        assert content == generator.render_text(results)
        assert "[red]" not in content

    def test_print_to_console(self, results):
        """Test the console rendering carries the same content."""
        buffer = io.StringIO()
        console = Console(file=buffer, color_system=None, width=200)

        ReportGenerator().print(results, console=console)

        output = buffer.getvalue()
        assert "[FAIL] Bishop.corner" in output
        assert "Category: BishopMoves" in output

    def test_generate_without_file(self, tmp_path, results):
        config = SuiteRunnerConfig(report=ReportConfig(write_file=False))
        console = Console(file=io.StringIO(), color_system=None)

        path = ReportGenerator(config, base_dir=tmp_path).generate(results, console=console)

        assert path is None
        assert not (tmp_path / "reports").exists()
