"""Tests for the command-line interface."""

import json
import textwrap

import pytest
from click.testing import CliRunner

from suiterunner.cli import main

PASSING = textwrap.dedent(
    """
    import suiterunner as sr
    from suiterunner import Assert


    @sr.test_class(category="BishopMoves")
    class BishopMoves:
        @sr.test_method
        @sr.test_case(27, 13, name="center")
        def move_count(self, square, expected):
            Assert.are_equal(13, expected)
    """
)

FAILING = textwrap.dedent(
    """
    import suiterunner as sr
    from suiterunner import Assert


    @sr.test_class(category="OpeningBook")
    class OpeningBook:
        @sr.test_method
        def first_move(self):
            Assert.are_equal("e4", "d4", "book order")
    """
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "passing_suite.py").write_text(PASSING)
    (tmp_path / "failing_suite.py").write_text(FAILING)
    return tmp_path


class TestRunCommand:
    """Tests for the run command."""

    def test_passing_run_exits_zero(self, workdir):
        """Test a fully passing run exits 0 and writes the report."""
        result = CliRunner().invoke(main, ["run", "passing_suite.py"])

        assert result.exit_code == 0, result.output
        assert "BishopMoves.move_count[center]" in result.output
        assert "Report saved" in result.output
        reports = list((workdir / "reports").glob("test_results_*.txt"))
        assert len(reports) == 1
        assert "[PASS] BishopMoves.move_count[center]" in reports[0].read_text(encoding="utf-8")

    def test_failing_run_exits_one(self, workdir):
        result = CliRunner().invoke(main, ["run", "failing_suite.py", "--no-report"])

        assert result.exit_code == 1
        assert "book order" in result.output
        assert not (workdir / "reports").exists()

    def test_multiple_targets_and_category(self, workdir):
        """Test the category option filters across every target."""
        result = CliRunner().invoke(
            main,
            ["run", "passing_suite.py", "failing_suite.py", "-k", "BishopMoves", "--no-report"],
        )

        assert result.exit_code == 0, result.output
        assert "OpeningBook.first_move" not in result.output

    def test_missing_target(self, workdir):
        """Test a target that cannot be loaded is reported and fails the run."""
        result = CliRunner().invoke(main, ["run", "missing_suite.py", "--no-report"])

        assert result.exit_code == 1
        assert "Error loading tests" in result.output

    def test_bracketed_labels_in_progress(self, workdir):
        """Test case labels print literally and never break the run."""
        (workdir / "path_suite.py").write_text(
            textwrap.dedent(
                """
                import suiterunner as sr


                @sr.test_class()
                class PathSuite:
                    @sr.test_method
                    @sr.test_case("/tmp/x")
                    def opens(self, path):
                        pass

                    @sr.test_method
                    @sr.test_case(1, name="center")
                    def labelled(self, n):
                        pass
                """
            )
        )

        result = CliRunner().invoke(main, ["run", "path_suite.py", "--no-report", "--no-color"])

        assert result.exit_code == 0, result.output
        assert "PathSuite.opens[/tmp/x]" in result.output
        assert "PathSuite.labelled[center]" in result.output

    def test_requires_target(self, workdir):
        result = CliRunner().invoke(main, ["run"])
        assert result.exit_code == 2

    def test_config_file_option(self, workdir):
        """Test report settings come from the given config file."""
        (workdir / "custom.json").write_text(
            json.dumps({"report": {"output_dir": "out", "file_prefix": "chess"}})
        )

        result = CliRunner().invoke(main, ["--config", "custom.json", "run", "passing_suite.py"])

        assert result.exit_code == 0, result.output
        assert len(list((workdir / "out").glob("chess_*.txt"))) == 1

    def test_invalid_config(self, workdir):
        (workdir / "bad.json").write_text(json.dumps({"log_level": "chatty"}))

        result = CliRunner().invoke(main, ["-c", "bad.json", "run", "passing_suite.py"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestInteractiveCommand:
    """Tests for the interactive command."""

    def test_runs_until_empty_line(self, workdir):
        """Test each entered location is run and reported."""
        result = CliRunner().invoke(
            main,
            ["interactive"],
            input="passing_suite.py\nfailing_suite.py\n\n",
        )

        assert result.exit_code == 0, result.output
        assert "BishopMoves.move_count[center]" in result.output
        assert "OpeningBook.first_move" in result.output
        assert "Categories" in result.output
        assert len(list((workdir / "reports").glob("*.txt"))) >= 1

    def test_bad_location_continues(self, workdir):
        result = CliRunner().invoke(main, ["interactive"], input="nowhere.py\n\n")

        assert result.exit_code == 0
        assert "Error loading tests" in result.output


class TestInitCommand:
    """Tests for the init command."""

    def test_creates_config(self, workdir):
        result = CliRunner().invoke(main, ["init"])

        assert result.exit_code == 0
        assert json.loads((workdir / "suiterunner.json").read_text())["log_level"] == "INFO"

    def test_refuses_to_overwrite(self, workdir):
        """Test an existing file is kept unless --force is given."""
        (workdir / "suiterunner.json").write_text("{}")

        refused = CliRunner().invoke(main, ["init"])
        forced = CliRunner().invoke(main, ["init", "--force"])

        assert refused.exit_code == 1
        assert forced.exit_code == 0
        assert json.loads((workdir / "suiterunner.json").read_text())["report"]
