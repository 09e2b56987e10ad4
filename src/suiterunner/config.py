"""Configuration management for SuiteRunner."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

CONFIG_NAMES = ["suiterunner.json", ".suiterunner.json"]


class RunConfig(BaseModel):
    """Test selection configuration."""

    categories: list[str] = Field(
        default_factory=list,
        description="Only run suites in these categories (empty runs everything)",
    )


class ReportConfig(BaseModel):
    """Report generation configuration."""

    output_dir: str = Field(default="./reports", description="Directory for report output")
    file_prefix: str = Field(default="test_results", description="Report filename prefix")
    write_file: bool = Field(default=True, description="Persist the plain-text report")
    color: Optional[bool] = Field(
        default=None, description="Colorize console output (None detects the terminal)"
    )
    title: str = Field(default="TEST RUN SUMMARY", description="Report heading")

    @field_validator("file_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Report file prefix cannot be empty")
        if any(sep in v for sep in ("/", "\\")):
            raise ValueError("Report file prefix cannot contain path separators")
        return v


class SuiteRunnerConfig(BaseModel):
    """Main configuration for SuiteRunner."""

    run: RunConfig = Field(default_factory=RunConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    log_level: str = Field(default="WARNING", description="Logging level for the runner")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_file(cls, path: Path | str) -> "SuiteRunnerConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "SuiteRunnerConfig":
        """Find and load configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        current = start_dir.resolve()
        while True:
            for name in CONFIG_NAMES:
                config_path = current / name
                if config_path.exists():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Create suiterunner.json or run 'suiterunner init'"
        )

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> "SuiteRunnerConfig":
        """Load ``path`` if given, else search for a config file, else use defaults."""
        if path:
            return cls.from_file(path)
        try:
            return cls.find_and_load()
        except FileNotFoundError:
            return cls()

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)

    def get_report_dir(self, base_dir: Path | str | None = None) -> Path:
        """Absolute directory the report artifact is written to."""
        if base_dir is None:
            base_dir = Path.cwd()
        else:
            base_dir = Path(base_dir)

        return (base_dir / self.report.output_dir).resolve()


def get_default_config() -> SuiteRunnerConfig:
    """Return a default configuration."""
    return SuiteRunnerConfig(
        run=RunConfig(categories=[]),
        report=ReportConfig(output_dir="./reports", file_prefix="test_results"),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.log_level = "INFO"
    config.to_file(output_path)
    return output_path
