"""Data models for discovered suites and test results."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

UNCATEGORIZED = "Uncategorized"


class ResultStatus(str, Enum):
    """Status of a test execution."""

    PASSED = "passed"
    FAILED = "failed"


class LifecycleRole(str, Enum):
    """When a lifecycle hook runs."""

    SUITE_SETUP = "before_all"
    SUITE_TEARDOWN = "after_all"
    PER_TEST_SETUP = "before_each"
    PER_TEST_TEARDOWN = "after_each"


def normalize_category(category: Optional[str]) -> str:
    """Return the trimmed category, or ``Uncategorized`` when blank."""
    if category is None or not category.strip():
        return UNCATEGORIZED
    return category.strip()


@dataclass(frozen=True)
class ParameterSet:
    """One set of literal arguments for a parameterized test."""

    args: tuple[Any, ...] = ()
    name: Optional[str] = None

    @property
    def label(self) -> str:
        """Display label: the explicit name, else the joined arguments."""
        if self.name:
            return self.name
        return ",".join(str(a) for a in self.args)


@dataclass(frozen=True)
class SharedContextRequirement:
    """A suite's request to have a shared context injected."""

    context_type: type
    attribute: str = "context"
    dispose: bool = True


@dataclass(frozen=True)
class TestDescriptor:
    """One declared test method within a suite."""

    __test__ = False

    name: str
    suite_name: str
    priority: int = 0
    cases: tuple[ParameterSet, ...] = ()
    is_async: bool = False
    skip: bool = False
    skip_reason: str = ""
    description: str = ""
    critical: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.suite_name}.{self.name}"

    def display_name(self, case: Optional[ParameterSet] = None) -> str:
        """Name of one execution: ``Suite.method`` or ``Suite.method[label]``."""
        if case is None:
            return self.full_name
        return f"{self.full_name}[{case.label}]"

    def expand(self) -> list[Optional[ParameterSet]]:
        """Cases to execute in order; ``[None]`` for a plain test."""
        if not self.cases:
            return [None]
        return list(self.cases)


@dataclass(frozen=True)
class SuiteDescriptor:
    """A declared test suite and everything discovery found on it."""

    name: str
    suite_class: type
    category: str = ""
    priority: int = 0
    declared_tests: tuple[TestDescriptor, ...] = ()
    hooks: dict[LifecycleRole, tuple[str, ...]] = field(default_factory=dict)
    context: Optional[SharedContextRequirement] = None

    @property
    def tests(self) -> tuple[TestDescriptor, ...]:
        """Tests to execute, in declaration order. Skipped tests are excluded."""
        return tuple(t for t in self.declared_tests if not t.skip)

    @property
    def skipped(self) -> tuple[tuple[str, str], ...]:
        """``(full_name, reason)`` for each test carrying a skip marker."""
        return tuple((t.full_name, t.skip_reason) for t in self.declared_tests if t.skip)

    def hooks_for(self, role: LifecycleRole) -> tuple[str, ...]:
        return self.hooks.get(role, ())

    @property
    def case_count(self) -> int:
        """Number of executions after parameter expansion."""
        return sum(len(t.expand()) for t in self.tests)


@dataclass(frozen=True)
class TestResult:
    """Outcome of one test execution (or one expanded parameter case)."""

    __test__ = False

    name: str
    passed: bool
    start_time: datetime
    end_time: datetime
    error_message: str = ""
    category: str = ""
    priority: int = 0
    suite: str = ""
    critical: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        if self.end_time < self.start_time:
            object.__setattr__(self, "end_time", self.start_time)

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def duration_ms(self) -> int:
        return int(self.duration.total_seconds() * 1000)

    @property
    def status(self) -> ResultStatus:
        return ResultStatus.PASSED if self.passed else ResultStatus.FAILED

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "passed": self.passed,
            "error_message": self.error_message,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration_ms": self.duration_ms,
            "category": self.category,
            "priority": self.priority,
            "suite": self.suite,
            "critical": self.critical,
            "description": self.description,
        }


@dataclass
class RunSummary:
    """Aggregate statistics for a run or a category."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration: timedelta = field(default_factory=timedelta)

    @property
    def pass_rate(self) -> float:
        """Percentage of executed tests that passed."""
        if self.total == 0:
            return 0.0
        return self.passed / self.total * 100

    @classmethod
    def from_results(cls, results: list[TestResult], skipped: int = 0) -> "RunSummary":
        passed = sum(1 for r in results if r.passed)
        return cls(
            total=len(results),
            passed=passed,
            failed=len(results) - passed,
            skipped=skipped,
            duration=sum((r.duration for r in results), timedelta()),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "duration_ms": int(self.duration.total_seconds() * 1000),
            "pass_rate": self.pass_rate,
        }


@dataclass
class CategoryGroup:
    """Results of one category, sorted for display."""

    category: str
    results: list[TestResult] = field(default_factory=list)

    @property
    def summary(self) -> RunSummary:
        return RunSummary.from_results(self.results)
