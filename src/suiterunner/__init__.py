"""
SuiteRunner - a small marker-driven test execution framework.

This package provides tools to:
- Declare suites, tests, parameter cases and lifecycle hooks with decorators
- Run them in a fixed lifecycle order, awaiting async tests
- Share data between tests through a run-scoped context
- Print and save a grouped, timed report
"""

__version__ = "0.1.0"
__author__ = "SuiteRunner Team"

from suiterunner.assertions import Assert
from suiterunner.context import SharedContext, SharedContextManager
from suiterunner.exceptions import AssertionFailure, DiscoveryError, SuiteRunnerError, SuiteSetupError
from suiterunner.markers import (
    after_all,
    after_each,
    before_all,
    before_each,
    shared_context,
    skip,
    test_case,
    test_class,
    test_method,
)
from suiterunner.models import LifecycleRole, ParameterSet, ResultStatus, TestResult

__all__ = [
    "Assert",
    "AssertionFailure",
    "DiscoveryError",
    "LifecycleRole",
    "ParameterSet",
    "ResultStatus",
    "SharedContext",
    "SharedContextManager",
    "SuiteRunnerError",
    "SuiteSetupError",
    "TestResult",
    "after_all",
    "after_each",
    "before_all",
    "before_each",
    "shared_context",
    "skip",
    "test_case",
    "test_class",
    "test_method",
]
