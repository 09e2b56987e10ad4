"""Core test execution functionality."""

from suiterunner.core.runner import TestRunner
from suiterunner.core.discovery import SuiteDiscovery, load_module
from suiterunner.core.executor import SuiteExecutor

__all__ = ["TestRunner", "SuiteDiscovery", "SuiteExecutor", "load_module"]
