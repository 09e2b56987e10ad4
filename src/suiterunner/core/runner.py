"""Test run orchestration."""

import asyncio
import logging
from pathlib import Path
from types import ModuleType
from typing import Iterable, Optional

from suiterunner.config import SuiteRunnerConfig
from suiterunner.context import SharedContextManager, default_manager
from suiterunner.core.discovery import SuiteDiscovery, load_module
from suiterunner.core.executor import ResultCallback, SuiteExecutor
from suiterunner.models import SuiteDescriptor, TestResult

logger = logging.getLogger(__name__)


class TestRunner:
    """Discovers suites and runs them one after another."""

    __test__ = False

    def __init__(
        self,
        config: Optional[SuiteRunnerConfig] = None,
        context_manager: Optional[SharedContextManager] = None,
        on_result: Optional[ResultCallback] = None,
    ):
        """Initialize the test runner.

        Args:
            config: Runner configuration; defaults apply when omitted
            context_manager: Shared context owner for the run. Defaults to the
                process-wide manager used by ``SharedContext.create()``.
            on_result: Called with every result as it is recorded
        """
        self.config = config or SuiteRunnerConfig()
        self.context_manager = context_manager or default_manager
        self.on_result = on_result
        self.discovery = SuiteDiscovery(categories=self.config.run.categories)

        self.results: list[TestResult] = []
        self.skipped: list[tuple[str, str]] = []

    def run(self, target: str | Path | ModuleType) -> list[TestResult]:
        """Run every suite in a module, file path or dotted module name."""
        module = target if isinstance(target, ModuleType) else load_module(target)
        return self.run_module(module)

    def run_module(self, module: ModuleType) -> list[TestResult]:
        """Run all suites declared in ``module``."""
        discovered = self.discovery.discover(module)
        return self.run_descriptors(discovered.suites)

    def run_suites(self, classes: Iterable[type]) -> list[TestResult]:
        """Run the given suite classes in order."""
        return self.run_descriptors(self.discovery.discover_classes(classes))

    def run_descriptors(self, suites: Iterable[SuiteDescriptor]) -> list[TestResult]:
        """Run already discovered suites and return the ordered results."""
        self.results = []
        self.skipped = []
        suites = list(suites)

        logger.info("Starting run with %d suites", len(suites))
        with asyncio.Runner() as aio:
            for suite in suites:
                self.skipped.extend(suite.skipped)
                executor = SuiteExecutor(
                    suite,
                    aio=aio,
                    context_manager=self.context_manager,
                    on_result=self.on_result,
                )
                self.results.extend(executor.run())

        failed = sum(1 for r in self.results if not r.passed)
        logger.info(
            "Run finished: %d results, %d failed, %d skipped",
            len(self.results),
            failed,
            len(self.skipped),
        )
        return list(self.results)
