"""Suite executor.

Runs one suite: instantiates it, fires its lifecycle hooks in order, expands
parameter cases, awaits async bodies and classifies every outcome into a
:class:`TestResult`. Nothing raised by user code escapes :meth:`SuiteExecutor.run`.
"""

import asyncio
import inspect
import logging
from datetime import datetime
from typing import Any, Callable, Optional

from suiterunner.context import SharedContext, SharedContextManager
from suiterunner.exceptions import AssertionFailure, DiscoveryError, SuiteSetupError
from suiterunner.models import (
    LifecycleRole,
    ParameterSet,
    SuiteDescriptor,
    TestDescriptor,
    TestResult,
)

logger = logging.getLogger(__name__)

SUITE_TEARDOWN_NAME = "<suite teardown>"

# A body that raises CancelledError itself fails its case; it never stops the run.
RECOVERABLE_ERRORS = (Exception, asyncio.CancelledError)

ResultCallback = Callable[[TestResult], None]


def find_assertion_failure(error: BaseException) -> Optional[AssertionFailure]:
    """Return the AssertionFailure in ``error``'s explicit cause chain, if any.

    Wrappers raised with ``raise ... from failure`` still count as an
    expectation failure.
    """
    seen: set[int] = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        if isinstance(current, AssertionFailure):
            return current
        seen.add(id(current))
        current = current.__cause__
    return None


def classify_error(error: BaseException) -> str:
    """Turn an exception raised by a test into its report message."""
    failure = find_assertion_failure(error)
    if failure is not None:
        return failure.message
    return f"Test failed with exception: {type(error).__name__}: {error}"


class SuiteExecutor:
    """Executes a single suite against one shared instance."""

    def __init__(
        self,
        suite: SuiteDescriptor,
        aio: asyncio.Runner,
        context_manager: SharedContextManager,
        on_result: Optional[ResultCallback] = None,
    ):
        """Initialize suite executor.

        Args:
            suite: Descriptor built by discovery
            aio: Event loop runner used to await async hooks and bodies
            context_manager: Source of the shared context for this run
            on_result: Called with each result as soon as it is recorded
        """
        self.suite = suite
        self.aio = aio
        self.context_manager = context_manager
        self.on_result = on_result

        self._instance: Any = None
        self._context: Any = None
        self._results: list[TestResult] = []

    def run(self) -> list[TestResult]:
        """Run the suite and return its results in execution order."""
        logger.info("Running suite %s (%d cases)", self.suite.name, self.suite.case_count)
        self._results = []

        try:
            self._set_up_suite()
        except SuiteSetupError as e:
            logger.warning("Suite %s setup failed: %s", self.suite.name, e)
            self._fail_all(f"Suite setup failed: {e}")
        else:
            for test in self.suite.tests:
                for case in test.expand():
                    self._record(self._execute_case(test, case))

        self._tear_down_suite()
        return self._results

    def _set_up_suite(self) -> None:
        try:
            self._instance = self.suite.suite_class()
            self._inject_context()
            self._run_hooks(LifecycleRole.SUITE_SETUP)
        except RECOVERABLE_ERRORS as e:
            raise SuiteSetupError(self.suite.name, e) from e

    def _inject_context(self) -> None:
        requirement = self.suite.context
        if requirement is None:
            return

        if requirement.context_type is SharedContext:
            self._context = self.context_manager.create()
        else:
            self._context = requirement.context_type()
            self._context.initialize()
        setattr(self._instance, requirement.attribute, self._context)

    def _tear_down_suite(self) -> None:
        start = datetime.now()
        errors: list[str] = []

        if self._instance is not None:
            for name in self.suite.hooks_for(LifecycleRole.SUITE_TEARDOWN):
                try:
                    self._call(name)
                except RECOVERABLE_ERRORS as e:
                    logger.warning("after_all hook %s.%s failed: %s", self.suite.name, name, e)
                    errors.append(f"{name}: {classify_error(e)}")

        requirement = self.suite.context
        if requirement is not None and requirement.dispose and self._context is not None:
            try:
                self._context.dispose()
            except RECOVERABLE_ERRORS as e:
                logger.warning("Disposing context for %s failed: %s", self.suite.name, e)
                errors.append(f"context dispose: {classify_error(e)}")

        if errors:
            self._record(
                self._make_result(
                    f"{self.suite.name}.{SUITE_TEARDOWN_NAME}",
                    start,
                    error_message="Suite teardown failed:\n" + "\n".join(errors),
                    priority=self.suite.priority,
                )
            )

    def _execute_case(self, test: TestDescriptor, case: Optional[ParameterSet]) -> TestResult:
        name = test.display_name(case)
        start = datetime.now()
        error_message = ""

        try:
            self._run_hooks(LifecycleRole.PER_TEST_SETUP)
            self._invoke_test(test, case)
        except RECOVERABLE_ERRORS as e:
            error_message = classify_error(e)
            logger.debug("%s failed: %s", name, error_message)
        finally:
            try:
                self._run_hooks(LifecycleRole.PER_TEST_TEARDOWN)
            except RECOVERABLE_ERRORS as e:
                teardown_message = f"after_each hook failed: {classify_error(e)}"
                error_message = f"{error_message}\n{teardown_message}" if error_message else teardown_message

        return self._make_result(
            name,
            start,
            error_message=error_message,
            priority=test.priority,
            critical=test.critical,
            description=test.description,
        )

    def _invoke_test(self, test: TestDescriptor, case: Optional[ParameterSet]) -> None:
        method = getattr(self._instance, test.name)
        args = case.args if case is not None else ()

        try:
            inspect.signature(method).bind(*args)
        except TypeError as e:
            raise DiscoveryError(
                f"Arguments {args!r} do not match {test.full_name}{inspect.signature(method)}: {e}"
            ) from e

        self._await(method(*args))

    def _run_hooks(self, role: LifecycleRole) -> None:
        for name in self.suite.hooks_for(role):
            self._call(name)

    def _call(self, name: str) -> Any:
        return self._await(getattr(self._instance, name)())

    def _await(self, value: Any) -> Any:
        """Drive an awaitable to completion on the run's event loop."""
        if inspect.isawaitable(value):
            return self.aio.run(_settle(value))
        return value

    def _fail_all(self, message: str) -> None:
        now = datetime.now()
        for test in self.suite.tests:
            for case in test.expand():
                self._record(
                    self._make_result(
                        test.display_name(case),
                        now,
                        end=now,
                        error_message=message,
                        priority=test.priority,
                        critical=test.critical,
                        description=test.description,
                    )
                )

    def _make_result(
        self,
        name: str,
        start: datetime,
        error_message: str = "",
        priority: int = 0,
        critical: bool = False,
        description: str = "",
        end: Optional[datetime] = None,
    ) -> TestResult:
        return TestResult(
            name=name,
            passed=not error_message,
            start_time=start,
            end_time=end or datetime.now(),
            error_message=error_message,
            category=self.suite.category,
            priority=priority,
            suite=self.suite.name,
            critical=critical,
            description=description,
        )

    def _record(self, result: TestResult) -> None:
        self._results.append(result)
        if self.on_result is not None:
            self.on_result(result)


async def _settle(awaitable: Any) -> Any:
    return await awaitable
