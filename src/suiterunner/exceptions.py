"""Exception types raised by SuiteRunner."""

from typing import Optional


class SuiteRunnerError(Exception):
    """Base class for all SuiteRunner errors."""

    pass


class AssertionFailure(SuiteRunnerError):
    """Raised by an assertion check when its condition does not hold.

    This is the only exception the engine reports as a violated expectation.
    Anything else raised from a test body is reported as a crash.
    """

    def __init__(self, message: str, inner: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.inner = inner
        if inner is not None:
            self.__cause__ = inner

    def __str__(self) -> str:
        return self.message


class DiscoveryError(SuiteRunnerError):
    """Raised when test metadata cannot be loaded or does not fit its target."""

    pass


class SuiteSetupError(SuiteRunnerError):
    """Raised when a suite cannot be instantiated or its setup hooks fail."""

    def __init__(self, suite_name: str, cause: BaseException):
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.suite_name = suite_name
        self.__cause__ = cause
